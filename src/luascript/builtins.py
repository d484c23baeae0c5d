## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Host-side global functions.  They are called with the evaluated argument list directly and skip
# the declared-type checks that script functions get.
#

from typing import Any, Callable

from .types import Array, is_number, type_name
from .errors import ScriptArgumentError
from .formatting import to_text


def _require(name: str, index: int, value: Any, expected: str, ok: bool) -> None:
    if not ok:
        raise ScriptArgumentError(function=name, index=index, expected=expected, actual=type_name(value))


## CONSTRUCTORS
def fn_array(*items) -> Array: return Array(items)
def fn_range(first, last) -> Array:
    _require('range', 1, first, 'number', is_number(first))
    _require('range', 2, last, 'number', is_number(last))
    return Array(float(i) for i in range(int(first), int(last) + 1))
## COLLECTIONS
def fn_len(x) -> float:
    _require('len', 1, x, 'string|array|table', isinstance(x, (str, list, tuple, dict)))
    return float(len(x))
def fn_push(xs, value) -> Any:
    _require('push', 1, xs, 'array', isinstance(xs, list))
    xs.append(value)
    return xs
## CONVERSION & INTROSPECTION
def fn_tostring(x) -> str: return to_text(x)
def fn_tonumber(x) -> float | None:
    if is_number(x): return float(x)
    if isinstance(x, str):
        try:
            return float(x.strip())
        except ValueError:
            return None
    return None
def fn_type(x) -> str: return type_name(x)


def get_builtin_name(py_name: str) -> str:
    """Map a Python function name like `fn_tostring` to its script-visible global name."""
    assert py_name.startswith('fn_'), f"Builtin function `{py_name}` requires prefix `fn_` by convention."
    return py_name[3:]


def load_builtins(output=None) -> dict[str, Callable]:
    """All built-in globals; `print` writes to `output` (standard output when None)."""
    def fn_print(*values) -> None:
        print('\t'.join(to_text(v) for v in values), file=output)

    functions = {get_builtin_name(k): v for k, v in globals().items() if k.startswith('fn_') and callable(v)}
    functions['print'] = fn_print
    return functions
