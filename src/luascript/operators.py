## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import math
import inspect
from typing import Any, Callable

from .types import is_number, is_truthy, type_name
from .errors import ScriptOperandError, ScriptInternalError
from .formatting import to_text


num = float

class Ordered:
    """Annotation for operands that must be both numbers or both strings."""


## ARITHMETIC
def op_add(a: Ordered, b: Ordered) -> Ordered: return a + b
def op_sub(a: num, b: num) -> num: return a - b
def op_mul(a: num, b: num) -> num: return a * b
def op_div(a: num, b: num) -> num:
    if b != 0: return a / b
    if a == 0 or math.isnan(a): return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)
def op_mod(a: num, b: num) -> num: return math.nan if b == 0 else a % b
def op_pow(a: num, b: num) -> num:
    if a == 0 and b < 0: return math.inf
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan
def op_neg(x: num) -> num: return -x
## STRINGS
def op_concat(a: Any, b: Any) -> str: return to_text(a) + to_text(b)
## COMPARISON
def op_equal(a: Any, b: Any) -> bool:
    if is_number(a) and is_number(b): return a == b
    if type_name(a) != type_name(b): return False
    if isinstance(a, (str, bool)): return a == b
    return a is b
def op_differ(a: Any, b: Any) -> bool: return not op_equal(a, b)
def op_lt(a: Ordered, b: Ordered) -> bool: return a < b
def op_gt(a: Ordered, b: Ordered) -> bool: return a > b
def op_lte(a: Ordered, b: Ordered) -> bool: return a <= b
def op_gte(a: Ordered, b: Ordered) -> bool: return a >= b
## BOOLEAN LOGIC (both sides already evaluated; returns one of the raw operands)
def op_and(a: Any, b: Any) -> Any: return b if is_truthy(a) else a
def op_or(a: Any, b: Any) -> Any: return a if is_truthy(a) else b
def op_not(x: Any) -> bool: return not is_truthy(x)


BINARY_ALIASES = {
    '+': 'add', '-': 'sub', '*': 'mul', '/': 'div', '%': 'mod', '^': 'pow', '..': 'concat',
    '==': 'equal', '!=': 'differ', '<': 'lt', '>': 'gt', '<=': 'lte', '>=': 'gte',
    'and': 'and', 'or': 'or',
}
UNARY_ALIASES = {'-': 'neg', 'not': 'not'}


def _operand_check(fn: Callable) -> Callable[..., bool]:
    hints = [p.annotation for p in inspect.signature(fn).parameters.values()]

    def check(*values) -> bool:
        ordered_kinds = set()
        for hint, value in zip(hints, values):
            if hint is num and not is_number(value): return False
            if hint is Ordered:
                if not (is_number(value) or isinstance(value, str)): return False
                ordered_kinds.add(type_name(value))
        return len(ordered_kinds) <= 1
    return check


def _load_table(aliases: dict[str, str]) -> dict[str, tuple[Callable, Callable]]:
    table = {}
    for symbol, name in aliases.items():
        fn = globals()[f'op_{name}']
        table[symbol] = (fn, _operand_check(fn))
    return table

BINARY_OPERATORS = _load_table(BINARY_ALIASES)
UNARY_OPERATORS = _load_table(UNARY_ALIASES)


def apply_binary(operator: str, left: Any, right: Any, node=None) -> Any:
    if (entry := BINARY_OPERATORS.get(operator)) is None:
        raise ScriptInternalError(f"Unknown binary operator `{operator}`.", tag=operator, kind="UnknownOperator", node=node)
    fn, check = entry
    if not check(left, right):
        raise ScriptOperandError(operator=operator, left=type_name(left), right=type_name(right), node=node)
    return fn(left, right)


def apply_unary(operator: str, argument: Any, node=None) -> Any:
    if (entry := UNARY_OPERATORS.get(operator)) is None:
        raise ScriptInternalError(f"Unknown unary operator `{operator}`.", tag=operator, kind="UnknownOperator", node=node)
    fn, check = entry
    if not check(argument):
        raise ScriptOperandError(operator=operator, left=type_name(argument), node=node)
    return fn(argument)
