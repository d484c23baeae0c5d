## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass

from .nodes import FunctionDeclaration


@dataclass(frozen=True)
class Token:
    kind: str                     # number, string, identifier, keyword, type-name, operator, punctuation, comment
    text: str
    line: int = 0
    column: int = 0

    def is_(self, kind: str, text: str | None = None) -> bool:
        return self.kind == kind and (text is None or self.text == text)

    def __repr__(self):
        return f"{self.kind} '{self.text}'"


TYPE_NAMES = frozenset({'number', 'string', 'bool', 'nil', 'array', 'Class', 'function', 'table'})

KEYWORDS = frozenset({
    'fn', 'return', 'local', 'const', 'print', 'class',
    'if', 'else', 'elseif', 'for', 'while', 'until', 'goto', 'in',
    'and', 'or', 'not', 'true', 'false', 'new',
    'break', 'continue', 'switch', 'case', 'default',
})


class Array(list):
    """Composite value iterated by `for ... in`; only built-ins construct these."""
    pass


class ClassRecord(dict):
    """Mapping from method name to its `FunctionDeclaration`, built once per class declaration."""

    def __init__(self, name: str, methods: dict):
        super().__init__(methods)
        self.name = name

    def __repr__(self):
        return f"ClassRecord({self.name!r}, {dict.__repr__(self)})"


@dataclass(frozen=True)
class Return:
    """Outcome of executing a `return` statement, propagated through enclosing blocks."""
    value: Any = None


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    return value is not None and value is not False


def type_name(value: Any) -> str:
    if value is None: return 'nil'
    if isinstance(value, bool): return 'bool'
    if is_number(value): return 'number'
    if isinstance(value, str): return 'string'
    if isinstance(value, ClassRecord): return 'Class'
    if isinstance(value, (list, tuple)): return 'array'
    if isinstance(value, dict): return 'table'
    if isinstance(value, FunctionDeclaration) or callable(value): return 'function'
    return type(value).__name__


# Only these declared parameter types are enforced at call time; others are documentation.
CHECKED_TYPES: dict[str, Callable[[Any], bool]] = {
    'string': lambda v: isinstance(v, str),
    'number': is_number,
    'bool': lambda v: isinstance(v, bool),
    'nil': lambda v: v is None,
}


def validate_arguments(params, args: list) -> tuple[bool, int, str]:
    """Check arguments against declared parameter types, as used by the interpreter before a call.

    Args:
        params: The `Param` sequence of the function declaration.
        args:   Evaluated argument values, left to right.

    Returns:
        (True, 0, "") if valid, else (False, index, expected) with the 1-based index of the first
        mismatching argument and the declared type name it failed.
    """
    for i, (param, actual) in enumerate(zip(params, args), start=1):
        if (check := CHECKED_TYPES.get(param.declared_type)) is None:
            continue
        if not check(actual):
            return False, i, param.declared_type
    return True, 0, ""
