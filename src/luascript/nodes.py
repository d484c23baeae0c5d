## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Abstract syntax tree.  Every variant is an immutable dataclass and sequences are stored as tuples,
# so a parsed program can be evaluated any number of times and compared structurally.
#

from typing import Any, Literal as _Literal
from dataclasses import dataclass


class Node:
    """Marker base; the concrete class is the variant tag."""
    __slots__ = ()


Block = tuple                     # tuple[Statement, ...]


@dataclass(frozen=True)
class Program(Node):
    body: Block


@dataclass(frozen=True)
class Param:
    name: str
    declared_type: str | None = None


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: str
    params: tuple                 # tuple[Param, ...]
    return_type: str | None
    body: Block

    def __repr__(self):
        return f"FunctionDeclaration({self.name!r}, arity={len(self.params)})"


@dataclass(frozen=True)
class VariableDeclaration(Node):
    kind: _Literal['local', 'const']
    declared_type: str
    name: str
    init: Any = None


@dataclass(frozen=True)
class ClassDeclaration(Node):
    name: str
    body: tuple                   # tuple[FunctionDeclaration, ...]


@dataclass(frozen=True)
class BinaryExpression(Node):
    operator: str
    left: Any
    right: Any


@dataclass(frozen=True)
class UnaryExpression(Node):
    operator: str
    argument: Any


@dataclass(frozen=True)
class Literal(Node):
    value: float | str | bool | None


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class CallExpression(Node):
    callee: Any                   # Identifier | MemberExpression
    arguments: tuple


@dataclass(frozen=True)
class MemberExpression(Node):
    object: Any
    property_name: str


@dataclass(frozen=True)
class IfStatement(Node):
    test: Any
    consequent: Block
    alternate: Any = None         # Block for `else`, IfStatement for `elseif`, or None


@dataclass(frozen=True)
class ForStatement(Node):
    var: str
    start: Any
    end: Any
    step: Any
    body: Block


@dataclass(frozen=True)
class ForInStatement(Node):
    var: str
    iterator: Any
    body: Block


@dataclass(frozen=True)
class WhileStatement(Node):
    test: Any
    body: Block


@dataclass(frozen=True)
class ReturnStatement(Node):
    argument: Any = None


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Any


@dataclass(frozen=True)
class PrintStatement(Node):
    argument: Any
