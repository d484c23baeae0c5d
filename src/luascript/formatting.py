## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from decimal import Decimal
from typing import Any

from .types import ClassRecord, is_number
from .nodes import (
    Program, FunctionDeclaration, VariableDeclaration, ClassDeclaration,
    BinaryExpression, UnaryExpression, Literal, Identifier, CallExpression, MemberExpression,
    IfStatement, ForStatement, ForInStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, PrintStatement,
)


def format_number(x) -> str:
    if isinstance(x, int): return str(x)
    return '%.14g' % x


def to_text(value: Any) -> str:
    """Textual form of a runtime value, as written by `print` and the `..` operator."""
    if value is None: return 'nil'
    if isinstance(value, bool): return str(value).lower()
    if is_number(value): return format_number(value)
    if isinstance(value, str): return value
    if isinstance(value, FunctionDeclaration): return f'function: {value.name}'
    if isinstance(value, ClassRecord): return f'class: {value.name}'
    if isinstance(value, (list, tuple)):
        return '{' + ', '.join(format_item(v) for v in value) + '}'
    if isinstance(value, dict):
        return '{' + ', '.join(f'{k} = {format_item(v)}' for k, v in value.items()) + '}'
    if callable(value): return f'builtin: {getattr(value, "__name__", "?")}'
    return str(value)


def format_item(value: Any) -> str:
    """Like `to_text`, but strings are quoted; used by the REPL and inside composite values."""
    if isinstance(value, str): return '"' + value + '"'
    return to_text(value)


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


# Source printing ─────────────────────────────────────────────────────────────────────────────
#
# Output re-parses to an identical tree: nested operators are always parenthesized, and statements
# that end in an open expression are terminated by `;` so a following `(` is never read as a call.

def _format_literal(value) -> str:
    if value is None: return 'nil'
    if isinstance(value, bool): return 'true' if value else 'false'
    if isinstance(value, str): return f'"{value}"'
    if float(value).is_integer(): return str(int(value))
    text = repr(float(value))
    return text if 'e' not in text else format(Decimal(value), 'f')


def format_expression(node, nested=False) -> str:
    match node:
        case Literal(value=value):
            return _format_literal(value)
        case Identifier(name=name):
            return name
        case MemberExpression(object=obj, property_name=prop):
            return f'{format_expression(obj)}.{prop}'
        case CallExpression(callee=callee, arguments=args):
            return f'{format_expression(callee)}(' + ', '.join(format_expression(a) for a in args) + ')'
        case UnaryExpression(operator=op, argument=arg):
            space = ' ' if op == 'not' else ''
            return f'{op}{space}{format_expression(arg, nested=True)}'
        case BinaryExpression(operator=op, left=left, right=right):
            text = f'{format_expression(left, nested=True)} {op} {format_expression(right, nested=True)}'
            return f'({text})' if nested else text
    raise TypeError(f"Cannot format expression node {type(node).__name__}.")


def _format_block(body, indent: int) -> str:
    if not body: return '{\n' + ' ' * indent + '}'
    inner = '\n'.join(format_statement(s, indent + 4) for s in body)
    return '{\n' + inner + '\n' + ' ' * indent + '}'


def format_statement(node, indent: int = 0) -> str:
    pad = ' ' * indent
    match node:
        case FunctionDeclaration(name=name, params=params, return_type=rt, body=body):
            ps = ', '.join(p.name + (f': {p.declared_type}' if p.declared_type else '') for p in params)
            return f'{pad}fn {name}({ps}) ' + (f'{rt} ' if rt else '') + _format_block(body, indent)
        case VariableDeclaration(kind=kind, declared_type=declared, name=name, init=init):
            value = f' = {format_expression(init)}' if init is not None else ''
            return f'{pad}{kind} {declared}: {name}{value};'
        case ClassDeclaration(name=name, body=methods):
            return f'{pad}class {name} ' + _format_block(methods, indent)
        case IfStatement():
            return pad + _format_if(node, indent)
        case ForStatement(var=var, start=start, end=end, step=step, body=body):
            bounds = f'{format_expression(start)}, {format_expression(end)}'
            if step is not None: bounds += f', {format_expression(step)}'
            return f'{pad}for {var} = {bounds} ' + _format_block(body, indent)
        case ForInStatement(var=var, iterator=iterator, body=body):
            return f'{pad}for {var} in {format_expression(iterator)} ' + _format_block(body, indent)
        case WhileStatement(test=test, body=body):
            return f'{pad}while {format_expression(test)} ' + _format_block(body, indent)
        case ReturnStatement(argument=None):
            return f'{pad}return;'
        case ReturnStatement(argument=arg):
            return f'{pad}return {format_expression(arg)};'
        case PrintStatement(argument=arg):
            return f'{pad}print({format_expression(arg)})'
        case ExpressionStatement(expression=expr):
            return f'{pad}{format_expression(expr)};'
    raise TypeError(f"Cannot format statement node {type(node).__name__}.")


def _format_if(node: IfStatement, indent: int) -> str:
    text = f'if {format_expression(node.test)} ' + _format_block(node.consequent, indent)
    if isinstance(node.alternate, IfStatement):
        text += ' else' + _format_if(node.alternate, indent)
    elif node.alternate is not None:
        text += ' else ' + _format_block(node.alternate, indent)
    return text


def format_source(node) -> str:
    """Render an AST back into source text."""
    if isinstance(node, Program):
        return '\n'.join(format_statement(s) for s in node.body) + '\n'
    if isinstance(node, tuple):
        return '\n'.join(format_statement(s) for s in node) + '\n'
    try:
        return format_statement(node)
    except TypeError:
        return format_expression(node)


# Diagnostics ─────────────────────────────────────────────────────────────────────────────────

def format_parse_error_context(filename, line, column, token_text, source=None):
    """Show the lines around a syntax error, with the offending token highlighted."""
    lines = source.splitlines(keepends=True) if source is not None else open(filename, 'r').readlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    width = max(len(token_text or ''), 1)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        content = lines[i].rstrip('\n')
        color = '\033[97m' if i + 1 == line else '\033[90m'
        if i + 1 == line and 0 < column <= len(content):
            head, mark, tail = content[:column-1], content[column-1:column-1+width], content[column-1+width:]
            content = f"{head}\033[48;5;30m\033[1;97m{mark}\033[0m{tail}"
        result.append(f"{color}{i+1:>5} |\033[0m {content}")
    return '\n' + '\n'.join(result) + '\n'


def format_trace(depth: int, label: str, detail: str = '') -> str:
    return f"\033[90m{'  ' * depth}{label}\033[0m {detail}".rstrip()
