## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
import inspect
import functools
from typing import Any, Callable

from .types import ClassRecord, Return, is_number, is_truthy, type_name, validate_arguments
from .errors import (
    ScriptCallError, ScriptArityError, ScriptArgumentError, ScriptFieldError, ScriptOperandError,
    ScriptIteratorError, ScriptInternalError, ScriptStackOverflow,
)
from .nodes import (
    Program, FunctionDeclaration, VariableDeclaration, ClassDeclaration,
    BinaryExpression, UnaryExpression, Literal, Identifier, CallExpression, MemberExpression,
    IfStatement, ForStatement, ForInStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, PrintStatement,
)
from .operators import apply_binary, apply_unary
from .formatting import to_text, format_item, format_statement, format_trace
from .environment import Environment


# Each script call nests about ten host frames; this leaves room for a few thousand calls.
RECURSION_LIMIT = 30_000


@functools.cache
def _host_signature(fn: Callable) -> inspect.Signature | None:
    try:
        return inspect.signature(fn)
    except (TypeError, ValueError):
        return None


class Interpreter:
    """Tree-walking evaluator.

    Calls push a new environment onto an explicit stack of frames and pop it on every exit path.
    A callee's free names resolve through the caller's environment at the time of the call
    (dynamic scoping), not through the environment where the function was declared.
    """

    def __init__(self, output=None, verbosity: int = 0, stats: dict | None = None, trace=None):
        self.output = output
        self.verbosity = verbosity
        self.stats = stats
        self.trace = trace
        self.reset()

    def reset(self) -> None:
        self.globals = Environment()
        self.frames: list[Environment] = [self.globals]

    @property
    def environment(self) -> Environment:
        return self.frames[-1]

    def add_builtin(self, name: str, fn: Callable) -> None:
        self.globals.define(name, fn)

    def _trace(self, level: int, label: str, detail: str = '') -> None:
        if self.verbosity >= level:
            print(format_trace(len(self.frames) - 1, label, detail), file=self.trace or sys.stderr)

    def _count(self, key: str) -> None:
        if self.stats is not None:
            self.stats[key] = self.stats.get(key, 0) + 1

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def execute(self, program: Program) -> Any:
        previous = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous, RECURSION_LIMIT))
        try:
            return self.evaluate(program)
        finally:
            sys.setrecursionlimit(previous)

    def execute_block(self, body) -> Return | None:
        for stmt in body:
            if isinstance(result := self._step(stmt), Return):
                return result
        return None

    def _step(self, stmt):
        self._count('steps')
        if self.verbosity >= 2:
            self._trace(2, 'step', format_statement(stmt).splitlines()[0])
        return self.evaluate(stmt)

    def evaluate(self, node) -> Any:
        match node:
            case Program(body=body):
                result = None
                for stmt in body:
                    result = self._step(stmt)
                    if isinstance(result, Return):
                        return result.value
                return result

            case FunctionDeclaration(name=name):
                self.environment.define(name, node)
                return None

            case ClassDeclaration():
                self.environment.define(node.name, self._build_class(node))
                return None

            case VariableDeclaration(name=name, init=init):
                self.environment.define(name, self.evaluate(init) if init is not None else None)
                return None

            case Identifier(name=name):
                return self.environment.lookup(name, node=node)

            case Literal(value=value):
                return value

            case BinaryExpression(operator=op, left=left, right=right):
                return apply_binary(op, self.evaluate(left), self.evaluate(right), node=node)

            case UnaryExpression(operator=op, argument=argument):
                return apply_unary(op, self.evaluate(argument), node=node)

            case MemberExpression(object=obj, property_name=prop):
                return self._project(self.evaluate(obj), prop, node)

            case CallExpression():
                return self._evaluate_call(node)

            case IfStatement(test=test, consequent=consequent, alternate=alternate):
                if is_truthy(self.evaluate(test)):
                    return self.execute_block(consequent)
                if isinstance(alternate, IfStatement):
                    return self.evaluate(alternate)
                if alternate is not None:
                    return self.execute_block(alternate)
                return None

            case ForStatement():
                return self._evaluate_for(node)

            case ForInStatement(var=var, iterator=iterator, body=body):
                values = self.evaluate(iterator)
                if not isinstance(values, (list, tuple)):
                    raise ScriptIteratorError(actual=type_name(values), node=node)
                for value in tuple(values):
                    self.environment.define(var, value)
                    if (outcome := self.execute_block(body)) is not None:
                        return outcome
                return None

            case WhileStatement(test=test, body=body):
                while is_truthy(self.evaluate(test)):
                    if (outcome := self.execute_block(body)) is not None:
                        return outcome
                return None

            case ReturnStatement(argument=argument):
                return Return(self.evaluate(argument) if argument is not None else None)

            case ExpressionStatement(expression=expression):
                return self.evaluate(expression)

            case PrintStatement(argument=argument):
                print(to_text(self.evaluate(argument)), file=self.output)
                return None

        raise ScriptInternalError(f"Unknown node type `{type(node).__name__}`.", tag=type(node).__name__, node=node)

    def _build_class(self, node: ClassDeclaration) -> ClassRecord:
        methods = {}
        for member in node.body:
            if not isinstance(member, FunctionDeclaration):
                raise ScriptInternalError(f"Unsupported class member `{type(member).__name__}`.", tag=type(member).__name__, node=member)
            methods[member.name] = member
        return ClassRecord(node.name, methods)

    def _evaluate_for(self, node: ForStatement) -> Return | None:
        env = self.environment
        env.define(node.var, self.evaluate(node.start))
        while True:
            current, end = env.lookup(node.var, node=node), self.evaluate(node.end)
            if not (is_number(current) and is_number(end)):
                raise ScriptOperandError(operator='for', left=type_name(current), right=type_name(end), node=node)
            if current > end: break
            if (outcome := self.execute_block(node.body)) is not None:
                return outcome
            step = self.evaluate(node.step) if node.step is not None else 1.0
            env.define(node.var, apply_binary('+', env.lookup(node.var, node=node), step, node=node))
        return None

    # Calls ───────────────────────────────────────────────────────────────────────────────────
    def _project(self, obj: Any, name: str, node) -> Any:
        if isinstance(obj, dict) and name in obj:
            return obj[name]
        raise ScriptFieldError(field=name, actual=type_name(obj), node=node)

    def _evaluate_call(self, node: CallExpression) -> Any:
        match node.callee:
            case Identifier(name=name):
                candidate = self.environment.lookup(name, node=node.callee)
            case MemberExpression(object=obj, property_name=prop):
                candidate = self._project(self.evaluate(obj), prop, node.callee)
            case other:
                raise ScriptCallError(actual=type(other).__name__, node=node)

        args = [self.evaluate(arg) for arg in node.arguments]
        return self.call(candidate, args, node=node)

    def call(self, fn: Any, args: list, node=None) -> Any:
        """Invoke a script function with type-checked arguments, or a host callable directly."""
        if isinstance(fn, FunctionDeclaration):
            if len(args) != len(fn.params):
                raise ScriptArityError(function=fn.name, expected=len(fn.params), actual=len(args), node=node)
            ok, index, expected = validate_arguments(fn.params, args)
            if not ok:
                raise ScriptArgumentError(function=fn.name, index=index, expected=expected,
                                          actual=type_name(args[index - 1]), node=node)
            return self._invoke(fn, args, node)

        if callable(fn) and not isinstance(fn, (dict, list, type)):
            self._check_host_arity(fn, args, node)
            self._count('calls')
            return fn(*args)

        raise ScriptCallError(actual=type_name(fn), node=node)

    def _check_host_arity(self, fn: Callable, args: list, node=None) -> None:
        if (signature := _host_signature(fn)) is None: return
        try:
            signature.bind(*args)
        except TypeError:
            positional = [p for p in signature.parameters.values() if p.default is p.empty
                          and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
            name = node.callee.name if node is not None and isinstance(node.callee, Identifier) \
                   else getattr(fn, '__name__', type(fn).__name__)
            raise ScriptArityError(function=name, expected=len(positional), actual=len(args), node=node) from None

    def _invoke(self, fn: FunctionDeclaration, args: list, node=None) -> Any:
        self._count('calls')
        bindings = {param.name: value for param, value in zip(fn.params, args)}
        depth = len(self.frames)
        self.frames.append(self.environment.child(bindings))
        try:
            if self.verbosity >= 1:
                self._trace(1, 'call', f"{fn.name}(" + ', '.join(format_item(a) for a in args) + ")")
            outcome = self.execute_block(fn.body)
        except RecursionError as exc:
            if isinstance(exc, ScriptStackOverflow): raise
            raise ScriptStackOverflow(function=fn.name, node=node) from None
        finally:
            del self.frames[depth:]

        result = outcome.value if outcome is not None else None
        self._trace(1, 'return', f"{fn.name} → {format_item(result)}")
        return result
