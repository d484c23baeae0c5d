## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class ScriptError(Exception):
    """Base class for all errors raised by the language; `kind` is a stable machine-readable tag."""
    kind: str = "Error"

    def __init__(self, message: str = "", **fields):
        super().__init__(message)
        self.message = message
        for key, value in fields.items():
            setattr(self, key, value)


class ScriptSyntaxError(ScriptError):
    kind = "SyntaxError"

    def __init__(self, message, *, expected=None, token=None, line=None, column=None, position=None, filename=None):
        super().__init__(message)
        self.expected: str | None = expected
        self.token = token
        self.line: int | None = line
        self.column: int | None = column
        self.position: int | None = position
        self.filename: str | None = filename

class ScriptIncompleteParse(ScriptSyntaxError):
    """Input ended while the parser still expected more; the REPL reads another line."""
    pass

class ScriptLexError(ScriptSyntaxError):
    pass


class ScriptRuntimeError(ScriptError, RuntimeError):
    kind = "RuntimeError"

    def __init__(self, message: str = "", *, node=None, **fields):
        super().__init__(message, **fields)
        self.node = node

class ScriptNameError(ScriptRuntimeError, NameError):
    kind = "UndefinedVariable"

    def __init__(self, message: str = "", *, name: str, node=None):
        super().__init__(message or f"Undefined variable `{name}`.", node=node)
        self.name = name

class ScriptFieldError(ScriptRuntimeError, AttributeError):
    kind = "UndefinedField"

    def __init__(self, message: str = "", *, field: str, actual: str, node=None):
        super().__init__(message or f"Value of type `{actual}` has no field `{field}`.", node=node)
        self.field = field
        self.actual = actual


class ScriptCallError(ScriptRuntimeError, TypeError):
    kind = "NotCallable"

    def __init__(self, message: str = "", *, actual: str, node=None):
        super().__init__(message or f"Attempt to call non-function (a `{actual}` value).", node=node)
        self.actual = actual

class ScriptArityError(ScriptRuntimeError, TypeError):
    kind = "ArityMismatch"

    def __init__(self, message: str = "", *, function: str, expected: int, actual: int, node=None):
        super().__init__(message or f"Incorrect number of arguments for function `{function}`: expected {expected}, got {actual}.", node=node)
        self.function = function
        self.expected = expected
        self.actual = actual

class ScriptArgumentError(ScriptRuntimeError, TypeError):
    kind = "ArgumentType"

    def __init__(self, message: str = "", *, function: str, index: int, expected: str, actual: str, node=None):
        super().__init__(message or f"Argument {index} of `{function}` expected `{expected}`, got `{actual}`.", node=node)
        self.function = function
        self.index = index
        self.expected = expected
        self.actual = actual

class ScriptOperandError(ScriptRuntimeError, TypeError):
    kind = "OperandType"

    def __init__(self, message: str = "", *, operator: str, left: str, right: str | None = None, node=None):
        operands = f"`{left}` and `{right}`" if right is not None else f"`{left}`"
        super().__init__(message or f"Invalid operand types for `{operator}`: {operands}.", node=node)
        self.operator = operator
        self.left = left
        self.right = right

class ScriptIteratorError(ScriptRuntimeError, TypeError):
    kind = "NotIterable"

    def __init__(self, message: str = "", *, actual: str, node=None):
        super().__init__(message or f"For-in iterator must be an array, got `{actual}`.", node=node)
        self.actual = actual


class ScriptInternalError(ScriptRuntimeError):
    """Unknown node or operator tags; unreachable for trees built by the parser."""
    kind = "UnknownNode"

    def __init__(self, message: str = "", *, tag: str, kind: str = "UnknownNode", node=None):
        super().__init__(message or f"Unknown tag `{tag}`.", node=node)
        self.tag = tag
        self.kind = kind

class ScriptStackOverflow(ScriptRuntimeError, RecursionError):
    kind = "StackOverflow"

    def __init__(self, message: str = "", *, function: str, node=None):
        super().__init__(message or f"Stack overflow while calling `{function}`.", node=node)
        self.function = function
