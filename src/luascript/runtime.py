## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from .types import Token
from .nodes import Program
from .lexer import tokenize as _tokenize
from .parser import parse_program
from .builtins import load_builtins
from .formatting import format_source, to_text
from .interpreter import Interpreter


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, output=None, verbosity: int = 0, stats: dict | None = None, trace=None):
        self.builtins: dict[str, Callable] = load_builtins(output)
        self.interpreter = Interpreter(output=output, verbosity=verbosity, stats=stats, trace=trace)
        self._install_builtins()

    def _install_builtins(self) -> None:
        for name, fn in self.builtins.items():
            self.interpreter.add_builtin(name, fn)

    # Front-end ───────────────────────────────────────────────────────────────────────────────
    def tokenize(self, source: str, filename: str | None = None) -> list[Token]:
        return _tokenize(source, filename=filename)

    def parse(self, source: str, filename: str | None = None) -> Program:
        return parse_program(self.tokenize(source, filename=filename), filename=filename)

    def unparse(self, program: Program) -> str:
        return format_source(program)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, filename: str | None = None, reset: bool = True) -> Any:
        """Tokenize, parse and evaluate; by default each run starts from fresh globals."""
        return self.evaluate(self.parse(source, filename=filename), reset=reset)

    def evaluate(self, program: Program, reset: bool = True) -> Any:
        if reset:
            self.reset()
        return self.interpreter.execute(program)

    def reset(self) -> None:
        self.interpreter.reset()
        self._install_builtins()

    def call(self, name_or_fn: str | Any, *args) -> Any:
        fn = self.lookup(name_or_fn) if isinstance(name_or_fn, str) else name_or_fn
        return self.interpreter.call(fn, list(args))

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_builtin(self, name: str, func: Callable) -> None:
        self.builtins[name] = func
        self.interpreter.add_builtin(name, func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def lookup(self, name: str) -> Any:
        return self.interpreter.globals.lookup(name)

    def list_builtins(self) -> list[str]:
        return sorted(self.builtins)

    def to_text(self, value: Any) -> str:
        return to_text(value)
