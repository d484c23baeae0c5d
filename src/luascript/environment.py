## luascript — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .errors import ScriptNameError


class Environment:
    """Name-to-value bindings with read-through fallback to a parent environment.

    Definitions always land in the innermost mapping; lookups walk outward.  A name bound to `nil`
    (Python `None`) is still bound, only a missing name is undefined.
    """

    def __init__(self, bindings: dict | None = None, parent: "Environment | None" = None):
        self.bindings = {} if bindings is None else bindings
        self.parent = parent

    def define(self, name: str, value: Any) -> None:
        self.bindings[name] = value

    def _resolve(self, name: str) -> dict | None:
        # Iterative, since call chains under dynamic scoping can be thousands deep.
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings
            env = env.parent
        return None

    def lookup(self, name: str, *, node=None) -> Any:
        if (bindings := self._resolve(name)) is None:
            raise ScriptNameError(name=name, node=node)
        return bindings[name]

    def __contains__(self, name: str) -> bool:
        return self._resolve(name) is not None

    def child(self, bindings: dict | None = None) -> "Environment":
        return Environment(bindings, parent=self)

    def __repr__(self):
        depth, env = 0, self.parent
        while env is not None:
            depth, env = depth + 1, env.parent
        return f"Environment(depth={depth}, names={sorted(self.bindings)})"
