"""Binding context for Savage.

The Environment maps identifiers to expressions and supports nested scopes
via an `outer` link; user function calls bind their parameters in a scope
layered over the caller's context.

Environments are read as plain ``Mapping[str, Expression]`` objects; only
`define` mutates, and the evaluator never calls it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterator, Optional

from savage.types.expression import Expression


class Environment(Mapping):
    """Hierarchical mapping from identifiers to expressions."""

    __slots__ = ("vars", "outer")

    def __init__(
        self,
        bindings: Optional[Mapping[str, Expression]] = None,
        outer: Optional[Environment] = None,
    ):
        self.vars: dict[str, Expression] = dict(bindings) if bindings else {}
        self.outer: Environment | None = outer

    @classmethod
    def snapshot(cls, context: Optional[Mapping[str, Expression]]) -> Environment:
        """Return a read-only view of `context` that later mutations cannot affect."""
        if context is None:
            return cls()
        return cls(dict(context))

    def define(self, name: str, value: Expression) -> None:
        """Bind `name` to `value` in this scope."""
        if not isinstance(name, str) or not name:
            raise TypeError(f"Cannot define {name!r} as an identifier")
        self.vars[name] = value

    def update(self, bindings: Mapping[str, Expression]) -> None:
        for name, value in bindings.items():
            self.define(name, value)

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def extend(self, bindings: Mapping[str, Expression]) -> Environment:
        return Environment(bindings, outer=self)

    # --- Mapping protocol ---
    def __getitem__(self, name: str) -> Expression:
        env = self.find(name)
        if env is None:
            raise KeyError(name)
        return env.vars[name]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        env: Optional[Environment] = self
        while env is not None:
            for name in env.vars:
                if name not in seen:
                    seen.add(name)
                    yield name
            env = env.outer

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"Environment({sorted(self)!r})"
