"""Registration of Savage's built-in functions and constants."""

from __future__ import annotations

from functools import lru_cache

from savage.builtin import linear_algebra, logic
from savage.builtin.registry import Function, Metadata
from savage.types.environment import Environment
from savage.types.helpers import com


@lru_cache(maxsize=None)
def functions() -> tuple[Function, ...]:
    """All built-in functions, in registration order."""
    return (
        logic.and_,
        logic.or_,
        logic.not_,
        logic.xor,
        linear_algebra.determinant,
        linear_algebra.transpose,
        linear_algebra.trace,
        linear_algebra.nullspace,
        linear_algebra.eigenvalues,
        linear_algebra.eigenvectors,
    )


def registry() -> tuple[Metadata, ...]:
    return tuple(f.metadata for f in functions())


def register(env: Environment) -> None:
    """Register all builtin functions and constants into the given environment."""
    env.update({f.name: f.value for f in functions()})
    env.define("i", com(0, 1, 1, 1))
