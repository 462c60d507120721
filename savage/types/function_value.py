"""User-defined function representation for Savage."""

from __future__ import annotations

from typing import Sequence

from savage.errors import InvalidNumberOfArguments
from savage.types.environment import Environment
from savage.types.expression import Expression, FunctionValue


class UserFunction:
    """A function defined as ``name(formals...) = body``.

    The body is evaluated in the caller's context extended with the formal
    parameters bound to the (already evaluated) arguments.
    """

    __slots__ = ("name", "formals", "body")

    def __init__(self, name: str, formals: Sequence[str], body: Expression):
        self.name: str = name
        self.formals: tuple[str, ...] = tuple(formals)
        self.body: Expression = body

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.formals)}) = {self.body}"

    def __repr__(self) -> str:
        return f"UserFunction({str(self)!r})"

    def __call__(
        self, expression: Expression, arguments: Sequence[Expression], context: Environment
    ) -> Expression:
        if len(arguments) != len(self.formals):
            raise InvalidNumberOfArguments(
                expression, len(self.formals), len(self.formals), len(arguments)
            )
        from savage.evaluation.evaluator import evaluate0
        scope = context.extend(dict(zip(self.formals, arguments)))
        return evaluate0(self.body, scope)

    def value(self) -> FunctionValue:
        return FunctionValue(self.name, self)


def define_function(name: str, formals: Sequence[str], body: Expression) -> FunctionValue:
    """Return a function value for ``name(formals...) = body``."""
    if len(set(formals)) != len(formals):
        raise ValueError(f"duplicate parameter names in definition of {name}")
    return UserFunction(name, formals, body).value()
