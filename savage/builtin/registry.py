"""Built-in function framework.

A built-in is a plain Python function (the *proxy*) declared with the
`builtin` decorator, which records its metadata and wraps it into a
function implementation that:

- checks the number of arguments,
- returns the call unevaluated while any typed argument is not concrete yet,
- converts each argument to its declared parameter kind,
- runs the proxy, mapping `ArgumentError` to `InvalidArgument`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, Sequence

from savage.errors import InvalidArgument, InvalidNumberOfArguments
from savage.evaluation.classify import BooleanValue, MatrixValue, Number, classify, is_concrete
from savage.types.environment import Environment
from savage.types.expression import Expression, FunctionValue
from savage.types.numbers import ComplexRational

logger = logging.getLogger(__name__)


class Parameter(Enum):
    """Kinds of values a built-in can ask for."""

    EXPRESSION = "expression"
    INTEGER = "integer"
    RATIONAL = "rational"
    COMPLEX = "complex"
    VECTOR = "vector"
    MATRIX = "matrix"
    SQUARE_MATRIX = "square matrix"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Metadata:
    name: str
    description: str
    parameters: tuple[Parameter, ...] = ()
    # Pairs of (input, expected output) as typed at the prompt.
    examples: tuple[tuple[str, str], ...] = ()
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class Function:
    metadata: Metadata
    implementation: Callable[..., Expression] = field(repr=False)
    proxy: Callable[..., Expression] = field(repr=False)
    value: FunctionValue = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "value", FunctionValue(self.metadata.name, self.implementation))

    @property
    def name(self) -> str:
        return self.metadata.name


class ArgumentError(Exception):
    """Raised by a proxy that rejects one of its (already converted) arguments."""

    def __init__(self, argument: Expression):
        super().__init__(f"invalid argument {argument}")
        self.argument = argument


def convert(parameter: Parameter, argument: Expression) -> Any:
    """Convert a concrete `argument` to the Python value `parameter` asks for."""
    if parameter is Parameter.EXPRESSION:
        return argument

    cls = classify(argument)
    match parameter, cls:
        case Parameter.INTEGER, Number(value=int() as value):
            return value
        case Parameter.RATIONAL, Number(value=int() | Fraction() as value):
            return Fraction(value)
        case Parameter.COMPLEX, Number(value=value):
            return ComplexRational.coerce(value)
        case Parameter.VECTOR, MatrixValue(is_vector=True):
            return argument
        case Parameter.MATRIX, MatrixValue(matrix=matrix):
            return matrix
        case Parameter.SQUARE_MATRIX, MatrixValue(matrix=matrix) if matrix.is_square() or matrix.is_empty():
            return matrix
        case Parameter.BOOLEAN, BooleanValue(value=bool() as value):
            return value
    raise ArgumentError(argument)


def wrap_proxy(parameters: Sequence[Parameter], proxy: Callable[..., Expression]):
    """Return a function implementation that type-checks its arguments, then calls `proxy`."""
    parameters = tuple(parameters)

    def implementation(expression: Expression, arguments: Sequence[Expression], context: Environment) -> Expression:
        if len(arguments) != len(parameters):
            raise InvalidNumberOfArguments(expression, len(parameters), len(parameters), len(arguments))

        for argument, parameter in zip(arguments, parameters):
            if parameter is not Parameter.EXPRESSION and not is_concrete(classify(argument)):
                logger.debug("leaving %r unevaluated until its arguments are known", expression)
                return expression

        try:
            converted = [convert(p, a) for p, a in zip(parameters, arguments)]
            return proxy(*converted)
        except ArgumentError as e:
            raise InvalidArgument(expression, e.argument) from None

    return implementation


def builtin(
    name: str,
    description: str,
    parameters: Sequence[Parameter],
    examples: Sequence[tuple[str, str]] = (),
    categories: Sequence[str] = (),
) -> Callable[[Callable[..., Expression]], Function]:
    """Declare a built-in function; the decorated proxy becomes a `Function`."""

    def decorator(proxy: Callable[..., Expression]) -> Function:
        metadata = Metadata(name, description, tuple(parameters), tuple(examples), tuple(categories))
        return Function(metadata, wrap_proxy(parameters, proxy), proxy)

    return decorator
