"""Evaluability classes.

Every evaluated expression falls into exactly one of these coarse classes;
the evaluator folds a node only when its children's classes are concrete
enough for the operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from savage.types import numbers
from savage.types.expression import (
    ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, LOGIC_OPERATORS, Boolean, Complex, Expression,
    Integer, Matrix, Negation, Not, Rational, Vector,
)
from savage.types.numbers import RationalRepresentation


@dataclass(frozen=True)
class Number:
    value: numbers.Number
    representation: RationalRepresentation = RationalRepresentation.FRACTION

    def is_real(self) -> bool:
        return not isinstance(self.value, numbers.ComplexRational)


@dataclass(frozen=True)
class MatrixValue:
    """A matrix of known shape; a vector is its n x 1 column with ``is_vector`` set."""

    matrix: Matrix
    is_vector: bool = False


@dataclass(frozen=True)
class BooleanValue:
    # None: the expression has boolean type but its value is not known yet.
    value: Optional[bool] = None


class Opaque(Enum):
    ARITHMETIC = "arithmetic"
    UNKNOWN = "unknown"


ARITHMETIC = Opaque.ARITHMETIC
UNKNOWN = Opaque.UNKNOWN

EvaluabilityClass = Union[Number, MatrixValue, BooleanValue, Opaque]


def classify(expr: Expression) -> EvaluabilityClass:
    match expr:
        case Integer(value=value):
            return Number(value)
        case Rational(value=value, representation=representation):
            return Number(numbers.normalize(value), representation)
        case Complex(value=value, representation=representation):
            return Number(numbers.normalize(value), representation)
        case Boolean(value=value):
            return BooleanValue(value)
        case Vector():
            return MatrixValue(Matrix.from_vector(expr), True)
        case Matrix():
            return MatrixValue(expr)
        case Not():
            return BooleanValue()
        case Negation():
            return ARITHMETIC
        case _ if isinstance(expr, ARITHMETIC_OPERATORS):
            return ARITHMETIC
        case _ if isinstance(expr, COMPARISON_OPERATORS + LOGIC_OPERATORS):
            return BooleanValue()
        case _:
            return UNKNOWN


def is_concrete(cls: EvaluabilityClass) -> bool:
    """True for numbers, matrices of known shape and known booleans."""
    if isinstance(cls, BooleanValue):
        return cls.value is not None
    return not isinstance(cls, Opaque)
