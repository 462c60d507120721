"""Constructors that make building expression trees by hand less verbose."""

from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Sequence

from savage.types.expression import (
    And, Boolean, Call, Complex, Equal, Expression, GreaterThan, GreaterThanOrEqual, Integer,
    LessThan, LessThanOrEqual, Matrix, NotEqual, Or, Power, Rational, Variable, Vector,
)
from savage.types.numbers import ComplexRational, RationalRepresentation


def var(identifier: str) -> Variable:
    return Variable(identifier)


def fun(function: Expression, arguments: Iterable[Expression] = ()) -> Call:
    return Call(function, tuple(arguments))


def int_(integer: int) -> Integer:
    return Integer(integer)


def rat(numerator: int, denominator: int) -> Rational:
    """Rational number using fraction representation."""
    return Rational(Fraction(numerator, denominator), RationalRepresentation.FRACTION)


def ratd(numerator: int, denominator: int) -> Rational:
    """Rational number using decimal representation where it is exact."""
    return Rational(Fraction(numerator, denominator), RationalRepresentation.DECIMAL)


def com(re_num: int, re_den: int, im_num: int, im_den: int) -> Complex:
    return Complex(
        ComplexRational(Fraction(re_num, re_den), Fraction(im_num, im_den)),
        RationalRepresentation.FRACTION,
    )


def comd(re_num: int, re_den: int, im_num: int, im_den: int) -> Complex:
    return Complex(
        ComplexRational(Fraction(re_num, re_den), Fraction(im_num, im_den)),
        RationalRepresentation.DECIMAL,
    )


def boolean(value: bool) -> Boolean:
    return Boolean(value)


def vector(*elements: Expression) -> Vector:
    return Vector(tuple(elements))


def matrix(rows: Sequence[Sequence[Expression]]) -> Matrix:
    return Matrix.from_rows(rows)


def pow_(base: Expression, exponent: Expression) -> Power:
    return Power(base, exponent)


def eq(left: Expression, right: Expression) -> Equal:
    return Equal(left, right)


def ne(left: Expression, right: Expression) -> NotEqual:
    return NotEqual(left, right)


def lt(left: Expression, right: Expression) -> LessThan:
    return LessThan(left, right)


def le(left: Expression, right: Expression) -> LessThanOrEqual:
    return LessThanOrEqual(left, right)


def gt(left: Expression, right: Expression) -> GreaterThan:
    return GreaterThan(left, right)


def ge(left: Expression, right: Expression) -> GreaterThanOrEqual:
    return GreaterThanOrEqual(left, right)


def and_(a: Expression, b: Expression) -> And:
    return And(a, b)


def or_(a: Expression, b: Expression) -> Or:
    return Or(a, b)
