"""Exact folding of arithmetic and comparison nodes.

Every function here receives a node whose children are already evaluated
together with their evaluability classes, and returns either the folded
expression or None when the node has to stay symbolic. Element-level work on
matrices is handed back to the evaluator through the `fold` callback so that
matrix entries get simplified as they are built.
"""

from __future__ import annotations

import operator
from fractions import Fraction
from typing import Callable, Optional

from savage.errors import InvalidArgument
from savage.evaluation.classify import BooleanValue, EvaluabilityClass, MatrixValue, Number, classify, is_concrete
from savage.types import numbers
from savage.types.expression import (
    BinaryOperator, Boolean, Complex, Difference, Equal, Expression, GreaterThan,
    GreaterThanOrEqual, Integer, LessThan, LessThanOrEqual, Matrix, Negation, NotEqual, Power,
    Product, Quotient, Rational, Remainder, Sum, Vector,
)
from savage.types.numbers import ComplexRational, RationalRepresentation

Fold = Callable[[Expression], Expression]

ORDERINGS = {
    LessThan: operator.lt,
    LessThanOrEqual: operator.le,
    GreaterThan: operator.gt,
    GreaterThanOrEqual: operator.ge,
}


def to_expression(value: numbers.Number, representation: RationalRepresentation) -> Expression:
    """Literal for `value`, using the tightest numeric node that holds it."""
    value = numbers.normalize(value)
    if isinstance(value, int):
        return Integer(value)
    if isinstance(value, Fraction):
        return Rational(value, representation)
    return Complex(value, representation)


def matrix_to_expression(matrix: Matrix, is_vector: bool) -> Expression:
    if is_vector:
        return Vector(matrix.elements)
    return matrix


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def divide(x: numbers.Number, y: numbers.Number) -> numbers.Number:
    if isinstance(x, ComplexRational) or isinstance(y, ComplexRational):
        return ComplexRational.coerce(x) / y
    return Fraction(x) / Fraction(y)


def fold_numbers(op: type, a: Number, b: Number) -> Optional[Expression]:
    representation = a.representation.merge(b.representation)
    x, y = a.value, b.value
    if op is Sum:
        result = x + y
    elif op is Difference:
        result = x - y
    elif op is Product:
        result = x * y
    elif op is Quotient:
        result = divide(x, y)
    elif op is Remainder:
        if y == 0:
            raise ZeroDivisionError("remainder by zero")
        if not (a.is_real() and b.is_real()):
            return None
        result = numbers.euclidean_remainder(x, y)
    elif op is Power:
        result = numbers.power(x, y)
        if result is None:
            return None
    else:
        return None
    return to_expression(result, representation)


def fold_negation(node: Negation, operand: EvaluabilityClass, fold: Fold) -> Optional[Expression]:
    match operand:
        case Number(value=value, representation=representation):
            return to_expression(-value, representation)
        case MatrixValue(matrix=matrix, is_vector=is_vector):
            return matrix_to_expression(matrix.map(lambda e: fold(Negation(e))), is_vector)
        case BooleanValue(value=bool()):
            raise InvalidArgument(node, node.operand)
    return None


def fold_arithmetic(
    node: BinaryOperator, left: EvaluabilityClass, right: EvaluabilityClass, fold: Fold
) -> Optional[Expression]:
    match left, right:
        case Number(), Number():
            return fold_numbers(type(node), left, right)
        case BooleanValue(value=bool()), _:
            raise InvalidArgument(node, node.left)
        case _, BooleanValue(value=bool()):
            raise InvalidArgument(node, node.right)
        case (MatrixValue(), _) | (_, MatrixValue()):
            if is_concrete(left) and is_concrete(right):
                return fold_matrix(node, left, right, fold)
    return None


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

def multiply(node: Expression, a: Matrix, b: Matrix, fold: Fold) -> Matrix:
    if a.ncols != b.nrows:
        raise InvalidArgument(node, b)

    def entry(i: int, j: int) -> Expression:
        acc: Expression = Integer(0)
        for k in range(a.ncols):
            term = fold(Product(a[i, k], b[k, j]))
            acc = term if k == 0 else fold(Sum(acc, term))
        return acc

    return Matrix.from_function(a.nrows, b.ncols, entry)


def identity(n: int) -> Matrix:
    return Matrix.from_function(n, n, lambda i, j: Integer(1 if i == j else 0))


# Bound on log2 of the entry tree size when a matrix with symbolic entries is raised to a power.
MAX_SYMBOLIC_POWER_BITS = 17


def power_too_large(m: Matrix, n: int) -> bool:
    """
    Numeric entries of m ^ n can grow to about n times (entry size + log2 of
    the dimension) bits. Symbolic entries grow as trees instead, roughly like
    n ** log2(2 * dimension) nodes.
    """
    if n < 2:
        return False
    classes = [classify(e) for e in m.elements]
    if not all(isinstance(c, Number) for c in classes):
        return n.bit_length() * (2 * m.nrows).bit_length() > MAX_SYMBOLIC_POWER_BITS
    size = max((numbers.bit_size(c.value) for c in classes), default=0)
    return n * (size + m.nrows.bit_length()) > numbers.MAX_POWER_BITS


def matrix_power(node: Power, m: Matrix, exponent: Number, fold: Fold) -> Optional[Matrix]:
    """Square matrix to a non-negative integer power, or None when the result would be too large."""
    if not m.is_square():
        raise InvalidArgument(node, node.left)
    n = exponent.value
    if not isinstance(n, int) or n < 0:
        raise InvalidArgument(node, node.right)
    if power_too_large(m, n):
        return None
    result = identity(m.nrows)
    base = m
    while n:
        if n & 1:
            result = multiply(node, result, base, fold)
        n >>= 1
        if n:
            base = multiply(node, base, base, fold)
    return result


def fold_matrix(
    node: BinaryOperator, left: EvaluabilityClass, right: EvaluabilityClass, fold: Fold
) -> Optional[Expression]:
    """Matrix semantics; any combination not listed here is an invalid argument."""
    op = type(node)
    both = isinstance(left, MatrixValue) and isinstance(right, MatrixValue)
    offending = node.right if isinstance(left, MatrixValue) else node.left

    if op in (Sum, Difference):
        if not both:
            raise InvalidArgument(node, offending)
        a, b = left.matrix, right.matrix
        if (a.nrows, a.ncols) != (b.nrows, b.ncols):
            raise InvalidArgument(node, node.right)
        elements = tuple(fold(op(x, y)) for x, y in zip(a.elements, b.elements))
        return matrix_to_expression(Matrix(a.nrows, a.ncols, elements), left.is_vector and right.is_vector)

    if op is Product:
        if both:
            result = multiply(node, left.matrix, right.matrix, fold)
            return matrix_to_expression(result, right.is_vector and result.ncols == 1)
        if isinstance(right, MatrixValue):
            scaled = right.matrix.map(lambda e: fold(Product(node.left, e)))
            return matrix_to_expression(scaled, right.is_vector)
        scaled = left.matrix.map(lambda e: fold(Product(e, node.right)))
        return matrix_to_expression(scaled, left.is_vector)

    if op is Quotient and isinstance(left, MatrixValue) and isinstance(right, Number):
        scaled = left.matrix.map(lambda e: fold(Quotient(e, node.right)))
        return matrix_to_expression(scaled, left.is_vector)

    if op is Power and isinstance(left, MatrixValue) and isinstance(right, Number):
        result = matrix_power(node, left.matrix, right, fold)
        if result is None:
            return None
        return matrix_to_expression(result, left.is_vector)

    raise InvalidArgument(node, offending)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------

def fold_comparison(
    node: BinaryOperator, left: EvaluabilityClass, right: EvaluabilityClass
) -> Optional[Expression]:
    op = type(node)
    if op in (Equal, NotEqual):
        match left, right:
            case Number(), Number():
                equal = left.value == right.value
            case BooleanValue(value=bool()), BooleanValue(value=bool()):
                equal = left.value == right.value
            case _:
                return None
        return Boolean(equal if op is Equal else not equal)
    if isinstance(left, Number) and isinstance(right, Number) and left.is_real() and right.is_real():
        return Boolean(ORDERINGS[op](left.value, right.value))
    return None
