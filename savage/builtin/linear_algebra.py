"""Linear algebra built-ins."""

from __future__ import annotations

from typing import Iterator

from savage.builtin.registry import Parameter, builtin
from savage.errors import NotImplementedFault
from savage.evaluation.evaluator import fold
from savage.types.expression import Difference, Expression, Matrix, Product, Sum
from savage.types.helpers import int_

LINEAR_ALGEBRA = ("linear algebra",)


def permutations(n: int) -> Iterator[list[int]]:
    """
    Permutations of range(n) in Heap's order.

    The first one is the identity and each following permutation differs from
    its predecessor by exactly one transposition.
    """
    indices = list(range(n))
    counters = [0] * n
    yield list(indices)
    i = 1
    while i < n:
        if counters[i] < i:
            j = 0 if i % 2 == 0 else counters[i]
            indices[j], indices[i] = indices[i], indices[j]
            yield list(indices)
            counters[i] += 1
            i = 1
        else:
            counters[i] = 0
            i += 1


@builtin(
    name="det",
    description="determinant of a square matrix",
    parameters=[Parameter.SQUARE_MATRIX],
    examples=[
        ("det([[1, 2], [3, 4]])", "-2"),
        ("det([[a, b], [c, d]])", "a * d - b * c"),
        ("det([])", "1"),
    ],
    categories=LINEAR_ALGEBRA,
)
def determinant(matrix: Matrix) -> Expression:
    if matrix.is_empty():
        return int_(1)

    n = matrix.nrows
    total: Expression | None = None
    positive = True
    for permutation in permutations(n):
        term = matrix[0, permutation[0]]
        for i in range(1, n):
            term = fold(Product(term, matrix[i, permutation[i]]))
        if total is None:
            total = term
        else:
            # Every permutation after the identity flips the sign.
            positive = not positive
            total = fold(Sum(total, term) if positive else Difference(total, term))
    return total


@builtin(
    name="transpose",
    description="transpose of a matrix",
    parameters=[Parameter.MATRIX],
    examples=[("transpose([[1, 2], [3, 4]])", "[[1, 3], [2, 4]]")],
    categories=LINEAR_ALGEBRA,
)
def transpose(matrix: Matrix) -> Expression:
    return matrix.transpose()


@builtin(
    name="trace",
    description="trace of a square matrix",
    parameters=[Parameter.SQUARE_MATRIX],
    examples=[("trace([[1, 2], [3, a]])", "1 + a")],
    categories=LINEAR_ALGEBRA,
)
def trace(matrix: Matrix) -> Expression:
    total: Expression = int_(0)
    for element in matrix.diagonal():
        total = fold(Sum(total, element))
    return total


@builtin(
    name="nullspace",
    description="nullspace of a matrix",
    parameters=[Parameter.MATRIX],
    categories=LINEAR_ALGEBRA,
)
def nullspace(matrix: Matrix) -> Expression:
    raise NotImplementedFault("nullspace")


@builtin(
    name="eigenvals",
    description="eigen values of a square matrix",
    parameters=[Parameter.SQUARE_MATRIX],
    categories=LINEAR_ALGEBRA,
)
def eigenvalues(matrix: Matrix) -> Expression:
    raise NotImplementedFault("eigenvals")


@builtin(
    name="eigenvecs",
    description="eigen vectors of a square matrix",
    parameters=[Parameter.SQUARE_MATRIX],
    categories=LINEAR_ALGEBRA,
)
def eigenvectors(matrix: Matrix) -> Expression:
    raise NotImplementedFault("eigenvecs")
