"""Expression tree for Savage.

Every node is a frozen dataclass, so trees are immutable, hashable and
compare structurally. Composite nodes own their children as tuples; since
nothing is ever mutated in place, subtrees may be shared freely.

Each node also reports the (precedence, associativity) pair the printer uses
to decide where parentheses are required. Literals report the precedence of
the text they render to, e.g. ``-1`` behaves like a negation and ``1/2``
like a quotient.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Callable, ClassVar, Iterator, Sequence

from savage.types.numbers import ComplexRational, RationalRepresentation, decimal_representation


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"


OR_PRECEDENCE = 1
AND_PRECEDENCE = 2
COMPARISON_PRECEDENCE = 3
SUM_PRECEDENCE = 4
PRODUCT_PRECEDENCE = 5
NEGATION_PRECEDENCE = 6
POWER_PRECEDENCE = 7
CALL_PRECEDENCE = 8
ATOM_PRECEDENCE = 9


class Expression:
    """Base class of all expression nodes.

    The arithmetic dunders only *build* nodes; nothing is evaluated here.
    """

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return ATOM_PRECEDENCE, Associativity.FULL

    def children(self) -> tuple[Expression, ...]:
        return ()

    def __neg__(self) -> Expression:
        return Negation(self)

    def __invert__(self) -> Expression:
        return Not(self)

    def __add__(self, other: Expression) -> Expression:
        return Sum(self, other)

    def __sub__(self, other: Expression) -> Expression:
        return Difference(self, other)

    def __mul__(self, other: Expression) -> Expression:
        return Product(self, other)

    def __truediv__(self, other: Expression) -> Expression:
        return Quotient(self, other)

    def __mod__(self, other: Expression) -> Expression:
        return Remainder(self, other)

    def __str__(self) -> str:
        from savage.printer import to_text
        return to_text(self)


def _signed_precedence(negative: bool) -> tuple[int, Associativity]:
    if negative:
        return NEGATION_PRECEDENCE, Associativity.FULL
    return ATOM_PRECEDENCE, Associativity.FULL


def _rational_precedence(x: Fraction, representation: RationalRepresentation) -> tuple[int, Associativity]:
    if x.denominator == 1 or (
        representation is RationalRepresentation.DECIMAL and decimal_representation(x) is not None
    ):
        return _signed_precedence(x < 0)
    return PRODUCT_PRECEDENCE, Associativity.FULL


# ---------------------------------------------------------------------------
# Leaf values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Integer(Expression):
    value: int

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return _signed_precedence(self.value < 0)


@dataclass(frozen=True)
class Rational(Expression):
    value: Fraction
    representation: RationalRepresentation = field(
        default=RationalRepresentation.FRACTION, compare=False
    )

    def __post_init__(self):
        object.__setattr__(self, "value", Fraction(self.value))

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return _rational_precedence(self.value, self.representation)


@dataclass(frozen=True)
class Complex(Expression):
    value: ComplexRational
    representation: RationalRepresentation = field(
        default=RationalRepresentation.FRACTION, compare=False
    )

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        z = self.value
        if z.im == 0:
            return _rational_precedence(z.re, self.representation)
        if z.re == 0:
            if abs(z.im) == 1:
                return _signed_precedence(z.im < 0)
            return PRODUCT_PRECEDENCE, Associativity.FULL
        return SUM_PRECEDENCE, Associativity.FULL


@dataclass(frozen=True)
class Boolean(Expression):
    value: bool


@dataclass(frozen=True)
class Vector(Expression):
    elements: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))

    def children(self) -> tuple[Expression, ...]:
        return self.elements


@dataclass(frozen=True)
class Matrix(Expression):
    """Column-major matrix: element (i, j) lives at ``elements[j * nrows + i]``."""

    nrows: int
    ncols: int
    elements: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))
        if self.nrows < 0 or self.ncols < 0 or len(self.elements) != self.nrows * self.ncols:
            raise ValueError(
                f"{self.nrows}x{self.ncols} matrix cannot hold {len(self.elements)} elements"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Expression]]) -> Matrix:
        nrows = len(rows)
        ncols = len(rows[0]) if rows else 0
        if any(len(r) != ncols for r in rows):
            raise ValueError("all matrix rows must have the same length")
        return cls(nrows, ncols, tuple(rows[i][j] for j in range(ncols) for i in range(nrows)))

    @classmethod
    def from_function(cls, nrows: int, ncols: int, fn: Callable[[int, int], Expression]) -> Matrix:
        return cls(nrows, ncols, tuple(fn(i, j) for j in range(ncols) for i in range(nrows)))

    @classmethod
    def from_vector(cls, vector: Vector) -> Matrix:
        return cls(len(vector.elements), 1, vector.elements)

    def __getitem__(self, index: tuple[int, int]) -> Expression:
        i, j = index
        if not (0 <= i < self.nrows and 0 <= j < self.ncols):
            raise IndexError(f"index {index} out of range for {self.nrows}x{self.ncols} matrix")
        return self.elements[j * self.nrows + i]

    def row(self, i: int) -> tuple[Expression, ...]:
        return tuple(self[i, j] for j in range(self.ncols))

    def rows(self) -> Iterator[tuple[Expression, ...]]:
        for i in range(self.nrows):
            yield self.row(i)

    def column(self, j: int) -> tuple[Expression, ...]:
        return self.elements[j * self.nrows:(j + 1) * self.nrows]

    def is_square(self) -> bool:
        return self.nrows == self.ncols

    def is_empty(self) -> bool:
        return not self.elements

    def transpose(self) -> Matrix:
        return Matrix.from_function(self.ncols, self.nrows, lambda i, j: self[j, i])

    def diagonal(self) -> tuple[Expression, ...]:
        return tuple(self[k, k] for k in range(min(self.nrows, self.ncols)))

    def map(self, fn: Callable[[Expression], Expression]) -> Matrix:
        return Matrix(self.nrows, self.ncols, tuple(fn(e) for e in self.elements))

    def children(self) -> tuple[Expression, ...]:
        return self.elements


# ---------------------------------------------------------------------------
# References, applications, function values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Variable(Expression):
    identifier: str


@dataclass(frozen=True)
class Call(Expression):
    """Syntactic application ``callee(arguments...)``; the callee may not be a function yet."""

    callee: Expression
    arguments: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return CALL_PRECEDENCE, Associativity.LEFT

    def children(self) -> tuple[Expression, ...]:
        return (self.callee, *self.arguments)


# (call expression, evaluated arguments, binding context) -> result
FunctionImplementation = Callable[..., Expression]


@dataclass(frozen=True)
class FunctionValue(Expression):
    """A named, invocable function. Two values are equal only if they share an implementation."""

    name: str
    implementation: FunctionImplementation = field(repr=False)


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnaryOperator(Expression):
    operand: Expression

    symbol: ClassVar[str] = ""

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return NEGATION_PRECEDENCE, Associativity.LEFT

    def children(self) -> tuple[Expression, ...]:
        return (self.operand,)


@dataclass(frozen=True)
class Negation(UnaryOperator):
    symbol: ClassVar[str] = "-"


@dataclass(frozen=True)
class Not(UnaryOperator):
    symbol: ClassVar[str] = "!"


@dataclass(frozen=True)
class BinaryOperator(Expression):
    left: Expression
    right: Expression

    symbol: ClassVar[str] = ""
    precedence: ClassVar[int] = 0
    associativity: ClassVar[Associativity] = Associativity.LEFT

    def precedence_and_associativity(self) -> tuple[int, Associativity]:
        return self.precedence, self.associativity

    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class Sum(BinaryOperator):
    symbol: ClassVar[str] = "+"
    precedence: ClassVar[int] = SUM_PRECEDENCE
    associativity: ClassVar[Associativity] = Associativity.FULL


@dataclass(frozen=True)
class Difference(BinaryOperator):
    symbol: ClassVar[str] = "-"
    precedence: ClassVar[int] = SUM_PRECEDENCE


@dataclass(frozen=True)
class Product(BinaryOperator):
    symbol: ClassVar[str] = "*"
    precedence: ClassVar[int] = PRODUCT_PRECEDENCE
    associativity: ClassVar[Associativity] = Associativity.FULL


@dataclass(frozen=True)
class Quotient(BinaryOperator):
    symbol: ClassVar[str] = "/"
    precedence: ClassVar[int] = PRODUCT_PRECEDENCE


@dataclass(frozen=True)
class Remainder(BinaryOperator):
    """Remainder of the Euclidean division of ``left`` by ``right``."""

    symbol: ClassVar[str] = "%"
    precedence: ClassVar[int] = PRODUCT_PRECEDENCE


@dataclass(frozen=True)
class Power(BinaryOperator):
    symbol: ClassVar[str] = "^"
    precedence: ClassVar[int] = POWER_PRECEDENCE
    associativity: ClassVar[Associativity] = Associativity.RIGHT


@dataclass(frozen=True)
class Comparison(BinaryOperator):
    precedence: ClassVar[int] = COMPARISON_PRECEDENCE


@dataclass(frozen=True)
class Equal(Comparison):
    symbol: ClassVar[str] = "=="


@dataclass(frozen=True)
class NotEqual(Comparison):
    symbol: ClassVar[str] = "!="


@dataclass(frozen=True)
class LessThan(Comparison):
    symbol: ClassVar[str] = "<"


@dataclass(frozen=True)
class LessThanOrEqual(Comparison):
    symbol: ClassVar[str] = "<="


@dataclass(frozen=True)
class GreaterThan(Comparison):
    symbol: ClassVar[str] = ">"


@dataclass(frozen=True)
class GreaterThanOrEqual(Comparison):
    symbol: ClassVar[str] = ">="


@dataclass(frozen=True)
class And(BinaryOperator):
    symbol: ClassVar[str] = "&&"
    precedence: ClassVar[int] = AND_PRECEDENCE
    associativity: ClassVar[Associativity] = Associativity.FULL


@dataclass(frozen=True)
class Or(BinaryOperator):
    symbol: ClassVar[str] = "||"
    precedence: ClassVar[int] = OR_PRECEDENCE
    associativity: ClassVar[Associativity] = Associativity.FULL


ARITHMETIC_OPERATORS = (Sum, Difference, Product, Quotient, Remainder, Power)
COMPARISON_OPERATORS = (Equal, NotEqual, LessThan, LessThanOrEqual, GreaterThan, GreaterThanOrEqual)
LOGIC_OPERATORS = (And, Or)
