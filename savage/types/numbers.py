"""Exact numeric tower for Savage.

Integers are Python ``int``, rationals are ``fractions.Fraction`` and complex
numbers are ``ComplexRational`` values whose real and imaginary parts are
independent rationals. Nothing in here ever touches floating point.

Promotion order is int ⊂ Fraction ⊂ ComplexRational; ``normalize`` maps a
result back onto the tightest type that represents it exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Union

# Results whose size would exceed this many bits are left symbolic.
MAX_POWER_BITS = 1_000_000


class RationalRepresentation(Enum):
    """Preferred representation when printing a rational number."""

    FRACTION = "fraction"
    # Falls back to FRACTION when the value has no finite decimal expansion.
    DECIMAL = "decimal"

    def merge(self, other: RationalRepresentation) -> RationalRepresentation:
        if self is RationalRepresentation.DECIMAL or other is RationalRepresentation.DECIMAL:
            return RationalRepresentation.DECIMAL
        return RationalRepresentation.FRACTION


def merge_representations(*representations: RationalRepresentation) -> RationalRepresentation:
    result = RationalRepresentation.FRACTION
    for r in representations:
        result = result.merge(r)
    return result


@dataclass(frozen=True)
class ComplexRational:
    re: Fraction
    im: Fraction = Fraction(0)

    def __post_init__(self):
        object.__setattr__(self, "re", Fraction(self.re))
        object.__setattr__(self, "im", Fraction(self.im))

    @classmethod
    def coerce(cls, value: Number) -> ComplexRational:
        if isinstance(value, ComplexRational):
            return value
        return cls(Fraction(value))

    # --- predicates ---
    def is_zero(self) -> bool:
        return self.re == 0 and self.im == 0

    def is_real(self) -> bool:
        return self.im == 0

    def is_integer(self) -> bool:
        return self.im == 0 and self.re.denominator == 1

    def __bool__(self) -> bool:
        return not self.is_zero()

    # --- ring operations ---
    def __neg__(self) -> ComplexRational:
        return ComplexRational(-self.re, -self.im)

    def __add__(self, other: Number) -> ComplexRational:
        o = ComplexRational.coerce(other)
        return ComplexRational(self.re + o.re, self.im + o.im)

    __radd__ = __add__

    def __sub__(self, other: Number) -> ComplexRational:
        o = ComplexRational.coerce(other)
        return ComplexRational(self.re - o.re, self.im - o.im)

    def __rsub__(self, other: Number) -> ComplexRational:
        return ComplexRational.coerce(other) - self

    def __mul__(self, other: Number) -> ComplexRational:
        o = ComplexRational.coerce(other)
        return ComplexRational(
            self.re * o.re - self.im * o.im,
            self.re * o.im + self.im * o.re,
        )

    __rmul__ = __mul__

    def __truediv__(self, other: Number) -> ComplexRational:
        o = ComplexRational.coerce(other)
        norm = o.re * o.re + o.im * o.im
        if norm == 0:
            raise ZeroDivisionError("complex division by zero")
        return ComplexRational(
            (self.re * o.re + self.im * o.im) / norm,
            (self.im * o.re - self.re * o.im) / norm,
        )

    def __rtruediv__(self, other: Number) -> ComplexRational:
        return ComplexRational.coerce(other) / self

    def __pow__(self, exponent: int) -> ComplexRational:
        if not isinstance(exponent, int):
            return NotImplemented
        if exponent < 0:
            return ComplexRational(1) / (self ** -exponent)
        result = ComplexRational(1)
        base = self
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    def __repr__(self) -> str:
        return f"ComplexRational({self.re}, {self.im})"


Number = Union[int, Fraction, ComplexRational]


def normalize(value: Number) -> Number:
    """Return ``value`` as the tightest of int, Fraction or ComplexRational."""
    if isinstance(value, ComplexRational):
        if value.im != 0:
            return value
        value = value.re
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return value.numerator
        return value
    return int(value)


def euclidean_remainder(a: Fraction, b: Fraction) -> Fraction:
    """Remainder of the Euclidean division of a by b, always in [0, |b|)."""
    if b == 0:
        raise ZeroDivisionError("remainder by zero")
    return Fraction(a) % abs(Fraction(b))


def exact_root(n: int, k: int) -> int | None:
    """Return r with r ** k == n for non-negative n, or None if n is not a perfect power."""
    if n < 0 or k < 1:
        return None
    if n < 2 or k == 1:
        return n
    # 2 ** k already exceeds n, so only 0 and 1 have a k-th root.
    if k >= n.bit_length():
        return None
    x = 1 << -(-n.bit_length() // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            break
        x = y
    return x if x ** k == n else None


def bit_size(value: Number) -> int:
    """Largest bit length among the numerators and denominators of `value`."""
    z = ComplexRational.coerce(value)
    return max(
        abs(z.re.numerator).bit_length(), z.re.denominator.bit_length(),
        abs(z.im.numerator).bit_length(), z.im.denominator.bit_length(),
    )


def is_unit(z: ComplexRational) -> bool:
    """True for 1, -1, i and -i, whose powers never grow."""
    return z.re.denominator == 1 and z.im.denominator == 1 and abs(z.re) + abs(z.im) == 1


def _too_large(base: ComplexRational, exponent: int) -> bool:
    if base.is_zero() or is_unit(base):
        return False
    return bit_size(base) * abs(exponent) > MAX_POWER_BITS


def power(base: Number, exponent: Number) -> ComplexRational | None:
    """Exact power, or None when the result is not exactly representable.

    Integer exponents always succeed (barring division by zero). A rational
    exponent p/q on a non-negative real base succeeds only if the q-th root
    of the base is itself rational.
    """
    b = ComplexRational.coerce(base)
    e = ComplexRational.coerce(exponent)
    if not e.is_real():
        return None
    if e.re.denominator == 1:
        n = e.re.numerator
        if _too_large(b, n):
            return None
        return b ** n
    if not b.is_real() or b.re < 0:
        return None
    q = e.re.denominator
    num = exact_root(b.re.numerator, q)
    den = exact_root(b.re.denominator, q)
    if num is None or den is None:
        return None
    root = ComplexRational(Fraction(num, den))
    if _too_large(root, e.re.numerator):
        return None
    return root ** e.re.numerator


def decimal_representation(x: Fraction) -> tuple[int, int] | None:
    """Return (n, m) such that x == n / 10**m, or None if no such pair exists."""
    denominator = x.denominator
    powers = []
    for p in (2, 5):
        count = 0
        while denominator % p == 0:
            denominator //= p
            count += 1
        powers.append(count)
    if denominator != 1:
        return None
    power_of_2, power_of_5 = powers
    if power_of_2 < power_of_5:
        multiplier = 2 ** (power_of_5 - power_of_2)
    else:
        multiplier = 5 ** (power_of_2 - power_of_5)
    return x.numerator * multiplier, max(power_of_2, power_of_5)
