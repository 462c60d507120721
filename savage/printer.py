"""Printer: renders expressions back to text with minimal parentheses.

A child is parenthesised iff its precedence is lower than its parent's, or
equal to it while the parent does not associate on the child's side.
"""

from __future__ import annotations

from fractions import Fraction

from savage.types.expression import (
    Associativity, BinaryOperator, Boolean, Call, Complex, Expression, FunctionValue, Integer,
    Matrix, Rational, UnaryOperator, Variable, Vector,
)
from savage.types.numbers import ComplexRational, RationalRepresentation, decimal_representation


def to_text(expression: Expression) -> str:
    match expression:
        case Integer(value=value):
            return format_integer(value)
        case Rational(value=value, representation=representation):
            return format_rational(value, representation)
        case Complex(value=value, representation=representation):
            return format_complex(value, representation)
        case Boolean(value=value):
            return "true" if value else "false"
        case Vector(elements=elements):
            return format_list(elements)
        case Matrix():
            return "[" + ", ".join(format_list(row) for row in expression.rows()) + "]"
        case Variable(identifier=identifier):
            return identifier
        case FunctionValue(name=name):
            return name
        case Call(callee=callee, arguments=arguments):
            return wrap(expression, callee, left=True) + format_list(arguments, "(", ")")
        case UnaryOperator(operand=operand):
            return expression.symbol + wrap(expression, operand, left=False)
        case BinaryOperator():
            return format_infix(expression)
    return repr(expression)


# Integers this short convert with str() under any interpreter digit limit.
STR_SAFE_BITS = 10_000
LOG10_2 = 0.30102999566398120


def format_integer(n: int) -> str:
    if n < 0:
        return "-" + format_integer(-n)
    if n.bit_length() <= STR_SAFE_BITS:
        return str(n)
    half = int(n.bit_length() * LOG10_2) // 2
    high, low = divmod(n, 10 ** half)
    return format_integer(high) + format_integer(low).zfill(half)


def format_list(elements, opening: str = "[", closing: str = "]") -> str:
    return opening + ", ".join(to_text(e) for e in elements) + closing


def needs_parentheses(parent: Expression, child: Expression, left: bool) -> bool:
    parent_precedence, associativity = parent.precedence_and_associativity()
    child_precedence, _ = child.precedence_and_associativity()
    if child_precedence != parent_precedence:
        return child_precedence < parent_precedence
    if left:
        return associativity is Associativity.RIGHT
    return associativity is Associativity.LEFT


def wrap(parent: Expression, child: Expression, left: bool) -> str:
    text = to_text(child)
    if needs_parentheses(parent, child, left):
        return f"({text})"
    return text


def format_infix(node: BinaryOperator) -> str:
    # Operands that print bare are walked iteratively on both sides, so long
    # chains such as a + b + c or a ^ b ^ c do not recurse once per operator.
    pieces = []
    while True:
        pieces += [format_left_operand(node), node.symbol]
        right = node.right
        if isinstance(right, BinaryOperator) and not needs_parentheses(node, right, left=False):
            node = right
            continue
        pieces.append(wrap(node, right, left=False))
        return " ".join(pieces)


def format_left_operand(node: BinaryOperator) -> str:
    spine = []
    while isinstance(node.left, BinaryOperator) and not needs_parentheses(node, node.left, left=True):
        node = node.left
        spine.append(node)
    text = wrap(node, node.left, left=True)
    for op in reversed(spine):
        text = f"{text} {op.symbol} {wrap(op, op.right, left=False)}"
    return text


def format_rational(x: Fraction, representation: RationalRepresentation) -> str:
    """Decimal form when requested and exact, fraction form otherwise."""
    if representation is RationalRepresentation.DECIMAL:
        decimal = decimal_representation(x)
        if decimal is not None:
            mantissa, separator_position = decimal
            digits = format_integer(abs(mantissa))
            if separator_position > 0:
                if separator_position > len(digits) - 1:
                    digits = "0" * (separator_position - (len(digits) - 1)) + digits
                digits = digits[:-separator_position] + "." + digits[-separator_position:]
            return ("-" if x < 0 else "") + digits
    if x.denominator == 1:
        return format_integer(x.numerator)
    return f"{format_integer(x.numerator)}/{format_integer(x.denominator)}"


def format_complex(z: ComplexRational, representation: RationalRepresentation) -> str:
    def r(x: Fraction) -> str:
        return format_rational(x, representation)

    if z.im == 0:
        return r(z.re)
    if z.re == 0:
        if abs(z.im) == 1:
            return "-i" if z.im < 0 else "i"
        return f"{r(z.im)}*i"
    if z.re < 0 < z.im:
        if z.im == 1:
            return f"i - {r(-z.re)}"
        return f"{r(z.im)}*i - {r(-z.re)}"
    sign = "-" if z.im < 0 else "+"
    if abs(z.im) == 1:
        return f"{r(z.re)} {sign} i"
    return f"{r(z.re)} {sign} {r(abs(z.im))}*i"
