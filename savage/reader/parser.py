"""
  Savage Reader: Lexer and Parser

- Regex lexer yielding positioned tokens
- Precedence-climbing parser, lowest to highest:

    a || b
    a && b
    == != < <= > >=          (left-folding chains)
    + -
    * / %
    -a  !a                   (operand is a power-level expression)
    a ^ b                    (right associative)
    f(a, b, ...)             (applications chain left)
    atoms: identifiers, true/false, numbers, ( expr ), [ e, ... ]

- Brackets, '^' operands and chained applications all count towards the
  nesting limit, so every accepted tree has bounded depth apart from the
  left-leaning chains of the binary levels, which consumers walk iteratively.

- Errors are collected rather than raised on first sight; inside a delimited
  list the parser resynchronises on the next ',' or closing delimiter so one
  call can report several problems.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Iterable, Iterator, Optional

from savage import config
from savage.errors import ParseErrors
from savage.types.expression import (
    And, Boolean, Call, Difference, Equal, Expression, GreaterThan, GreaterThanOrEqual, Integer,
    LessThan, LessThanOrEqual, Matrix, Negation, Not, NotEqual, Or, Power, Product, Quotient,
    Rational, Remainder, Sum, Variable, Vector,
)
from savage.types.numbers import RationalRepresentation

logger = logging.getLogger(__name__)


TOKEN_RE = re.compile(
    r"(?P<number>(?:0|[1-9][0-9]*)(?:\.[0-9]+)?)"  # integers and decimals
    r"|(?P<identifier>[A-Za-z_][A-Za-z0-9_]*)"  # identifiers and true/false
    r"|(?P<operator>==|!=|<=|>=|&&|\|\||[-+*/%^!<>=])"  # longest operators first
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbracket>\[)"  # [
    r"|(?P<rbracket>\])"  # ]
    r"|(?P<comma>,)"  # ,
    r"|(?P<question>\?)"  # help marker, only meaningful to the command grammar
    r"|(?P<invalid>\S)"  # fallback: anything else is rejected by the parser
)

CLOSERS = {"lparen": "rparen", "lbracket": "rbracket"}
DELIMITER_TEXT = {"lparen": "(", "rparen": ")", "lbracket": "[", "rbracket": "]"}

DISJUNCTION_OPERATORS = {"||": Or}
CONJUNCTION_OPERATORS = {"&&": And}
COMPARISON_OPERATORS = {
    "==": Equal,
    "!=": NotEqual,
    "<": LessThan,
    "<=": LessThanOrEqual,
    ">": GreaterThan,
    ">=": GreaterThanOrEqual,
}
SUM_OPERATORS = {"+": Sum, "-": Difference}
PRODUCT_OPERATORS = {"*": Product, "/": Quotient, "%": Remainder}

END_OF_INPUT = "end of input"
ATOM_START = frozenset({"identifier", "number", "(", "["})
OPERAND_START = ATOM_START | {"-", "!"}
CONTINUATIONS = frozenset(
    {"||", "&&", "==", "!=", "<", "<=", ">", ">=", "+", "-", "*", "/", "%", "^", "("}
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end


class ErrorReason(Enum):
    UNEXPECTED = "unexpected"
    UNCLOSED = "unclosed"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ParseError:
    """A single syntax error.

    `found` is the offending token text, or None for the end of input.
    Unclosed-delimiter errors also carry the opening delimiter and its span.
    """

    reason: ErrorReason
    span: tuple[int, int]
    found: Optional[str]
    expected: frozenset[str] = frozenset()
    message: Optional[str] = None
    delimiter: Optional[str] = None
    delimiter_span: Optional[tuple[int, int]] = None

    @property
    def at_end_of_input(self) -> bool:
        return self.found is None

    def __str__(self) -> str:
        found = END_OF_INPUT if self.found is None else repr(self.found)
        if self.reason is ErrorReason.CUSTOM and self.message:
            return f"{self.message} at {self.span[0]}"
        if self.reason is ErrorReason.UNCLOSED:
            return (
                f"unclosed delimiter {self.delimiter!r} opened at {self.delimiter_span[0]}, "
                f"found {found} at {self.span[0]}"
            )
        text = f"unexpected {found} at {self.span[0]}"
        if self.expected:
            text += ", expected one of " + ", ".join(sorted(self.expected))
        return text


class _Abort(Exception):
    """Unwinds to the nearest point where the parser can resynchronise."""

    def __init__(self, error: ParseError):
        super().__init__(str(error))
        self.error = error


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields positioned tokens, skipping whitespace."""
    pos = 0
    n = len(source)
    while True:
        while pos < n and source[pos].isspace():
            pos += 1
        if pos >= n:
            break
        m = TOKEN_RE.match(source, pos)
        kind = m.lastgroup
        yield Token(kind, m.group(kind), m.start(), m.end())
        pos = m.end()


class TokenStream:
    def __init__(self, tokens: Iterable[Token], end: int, max_depth: Optional[int] = None):
        self.tokens = iter(tokens)
        self.buffer: list[Token] = []
        self.end = end
        self.errors: list[ParseError] = []
        self.depth = 0
        self.max_depth = max_depth if max_depth is not None else config.get_max_parse_depth()

    # --- token access ---
    def peek(self) -> Optional[Token]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None
        return self.buffer[0]

    def advance(self) -> Optional[Token]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, None)

    def peek_operator(self) -> Optional[str]:
        tok = self.peek()
        if tok is not None and tok.kind == "operator":
            return tok.text
        return None

    # --- error construction ---
    def unexpected(self, expected: Iterable[str]) -> _Abort:
        tok = self.peek()
        if tok is None:
            error = ParseError(ErrorReason.UNEXPECTED, (self.end, self.end), None, frozenset(expected))
        else:
            error = ParseError(ErrorReason.UNEXPECTED, tok.span, tok.text, frozenset(expected))
        return _Abort(error)

    def unclosed(self, opening: Token, expected: Iterable[str]) -> _Abort:
        tok = self.peek()
        span = tok.span if tok is not None else (self.end, self.end)
        return _Abort(ParseError(
            ErrorReason.UNCLOSED,
            span,
            tok.text if tok is not None else None,
            frozenset(expected),
            delimiter=opening.text,
            delimiter_span=opening.span,
        ))

    def synchronize(self) -> None:
        """Skip tokens up to the next ',' or closing delimiter at the current nesting level."""
        nesting = 0
        while (tok := self.peek()) is not None:
            if tok.kind in CLOSERS:
                nesting += 1
            elif tok.kind in ("rparen", "rbracket"):
                if nesting == 0:
                    return
                nesting -= 1
            elif tok.kind == "comma" and nesting == 0:
                return
            self.advance()

    # --- grammar ---
    def parse_all(self) -> Expression:
        """Parse one complete expression, raising ParseErrors if anything went wrong."""
        expr: Optional[Expression] = None
        try:
            expr = self.parse_expression()
            if self.peek() is not None:
                raise self.unexpected(CONTINUATIONS | {END_OF_INPUT})
        except _Abort as abort:
            self.errors.append(abort.error)
        if self.errors:
            logger.debug("parse failed with %d error(s)", len(self.errors))
            raise ParseErrors(self.errors)
        return expr

    def parse_expression(self) -> Expression:
        return self._binary(self.parse_conjunction, DISJUNCTION_OPERATORS)

    def parse_conjunction(self) -> Expression:
        return self._binary(self.parse_comparison, CONJUNCTION_OPERATORS)

    def parse_comparison(self) -> Expression:
        return self._binary(self.parse_sum, COMPARISON_OPERATORS)

    def parse_sum(self) -> Expression:
        return self._binary(self.parse_product, SUM_OPERATORS)

    def parse_product(self) -> Expression:
        return self._binary(self.parse_unary, PRODUCT_OPERATORS)

    def _binary(self, operand, operators: dict) -> Expression:
        left = operand()
        while (op := self.peek_operator()) in operators:
            self.advance()
            left = operators[op](left, operand())
        return left

    def parse_unary(self) -> Expression:
        op = self.peek_operator()
        if op == "-":
            self.advance()
            return Negation(self.parse_power())
        if op == "!":
            self.advance()
            return Not(self.parse_power())
        return self.parse_power()

    def parse_power(self) -> Expression:
        # Each '^' nests its right operand one level deeper, like a bracket does.
        operands = [self.parse_application()]
        entered = 0
        try:
            while self.peek_operator() == "^":
                self._enter(self.peek())
                entered += 1
                self.advance()
                operands.append(self.parse_application())
        finally:
            self.depth -= entered
        result = operands.pop()
        while operands:
            result = Power(operands.pop(), result)
        return result

    def parse_application(self) -> Expression:
        expr = self.parse_atom()
        chained = 0
        try:
            while (tok := self.peek()) is not None and tok.kind == "lparen":
                # f(a)(b) nests the first call inside the second.
                if isinstance(expr, Call):
                    self._enter(tok)
                    chained += 1
                expr = Call(expr, tuple(self.parse_delimited()))
        finally:
            self.depth -= chained
        return expr

    def parse_atom(self) -> Expression:
        tok = self.peek()
        if tok is None:
            raise self.unexpected(ATOM_START)

        if tok.kind == "identifier":
            self.advance()
            if tok.text == "true":
                return Boolean(True)
            if tok.text == "false":
                return Boolean(False)
            return Variable(tok.text)

        if tok.kind == "number":
            self.advance()
            return parse_number(tok.text)

        if tok.kind == "lparen":
            return self.parse_group()

        if tok.kind == "lbracket":
            return vector_or_matrix(self.parse_delimited())

        if tok.kind == "operator" and tok.text in ("-", "!"):
            # Prefix operators only bind to power-level operands.
            raise self.unexpected(ATOM_START)

        raise self.unexpected(OPERAND_START)

    def _enter(self, opening: Token) -> None:
        if self.depth >= self.max_depth:
            raise _Abort(ParseError(
                ErrorReason.CUSTOM,
                opening.span,
                opening.text,
                message=f"maximum nesting depth of {self.max_depth} exceeded",
            ))
        self.depth += 1

    def parse_group(self) -> Expression:
        """( expr )"""
        opening = self.peek()
        self._enter(opening)
        self.advance()
        try:
            expr: Expression = Vector()
            try:
                expr = self.parse_expression()
            except _Abort as abort:
                self.errors.append(abort.error)
                self.synchronize()
            self._close(opening, allow_comma=False)
            return expr
        finally:
            self.depth -= 1

    def parse_delimited(self) -> list[Expression]:
        """( e, ... ) or [ e, ... ]; an empty list is allowed."""
        opening = self.peek()
        self._enter(opening)
        self.advance()
        closer = CLOSERS[opening.kind]
        items: list[Expression] = []
        try:
            tok = self.peek()
            if tok is not None and tok.kind == closer:
                self.advance()
                return items
            while True:
                try:
                    items.append(self.parse_expression())
                except _Abort as abort:
                    self.errors.append(abort.error)
                    self.synchronize()
                tok = self.peek()
                if tok is not None and tok.kind == "comma":
                    self.advance()
                    continue
                self._close(opening, allow_comma=True)
                return items
        finally:
            self.depth -= 1

    def _close(self, opening: Token, allow_comma: bool) -> None:
        closer = CLOSERS[opening.kind]
        expected = CONTINUATIONS | {DELIMITER_TEXT[closer]}
        if allow_comma:
            expected |= {","}
        tok = self.peek()
        if tok is not None and tok.kind == closer:
            self.advance()
            return
        if tok is None:
            raise self.unclosed(opening, expected)
        self.errors.append(self.unexpected(expected).error)
        self.synchronize()
        tok = self.peek()
        if tok is not None and tok.kind == closer:
            self.advance()
            return
        raise self.unclosed(opening, expected)


# Digit strings this short convert with int() under any interpreter digit limit.
INT_SAFE_DIGITS = 3000


def digits_to_int(digits: str) -> int:
    if len(digits) <= INT_SAFE_DIGITS:
        return int(digits)
    half = len(digits) // 2
    return digits_to_int(digits[:-half]) * 10 ** half + digits_to_int(digits[-half:])


def parse_number(text: str) -> Expression:
    """Integer literal, or a decimal literal read as an exact rational."""
    if "." not in text:
        return Integer(digits_to_int(text))
    integer_part, fractional_part = text.split(".")
    return Rational(
        Fraction(digits_to_int(integer_part + fractional_part), 10 ** len(fractional_part)),
        RationalRepresentation.DECIMAL,
    )


def vector_or_matrix(elements: list[Expression]) -> Expression:
    """If every element is a vector of the first one's length, the elements are matrix rows."""
    if elements and isinstance(elements[0], Vector):
        row_size = len(elements[0].elements)
        if all(isinstance(e, Vector) and len(e.elements) == row_size for e in elements):
            return Matrix.from_rows([e.elements for e in elements])
    return Vector(tuple(elements))


def parse(source: str, max_depth: Optional[int] = None) -> Expression:
    """Parse `source` into an expression, raising ParseErrors on failure."""
    stream = TokenStream(lex(source), len(source), max_depth)
    return stream.parse_all()


def is_incomplete(source: str) -> bool:
    """True if `source` fails to parse only because the input ended too early."""
    try:
        parse(source)
    except ParseErrors as e:
        return any(error.at_end_of_input for error in e.errors)
    return False
