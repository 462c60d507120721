import pytest

from savage.printer import format_integer, needs_parentheses, to_text
from savage.reader.parser import parse
from savage.types.expression import (
    Boolean, Call, Difference, FunctionValue, Integer, Matrix, Negation, Not, Power, Product, Sum, Vector,
)
from savage.types.helpers import (
    and_, com, comd, eq, fun, int_, lt, matrix, or_, pow_, rat, ratd, var, vector,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (1, "1"),
        (-1, "-1"),
        (1234567890, "1234567890"),
        (-1234567890, "-1234567890"),
        (9876543210, "9876543210"),
        (-9876543210, "-9876543210"),
    ]
)
def test_integers(value, expected):
    assert to_text(int_(value)) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        (rat(0, 1), "0"),
        (ratd(0, 1), "0"),
        (rat(0, -1), "0"),
        (ratd(0, -1), "0"),
        (rat(1, 1), "1"),
        (ratd(1, 1), "1"),
        (rat(-1, 1), "-1"),
        (ratd(-1, 1), "-1"),
        (rat(1, 2), "1/2"),
        (ratd(1, 2), "0.5"),
        (rat(3, 2), "3/2"),
        (ratd(3, 2), "1.5"),
        (rat(1, 3), "1/3"),
        (ratd(1, 3), "1/3"),
        (rat(123, 40), "123/40"),
        (ratd(123, 40), "3.075"),
        (rat(123, -40), "-123/40"),
        (ratd(123, -40), "-3.075"),
        (rat(-123, -40), "123/40"),
        (ratd(-123, -40), "3.075"),
        (ratd(-1, 8), "-0.125"),
        (ratd(1, 1000), "0.001"),
    ]
)
def test_rational_numbers(expression, expected):
    assert to_text(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        (com(0, 1, 0, 1), "0"),
        (comd(0, 1, 0, 1), "0"),
        (com(1, 1, 0, 1), "1"),
        (comd(1, 1, 0, 1), "1"),
        (com(0, 1, 1, 1), "i"),
        (comd(0, 1, 1, 1), "i"),
        (com(-1, 1, 0, 1), "-1"),
        (comd(-1, 1, 0, 1), "-1"),
        (com(0, 1, -1, 1), "-i"),
        (comd(0, 1, -1, 1), "-i"),
        (com(1, 1, 1, 1), "1 + i"),
        (comd(1, 1, 1, 1), "1 + i"),
        (com(1, 1, -1, 1), "1 - i"),
        (comd(1, 1, -1, 1), "1 - i"),
        (com(-1, 1, 1, 1), "i - 1"),
        (comd(-1, 1, 1, 1), "i - 1"),
        (com(-1, 1, -1, 1), "-1 - i"),
        (comd(-1, 1, -1, 1), "-1 - i"),
        (com(123, -40, 1, 3), "1/3*i - 123/40"),
        (comd(123, -40, 1, 3), "1/3*i - 3.075"),
        (com(1, 3, 123, 40), "1/3 + 123/40*i"),
        (comd(1, 3, 123, 40), "1/3 + 3.075*i"),
        (com(0, 1, 2, 1), "2*i"),
        (com(2, 1, -3, 1), "2 - 3*i"),
    ]
)
def test_complex_numbers(expression, expected):
    assert to_text(expression) == expected


def test_vectors_and_matrices():
    assert to_text(Vector()) == "[]"
    assert to_text(vector(int_(1), var("a"))) == "[1, a]"
    assert to_text(vector(vector(int_(1)), vector())) == "[[1], []]"
    assert to_text(matrix([[int_(1), int_(2)], [int_(3), int_(4)]])) == "[[1, 2], [3, 4]]"
    assert to_text(Matrix(2, 0)) == "[[], []]"
    assert to_text(Matrix(0, 0)) == "[]"


def test_atoms_and_calls():
    f = var("f")
    assert to_text(Boolean(True)) == "true"
    assert to_text(Boolean(False)) == "false"
    assert to_text(fun(f)) == "f()"
    assert to_text(fun(f, [int_(1), var("x")])) == "f(1, x)"
    assert to_text(fun(fun(f, [int_(1)]), [int_(2)])) == "f(1)(2)"
    assert to_text(fun(Sum(f, var("g")), [var("a")])) == "(f + g)(a)"
    assert to_text(FunctionValue("det", lambda *args: None)) == "det"


# Pairs of expression and expected rendering, left to right.
t = [
    ((int_(1) + int_(2)) + int_(3), "1 + 2 + 3"),
    ((int_(1) + int_(2)) - int_(3), "1 + 2 - 3"),
    ((int_(1) - int_(2)) + int_(3), "1 - 2 + 3"),
    ((int_(1) - int_(2)) - int_(3), "1 - 2 - 3"),
    (int_(1) + (int_(2) + int_(3)), "1 + 2 + 3"),
    (int_(1) + (int_(2) - int_(3)), "1 + 2 - 3"),
    (int_(1) - (int_(2) + int_(3)), "1 - (2 + 3)"),
    (int_(1) - (int_(2) - int_(3)), "1 - (2 - 3)"),
    ((int_(1) * int_(2)) * int_(3), "1 * 2 * 3"),
    ((int_(1) * int_(2)) / int_(3), "1 * 2 / 3"),
    ((int_(1) / int_(2)) * int_(3), "1 / 2 * 3"),
    ((int_(1) / int_(2)) / int_(3), "1 / 2 / 3"),
    (int_(1) * (int_(2) * int_(3)), "1 * 2 * 3"),
    (int_(1) * (int_(2) / int_(3)), "1 * 2 / 3"),
    (int_(1) / (int_(2) * int_(3)), "1 / (2 * 3)"),
    (int_(1) / (int_(2) / int_(3)), "1 / (2 / 3)"),
    ((int_(1) + int_(2)) / int_(3), "(1 + 2) / 3"),
    ((int_(1) / int_(2)) + int_(3), "1 / 2 + 3"),
    (int_(1) + (int_(2) / int_(3)), "1 + 2 / 3"),
    (int_(1) / (int_(2) + int_(3)), "1 / (2 + 3)"),
    (int_(1) % (int_(2) * int_(3)), "1 % (2 * 3)"),
    (pow_(int_(1) * int_(2), int_(3)), "(1 * 2) ^ 3"),
    (pow_(int_(1), int_(2)) * int_(3), "1 ^ 2 * 3"),
    (int_(1) * pow_(int_(2), int_(3)), "1 * 2 ^ 3"),
    (pow_(int_(1), int_(2) * int_(3)), "1 ^ (2 * 3)"),
    (pow_(pow_(int_(1), int_(2)), int_(3)), "(1 ^ 2) ^ 3"),
    (pow_(int_(1), pow_(int_(2), int_(3))), "1 ^ 2 ^ 3"),
    (pow_(int_(1), int_(2)), "1 ^ 2"),
    (pow_(int_(-1), int_(2)), "(-1) ^ 2"),
    (pow_(rat(1, 2), int_(3)), "(1/2) ^ 3"),
    (pow_(ratd(1, 2), int_(3)), "0.5 ^ 3"),
    (pow_(com(0, 1, -1, 1), int_(2)), "(-i) ^ 2"),
    (com(1, 1, 1, 1) * int_(2), "(1 + i) * 2"),
    (com(1, 1, -1, 1) - int_(2), "1 - i - 2"),
    (int_(2) - com(1, 1, -1, 1), "2 - (1 - i)"),
]


@pytest.mark.parametrize("expression, expected", t)
def test_operators(expression, expected):
    assert to_text(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        (Negation(var("a")), "-a"),
        (Negation(pow_(var("a"), int_(2))), "-a ^ 2"),
        (pow_(Negation(var("a")), int_(2)), "(-a) ^ 2"),
        (pow_(int_(2), Negation(int_(1))), "2 ^ (-1)"),
        (int_(2) * Negation(int_(3)), "2 * -3"),
        (Negation(Negation(var("a"))), "-(-a)"),
        (Negation(int_(-1)), "-(-1)"),
        (Negation(var("a") + var("b")), "-(a + b)"),
        (Not(var("a")), "!a"),
        (Not(lt(var("a"), var("b"))), "!(a < b)"),
        (eq(lt(var("a"), var("b")), var("c")), "a < b == c"),
        (lt(var("a"), eq(var("b"), var("c"))), "a < (b == c)"),
        (or_(var("a"), and_(var("b"), var("c"))), "a || b && c"),
        (and_(or_(var("a"), var("b")), var("c")), "(a || b) && c"),
        (eq(var("a") + var("b"), int_(1)), "a + b == 1"),
    ]
)
def test_unary_comparison_and_logic(expression, expected):
    assert to_text(expression) == expected


def test_needs_parentheses():
    a, b = var("a"), var("b")
    parent = a - b
    assert not needs_parentheses(parent, a + b, left=True)
    assert needs_parentheses(parent, a + b, left=False)
    assert needs_parentheses(a * b, a + b, left=True)


def test_str_uses_printer():
    assert str(var("a") * (var("b") + int_(1))) == "a * (b + 1)"


@pytest.mark.parametrize(
    "source",
    ["1 + 2 * 3", "(1 + 2) * 3", "a - (b - c)", "2 ^ 3 ^ 2", "(2 ^ 3) ^ 2", "-a ^ 2",
     "f(a)(b)", "[[1, 2], [3, 4]]", "!(a && b) || c", "3.075 * x", "a < b == c"]
)
def test_printed_text_parses_back(source):
    expression = parse(source)
    assert parse(to_text(expression)) == expression


def test_long_left_chains_print():
    expression = int_(0)
    for k in range(1, 5000):
        expression = Sum(expression, int_(k))
    text = to_text(expression)
    assert text.startswith("0 + 1 + 2")
    assert text.endswith("4998 + 4999")


def test_long_right_chains_print():
    power = var("a")
    total = var("a")
    for _ in range(3000):
        power = Power(var("a"), power)
        total = Sum(var("b"), total)
    assert to_text(power) == " ^ ".join(["a"] * 3001)
    assert to_text(total) == " + ".join(["b"] * 3000 + ["a"])


def test_right_chains_keep_parentheses_where_needed():
    assert to_text(Power(var("a"), Power(Sum(var("b"), var("c")), var("d")))) == "a ^ (b + c) ^ d"
    assert to_text(Sum(var("a"), Sum(Product(var("b"), var("c")), var("d")))) == "a + b * c + d"
    assert to_text(Power(var("a"), Power(var("b"), Negation(var("c"))))) == "a ^ b ^ (-c)"
    assert to_text(Difference(var("a"), Difference(var("b"), var("c")))) == "a - (b - c)"


def test_huge_integers_print():
    assert to_text(Integer(10 ** 5000)) == "1" + "0" * 5000
    assert to_text(Integer(-(10 ** 5000))) == "-1" + "0" * 5000
    n = 7 ** 12000
    text = format_integer(n)
    assert text[0] != "0"
    assert len(text) == 10142
