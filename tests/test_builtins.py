from fractions import Fraction

import pytest

from savage.builtin import linear_algebra
from savage.builtin.env_builtin import functions, register, registry
from savage.builtin.registry import ArgumentError, Function, Metadata, Parameter, builtin, convert, wrap_proxy
from savage.errors import InvalidArgument, InvalidNumberOfArguments, NotImplementedFault
from savage.help import HELP_HEADER, function_help, help_text
from savage.types.environment import Environment
from savage.types.expression import Boolean, Call, Complex, FunctionValue, Integer, Matrix
from savage.types.helpers import int_, matrix, rat, var, vector
from savage.types.numbers import ComplexRational


def examples():
    for metadata in registry():
        for source, expected in metadata.examples:
            yield pytest.param(source, expected, id=source)


@pytest.mark.parametrize("source, expected", examples())
def test_documented_examples(ev, source, expected):
    assert ev(source) == expected


def test_every_builtin_is_documented():
    for metadata in registry():
        assert metadata.description
        assert metadata.categories


# -----------------------------------------------------
# Linear algebra
# -----------------------------------------------------

def test_permutations_follow_heaps_order():
    assert list(linear_algebra.permutations(3)) == [
        [0, 1, 2], [1, 0, 2], [2, 0, 1], [0, 2, 1], [1, 2, 0], [2, 1, 0],
    ]
    assert list(linear_algebra.permutations(1)) == [[0]]
    assert len(list(linear_algebra.permutations(5))) == 120


@pytest.mark.parametrize(
    "source, expected",
    [
        ("det([[x]])", "x"),
        ("det([[1, 2, 3], [4, 5, 6], [7, 8, 10]])", "-3"),
        ("det([[1, 2, 3], [4, 5, 6], [7, 8, 9]])", "0"),
        ("det([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])", "1"),
        ("det([[0, 1], [1, 0]])", "-1"),
        ("det([[1 / 2, 0], [0, i]])", "1/2*i"),
        ("det([[1, 2], [3, 4]] * [[1, 2], [3, 4]])", "4"),
        ("det(x)", "det(x)"),
        ("det([[1, 2], [3, 4]]) + x", "-2 + x"),
        ("trace([[1, 2], [3, 4]])", "5"),
        ("trace([])", "0"),
        ("transpose([1, 2])", "[[1, 2]]"),
        ("transpose([[1, 2, 3]])", "[[1], [2], [3]]"),
        ("transpose(transpose([[a, b], [c, d]]))", "[[a, b], [c, d]]"),
    ]
)
def test_linear_algebra(ev, source, expected):
    assert ev(source) == expected


def test_determinant_signs_alternate():
    rows = [[var(f"a{i}{j}") for j in range(3)] for i in range(3)]
    result = str(linear_algebra.determinant.proxy(matrix(rows)))
    assert result == (
        "a00 * a11 * a22 - a01 * a10 * a22 + a02 * a10 * a21"
        " - a00 * a12 * a21 + a01 * a12 * a20 - a02 * a11 * a20"
    )


@pytest.mark.parametrize(
    "source",
    ["det([[1, 2]])", "det([1, 2])", "det(1)", "det(true)", "trace([[1, 2]])", "transpose(1)"]
)
def test_linear_algebra_rejects_invalid_arguments(ev, source):
    with pytest.raises(InvalidArgument):
        ev(source)


@pytest.mark.parametrize("source", ["det()", "det([[1]], [[1]])", "transpose()", "xor(true)"])
def test_arity_is_checked(ev, source):
    with pytest.raises(InvalidNumberOfArguments):
        ev(source)


@pytest.mark.parametrize("name", ["nullspace", "eigenvals", "eigenvecs"])
def test_unimplemented_functions(ev, name):
    with pytest.raises(NotImplementedFault) as e:
        ev(f"{name}([[1, 2], [3, 4]])")
    assert e.value.name == name


# -----------------------------------------------------
# Logic
# -----------------------------------------------------

@pytest.mark.parametrize(
    "source, expected",
    [
        ("or(true, false)", "true"),
        ("not(false)", "true"),
        ("xor(false, false)", "false"),
        ("and(a, true)", "and(a, true)"),
        ("not(a < 1)", "not(a < 1)"),
    ]
)
def test_logic_functions(ev, source, expected):
    assert ev(source) == expected


def test_logic_functions_reject_numbers(ev):
    with pytest.raises(InvalidArgument) as e:
        ev("and(1, true)")
    assert e.value.argument == int_(1)


# -----------------------------------------------------
# Registry
# -----------------------------------------------------

def test_registration_order_and_names():
    assert [f.name for f in functions()] == [
        "and", "or", "not", "xor", "det", "transpose", "trace", "nullspace", "eigenvals", "eigenvecs",
    ]
    assert all(isinstance(f, Function) for f in functions())
    assert all(isinstance(m, Metadata) for m in registry())


def test_register_binds_functions_and_i():
    env = Environment()
    register(env)
    assert isinstance(env["det"], FunctionValue)
    assert env["det"] == linear_algebra.determinant.value
    assert env["i"] == Complex(ComplexRational(0, 1))


@pytest.mark.parametrize(
    "parameter, argument, expected",
    [
        (Parameter.EXPRESSION, var("a"), var("a")),
        (Parameter.INTEGER, rat(4, 2), 2),
        (Parameter.RATIONAL, int_(3), Fraction(3)),
        (Parameter.RATIONAL, rat(1, 2), Fraction(1, 2)),
        (Parameter.COMPLEX, int_(1), ComplexRational(1)),
        (Parameter.VECTOR, vector(int_(1)), vector(int_(1))),
        (Parameter.MATRIX, vector(int_(1), int_(2)), Matrix(2, 1, (int_(1), int_(2)))),
        (Parameter.SQUARE_MATRIX, matrix([[int_(1)]]), Matrix(1, 1, (int_(1),))),
        (Parameter.BOOLEAN, Boolean(True), True),
    ]
)
def test_convert(parameter, argument, expected):
    assert convert(parameter, argument) == expected


@pytest.mark.parametrize(
    "parameter, argument",
    [
        (Parameter.INTEGER, rat(1, 2)),
        (Parameter.RATIONAL, Complex(ComplexRational(0, 1))),
        (Parameter.VECTOR, matrix([[int_(1)]])),
        (Parameter.MATRIX, int_(1)),
        (Parameter.SQUARE_MATRIX, matrix([[int_(1), int_(2)]])),
        (Parameter.BOOLEAN, int_(0)),
    ]
)
def test_convert_rejects(parameter, argument):
    with pytest.raises(ArgumentError) as e:
        convert(parameter, argument)
    assert e.value.argument == argument


def test_wrap_proxy():
    implementation = wrap_proxy([Parameter.INTEGER], lambda n: Integer(n * 2))
    call = Call(var("double"), (int_(3),))
    assert implementation(call, (int_(3),), Environment()) == int_(6)
    pending = Call(var("double"), (var("x"),))
    assert implementation(pending, (var("x"),), Environment()) is pending
    with pytest.raises(InvalidArgument):
        implementation(call, (rat(1, 2),), Environment())
    with pytest.raises(InvalidNumberOfArguments) as e:
        implementation(call, (), Environment())
    assert (e.value.min_number, e.value.max_number, e.value.given_number) == (1, 1, 0)


def test_builtin_decorator():
    @builtin("twice", "double an expression", [Parameter.EXPRESSION], examples=[("twice(x)", "x + x")])
    def twice(e):
        return e + e

    assert isinstance(twice, Function)
    assert twice.name == "twice"
    assert twice.value.name == "twice"
    assert twice.metadata.parameters == (Parameter.EXPRESSION,)
    # Expression parameters are passed through even when symbolic.
    assert twice.value.implementation(Call(twice.value, (var("x"),)), (var("x"),), Environment()) == var("x") + var("x")


# -----------------------------------------------------
# Help
# -----------------------------------------------------

def test_help_for_one_function():
    assert help_text("det") == (
        "det - determinant of a square matrix\n"
        "\n"
        "Syntax:\n"
        "  det(square matrix)\n"
        "\n"
        "Examples:\n"
        "  in: det([[1, 2], [3, 4]])\n"
        "  out: -2\n"
        "\n"
        "  in: det([[a, b], [c, d]])\n"
        "  out: a * d - b * c\n"
        "\n"
        "  in: det([])\n"
        "  out: 1\n"
        "\n"
        "Categories:\n"
        "  linear algebra\n"
    )


def test_help_without_examples():
    metadata = linear_algebra.nullspace.metadata
    assert function_help(metadata) == (
        "nullspace - nullspace of a matrix\n\nSyntax:\n  nullspace(matrix)\n\nCategories:\n  linear algebra\n"
    )


def test_full_help_lists_every_function():
    text = help_text()
    assert text.startswith(HELP_HEADER)
    for metadata in registry():
        assert f"{metadata.name} - {metadata.description}" in text
    assert help_text("no_such_function") is None
