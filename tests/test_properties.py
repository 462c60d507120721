from hypothesis import assume, given, settings, strategies as st

from savage.errors import SavageError
from savage.evaluation.evaluator import evaluate
from savage.printer import to_text
from savage.reader.parser import parse
from savage.types.expression import (
    And, Associativity, BinaryOperator, Boolean, Call, Difference, Equal, Expression, GreaterThan,
    LessThanOrEqual, Negation, Not, NotEqual, Or, Power, Product, Quotient, Remainder, Sum, Variable, Vector,
)
from savage.types.helpers import int_, ratd

# -----------------------------------------------------
# Strategies
# -----------------------------------------------------

names = st.sampled_from(["a", "b", "x", "y1", "f", "_t"])

# Only literals that print back as a single token: negative numbers print
# with a leading '-' and come back as a negation.
leaves = st.one_of(
    st.integers(min_value=0, max_value=50).map(int_),
    st.builds(lambda n, k: ratd(n, 10 ** k), st.integers(1, 999), st.integers(1, 3)).filter(
        lambda r: r.value.denominator != 1
    ),
    st.booleans().map(Boolean),
    names.map(Variable),
)

BINARY = [Sum, Difference, Product, Quotient, Remainder, Power, Equal, NotEqual, LessThanOrEqual,
          GreaterThan, And, Or]


def extend(children):
    # A list whose elements are all vectors of one length reads back as a matrix.
    not_vector = children.filter(lambda e: not isinstance(e, Vector))
    return st.one_of(
        st.builds(lambda op, l, r: op(l, r), st.sampled_from(BINARY), children, children),
        st.builds(Negation, children),
        st.builds(Not, children),
        st.builds(lambda c, args: Call(c, tuple(args)), children, st.lists(children, max_size=3)),
        st.lists(not_vector, max_size=3).map(lambda es: Vector(tuple(es))),
    )


expressions = st.recursive(leaves, extend, max_leaves=20)


def depth(e: Expression) -> int:
    children = e.children()
    return 1 + max((depth(c) for c in children), default=0)


def regroups(e: Expression) -> bool:
    """True if printing drops parentheses that the parser would put back on the left."""
    if isinstance(e, BinaryOperator):
        precedence, associativity = e.precedence_and_associativity()
        if associativity is Associativity.FULL and e.right.precedence_and_associativity()[0] == precedence:
            return True
    return any(regroups(c) for c in e.children())


# -----------------------------------------------------
# Properties
# -----------------------------------------------------

@given(expressions)
@settings(max_examples=300)
def test_printed_text_parses_back_to_the_same_tree(expression):
    assume(depth(expression) <= 20)
    assume(not regroups(expression))
    assert parse(to_text(expression)) == expression


@given(expressions)
def test_printing_is_a_fixpoint(expression):
    assume(depth(expression) <= 20)
    text = to_text(expression)
    assert to_text(parse(text)) == text


@given(expressions)
def test_evaluation_is_idempotent(expression):
    assume(depth(expression) <= 20)
    try:
        once = evaluate(expression)
    except SavageError:
        return
    assert evaluate(once) == once
