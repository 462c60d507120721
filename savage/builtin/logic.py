"""Boolean logic built-ins."""

from __future__ import annotations

from savage.builtin.registry import Parameter, builtin
from savage.types.expression import Expression
from savage.types.helpers import boolean

LOGIC = ("logic",)


@builtin(
    name="and",
    description="logical conjunction",
    parameters=[Parameter.BOOLEAN, Parameter.BOOLEAN],
    examples=[
        ("and(true, true)", "true"),
        ("and(true, false)", "false"),
        ("and(1 < 2, 2 < 3)", "true"),
    ],
    categories=LOGIC,
)
def and_(a: bool, b: bool) -> Expression:
    return boolean(a and b)


@builtin(
    name="or",
    description="logical disjunction",
    parameters=[Parameter.BOOLEAN, Parameter.BOOLEAN],
    examples=[
        ("or(false, true)", "true"),
        ("or(false, false)", "false"),
    ],
    categories=LOGIC,
)
def or_(a: bool, b: bool) -> Expression:
    return boolean(a or b)


@builtin(
    name="not",
    description="logical negation",
    parameters=[Parameter.BOOLEAN],
    examples=[
        ("not(true)", "false"),
        ("not(1 == 2)", "true"),
    ],
    categories=LOGIC,
)
def not_(a: bool) -> Expression:
    return boolean(not a)


@builtin(
    name="xor",
    description="exclusive disjunction",
    parameters=[Parameter.BOOLEAN, Parameter.BOOLEAN],
    examples=[
        ("xor(true, false)", "true"),
        ("xor(true, true)", "false"),
    ],
    categories=LOGIC,
)
def xor(a: bool, b: bool) -> Expression:
    return boolean(a != b)
