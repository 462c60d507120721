"""Core evaluator for Savage.

Evaluation is post-order: children are evaluated first, then `fold` tries to
reduce the node from its evaluated children. A node that cannot be reduced
is returned rebuilt from its evaluated children, so the result is the most
simplified symbolic form rather than an error.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from savage import config
from savage.errors import DivisionByZero, EvaluationDepthExceeded, InvalidArgument
from savage.evaluation import arithmetic
from savage.evaluation.apply import apply
from savage.evaluation.classify import BooleanValue, classify, is_concrete
from savage.runtime_context import nested_evaluation
from savage.types.environment import Environment
from savage.types.expression import (
    ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, And, BinaryOperator, Boolean, Call, Complex,
    Expression, FunctionValue, Integer, Matrix, Negation, Not, Or, Rational, UnaryOperator,
    Variable, Vector,
)

logger = logging.getLogger(__name__)


def evaluate(expression: Expression, context: Optional[Mapping[str, Expression]] = None) -> Expression:
    """
    Evaluate `expression` against a snapshot of `context`.

    The context is never mutated; unbound variables stay symbolic.
    """
    return evaluate0(expression, Environment.snapshot(context))


def evaluate0(expr: Expression, env: Environment) -> Expression:
    """Single evaluation step over an already prepared environment."""
    with nested_evaluation() as depth:
        limit = config.get_max_evaluation_depth()
        if depth > limit:
            raise EvaluationDepthExceeded(expr, limit)

        match expr:
            case Variable(identifier=name):
                # A binding that leads back to its own name stays symbolic.
                if name in env and not refers_to_itself(name, env):
                    return evaluate0(env[name], env)
                return expr

            case Call(callee=callee, arguments=arguments):
                evaluated = [evaluate0(arg, env) for arg in arguments]
                return fold(Call(evaluate0(callee, env), tuple(evaluated)), env)

            case Vector(elements=elements):
                return Vector(tuple([evaluate0(e, env) for e in elements]))

            case Matrix():
                return expr.map(lambda e: evaluate0(e, env))

            case UnaryOperator(operand=operand):
                return fold(type(expr)(evaluate0(operand, env)), env)

            case BinaryOperator():
                return evaluate_chain(expr, env)

            case _:
                return fold(expr, env)


def evaluate_chain(expr: BinaryOperator, env: Environment) -> Expression:
    """
    Evaluate a binary node whose left operands may themselves be binary nodes.

    The left spine is walked iteratively and folded from the innermost node
    outwards, so a + b + c + ... costs one level of nesting, not one per operator.
    """
    spine = [expr]
    while isinstance(spine[-1].left, BinaryOperator):
        spine.append(spine[-1].left)
    result = evaluate0(spine[-1].left, env)
    for node in reversed(spine):
        result = fold(type(node)(result, evaluate0(node.right, env)), env)
    return result


def refers_to_itself(name: str, env: Mapping[str, Expression]) -> bool:
    """True if following bindings from `name` leads back to `name`."""
    seen: set[str] = set()
    stack = [env[name]]
    while stack:
        node = stack.pop()
        if isinstance(node, Variable):
            other = node.identifier
            if other == name:
                return True
            if other in env and other not in seen:
                seen.add(other)
                stack.append(env[other])
            continue
        stack.extend(node.children())
    return False


def fold(node: Expression, context: Optional[Mapping[str, Expression]] = None) -> Expression:
    """
    Reduce `node`, whose children are assumed to be evaluated already.

    Returns `node` itself when nothing can be folded. Exact division or
    remainder by zero raises DivisionByZero carrying `node`.
    """
    env = context if isinstance(context, Environment) else Environment.snapshot(context)
    try:
        folded = _fold(node, env)
    except ZeroDivisionError:
        raise DivisionByZero(node) from None
    return node if folded is None else folded


def _fold(node: Expression, env: Environment) -> Optional[Expression]:
    def fold_child(e: Expression) -> Expression:
        return fold(e, env)

    match node:
        case Integer() | Rational() | Complex():
            number = classify(node)
            return arithmetic.to_expression(number.value, number.representation)

        case Call(callee=FunctionValue() as function, arguments=arguments):
            return apply(function, node, arguments, env)

        case Call():
            logger.debug("callee %r is not a function, leaving call symbolic", node.callee)
            return None

        case Negation(operand=operand):
            return arithmetic.fold_negation(node, classify(operand), fold_child)

        case Not(operand=operand):
            return fold_logic(node, [operand], lambda values: not values[0])

        case And(left=left, right=right):
            return fold_logic(node, [left, right], all)

        case Or(left=left, right=right):
            return fold_logic(node, [left, right], any)

        case _ if isinstance(node, ARITHMETIC_OPERATORS):
            return arithmetic.fold_arithmetic(node, classify(node.left), classify(node.right), fold_child)

        case _ if isinstance(node, COMPARISON_OPERATORS):
            return arithmetic.fold_comparison(node, classify(node.left), classify(node.right))

    return None


def fold_logic(node: Expression, operands: list[Expression], combine) -> Optional[Expression]:
    """Fold a logical node once every operand is a known boolean; both sides are always evaluated."""
    values = []
    for operand in operands:
        cls = classify(operand)
        if isinstance(cls, BooleanValue):
            if cls.value is None:
                return None
            values.append(cls.value)
        elif is_concrete(cls):
            raise InvalidArgument(node, operand)
        else:
            return None
    return Boolean(combine(values))


def free_variables(expression: Expression, context: Optional[Mapping[str, Expression]] = None) -> set[str]:
    """
    Identifiers in `expression` that have no binding reachable from the root.

    Bound variables are followed through their bound expressions; a name met
    again while its own binding is being followed is not reported.
    """
    env = Environment.snapshot(context)
    free: set[str] = set()
    stack: list[tuple[Expression, frozenset[str]]] = [(expression, frozenset())]
    while stack:
        node, following = stack.pop()
        if isinstance(node, Variable):
            name = node.identifier
            if name in following:
                continue
            if name in env:
                stack.append((env[name], following | {name}))
            else:
                free.add(name)
            continue
        stack.extend((child, following) for child in node.children())
    return free
