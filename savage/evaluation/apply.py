"""Function application for Savage.

Built-in and user-defined functions share one calling convention: the
implementation receives the call expression (for diagnostics and for
returning the call unevaluated), the evaluated arguments and the binding
context of the call site. Arity checks belong to the implementation.
"""

from __future__ import annotations

import logging
from typing import Sequence

from savage.types.environment import Environment
from savage.types.expression import Call, Expression, FunctionValue

logger = logging.getLogger(__name__)


def apply(
    function: FunctionValue,
    call: Call,
    arguments: Sequence[Expression],
    context: Environment,
) -> Expression:
    logger.debug("applying %s to %d argument(s)", function.name, len(arguments))
    return function.implementation(call, tuple(arguments), context)
