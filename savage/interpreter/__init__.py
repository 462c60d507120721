from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from savage.builtin.env_builtin import register
from savage.command import (
    Command, DefineFunction, DefineVariable, EvaluateExpression, ShowHelp, parse_command,
)
from savage.errors import UndefinedIdentifiers
from savage.evaluation.evaluator import evaluate, free_variables
from savage.help import help_text
from savage.printer import to_text
from savage.types.environment import Environment
from savage.types.expression import Expression, Variable, Vector
from savage.types.function_value import define_function

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Output:
    text: str
    value: Optional[Expression] = None
    # Position of an evaluation result in `out`; None for definitions and help.
    index: Optional[int] = None


class Interpreter:
    """
    Runs commands against a binding context that persists across calls.
    Every evaluation result is appended to `outputs`, which is also bound
    as the vector `out`.
    """

    def __init__(self):
        self.env: Environment = Environment()
        register(self.env)
        self.outputs: list[Expression] = []
        self._bind_outputs()

    def _bind_outputs(self) -> None:
        self.env.define("out", Vector(tuple(self.outputs)))

    def execute(self, line: str) -> Output:
        return self.run(parse_command(line))

    def run(self, command: Command) -> Output:
        match command:
            case EvaluateExpression(expression=expression):
                value = evaluate(expression, self.env)
                index = len(self.outputs)
                self.outputs.append(value)
                self._bind_outputs()
                return Output(to_text(value), value, index)

            case DefineVariable(identifier=name, expression=expression):
                self._check_defined(expression, self.env)
                value = evaluate(expression, self.env)
                self.env.define(name, value)
                logger.debug("defined variable %s", name)
                return Output(f"{name} = {to_text(value)}", value)

            case DefineFunction(identifier=name, parameters=parameters, expression=body):
                # Parameters and the function itself (for recursion) are bound inside the body.
                scope = self.env.extend({p: Variable(p) for p in (name, *parameters)})
                self._check_defined(body, scope)
                value = define_function(name, parameters, body)
                self.env.define(name, value)
                logger.debug("defined function %s/%d", name, len(parameters))
                return Output(str(value.implementation), value)

            case ShowHelp(topic=topic):
                text = help_text(topic)
                if text is None:
                    return Output(f"No help available for '{topic}'")
                return Output(text)

        raise TypeError(f"Unknown command: {command!r}")

    @staticmethod
    def _check_defined(expression: Expression, scope: Environment) -> None:
        undefined = free_variables(expression, scope)
        if undefined:
            raise UndefinedIdentifiers(undefined)
