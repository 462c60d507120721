# Public surface of the Savage core.
# Expressions are immutable trees (savage.types.expression); parse() builds
# them from text, evaluate() simplifies them against a binding context and
# to_text() renders them back with minimal parentheses.

from savage.reader.parser import parse, is_incomplete
from savage.evaluation.evaluator import evaluate, fold, free_variables
from savage.printer import to_text
from savage.builtin.env_builtin import functions, registry, register
from savage.types.environment import Environment
from savage.command import parse_command
from savage.interpreter import Interpreter, Output
