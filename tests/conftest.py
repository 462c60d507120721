import pytest

from savage.builtin.env_builtin import register
from savage.evaluation.evaluator import evaluate
from savage.interpreter import Interpreter
from savage.printer import to_text
from savage.reader.parser import parse
from savage.types.environment import Environment

# Every test gets fresh state: an environment seeded with the built-ins
# (functions and the imaginary unit `i`) and, where needed, a new session.


@pytest.fixture
def env():
    env = Environment()
    register(env)
    return env


@pytest.fixture
def interpreter():
    return Interpreter()


@pytest.fixture
def ev(env):
    """Parse, evaluate against the built-in environment and print."""

    def run(source: str, context=None) -> str:
        return to_text(evaluate(parse(source), env if context is None else context))

    return run
