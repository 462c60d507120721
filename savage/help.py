"""Plain-text help generated from the built-in function registry."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from savage.builtin.env_builtin import registry
from savage.builtin.registry import Metadata

HELP_HEADER = """\
Savage evaluates mathematical expressions exactly.

  in: 1/3 + 1/6            arithmetic on integers, rationals and complex numbers
  in: x = 2                define a variable
  in: f(x) = x ^ 2 + 1     define a function
  in: det([[1, 2], [3, 4]]) call a built-in function
  in: out                  earlier results are kept in the vector `out`
  in: ? det                show help for one function

Operators: || && == != < <= > >= + - * / % ^ ! and unary -"""

HELP_FOOTER = "Press Ctrl+D to quit."

SEPARATOR = "\n---\n\n"


def function_help(metadata: Metadata) -> str:
    parameters = ", ".join(p.value for p in metadata.parameters)
    text = f"{metadata.name} - {metadata.description}\n\nSyntax:\n  {metadata.name}({parameters})\n"
    if metadata.examples:
        examples = "\n\n".join(f"  in: {i}\n  out: {o}" for i, o in metadata.examples)
        text += f"\nExamples:\n{examples}\n"
    if metadata.categories:
        text += f"\nCategories:\n  {', '.join(metadata.categories)}\n"
    return text


@lru_cache(maxsize=None)
def function_help_texts() -> dict[str, str]:
    return {m.name: function_help(m) for m in registry()}


@lru_cache(maxsize=None)
def help_text(topic: Optional[str] = None) -> Optional[str]:
    """Full help text, or the help for one function; None for an unknown topic."""
    texts = function_help_texts()
    if topic is not None:
        return texts.get(topic)
    body = SEPARATOR.join(texts[m.name] for m in registry())
    return HELP_HEADER + SEPARATOR + body + SEPARATOR + HELP_FOOTER + "\n"
