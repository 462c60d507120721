"""Commands accepted at the prompt.

    name = expr              define a variable
    name(p, q, ...) = expr   define a function
    ? [name]                 show help
    expr                     evaluate an expression
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from savage.errors import ParseErrors
from savage.reader.parser import END_OF_INPUT, ErrorReason, ParseError, Token, TokenStream, lex
from savage.types.expression import Expression


@dataclass(frozen=True)
class EvaluateExpression:
    expression: Expression


@dataclass(frozen=True)
class DefineVariable:
    identifier: str
    expression: Expression


@dataclass(frozen=True)
class DefineFunction:
    identifier: str
    parameters: tuple[str, ...]
    expression: Expression


@dataclass(frozen=True)
class ShowHelp:
    topic: Optional[str] = None


Command = Union[EvaluateExpression, DefineVariable, DefineFunction, ShowHelp]


def _unexpected(token: Token, expected: frozenset[str]) -> ParseErrors:
    return ParseErrors([ParseError(ErrorReason.UNEXPECTED, token.span, token.text, expected)])


def _function_header(tokens: list[Token]) -> Optional[tuple[list[str], int]]:
    """Match ``name ( p, ... ) =`` and return (parameters, index of the body), or None."""
    if len(tokens) < 4 or tokens[0].kind != "identifier" or tokens[1].kind != "lparen":
        return None
    parameters: list[str] = []
    i = 2
    if tokens[i].kind != "rparen":
        while True:
            if i + 1 >= len(tokens) or tokens[i].kind != "identifier":
                return None
            parameters.append(tokens[i].text)
            if tokens[i + 1].kind == "comma":
                i += 2
            elif tokens[i + 1].kind == "rparen":
                i += 1
                break
            else:
                return None
    i += 1
    if i < len(tokens) and tokens[i].kind == "operator" and tokens[i].text == "=":
        return parameters, i + 1
    return None


def parse_command(text: str) -> Command:
    """Classify and parse one line of input, raising ParseErrors on failure."""
    tokens = list(lex(text))

    def body(start: int) -> Expression:
        return TokenStream(tokens[start:], len(text)).parse_all()

    match tokens:
        case [Token(kind="question")]:
            return ShowHelp()
        case [Token(kind="question"), Token(kind="identifier", text=topic)]:
            return ShowHelp(topic)
        case [Token(kind="question"), Token(kind="identifier"), extra, *_]:
            raise _unexpected(extra, frozenset({END_OF_INPUT}))
        case [Token(kind="question"), other, *_]:
            raise _unexpected(other, frozenset({"identifier", END_OF_INPUT}))
        case [Token(kind="identifier", text=name), Token(kind="operator", text="="), *_]:
            return DefineVariable(name, body(2))

    header = _function_header(tokens)
    if header is not None:
        parameters, start = header
        seen: set[str] = set()
        for tok in tokens[2:start]:
            if tok.kind != "identifier":
                continue
            if tok.text in seen:
                raise ParseErrors([ParseError(
                    ErrorReason.CUSTOM, tok.span, tok.text,
                    message=f"duplicate parameter '{tok.text}'",
                )])
            seen.add(tok.text)
        return DefineFunction(tokens[0].text, tuple(parameters), body(start))

    return EvaluateExpression(body(0))


def is_incomplete(text: str) -> bool:
    """True if `text` fails to parse as a command only because the input ended too early."""
    try:
        parse_command(text)
    except ParseErrors as e:
        return any(error.at_end_of_input for error in e.errors)
    return False
