from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from savage.reader.parser import ParseError
    from savage.types.expression import Expression


class SavageError(Exception):
    """ Base class for all Savage errors"""
    pass


class SavageSyntaxError(SavageError):
    """ Raised when there is a syntax error"""


class ParseErrors(SavageSyntaxError):
    """ Raised when the parser rejects its input; carries every error it collected"""

    def __init__(self, errors: Iterable[ParseError]):
        self.errors: list[ParseError] = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    def __iter__(self):
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


class EvaluateError(SavageError):
    """ Base class for errors raised while evaluating an expression"""

    def __init__(self, expression: Expression, message: str):
        super().__init__(message)
        self.expression = expression


class InvalidNumberOfArguments(EvaluateError):
    """ Raised when the number of arguments passed to a function is incorrect"""

    def __init__(self, expression: Expression, min_number: int, max_number: int, given_number: int):
        if min_number == max_number:
            expected = str(min_number)
        else:
            expected = f"{min_number} to {max_number}"
        super().__init__(
            expression, f"expected {expected} argument(s), got {given_number}"
        )
        self.min_number = min_number
        self.max_number = max_number
        self.given_number = given_number


class InvalidArgument(EvaluateError):
    """ Raised when a function receives an argument of the wrong kind or shape"""

    def __init__(self, expression: Expression, argument: Expression):
        super().__init__(expression, "invalid argument")
        self.argument = argument


class DivisionByZero(EvaluateError):
    """ Raised when dividing by an exact zero"""

    def __init__(self, expression: Expression):
        super().__init__(expression, "division by zero")


class EvaluationDepthExceeded(EvaluateError):
    """ Raised when evaluation nests deeper than the configured maximum"""

    def __init__(self, expression: Expression, limit: int):
        super().__init__(expression, f"maximum evaluation depth of {limit} exceeded")
        self.limit = limit


class UndefinedIdentifiers(SavageError):
    """ Raised when a definition references names that have no binding"""

    def __init__(self, identifiers: Iterable[str]):
        self.identifiers = sorted(identifiers)
        super().__init__("undefined identifier(s): " + ", ".join(self.identifiers))


class NotImplementedFault(SavageError, NotImplementedError):
    """ Raised by registry entries that exist but have no implementation yet"""

    def __init__(self, name: str):
        super().__init__(f"function '{name}' is not implemented")
        self.name = name
