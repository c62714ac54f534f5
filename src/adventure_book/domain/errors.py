"""Exceptions raised while parsing documents and evaluating expressions."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adventure_book.domain.defs.page_def import Page


class ParsingError(Exception):
    """Raised when document text cannot be turned into an entity."""


class ValueNaNError(ParsingError):
    """Raised when a field that must hold an integer does not."""


class IncorrectElementCountError(ParsingError):
    """Raised when a tagged line has the wrong number of `;` separated parts."""


class ElementPairMissingError(ParsingError):
    """Raised when a result side effect keyword has no value."""


class InvalidEntityError(ParsingError):
    """Raised when a parsed entity breaks its validity rules."""


class IncompletePageError(ParsingError):
    """Raised when a page parses but is not playable."""

    def __init__(self, message: str, page: Page) -> None:
        super().__init__(message)
        self.page = page


class MissingRecordError(ParsingError):
    """Raised when a bracketed keyword names neither a record nor a name."""

    def __init__(self, keyword: str) -> None:
        super().__init__(f"No record or name called '{keyword}'.")
        self.keyword = keyword


class EvaluationError(Exception):
    """Base exception for expression evaluation."""

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(message)
        self.expression = expression


class DivisionByZeroError(EvaluationError):
    """Raised when an expression divides by zero."""


class NotANumberError(EvaluationError):
    """Raised when an operand is neither dice notation nor an integer."""


class InvalidDieExpressionError(EvaluationError):
    """Raised when dice notation does not read as `NdS` or `NxS`."""


class MissingDicePoolEvaluatorError(EvaluationError):
    """Raised when a dice pool lacks its threshold, as in `4d6p`."""
