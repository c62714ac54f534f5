"""Relational operators used by conditions and tests."""
from __future__ import annotations

from enum import Enum


class Comparison(Enum):
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    EQUAL = "="
    NOT_EQUAL = "!="

    @classmethod
    def from_text(cls, token: str) -> "Comparison":
        """Return the operator for `token`.

        Anything unrecognized, the empty string included, reads as LESS_EQUAL.
        Published adventures rely on this.
        """
        return _TOKENS.get(token.strip(), cls.LESS_EQUAL)

    def compare(self, lhs: int, rhs: int) -> bool:
        if self is Comparison.GREATER:
            return lhs > rhs
        if self is Comparison.GREATER_EQUAL:
            return lhs >= rhs
        if self is Comparison.LESS:
            return lhs < rhs
        if self is Comparison.EQUAL:
            return lhs == rhs
        if self is Comparison.NOT_EQUAL:
            return lhs != rhs
        return lhs <= rhs

    def __str__(self) -> str:
        return self.value


_TOKENS = {
    ">": Comparison.GREATER,
    ">=": Comparison.GREATER_EQUAL,
    "<": Comparison.LESS,
    "<=": Comparison.LESS_EQUAL,
    "=": Comparison.EQUAL,
    "==": Comparison.EQUAL,
    "!": Comparison.NOT_EQUAL,
    "!=": Comparison.NOT_EQUAL,
}

__all__ = ["Comparison"]
