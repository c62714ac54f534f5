"""Arithmetic and dice expression evaluation.

Expressions are read left to right in a single pass without building a
tree. The text is cut after every `+ - * /`, each piece is resolved to an
integer operand that remembers the operator following it, and the operand
list is then folded so that `*` and `/` bind tighter than `+` and `-`.

Operands are, in order of preference:

* record tags (`[strength]`) substituted with the record value, or `0`
  when no such record exists,
* `l` / `h` chains (`1d20h1d20`) keeping the lower or higher side,
* dice notation: `NdS`, `NdSpT` (pool, count dice >= T), `NdSqT`
  (reverse pool, count dice <= T) and `NxS` (exploding dice),
* plain base-10 integers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Mapping, Optional

from adventure_book.core.rng import DiceRNG
from adventure_book.domain.comparison import Comparison
from adventure_book.domain.errors import (
    DivisionByZeroError,
    InvalidDieExpressionError,
    MissingDicePoolEvaluatorError,
    NotANumberError,
)

if TYPE_CHECKING:
    from adventure_book.domain.defs.adventure_def import Record

_OPERATORS = "+-*/"
_PRIORITIES = {"+": 1, "-": 1, "*": 2, "/": 2}
_INTEGER = re.compile(r"[+-]?\d+")
_RECORD_TAG = re.compile(r"\[([^\[\]]*)\]")


@dataclass(frozen=True, slots=True)
class _Operand:
    value: int
    operator: Optional[str]
    priority: int


def evaluate_expression(expression: str, records: Mapping[str, Record], rng: DiceRNG) -> int:
    """Evaluate `expression` into an integer.

    Raises an EvaluationError subclass when the expression cannot be read.
    Unknown records count as zero.
    """
    operands: List[_Operand] = []
    for token in _split_inclusive(expression, _OPERATORS):
        if token.strip() == "-":
            # Unary minus after another operator, as in `1d20*-1`.
            operands.append(_Operand(-1, "*", 2))
            continue
        text = token.strip()
        operator = text[-1] if text and text[-1] in _OPERATORS else None
        if operator is not None:
            text = text[:-1].strip()
        text = _substitute_records(text, records)
        if "l" in text or "h" in text:
            value = _evaluate_chain(text, expression, rng)
        else:
            value = _evaluate_operand(text, expression, rng)
        operands.append(_Operand(value, operator, _PRIORITIES.get(operator, 0)))

    if not operands:
        raise NotANumberError("Empty expression.", expression)
    last = operands[-1]
    if last.operator is not None:
        # A dangling operator has nothing to its right.
        operands[-1] = _Operand(last.value, None, 0)
    return _reduce(operands, expression)


def evaluate_and_compare(
    lhs_expression: str,
    rhs_expression: str,
    comparison: Comparison,
    records: Mapping[str, Record],
    rng: DiceRNG,
) -> bool:
    """Evaluate the left side, then the right side, and compare them."""
    lhs = evaluate_expression(lhs_expression, records, rng)
    rhs = evaluate_expression(rhs_expression, records, rng)
    return comparison.compare(lhs, rhs)


def _split_inclusive(text: str, separators: str) -> List[str]:
    """Cut `text` after every separator, keeping it on the left piece."""
    pieces: List[str] = []
    start = 0
    for index, char in enumerate(text):
        if char in separators:
            pieces.append(text[start : index + 1])
            start = index + 1
    if start < len(text):
        pieces.append(text[start:])
    return pieces


def _substitute_records(text: str, records: Mapping[str, Record]) -> str:
    def _replace(match: "re.Match[str]") -> str:
        record = records.get(" ".join(match.group(1).split()))
        if record is None:
            return "0"
        return str(record.value)

    return _RECORD_TAG.sub(_replace, text)


def _evaluate_chain(text: str, expression: str, rng: DiceRNG) -> int:
    """Fold `a l b h c` pairwise from the left, keeping min for `l` and max for `h`."""
    parts = _split_inclusive(text, "lh")
    while True:
        if len(parts) < 2:
            raise NotANumberError(f"'{text}' is missing a side to compare against.", expression)
        this = parts.pop(0)
        following = parts.pop(0)
        mode = this[-1]
        following_mode = following[-1]
        this = this[:-1]
        if parts:
            following = following[:-1]
        this_value = _evaluate_operand(this.strip(), expression, rng)
        following_value = _evaluate_operand(following.strip(), expression, rng)
        result = min(this_value, following_value) if mode == "l" else max(this_value, following_value)
        if not parts:
            return result
        parts.insert(0, f"{result}{following_mode}")


def _evaluate_operand(text: str, expression: str, rng: DiceRNG) -> int:
    if "d" in text:
        return _roll(text, "d", expression, rng)
    if "x" in text:
        return _roll(text, "x", expression, rng)
    return _parse_int(text, expression)


def _roll(text: str, kind: str, expression: str, rng: DiceRNG) -> int:
    pool = "p" if "p" in text else "q" if "q" in text else None
    separators = kind + (pool or "")
    parts = [part.strip() for part in re.split(f"[{separators}]", text) if part.strip()]
    if pool is None and len(parts) != 2:
        raise InvalidDieExpressionError(
            f"Die roll evaluation needs a die expression, like '1d6', got '{text}' instead.", expression
        )
    if pool is not None and len(parts) != 3:
        raise MissingDicePoolEvaluatorError(
            f"Dice pool evaluation needs a die expression, like '4d6p4', got '{text}' instead.", expression
        )
    numbers = [_parse_int(part, expression) for part in parts]
    amount, sides = numbers[0], numbers[1]
    if amount <= 0 or sides <= 0 or (kind == "x" and sides == 1):
        raise InvalidDieExpressionError(f"'{text}' does not describe dice that can be rolled.", expression)
    if kind == "x":
        return rng.die_explode(amount, sides)
    if pool is None:
        return rng.die(amount, sides)
    threshold = numbers[2]
    if threshold <= 0:
        raise InvalidDieExpressionError(f"'{text}' needs a positive pool threshold.", expression)
    if pool == "p":
        return rng.pool(amount, sides, threshold)
    return rng.pool_reverse(amount, sides, threshold)


def _parse_int(text: str, expression: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise NotANumberError(f"'{text}' doesn't appear to be a valid number.", expression)
    return int(text)


def _reduce(operands: List[_Operand], expression: str) -> int:
    index = 0
    while len(operands) > 1:
        if index >= len(operands) - 1:
            index = 0
        left = operands[index]
        right = operands[index + 1]
        if left.priority >= right.priority:
            value = _apply(left.operator, left.value, right.value, expression)
            operands[index : index + 2] = [_Operand(value, right.operator, right.priority)]
        else:
            index += 1
    return operands[0].value


def _apply(operator: Optional[str], lhs: int, rhs: int, expression: str) -> int:
    if operator == "+":
        return lhs + rhs
    if operator == "-":
        return lhs - rhs
    if operator == "*":
        return lhs * rhs
    if rhs == 0:
        raise DivisionByZeroError("Division by zero.", expression)
    # Integer division truncates toward zero.
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs >= 0) == (rhs > 0) else -quotient


__all__ = ["evaluate_and_compare", "evaluate_expression"]
