"""Editing operations that keep an adventure and its pages consistent."""
from __future__ import annotations

import logging
from typing import Mapping

from adventure_book.core.rng import DiceRNG
from adventure_book.domain import keywords
from adventure_book.domain.comparison import Comparison
from adventure_book.domain.defs import GAME_OVER, Adventure, Choice, Condition, Name, Page, Record, StoryResult, Test
from adventure_book.domain.errors import DivisionByZeroError
from adventure_book.domain.evaluation import evaluate_expression
from adventure_book.services.errors import EditorError

# Dry runs only check that an expression reads, the rolls are thrown away.
_DRY_RUN_SEED = 69

logger = logging.getLogger(__name__)


class EditorService:
    """Applies edits to an adventure and the pages loaded alongside it."""

    def __init__(self, adventure: Adventure, pages: Mapping[str, Page]) -> None:
        self._adventure = adventure
        self._pages = pages

    def add_record(self, record: Record) -> None:
        self._require_new_variable(record.name)
        self._adventure.records[record.name] = record
        logger.info(f"Added record '{record.name}'")

    def add_name(self, name: Name) -> None:
        self._require_new_variable(name.keyword)
        self._adventure.names[name.keyword] = name
        logger.info(f"Added name '{name.keyword}'")

    def rename_record(self, old: str, new: str) -> None:
        """Rename a record in the adventure and every tag on every page."""
        if old not in self._adventure.records:
            raise EditorError(f"There is no record called '{old}'.")
        self._require_new_variable(new)
        self._adventure.rename_record(old, new)
        self._rename_keyword_on_pages(old, new)
        logger.info(f"Renamed record '{old}' to '{new}'")

    def rename_name(self, old: str, new: str) -> None:
        """Rename a name in the adventure and every tag on every page."""
        if old not in self._adventure.names:
            raise EditorError(f"There is no name called '{old}'.")
        self._require_new_variable(new)
        self._adventure.rename_name(old, new)
        self._rename_keyword_on_pages(old, new)
        logger.info(f"Renamed name '{old}' to '{new}'")

    def add_condition(self, page: Page, name: str) -> Condition:
        _require_name(name, page.conditions, "Condition")
        condition = Condition(name=name, expression_l="0", comparison=Comparison.LESS, expression_r="0")
        page.conditions[name] = condition
        return condition

    def add_test(self, page: Page, name: str) -> Test:
        """Add a test rolling `1d20 > 10`, tests need two results to pick from."""
        if len(page.results) < 2:
            raise EditorError("You need to add at least 2 results before you can add a test.")
        _require_name(name, page.tests, "Test")
        test = Test(name=name, expression_l="1d20", comparison=Comparison.GREATER, expression_r="10")
        page.tests[name] = test
        return test

    def add_result(self, page: Page, name: str, next_page: str) -> StoryResult:
        _require_name(name, page.results, "Result")
        result = StoryResult(name=name, next_page=next_page)
        page.results[name] = result
        return result

    def rename_condition(self, page: Page, old: str, new: str) -> None:
        """Rename a condition and the choices gated by it."""
        _require_existing(old, page.conditions, "Condition")
        _require_name(new, page.conditions, "Condition")
        page.rename_condition(old, new)

    def rename_test(self, page: Page, old: str, new: str) -> None:
        _require_existing(old, page.tests, "Test")
        _require_name(new, page.tests, "Test")
        page.rename_test(old, new)

    def rename_result(self, page: Page, old: str, new: str) -> None:
        """Rename a result along with the choices and tests leading to it."""
        _require_existing(old, page.results, "Result")
        _require_name(new, page.results, "Result")
        page.rename_result(old, new)

    def remove_condition(self, page: Page, name: str) -> None:
        if any(choice.condition == name for choice in page.choices):
            raise EditorError(f"Cannot remove Condition {name} because it's used in one or more of the Page's Choices.")
        page.conditions.pop(name, None)

    def remove_test(self, page: Page, name: str) -> None:
        if any(choice.test == name for choice in page.choices):
            raise EditorError(f"Cannot remove Test {name} because it's used in one or more of the Page's Choices.")
        page.tests.pop(name, None)

    def remove_result(self, page: Page, name: str) -> None:
        if any(choice.result == name for choice in page.choices):
            raise EditorError(f"Cannot remove Result {name} because it's used in one or more of the Page's Choices.")
        if any(name in (test.success_result, test.failure_result) for test in page.tests.values()):
            raise EditorError(f"Cannot remove Result {name} because it's used in one or more of the Page's Tests.")
        page.results.pop(name, None)

    def add_choice(self, page: Page, text: str) -> Choice:
        """Append a choice that ends the game until it is pointed elsewhere."""
        if not text.strip():
            raise EditorError("Choice text cannot be empty.")
        choice = Choice(text=text.strip(), result=GAME_OVER)
        page.choices.append(choice)
        return choice

    def remove_choice(self, page: Page, index: int) -> Choice:
        if not 0 <= index < len(page.choices):
            raise EditorError(f"There is no Choice at position {index}.")
        return page.choices.pop(index)

    def add_side_effect(self, page: Page, result_name: str, keyword: str) -> str:
        """Add a side effect for `keyword` with a default value.

        Records start at `1`, names at their own tag so the name is kept.
        """
        result = self._require_result(page, result_name)
        if keyword in result.side_effects:
            raise EditorError(f"Result {result_name} already changes {keyword}.")
        if keyword in self._adventure.records:
            value = "1"
        elif keyword in self._adventure.names:
            value = keywords.create_keyword(keyword)
        else:
            raise EditorError(f"There is no record or name called '{keyword}'.")
        result.side_effects[keyword] = value
        return value

    def set_side_effect(self, page: Page, result_name: str, keyword: str, expression: str) -> str:
        """Check `expression` and store it as the side effect value for `keyword`."""
        result = self._require_result(page, result_name)
        if keyword not in result.side_effects:
            raise EditorError(f"Result {result_name} has no side effect for {keyword}.")
        value = self.check_side_effect(keyword, expression)
        result.side_effects[keyword] = value
        return value

    def remove_side_effect(self, page: Page, result_name: str, keyword: str) -> None:
        result = self._require_result(page, result_name)
        if result.side_effects.pop(keyword, None) is None:
            raise EditorError(f"Result {result_name} has no side effect for {keyword}.")

    def check_side_effect(self, keyword: str, expression: str) -> str:
        """Validate a side effect value before it is stored on a result.

        An empty or `0` record expression would change nothing and becomes
        `1`. Division by zero is let through since default record values
        can cause it, other evaluation errors propagate. Name side effects
        are free text.
        """
        value = expression.strip()
        if keyword not in self._adventure.records:
            return value
        if not value or value == "0":
            logger.warning(f"Expression for record '{keyword}' cannot be empty or 0, using 1")
            return "1"
        try:
            evaluate_expression(value, self._adventure.records, DiceRNG(_DRY_RUN_SEED))
        except DivisionByZeroError:
            logger.warning(f"Expression '{value}' for '{keyword}' divides by zero with default record values")
        return value

    def _require_result(self, page: Page, result_name: str) -> StoryResult:
        result = page.results.get(result_name)
        if result is None:
            raise EditorError(f"There is no Result called '{result_name}'.")
        return result

    def _rename_keyword_on_pages(self, old: str, new: str) -> None:
        for page in self._pages.values():
            page.rename_keyword(old, new)

    def _require_new_variable(self, keyword: str) -> None:
        if not keywords.is_keyword_valid(keyword):
            raise EditorError(f"The keyword {keyword} is invalid, please use only letters and numbers.")
        if keyword in self._adventure.records or keyword in self._adventure.names:
            raise EditorError(f"Cannot add {keyword} because it already exists!")


def _require_name(name: str, existing: Mapping[str, object], label: str) -> None:
    if not name.strip():
        raise EditorError(f"{label} name cannot be empty.")
    if name in existing:
        raise EditorError(f"Cannot add {name} because it already exists!")


def _require_existing(name: str, existing: Mapping[str, object], label: str) -> None:
    if name not in existing:
        raise EditorError(f"There is no {label} called '{name}'.")
