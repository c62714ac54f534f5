"""Story page structures and their text format."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from adventure_book.core.rng import DiceRNG
from adventure_book.domain import keywords
from adventure_book.domain.comparison import Comparison
from adventure_book.domain.defs.adventure_def import Record
from adventure_book.domain.defs.text_format import join_fields, match_tag, split_fields, strip_tag
from adventure_book.domain.errors import (
    ElementPairMissingError,
    IncompletePageError,
    IncorrectElementCountError,
    InvalidEntityError,
)
from adventure_book.domain.evaluation import evaluate_and_compare

GAME_OVER = "game over"

_CONDITION_IN_CHOICE = re.compile(r"\{\s*condition:\s*(\w+(?:\s|\w)*)\s*\}")
_TEST_IN_CHOICE = re.compile(r"\{\s*test:\s*(\w+(?:\s|\w)*)\s*\}")
_RESULT_IN_CHOICE = re.compile(r"\{\s*result:\s*(\w+(?:\s|\w)*)\s*\}")
_PAGE_TAGS = ("title:", "story:", "choice:", "condition:", "test:", "result:")


@dataclass(slots=True)
class Choice:
    """Option offered to the player at the bottom of a page."""

    text: str
    condition: str = ""
    test: str = ""
    result: str = ""

    @classmethod
    def parse(cls, text: str) -> "Choice":
        """Pull `{condition: x}`, `{test: x}` and `{result: x}` tags out of the text."""
        condition, text = _extract_tag(_CONDITION_IN_CHOICE, text)
        test, text = _extract_tag(_TEST_IN_CHOICE, text)
        result, text = _extract_tag(_RESULT_IN_CHOICE, text)
        choice = cls(text=text.strip(), condition=condition, test=test, result=result)
        if not choice.is_valid():
            raise InvalidEntityError(f"Choice '{choice.text}' needs text and exactly one of a test or a result.")
        return choice

    def serialize(self) -> str:
        parts = [self.text]
        if self.condition:
            parts.append(f"{{condition: {self.condition}}}")
        if self.test:
            parts.append(f"{{test: {self.test}}}")
        else:
            parts.append(f"{{result: {self.result or GAME_OVER}}}")
        return " ".join(parts)

    def is_valid(self) -> bool:
        return bool(self.text) and bool(self.test) != bool(self.result)

    def is_game_over(self) -> bool:
        return not self.test and self.result == GAME_OVER


@dataclass(slots=True)
class Condition:
    """Gate deciding whether a choice can be picked."""

    name: str
    expression_l: str = "0"
    comparison: Comparison = Comparison.LESS
    expression_r: str = "0"

    @classmethod
    def parse(cls, text: str) -> "Condition":
        args = split_fields(text)
        if len(args) != 4:
            raise IncorrectElementCountError(f"Condition needs 4 elements, got {len(args)}: '{text.strip()}'.")
        return cls(
            name=args[0],
            expression_l=args[1],
            comparison=Comparison.from_text(args[2]),
            expression_r=args[3],
        )

    def serialize(self) -> str:
        return join_fields([self.name, self.expression_l, str(self.comparison), self.expression_r])

    def evaluate(self, records: Mapping[str, Record], rng: DiceRNG) -> bool:
        return evaluate_and_compare(self.expression_l, self.expression_r, self.comparison, records, rng)


@dataclass(slots=True)
class Test:
    """Roll deciding which of two results a choice leads to."""

    __test__ = False

    name: str
    expression_l: str = "1d20"
    comparison: Comparison = Comparison.GREATER
    expression_r: str = "10"
    success_result: str = ""
    failure_result: str = ""

    @classmethod
    def parse(cls, text: str) -> "Test":
        args = split_fields(text)
        if len(args) != 6:
            raise IncorrectElementCountError(f"Test needs 6 elements, got {len(args)}: '{text.strip()}'.")
        return cls(
            name=args[0],
            expression_l=args[1],
            comparison=Comparison.from_text(args[2]),
            expression_r=args[3],
            success_result=args[4],
            failure_result=args[5],
        )

    def serialize(self) -> str:
        return join_fields(
            [
                self.name,
                self.expression_l,
                str(self.comparison),
                self.expression_r,
                self.success_result,
                self.failure_result,
            ]
        )

    def evaluate(self, records: Mapping[str, Record], rng: DiceRNG) -> str:
        """Return the name of the result the roll leads to."""
        if evaluate_and_compare(self.expression_l, self.expression_r, self.comparison, records, rng):
            return self.success_result
        return self.failure_result


@dataclass(slots=True)
class StoryResult:
    """Next page plus the record and name changes made on the way there."""

    name: str
    next_page: str = ""
    side_effects: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "StoryResult":
        """Read `name; next_page` followed by `keyword; value` pairs."""
        args = split_fields(text)
        if len(args) < 2:
            raise IncorrectElementCountError(f"Result needs a name and a next page: '{text.strip()}'.")
        pairs = args[2:]
        if len(pairs) % 2:
            raise ElementPairMissingError(f"Result '{args[0]}' side effect '{pairs[-1]}' has no value.")
        side_effects = {pairs[index]: pairs[index + 1] for index in range(0, len(pairs), 2)}
        return cls(name=args[0], next_page=args[1], side_effects=side_effects)

    def serialize(self) -> str:
        parts = [self.name, self.next_page]
        for keyword, value in self.side_effects.items():
            parts.extend([keyword, value])
        return join_fields(parts)


@dataclass(slots=True)
class Page:
    """One screen of story with its choices and the rules behind them."""

    title: str = ""
    story: str = ""
    choices: List[Choice] = field(default_factory=list)
    conditions: Dict[str, Condition] = field(default_factory=dict)
    tests: Dict[str, Test] = field(default_factory=dict)
    results: Dict[str, StoryResult] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "Page":
        """Parse a page document.

        Untagged lines following `story:` continue the story on a new line.
        Raises IncompletePageError, carrying what was read, when the page
        is not playable.
        """
        page = cls()
        in_story = False
        for line in text.splitlines():
            tag = match_tag(line, _PAGE_TAGS)
            if tag is None:
                if in_story:
                    page.story += "\n" + line
                continue
            in_story = tag == "story:"
            remainder = strip_tag(line, tag)
            if tag == "title:":
                page.title = remainder
            elif tag == "story:":
                page.story = remainder
            elif tag == "choice:":
                page.choices.append(Choice.parse(remainder))
            elif tag == "condition:":
                condition = Condition.parse(remainder)
                page.conditions[condition.name] = condition
            elif tag == "test:":
                test = Test.parse(remainder)
                page.tests[test.name] = test
            else:
                result = StoryResult.parse(remainder)
                page.results[result.name] = result

        if not page.is_valid():
            raise IncompletePageError(
                f"Page '{page.title}' needs a story, a choice and a result for its choices.", page
            )
        return page

    def serialize(self) -> str:
        lines: List[str] = [f"title: {self.title}", f"story: {self.story}"]
        lines.extend(f"choice: {choice.serialize()}" for choice in self.choices)
        lines.extend(f"condition: {condition.serialize()}" for condition in self.conditions.values())
        lines.extend(f"test: {test.serialize()}" for test in self.tests.values())
        lines.extend(f"result: {result.serialize()}" for result in self.results.values())
        return "\n".join(lines) + "\n"

    def is_valid(self) -> bool:
        """Playable: a story, some choices and somewhere for them to lead."""
        if not self.story or not self.choices:
            return False
        return bool(self.results) or all(choice.is_game_over() for choice in self.choices)

    def rename_keyword(self, old: str, new: str) -> None:
        """Rename every `[old]` tag on the page to `[new]`.

        Side effect keys equal to `old` are re-keyed as well.
        """
        self.title = keywords.rename(self.title, old, new)
        self.story = keywords.rename(self.story, old, new)
        for choice in self.choices:
            choice.text = keywords.rename(choice.text, old, new)
        for entry in [*self.conditions.values(), *self.tests.values()]:
            entry.expression_l = keywords.rename(entry.expression_l, old, new)
            entry.expression_r = keywords.rename(entry.expression_r, old, new)
        for result in self.results.values():
            result.side_effects = {
                (new if keyword == old else keyword): keywords.rename(value, old, new)
                for keyword, value in result.side_effects.items()
            }

    def rename_condition(self, old: str, new: str) -> None:
        condition = self.conditions.pop(old)
        condition.name = new
        self.conditions[new] = condition
        for choice in self.choices:
            if choice.condition == old:
                choice.condition = new

    def rename_test(self, old: str, new: str) -> None:
        test = self.tests.pop(old)
        test.name = new
        self.tests[new] = test
        for choice in self.choices:
            if choice.test == old:
                choice.test = new

    def rename_result(self, old: str, new: str) -> None:
        result = self.results.pop(old)
        result.name = new
        self.results[new] = result
        for choice in self.choices:
            if choice.result == old:
                choice.result = new
        for test in self.tests.values():
            if test.success_result == old:
                test.success_result = new
            if test.failure_result == old:
                test.failure_result = new


def _extract_tag(pattern: "re.Pattern[str]", text: str) -> tuple[str, str]:
    """Return the first captured tag value and the text with that tag cut out."""
    match = pattern.search(text)
    if match is None:
        return "", text
    start, end = match.span()
    return match.group(1).strip(), text[:start] + text[end:]
