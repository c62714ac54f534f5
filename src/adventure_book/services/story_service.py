"""Story progression services."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Sequence

from adventure_book.core.rng import DiceRNG
from adventure_book.core.types import PageId
from adventure_book.data.repositories import PageRepository
from adventure_book.domain import keywords
from adventure_book.domain.defs import GAME_OVER, Adventure, Choice, Name, Page, Record, StoryResult
from adventure_book.domain.errors import MissingRecordError
from adventure_book.domain.evaluation import evaluate_expression
from adventure_book.domain.state import GameState
from adventure_book.services.errors import ChoiceUnavailableError, GameOverError, MissingReferenceError

_MAX_RANDOM_SEED = 2**63 - 1

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChoiceView:
    index: int
    text: str
    enabled: bool


@dataclass(slots=True)
class PageView:
    """Data returned to the presentation layer for rendering."""

    page_id: PageId
    title: str
    story: str
    choices: List[ChoiceView]


@dataclass(slots=True)
class StoryEvent:
    """Base class for story events."""


@dataclass(slots=True)
class TestRolledEvent(StoryEvent):
    __test__ = False

    test_name: str
    result_name: str


@dataclass(slots=True)
class RecordChangedEvent(StoryEvent):
    name: str
    old_value: int
    new_value: int


@dataclass(slots=True)
class NameChangedEvent(StoryEvent):
    keyword: str
    old_value: str
    new_value: str


@dataclass(slots=True)
class PageChangedEvent(StoryEvent):
    page_id: PageId


@dataclass(slots=True)
class GameOverEvent(StoryEvent):
    page_id: PageId


@dataclass(slots=True)
class ChoiceResult:
    """Result returned after applying a choice."""

    events: List[StoryEvent] = field(default_factory=list)
    page_view: PageView | None = None


def substitute_keywords(text: str, records: Mapping[str, Record], names: Mapping[str, Name]) -> str:
    """Replace `[keyword]` tags with record values or name values.

    A record wins over a name with the same keyword. Raises
    MissingRecordError for a tag matching neither.
    """
    values: Dict[str, str] = {key: name.value for key, name in names.items()}
    values.update({key: str(record.value) for key, record in records.items()})

    def _missing(keyword: str) -> str:
        raise MissingRecordError(keyword)

    return keywords.substitute(text, values, _missing)


def is_choice_enabled(page: Page, choice: Choice, records: Mapping[str, Record], rng: DiceRNG) -> bool:
    """Choices without a condition are always enabled."""
    if not choice.condition:
        return True
    condition = page.conditions.get(choice.condition)
    if condition is None:
        raise MissingReferenceError(f"Choice '{choice.text}' uses missing condition '{choice.condition}'.")
    return condition.evaluate(records, rng)


def render_page(
    page_id: PageId, page: Page, state: GameState, enabled: Sequence[bool] | None = None
) -> PageView:
    """Resolve keyword tags and choice availability for `page`.

    `enabled` reuses availability worked out earlier instead of rolling
    the conditions again.
    """
    if enabled is None:
        enabled = [is_choice_enabled(page, choice, state.records, state.rng) for choice in page.choices]
    choices = [
        ChoiceView(
            index=index,
            text=substitute_keywords(choice.text, state.records, state.names),
            enabled=enabled[index],
        )
        for index, choice in enumerate(page.choices)
    ]
    return PageView(
        page_id=page_id,
        title=substitute_keywords(page.title, state.records, state.names),
        story=substitute_keywords(page.story, state.records, state.names),
        choices=choices,
    )


class StoryService:
    """Application service that plays an adventure page by page."""

    def __init__(self, adventure: Adventure, page_repo: PageRepository) -> None:
        self._adventure = adventure
        self._page_repo = page_repo

    @property
    def adventure(self) -> Adventure:
        return self._adventure

    def start_new_game(self, seed: int | None = None) -> GameState:
        """Create a fresh game state positioned at the adventure's start page."""
        if seed is None:
            seed = secrets.randbelow(_MAX_RANDOM_SEED)
        state = GameState(
            seed=seed,
            rng=DiceRNG(seed),
            current_page_id=self._adventure.start,
            records={key: replace(record) for key, record in self._adventure.records.items()},
            names={key: replace(name) for key, name in self._adventure.names.items()},
        )
        state.visited_pages.append(state.current_page_id)
        logger.info(f"Started '{self._adventure.title}' at '{state.current_page_id}' with seed {seed}")
        return state

    def get_current_page_view(self, state: GameState) -> PageView:
        """Return the view model for the current page.

        Conditions are rolled once per visit, repeated calls reuse the
        outcome so the choice made matches the choice shown.
        """
        page = self._current_page(state)
        if state.enabled_choices is None:
            state.enabled_choices = [
                is_choice_enabled(page, choice, state.records, state.rng) for choice in page.choices
            ]
        return render_page(state.current_page_id, page, state, state.enabled_choices)

    def choose(self, state: GameState, choice_index: int) -> ChoiceResult:
        """Apply the selected choice and advance the story."""
        if state.game_over:
            raise GameOverError("The adventure has ended, start a new game.")
        page = self._current_page(state)
        view = self.get_current_page_view(state)
        if not 0 <= choice_index < len(page.choices):
            raise ChoiceUnavailableError(
                f"Choice index {choice_index} is invalid for page '{state.current_page_id}'."
            )
        if not view.choices[choice_index].enabled:
            raise ChoiceUnavailableError(f"Choice '{view.choices[choice_index].text}' is disabled.")

        choice = page.choices[choice_index]
        events: List[StoryEvent] = []
        result_name = self._resolve_result_name(page, choice, state, events)
        if result_name == GAME_OVER:
            state.game_over = True
            events.append(GameOverEvent(page_id=state.current_page_id))
            logger.info(f"Game over on '{state.current_page_id}'")
            return ChoiceResult(events=events, page_view=None)

        result = page.results.get(result_name)
        if result is None:
            raise MissingReferenceError(
                f"Page '{state.current_page_id}' has no result called '{result_name}'."
            )
        self.apply_result(state, result, events)
        return ChoiceResult(events=events, page_view=self.get_current_page_view(state))

    def apply_result(self, state: GameState, result: StoryResult, events: List[StoryEvent]) -> None:
        """Apply side effects of `result` and move to its next page.

        Every side effect is evaluated against the records as they were
        before any of them is written. Nothing is written when a side effect
        fails or the next page cannot be loaded.
        """
        record_updates: Dict[str, int] = {}
        name_updates: Dict[str, str] = {}
        for keyword, expression in result.side_effects.items():
            if keyword in state.records:
                record_updates[keyword] = evaluate_expression(expression, state.records, state.rng)
            elif keyword in state.names:
                name_updates[keyword] = substitute_keywords(expression, state.records, state.names)
            else:
                raise MissingRecordError(keyword)

        self._page_repo.get(result.next_page)

        for keyword, value in record_updates.items():
            record = state.records[keyword]
            events.append(RecordChangedEvent(name=keyword, old_value=record.value, new_value=value))
            logger.debug(f"Record '{keyword}' {record.value} -> {value}")
            record.value = value
        for keyword, value in name_updates.items():
            name = state.names[keyword]
            events.append(NameChangedEvent(keyword=keyword, old_value=name.value, new_value=value))
            logger.debug(f"Name '{keyword}' '{name.value}' -> '{value}'")
            name.value = value

        state.current_page_id = result.next_page
        state.enabled_choices = None
        state.visited_pages.append(result.next_page)
        events.append(PageChangedEvent(page_id=result.next_page))
        logger.info(f"Moved to page '{result.next_page}' through result '{result.name}'")

    def _resolve_result_name(
        self, page: Page, choice: Choice, state: GameState, events: List[StoryEvent]
    ) -> str:
        if not choice.test:
            return choice.result
        test = page.tests.get(choice.test)
        if test is None:
            raise MissingReferenceError(f"Choice '{choice.text}' uses missing test '{choice.test}'.")
        result_name = test.evaluate(state.records, state.rng)
        events.append(TestRolledEvent(test_name=test.name, result_name=result_name))
        return result_name

    def _current_page(self, state: GameState) -> Page:
        return self._page_repo.get(state.current_page_id)
