from pathlib import Path

import pytest

from adventure_book.core.rng import DiceRNG
from adventure_book.data import paths
from adventure_book.data.errors import DataLoadError
from adventure_book.data.repositories import AdventureRepository, PageRepository
from adventure_book.domain.defs import Choice, Name, Page, Record
from adventure_book.domain.errors import MissingRecordError
from adventure_book.domain.state import GameState
from adventure_book.services.errors import ChoiceUnavailableError, GameOverError, MissingReferenceError
from adventure_book.services.story_service import (
    GameOverEvent,
    NameChangedEvent,
    PageChangedEvent,
    RecordChangedEvent,
    StoryService,
    TestRolledEvent,
    is_choice_enabled,
    substitute_keywords,
)

SAMPLE_ID = "damsel_in_distress"


def _make_story_service() -> StoryService:
    adventure = AdventureRepository().get(SAMPLE_ID)
    return StoryService(adventure, PageRepository(paths.get_books_path() / SAMPLE_ID))


def test_start_new_game_shows_start_page() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)
    view = service.get_current_page_view(state)

    assert state.seed == 7
    assert state.current_page_id == "at_the_castle_ruins"
    assert state.visited_pages == ["at_the_castle_ruins"]
    assert view.title == "At the Castle Ruins"
    assert view.story.startswith("Sir Roland arrived at the ruined castle")
    assert "\nThe air is stale" in view.story
    assert [choice.enabled for choice in view.choices] == [True, True, False]


def test_start_new_game_without_seed_picks_one() -> None:
    state = _make_story_service().start_new_game()

    assert isinstance(state.seed, int)
    assert state.rng.seed == state.seed


def test_story_flow_applies_side_effects() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)

    first = service.choose(state, 1)

    assert first.events == [
        RecordChangedEvent(name="confidence", old_value=5, new_value=4),
        PageChangedEvent(page_id="coward_scene"),
    ]
    assert first.page_view is not None
    assert first.page_view.story == "Sir Roland flees into the forest. Confidence is down to 4."
    assert state.record_value("confidence") == 4

    second = service.choose(state, 0)

    assert RecordChangedEvent(name="confidence", old_value=4, new_value=6) in second.events
    assert NameChangedEvent(keyword="hero", old_value="Sir Roland", new_value="Sir Roland the Cautious") in second.events
    assert state.current_page_id == "at_the_castle_ruins"
    assert state.name_value("hero") == "Sir Roland the Cautious"
    assert second.page_view.story.startswith("Sir Roland the Cautious arrived")
    assert state.visited_pages == ["at_the_castle_ruins", "coward_scene", "at_the_castle_ruins"]


def test_playing_does_not_change_adventure_defaults() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)

    service.choose(state, 1)
    service.choose(state, 0)

    assert service.adventure.records["confidence"].value == 5
    assert service.adventure.names["hero"].value == "Sir Roland"


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6, 7, 8])
def test_test_choice_rolls_against_record(seed: int) -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=seed)
    roll = DiceRNG(seed).die(1, 20)
    expected_result = "victory" if 5 >= roll else "coward"
    expected_page = "victory_scene" if expected_result == "victory" else "coward_scene"

    outcome = service.choose(state, 0)

    assert outcome.events[0] == TestRolledEvent(test_name="bravery", result_name=expected_result)
    assert state.current_page_id == expected_page


def test_same_seed_replays_identically() -> None:
    service = _make_story_service()
    state_a = service.start_new_game(seed=31337)
    state_b = service.start_new_game(seed=31337)

    result_a = service.choose(state_a, 0)
    result_b = service.choose(state_b, 0)

    assert result_a.events == result_b.events


def test_disabled_and_out_of_range_choices_raise() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)

    with pytest.raises(ChoiceUnavailableError):
        service.choose(state, 2)
    with pytest.raises(ChoiceUnavailableError):
        service.choose(state, 9)
    with pytest.raises(ChoiceUnavailableError):
        service.choose(state, -1)


def test_game_over_ends_play() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)
    service.choose(state, 1)

    outcome = service.choose(state, 1)

    assert outcome.events == [GameOverEvent(page_id="coward_scene")]
    assert outcome.page_view is None
    assert state.game_over
    with pytest.raises(GameOverError):
        service.choose(state, 0)


def test_choice_availability_is_fixed_for_a_visit() -> None:
    service = _make_story_service()
    state = service.start_new_game(seed=7)

    first = service.get_current_page_view(state)
    second = service.get_current_page_view(state)

    assert state.enabled_choices == [True, True, False]
    assert [choice.enabled for choice in first.choices] == [choice.enabled for choice in second.choices]


def test_substitute_keywords_uses_records_and_names() -> None:
    records = {"gold": Record(name="gold", value=12)}
    names = {"hero": Name(keyword="hero", value="Ann")}

    assert substitute_keywords("[hero] has [ gold ] gold.", records, names) == "Ann has 12 gold."
    with pytest.raises(MissingRecordError) as excinfo:
        substitute_keywords("[ghost] says boo.", records, names)
    assert excinfo.value.keyword == "ghost"


def test_is_choice_enabled_requires_existing_condition() -> None:
    page = Page(title="T", story="S", choices=[Choice(text="Go", condition="missing", result="go")])

    assert is_choice_enabled(page, Choice(text="Free", result="go"), {}, DiceRNG(1))
    with pytest.raises(MissingReferenceError):
        is_choice_enabled(page, page.choices[0], {}, DiceRNG(1))


def test_apply_result_rejects_unknown_side_effect() -> None:
    service = _make_story_service()
    state: GameState = service.start_new_game(seed=7)
    page = PageRepository(paths.get_books_path() / SAMPLE_ID).get("at_the_castle_ruins")
    result = page.results["victory"]
    result.side_effects = {"ghost": "1"}

    with pytest.raises(MissingRecordError):
        service.apply_result(state, result, [])
    assert state.current_page_id == "at_the_castle_ruins"


def test_failed_move_leaves_state_untouched(tmp_path: Path) -> None:
    source = paths.get_books_path() / SAMPLE_ID
    for page_id in ("at_the_castle_ruins", "victory_scene"):
        text = (source / f"{page_id}.txt").read_text(encoding="utf-8")
        (tmp_path / f"{page_id}.txt").write_text(text, encoding="utf-8")
    service = StoryService(AdventureRepository().get(SAMPLE_ID), PageRepository(tmp_path))
    state = service.start_new_game(seed=7)

    with pytest.raises(DataLoadError):
        service.choose(state, 1)

    assert state.current_page_id == "at_the_castle_ruins"
    assert state.record_value("confidence") == 5
    assert state.visited_pages == ["at_the_castle_ruins"]
    assert [choice.enabled for choice in service.get_current_page_view(state).choices] == [True, True, False]


def test_record_wins_over_name_with_same_keyword() -> None:
    records = {"title": Record(name="title", value=3)}
    names = {"title": Name(keyword="title", value="Sir")}

    assert substitute_keywords("[title]", records, names) == "3"
