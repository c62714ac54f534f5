"""Service layer exports."""

from .editor_service import EditorService
from .errors import ChoiceUnavailableError, EditorError, GameOverError, MissingReferenceError, StoryError
from .story_graph_validator import Issue, format_issue, validate_adventure
from .story_service import (
    ChoiceResult,
    ChoiceView,
    GameOverEvent,
    NameChangedEvent,
    PageChangedEvent,
    PageView,
    RecordChangedEvent,
    StoryService,
    TestRolledEvent,
)

__all__ = [
    "ChoiceResult",
    "ChoiceUnavailableError",
    "ChoiceView",
    "EditorError",
    "EditorService",
    "GameOverError",
    "GameOverEvent",
    "Issue",
    "MissingReferenceError",
    "NameChangedEvent",
    "PageChangedEvent",
    "PageView",
    "RecordChangedEvent",
    "StoryError",
    "StoryService",
    "TestRolledEvent",
    "format_issue",
    "validate_adventure",
]
