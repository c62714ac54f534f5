"""Document model exports."""

from .adventure_def import Adventure, Name, Record
from .page_def import GAME_OVER, Choice, Condition, Page, StoryResult, Test

__all__ = [
    "GAME_OVER",
    "Adventure",
    "Choice",
    "Condition",
    "Name",
    "Page",
    "Record",
    "StoryResult",
    "Test",
]
