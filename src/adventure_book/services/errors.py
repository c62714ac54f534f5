"""Service-layer exceptions."""


class StoryError(Exception):
    """Base exception for story play."""


class MissingReferenceError(StoryError):
    """Raised when a choice or test names a condition, test or result the page lacks."""


class ChoiceUnavailableError(StoryError):
    """Raised when the selected choice does not exist or is disabled."""


class GameOverError(StoryError):
    """Raised when a choice is made after the game has ended."""


class EditorError(Exception):
    """Raised when an edit would leave the adventure inconsistent."""
