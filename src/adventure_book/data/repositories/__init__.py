"""Repository exports."""

from .adventure_repo import AdventureRepository
from .page_repo import PageRepository

__all__ = [
    "AdventureRepository",
    "PageRepository",
]
