"""Helpers for resolving adventure file locations."""
from __future__ import annotations

from pathlib import Path

ADVENTURE_FILENAME = "adventure.txt"
PAGE_SUFFIX = ".txt"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_books_path(base_path: Path | str | None = None) -> Path:
    """Return the directory holding the bundled adventure folders."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data" / "books"


def get_adventure_file(folder: Path | str) -> Path:
    return Path(folder) / ADVENTURE_FILENAME


def get_page_path(folder: Path | str, page_id: str) -> Path:
    """Return the file holding `page_id`, the page id is the file stem."""
    return Path(folder) / f"{page_id}{PAGE_SUFFIX}"
