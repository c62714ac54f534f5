"""Repository for the pages of one adventure."""
from __future__ import annotations

from pathlib import Path
from typing import List

from adventure_book.data import paths
from adventure_book.data.repositories.base import RepositoryBase
from adventure_book.domain.defs import Page


class PageRepository(RepositoryBase[Page]):
    """Loads `<page_id>.txt` files next to `adventure.txt`."""

    def _get_file_path(self, def_id: str) -> Path:
        return paths.get_page_path(self._folder, def_id)

    def _build(self, def_id: str, text: str) -> Page:
        return Page.parse(text)

    def _serialize(self, definition: Page) -> str:
        return definition.serialize()

    def ids(self) -> List[str]:
        if not self._folder.is_dir():
            return []
        return sorted(
            entry.stem
            for entry in self._folder.iterdir()
            if entry.is_file() and entry.suffix == paths.PAGE_SUFFIX and entry.name != paths.ADVENTURE_FILENAME
        )
