"""Repository for adventure metadata files."""
from __future__ import annotations

from pathlib import Path
from typing import List

from adventure_book.data import paths
from adventure_book.data.repositories.base import RepositoryBase
from adventure_book.domain.defs import Adventure


class AdventureRepository(RepositoryBase[Adventure]):
    """Loads the `adventure.txt` of every adventure folder under a books directory.

    Adventures are keyed by folder name.
    """

    def __init__(self, base_path: Path | str | None = None) -> None:
        super().__init__(paths.get_books_path(base_path))

    def _get_file_path(self, def_id: str) -> Path:
        return paths.get_adventure_file(self._folder / def_id)

    def _build(self, def_id: str, text: str) -> Adventure:
        return Adventure.parse(text, str(self._folder / def_id))

    def _serialize(self, definition: Adventure) -> str:
        return definition.serialize()

    def ids(self) -> List[str]:
        if not self._folder.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self._folder.iterdir()
            if entry.is_dir() and paths.get_adventure_file(entry).is_file()
        )
