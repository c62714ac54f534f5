"""Base repository implementation for text documents in an adventure folder."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Generic, List, TypeVar

from adventure_book.data.text_loader import load_text, save_text

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, folder: Path | str) -> None:
        self._folder = Path(folder)
        self._definitions: Dict[str, T] = {}

    @property
    def folder(self) -> Path:
        return self._folder

    def _get_file_path(self, def_id: str) -> Path:
        raise NotImplementedError

    def _build(self, def_id: str, text: str) -> T:
        """Convert raw document text into a typed definition."""
        raise NotImplementedError

    def _serialize(self, definition: T) -> str:
        raise NotImplementedError

    def ids(self) -> List[str]:
        """Return the ids of every stored definition."""
        raise NotImplementedError

    def get(self, def_id: str) -> T:
        """Return a definition by id, parsing it on first access."""
        if def_id not in self._definitions:
            file_path = self._get_file_path(def_id)
            text = load_text(file_path)
            self._definitions[def_id] = self._build(def_id, text)
            logger.debug(f"Loaded '{def_id}' from {file_path}")
        return self._definitions[def_id]

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        return [self.get(def_id) for def_id in sorted(self.ids())]

    def save(self, def_id: str, definition: T) -> None:
        """Write `definition` to disk and keep it cached under `def_id`."""
        file_path = self._get_file_path(def_id)
        save_text(file_path, self._serialize(definition))
        self._definitions[def_id] = definition
        logger.info(f"Saved '{def_id}' to {file_path}")

    def clear_cache(self) -> None:
        self._definitions.clear()
