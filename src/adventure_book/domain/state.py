"""Live play state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from adventure_book.core.rng import DiceRNG
from adventure_book.core.types import PageId
from adventure_book.domain.defs import Name, Record


@dataclass
class GameState:
    """Records and names as they stand during one playthrough."""

    seed: int
    rng: DiceRNG
    current_page_id: PageId
    records: Dict[str, Record] = field(default_factory=dict)
    names: Dict[str, Name] = field(default_factory=dict)
    game_over: bool = False
    enabled_choices: list[bool] | None = None
    visited_pages: list[PageId] = field(default_factory=list)

    def record_value(self, name: str) -> int:
        return self.records[name].value

    def name_value(self, keyword: str) -> str:
        return self.names[keyword].value
