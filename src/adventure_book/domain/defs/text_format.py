"""Helpers shared by the line-tagged document parsers."""
from __future__ import annotations

from typing import List, Optional, Sequence

FIELD_SEPARATOR = ";"


def split_fields(text: str) -> List[str]:
    """Split on `;`, trim every part and drop the empty ones."""
    return [part.strip() for part in text.split(FIELD_SEPARATOR) if part.strip()]


def join_fields(parts: Sequence[str]) -> str:
    return f"{FIELD_SEPARATOR} ".join(parts)


def match_tag(line: str, tags: Sequence[str]) -> Optional[str]:
    """Return the first tag `line` starts with, tags include their colon."""
    for tag in tags:
        if line.startswith(tag):
            return tag
    return None


def strip_tag(line: str, tag: str) -> str:
    """Remove `tag` once and trim the remainder."""
    return line.replace(tag, "", 1).strip()
