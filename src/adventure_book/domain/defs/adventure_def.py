"""Adventure metadata together with its records and names."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from adventure_book.domain.errors import IncorrectElementCountError, InvalidEntityError, ValueNaNError
from adventure_book.domain.defs.text_format import join_fields, match_tag, split_fields, strip_tag

_INTEGER = re.compile(r"[+-]?\d+")
_ADVENTURE_TAGS = ("title:", "description:", "start:", "record:", "name:")


def _parse_int(text: str) -> int | None:
    return int(text) if _INTEGER.fullmatch(text) else None


@dataclass(slots=True)
class Record:
    """Numeric story variable."""

    name: str
    category: str = ""
    value: int = 0

    @classmethod
    def parse(cls, text: str) -> "Record":
        """Read `name`, `name; category`, `name; value` or `name; category; value`."""
        args = split_fields(text)
        if len(args) == 1:
            return cls(name=args[0])
        if len(args) == 2:
            value = _parse_int(args[1])
            if value is None:
                return cls(name=args[0], category=args[1])
            return cls(name=args[0], value=value)
        if len(args) == 3:
            value = _parse_int(args[2])
            if value is None:
                raise ValueNaNError(f"Record '{args[0]}' value '{args[2]}' is not a number.")
            return cls(name=args[0], category=args[1], value=value)
        raise IncorrectElementCountError(f"Record needs 1 to 3 elements, got {len(args)}: '{text.strip()}'.")

    def serialize(self) -> str:
        if self.category:
            return join_fields([self.name, self.category, str(self.value)])
        return join_fields([self.name, str(self.value)])


@dataclass(slots=True)
class Name:
    """Text story variable."""

    keyword: str
    value: str = ""

    @classmethod
    def parse(cls, text: str) -> "Name":
        args = split_fields(text)
        if not 1 <= len(args) <= 2:
            raise IncorrectElementCountError(f"Name needs 1 or 2 elements, got {len(args)}: '{text.strip()}'.")
        return cls(keyword=args[0], value=args[1] if len(args) == 2 else "")

    def serialize(self) -> str:
        if self.value:
            return join_fields([self.keyword, self.value])
        return self.keyword


@dataclass(slots=True)
class Adventure:
    """Top-level story document."""

    title: str = ""
    description: str = ""
    path: str = ""
    start: str = ""
    records: Dict[str, Record] = field(default_factory=dict)
    names: Dict[str, Name] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str, path: str) -> "Adventure":
        """Parse an adventure document stored at `path`.

        Untagged lines following `description:` continue the description
        and are appended without a separator. Later records or names with
        the same key replace earlier ones.
        """
        adventure = cls(path=path)
        in_description = False
        for line in text.splitlines():
            tag = match_tag(line, _ADVENTURE_TAGS)
            if tag is None:
                if in_description:
                    adventure.description += line
                continue
            in_description = tag == "description:"
            remainder = strip_tag(line, tag)
            if tag == "title:":
                adventure.title = remainder
            elif tag == "description:":
                adventure.description = remainder
            elif tag == "start:":
                adventure.start = remainder
            elif tag == "record:":
                record = Record.parse(remainder)
                adventure.records[record.name] = record
            else:
                name = Name.parse(remainder)
                adventure.names[name.keyword] = name

        if not adventure.is_valid():
            raise InvalidEntityError(f"Adventure at '{path}' needs a title and a path.")
        return adventure

    def serialize(self) -> str:
        lines: List[str] = [
            f"title: {self.title}",
            f"description: {self.description}",
            f"start: {self.start}",
        ]
        lines.extend(f"record: {record.serialize()}" for record in self.records.values())
        lines.extend(f"name: {name.serialize()}" for name in self.names.values())
        return "\n".join(lines) + "\n"

    def is_valid(self) -> bool:
        """Bare minimum needed to list the adventure."""
        return bool(self.title) and bool(self.path)

    def is_playable(self) -> bool:
        return self.is_valid() and bool(self.start) and Path(self.path).exists()

    def rename_record(self, old: str, new: str) -> None:
        record = self.records.pop(old)
        record.name = new
        self.records[new] = record

    def rename_name(self, old: str, new: str) -> None:
        name = self.names.pop(old)
        name.keyword = new
        self.names[new] = name
