"""Bracketed keyword tags such as `[confidence]` embedded in story text."""
from __future__ import annotations

import re
from typing import Callable, List, Mapping, Pattern

_KEYWORD_TAG = re.compile(r"\[\s*([^\[\]]*?)\s*\]")
_VALID_KEYWORD = re.compile(r"\w+(?:\s+\w+)*")


def make_keyword(raw: str) -> Pattern[str]:
    """Compile the pattern matching `raw` as a tag, tolerating inner whitespace."""
    words = raw.split()
    body = r"\s+".join(re.escape(word) for word in words)
    return re.compile(r"\[\s*" + body + r"\s*\]")


def create_keyword(name: str) -> str:
    """Return the canonical tag for `name`."""
    return f"[{name.strip()}]"


def is_keyword_valid(name: str) -> bool:
    """Keywords hold letters, digits and underscores, optionally split by spaces."""
    return _VALID_KEYWORD.fullmatch(name.strip()) is not None


def is_present(text: str, raw: str) -> bool:
    return make_keyword(raw).search(text) is not None


def find_keywords(text: str) -> List[str]:
    """Return the identifiers of every tag in `text` in order of appearance."""
    return [" ".join(match.group(1).split()) for match in _KEYWORD_TAG.finditer(text)]


def rename(text: str, old_raw: str, new_literal: str) -> str:
    """Replace every `old_raw` tag in `text` with a tag for `new_literal`.

    Only matched spans are rewritten, the rest of the text is left as is.
    """
    pattern = make_keyword(old_raw)
    replacement = create_keyword(new_literal)
    pieces: List[str] = []
    cursor = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        pieces.append(text[cursor:start])
        pieces.append(replacement)
        cursor = end
    if not pieces:
        return text
    pieces.append(text[cursor:])
    return "".join(pieces)


def substitute(text: str, values: Mapping[str, str], on_missing: Callable[[str], str]) -> str:
    """Replace every tag with `values[identifier]`.

    `on_missing(identifier)` is called for unknown identifiers and its
    return value is used in place of the tag.
    """

    def _replace(match: "re.Match[str]") -> str:
        identifier = " ".join(match.group(1).split())
        if identifier in values:
            return values[identifier]
        return on_missing(identifier)

    return _KEYWORD_TAG.sub(_replace, text)


__all__ = [
    "create_keyword",
    "find_keywords",
    "is_keyword_valid",
    "is_present",
    "make_keyword",
    "rename",
    "substitute",
]
