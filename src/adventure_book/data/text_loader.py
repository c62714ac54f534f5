"""Low-level text helpers for repositories."""
from __future__ import annotations

from pathlib import Path

from .errors import DataLoadError, DataSaveError


def load_text(path: Path) -> str:
    """Read a UTF-8 document and raise DataLoadError on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Document not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise DataLoadError(f"Document is not valid UTF-8: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read document: {path}") from exc


def save_text(path: Path, text: str) -> None:
    """Write a UTF-8 document and raise DataSaveError on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DataSaveError(f"Unable to write document: {path}") from exc
