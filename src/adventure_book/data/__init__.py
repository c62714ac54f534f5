"""Data layer utilities for reading adventure folders."""

from .errors import DataError, DataLoadError, DataSaveError
from .paths import get_books_path, get_repo_root

__all__ = [
    "DataError",
    "DataLoadError",
    "DataSaveError",
    "get_books_path",
    "get_repo_root",
]
