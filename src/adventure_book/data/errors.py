"""Custom exceptions for reading and writing adventure files."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when document files are missing or unreadable."""


class DataSaveError(DataError):
    """Raised when a document cannot be written back to disk."""
