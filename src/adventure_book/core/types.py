"""Shared type aliases for the core and domain layers."""
from typing import Literal

PageId = str
Severity = Literal["ERROR", "WARN"]

__all__ = ["PageId", "Severity"]
