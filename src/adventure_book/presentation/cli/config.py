"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Union

_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

ConfigValue = Union[str, bool]

logger = logging.getLogger(__name__)


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "AdventureBook"
        return Path.home() / "AdventureBook"
    return Path.home() / ".config" / "adventure_book"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _defaults() -> Dict[str, ConfigValue]:
    return {"log_level": _DEFAULT_LOG_LEVEL, "warnings_as_errors": False}


def load_config(path: Path | None = None) -> Dict[str, ConfigValue]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _defaults()
    except (OSError, ValueError) as exc:
        logger.warning(f"Ignoring unreadable config {config_path}: {exc}")
        return _defaults()
    if not isinstance(raw, dict):
        return _defaults()
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "warnings_as_errors": raw.get("warnings_as_errors") is True,
    }


def save_config(config: Dict[str, ConfigValue], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "log_level": _normalize_log_level(config.get("log_level")),
        "warnings_as_errors": config.get("warnings_as_errors") is True,
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
