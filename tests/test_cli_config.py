from pathlib import Path

from adventure_book.presentation.cli import config


def test_load_config_defaults_when_missing(tmp_path: Path) -> None:
    loaded = config.load_config(tmp_path / "missing.json")

    assert loaded == {"log_level": "WARNING", "warnings_as_errors": False}


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"

    config.save_config({"log_level": "debug", "warnings_as_errors": True}, path)

    assert config.load_config(path) == {"log_level": "DEBUG", "warnings_as_errors": True}


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"log_level": "LOUD", "warnings_as_errors": "yes"}', encoding="utf-8")

    assert config.load_config(path) == {"log_level": "WARNING", "warnings_as_errors": False}


def test_unreadable_config_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert config.load_config(path) == {"log_level": "WARNING", "warnings_as_errors": False}

    path.write_text("[1, 2]", encoding="utf-8")
    assert config.load_config(path)["log_level"] == "WARNING"


def test_default_config_path_under_user_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_user_data_dir", lambda: tmp_path)

    assert config.get_default_config_path() == tmp_path / "config.json"
