import json
from pathlib import Path

import pytest

from adventure_book.data import paths
from adventure_book.presentation.cli.app import main

SAMPLE_ID = "damsel_in_distress"


def _write_book(folder: Path, pages: dict[str, str]) -> Path:
    folder.mkdir(parents=True)
    (folder / "adventure.txt").write_text("title: Tiny Tale\nstart: intro\n", encoding="utf-8")
    for page_id, text in pages.items():
        (folder / f"{page_id}.txt").write_text(text, encoding="utf-8")
    return folder


def _config(tmp_path: Path, **values: object) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(values), encoding="utf-8")
    return str(path)


def test_validate_sample_adventure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    folder = paths.get_books_path() / SAMPLE_ID

    exit_code = main(["--config", _config(tmp_path), "validate", str(folder)])

    assert exit_code == 0
    assert "Damsel in Distress: 3 pages, 0 issues" in capsys.readouterr().out


def test_validate_reports_broken_pages(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    folder = _write_book(
        tmp_path / "tiny",
        {
            "intro": "title: Intro\nstory: Hi.\nchoice: Go {result: go}\nresult: go; missing_page\n",
            "broken": "title: Broken\nchoice: Nothing {result: away}\n",
        },
    )

    exit_code = main(["--config", _config(tmp_path), "validate", str(folder)])
    output = capsys.readouterr().out

    assert exit_code == 1
    assert "MISSING_NEXT_PAGE" in output
    assert "INVALID_PAGE" in output
    assert "Tiny Tale: 1 pages, 2 issues" in output


def test_validate_warnings_as_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ending = "story: Done.\nchoice: The end. {result: game over}\n"
    folder = _write_book(tmp_path / "tiny", {"intro": f"title: Intro\n{ending}", "island": f"title: Island\n{ending}"})

    assert main(["--config", _config(tmp_path), "validate", str(folder)]) == 0
    assert "UNREACHABLE_PAGE" in capsys.readouterr().out
    assert main(["--config", _config(tmp_path, warnings_as_errors=True), "validate", str(folder)]) == 1


def test_validate_missing_adventure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--config", _config(tmp_path), "validate", str(tmp_path / "nothing")])

    assert exit_code == 1
    assert "INVALID_ADVENTURE" in capsys.readouterr().out


def test_list_adventures(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--config", _config(tmp_path), "list", str(paths.get_books_path())])

    assert exit_code == 0
    assert f"{SAMPLE_ID}: Damsel in Distress" in capsys.readouterr().out


def test_command_is_required(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--config", _config(tmp_path)])
