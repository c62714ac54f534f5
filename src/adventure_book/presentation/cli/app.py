"""Console commands for checking adventure folders."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from adventure_book.data import DataError
from adventure_book.data.repositories import AdventureRepository, PageRepository
from adventure_book.domain.defs import Page
from adventure_book.domain.errors import ParsingError
from adventure_book.presentation.cli.config import load_config
from adventure_book.services import Issue, format_issue, validate_adventure

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the command and return the exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)
    level = "DEBUG" if args.verbose else str(config["log_level"])
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if args.command == "list":
        return _list_adventures(args.books)
    return _validate_folder(args.folder, warnings_as_errors=bool(config["warnings_as_errors"]))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="adventure-book", description="Check Adventure Book documents.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Parse every page of an adventure and check references.")
    validate.add_argument("folder", type=Path, help="Adventure folder holding adventure.txt.")

    listing = subparsers.add_parser("list", help="List the adventures in a books directory.")
    listing.add_argument("books", type=Path, nargs="?", default=None, help="Directory of adventure folders.")
    return parser


def _list_adventures(books: Path | None) -> int:
    repo = AdventureRepository(books)
    for adventure_id in repo.ids():
        try:
            adventure = repo.get(adventure_id)
        except (DataError, ParsingError) as exc:
            logger.warning(f"Skipping '{adventure_id}': {exc}")
            continue
        print(f"{adventure_id}: {adventure.title}")
    return 0


def _validate_folder(folder: Path, *, warnings_as_errors: bool) -> int:
    folder = folder.resolve()
    try:
        adventure = AdventureRepository(folder.parent).get(folder.name)
    except (DataError, ParsingError) as exc:
        print(f"[ERROR] INVALID_ADVENTURE: {exc}")
        return 1

    page_repo = PageRepository(folder)
    pages: Dict[str, Page] = {}
    issues: List[Issue] = []
    for page_id in page_repo.ids():
        try:
            pages[page_id] = page_repo.get(page_id)
        except (DataError, ParsingError) as exc:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="INVALID_PAGE",
                    message=str(exc),
                    context={"page_id": page_id, "error": type(exc).__name__},
                )
            )
    issues.extend(validate_adventure(adventure, pages))

    for issue in issues:
        print(format_issue(issue))
    errors = [issue for issue in issues if issue.severity == "ERROR" or warnings_as_errors]
    print(f"{adventure.title}: {len(pages)} pages, {len(issues)} issues")
    return 1 if errors else 0
