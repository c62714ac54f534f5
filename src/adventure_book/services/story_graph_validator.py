"""Static cross-reference validation for an adventure and its pages."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from adventure_book.core.rng import DiceRNG
from adventure_book.core.types import Severity
from adventure_book.domain import keywords
from adventure_book.domain.defs import GAME_OVER, Adventure, Page
from adventure_book.domain.errors import DivisionByZeroError, EvaluationError
from adventure_book.domain.evaluation import evaluate_expression

_DRY_RUN_SEED = 69

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_adventure(adventure: Adventure, pages: Mapping[str, Page]) -> list[Issue]:
    """Check every name lookup the interpreter will make while playing.

    Parsing only checks the shape of each line, this catches choices
    pointing at missing conditions, results leading to missing pages,
    tags naming unknown variables and expressions that cannot evaluate.
    """
    issues: list[Issue] = []
    if adventure.start not in pages:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_START_PAGE",
                message="Adventure starts on a page that does not exist.",
                context={"referenced_id": adventure.start},
            )
        )
    variables = set(adventure.records) | set(adventure.names)
    for page_id in sorted(pages):
        page = pages[page_id]
        _validate_choices(page_id, page, issues)
        _validate_tests(page_id, page, issues)
        _validate_results(page_id, page, pages, variables, issues)
        _validate_keywords(page_id, page, variables, issues)
        _validate_expressions(page_id, page, adventure, issues)
    _validate_reachability(adventure.start, pages, issues)
    logger.debug(f"Validated {len(pages)} pages of '{adventure.title}', {len(issues)} issues")
    return issues


def _validate_choices(page_id: str, page: Page, issues: list[Issue]) -> None:
    for index, choice in enumerate(page.choices):
        field_path = f"choices[{index}]"
        if choice.condition and choice.condition not in page.conditions:
            issues.append(
                _missing("MISSING_CONDITION", "Choice uses a missing condition.", page_id, field_path, choice.condition)
            )
        if choice.test and choice.test not in page.tests:
            issues.append(
                _missing("MISSING_TEST", "Choice uses a missing test.", page_id, field_path, choice.test)
            )
        if choice.result and not choice.is_game_over() and choice.result not in page.results:
            issues.append(
                _missing("MISSING_RESULT", "Choice leads to a missing result.", page_id, field_path, choice.result)
            )


def _validate_tests(page_id: str, page: Page, issues: list[Issue]) -> None:
    for test in page.tests.values():
        for field_name, result_name in (
            ("success_result", test.success_result),
            ("failure_result", test.failure_result),
        ):
            if result_name != GAME_OVER and result_name not in page.results:
                issues.append(
                    _missing(
                        "MISSING_TEST_RESULT",
                        "Test leads to a missing result.",
                        page_id,
                        f"tests.{test.name}.{field_name}",
                        result_name,
                    )
                )


def _validate_results(
    page_id: str, page: Page, pages: Mapping[str, Page], variables: set[str], issues: list[Issue]
) -> None:
    for result in page.results.values():
        if result.next_page not in pages:
            issues.append(
                _missing(
                    "MISSING_NEXT_PAGE",
                    "Result moves to a page that does not exist.",
                    page_id,
                    f"results.{result.name}.next_page",
                    result.next_page,
                )
            )
        for keyword in result.side_effects:
            if keyword not in variables:
                issues.append(
                    _missing(
                        "UNKNOWN_SIDE_EFFECT",
                        "Result changes a record or name that does not exist.",
                        page_id,
                        f"results.{result.name}.side_effects",
                        keyword,
                    )
                )


def _validate_keywords(page_id: str, page: Page, variables: set[str], issues: list[Issue]) -> None:
    texts = [("title", page.title), ("story", page.story)]
    texts.extend((f"choices[{index}].text", choice.text) for index, choice in enumerate(page.choices))
    for field_path, text in texts:
        for keyword in keywords.find_keywords(text):
            if keyword not in variables:
                issues.append(
                    _missing("UNKNOWN_KEYWORD", "Text uses an unknown keyword.", page_id, field_path, keyword)
                )


def _validate_expressions(page_id: str, page: Page, adventure: Adventure, issues: list[Issue]) -> None:
    rng = DiceRNG(_DRY_RUN_SEED)
    for field_path, expression in _iter_expressions(page, adventure):
        try:
            evaluate_expression(expression, adventure.records, rng)
        except DivisionByZeroError:
            issues.append(
                Issue(
                    severity="WARN",
                    code="DIVISION_BY_ZERO",
                    message="Expression divides by zero with the starting record values.",
                    context={"page_id": page_id, "field_path": field_path, "expression": expression},
                )
            )
        except EvaluationError as exc:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="INVALID_EXPRESSION",
                    message=str(exc),
                    context={"page_id": page_id, "field_path": field_path, "expression": expression},
                )
            )


def _iter_expressions(page: Page, adventure: Adventure) -> Iterable[tuple[str, str]]:
    for condition in page.conditions.values():
        yield f"conditions.{condition.name}.expression_l", condition.expression_l
        yield f"conditions.{condition.name}.expression_r", condition.expression_r
    for test in page.tests.values():
        yield f"tests.{test.name}.expression_l", test.expression_l
        yield f"tests.{test.name}.expression_r", test.expression_r
    for result in page.results.values():
        for keyword, expression in result.side_effects.items():
            # Name side effects are free text.
            if keyword in adventure.records:
                yield f"results.{result.name}.side_effects.{keyword}", expression


def _validate_reachability(start: str, pages: Mapping[str, Page], issues: list[Issue]) -> None:
    reachable: set[str] = set()
    stack: list[str] = [start] if start in pages else []
    while stack:
        page_id = stack.pop()
        if page_id in reachable:
            continue
        reachable.add(page_id)
        for result in pages[page_id].results.values():
            if result.next_page in pages:
                stack.append(result.next_page)
    for page_id in sorted(set(pages) - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_PAGE",
                message="Page is unreachable from the start page.",
                context={"page_id": page_id},
            )
        )


def _missing(code: str, message: str, page_id: str, field_path: str, referenced_id: str) -> Issue:
    return Issue(
        severity="ERROR",
        code=code,
        message=message,
        context={"page_id": page_id, "field_path": field_path, "referenced_id": referenced_id},
    )
