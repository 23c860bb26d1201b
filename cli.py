# cli.py
"""
Konkani dictionary command line tools.

Commands:
    konkani-dict generate-test-cases  - Build a test-case file from dictionary rows
    konkani-dict validate             - Ask the configured LLM about each test case and score it
    konkani-dict verify-db            - Same check straight from the database, no file
    konkani-dict demo                 - Offline verifier demo on canned answers
"""

import asyncio
import logging
import sys
from typing import NoReturn, Optional, Sequence

import click
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from core.entities import ProviderError, ReferenceEntry
from core.provider_registry import provider_or_error
from core.response_verifier import verify_response
from model.report import ValidationRecord
from model.test_case import TestCase
from repository.dictionary_repository import DictionaryRepository
from service.test_case_service import TestCaseService, load_test_cases, save_test_cases
from service.verification_service import VerificationService, build_report, save_report
from util.enums import Color, PassPolicy
from util.logger import init_logger

logger = logging.getLogger(__name__)

DEMO_CASES: Sequence[tuple[str, str, str]] = (
    (
        "namaskara",
        "hello, greeting, salutation",
        'The Konkani word "namaskara" means "hello" or "greeting" in English. '
        "It is commonly used as a respectful greeting.",
    ),
    (
        "dev borem korum",
        "good morning, morning greeting",
        'This Konkani phrase translates to "good morning" in English.',
    ),
    (
        "dhanyavaad",
        "thank you, thanks, gratitude",
        'In Konkani, "dhanyavaad" means "thank you" or expresses gratitude.',
    ),
    (
        "koso",
        "how, how are you",
        'The word "koso" is used to ask "how" or "how are you" in Konkani.',
    ),
    (
        "mhaka",
        "to me, for me",
        'This is a preposition meaning "to me" or "for me" in English.',
    ),
)


def _fail(message: str) -> NoReturn:
    click.echo(f"{Color.RED}{message}{Color.RESET}", err=True)
    sys.exit(1)


def _require_llm() -> None:
    if not settings.ENABLE_LLM:
        _fail("LLM functionality is disabled. Set ENABLE_LLM=true to run verification.")


def _print_summary(records: Sequence[ValidationRecord]) -> dict:
    report = build_report(records)
    summary = report["summary"]
    click.echo("=" * 60)
    click.echo(f"{Color.BOLD}VALIDATION SUMMARY{Color.RESET}")
    click.echo(f"Total Tests: {summary['total_tests']}")
    click.echo(f"{Color.GREEN}Passed: {summary['passed']}{Color.RESET}")
    click.echo(f"{Color.RED}Failed: {summary['failed']}{Color.RESET}")
    click.echo(f"Pass Rate: {summary['pass_rate']}")
    click.echo("=" * 60)
    return report


def _print_record(index: int, total: int, record: ValidationRecord) -> None:
    click.echo(f"[{index}/{total}] {record.input_query}")
    if record.error:
        click.echo(f"  {Color.RED}error: {record.error}{Color.RESET}")
        return
    mark = f"{Color.GREEN}PASS" if record.passed else f"{Color.RED}FAIL"
    click.echo(
        f"  {mark}{Color.RESET} match={record.match_percentage}% "
        f"matched=[{', '.join(record.matched_tokens)}] latency={record.latency_ms}ms"
    )


def _run_cases(
    cases: Sequence[TestCase],
    *,
    max_tests: Optional[int] = None,
    policy: Optional[PassPolicy] = None,
    delay: Optional[float] = None,
) -> list[ValidationRecord]:
    provider = provider_or_error()
    if isinstance(provider, ProviderError):
        _fail(f"Provider unavailable: {provider.message}")

    click.echo(
        f"{Color.CYAN}Provider: {provider.provider_name} ({provider.provider_id}){Color.RESET}"
    )
    records = asyncio.run(
        VerificationService().run(
            provider, cases, max_tests=max_tests, policy=policy, delay_seconds=delay
        )
    )
    for i, record in enumerate(records, start=1):
        _print_record(i, len(records), record)
    return records


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run")
def main(log_level: Optional[str]) -> None:
    """Konkani dictionary: test-case generation and LLM answer verification."""
    init_logger(log_level)


@main.command("generate-test-cases")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=lambda: settings.VERIFY_TEST_CASES_FILE,
    help="Test-case file to write",
)
def generate_test_cases(limit: int, output: str) -> None:
    """Build a test-case file from published dictionary rows."""
    try:
        data = TestCaseService(DictionaryRepository()).generate(limit=limit)
    except SQLAlchemyError as e:
        logger.error("cli.generate.db_error err=%s", e)
        _fail(f"Failed to read dictionary entries: {type(e).__name__}")
    if not data.test_cases:
        _fail("No dictionary entries found. Load some data first.")
    path = save_test_cases(data, output)
    click.echo(f"{Color.GREEN}Wrote {data.total_test_cases} test cases to {path}{Color.RESET}")


@main.command()
@click.option(
    "--cases",
    type=click.Path(dir_okay=False),
    default=lambda: settings.VERIFY_TEST_CASES_FILE,
    help="Test-case file to read",
)
@click.option("--max", "max_tests", type=click.IntRange(min=1), default=None)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=lambda: settings.VERIFY_RESULTS_FILE,
    help="Report file to write",
)
@click.option(
    "--pass-policy",
    type=click.Choice([p.value for p in PassPolicy]),
    default=None,
    help="Override VERIFY_PASS_POLICY",
)
@click.option("--delay", type=click.FloatRange(min=0), default=None)
def validate(
    cases: str,
    max_tests: Optional[int],
    output: str,
    pass_policy: Optional[str],
    delay: Optional[float],
) -> None:
    """Ask the configured LLM about each test case and write a report."""
    _require_llm()
    try:
        loaded = load_test_cases(cases)
    except FileNotFoundError as e:
        _fail(f"{e}. Run generate-test-cases first.")
    except ValidationError as e:
        logger.error("cli.validate.bad_cases path=%s errors=%d", cases, e.error_count())
        _fail(f"Malformed test-case file {cases}: {e.error_count()} validation error(s)")

    policy = PassPolicy(pass_policy) if pass_policy else None
    records = _run_cases(loaded, max_tests=max_tests, policy=policy, delay=delay)
    report = _print_summary(records)
    path = save_report(report, output)
    click.echo(f"Report saved to {path}")


@main.command("verify-db")
@click.option("--count", type=click.IntRange(min=1), default=5, show_default=True)
def verify_db(count: int) -> None:
    """Verify LLM answers against entries fetched straight from the database."""
    _require_llm()
    try:
        cases = TestCaseService(DictionaryRepository()).from_verifiable_entries(count)
    except SQLAlchemyError as e:
        logger.error("cli.verify_db.db_error err=%s", e)
        _fail(f"Failed to read dictionary entries: {type(e).__name__}")
    if not cases:
        _fail("No entries with a spelling and meaning found.")
    _print_summary(_run_cases(cases))


@main.command()
def demo() -> None:
    """Score canned answers offline to show how verification works."""
    accurate = 0
    for i, (word, meaning, answer) in enumerate(DEMO_CASES, start=1):
        result = verify_response(
            ReferenceEntry(headword=word, canonical_meaning=meaning),
            answer,
            threshold=settings.VERIFY_ACCURACY_THRESHOLD,
        )
        accurate += int(result.is_accurate)
        click.echo(f"[{i}/{len(DEMO_CASES)}] {word}")
        click.echo(f"  meaning:  {meaning}")
        click.echo(f"  answer:   {answer}")
        click.echo(
            f"  match={result.match_percentage}% "
            f"matched=[{', '.join(result.matched_tokens)}] accurate={result.is_accurate}"
        )
    click.echo(f"Accurate: {accurate}/{len(DEMO_CASES)}")


if __name__ == "__main__":
    main()
