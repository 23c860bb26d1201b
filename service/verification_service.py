# service/verification_service.py
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence
from config.settings import Settings, settings as app_settings
from core.entities import (
    ChatMessage,
    GenerationOptions,
    ProviderError,
    VerificationResult,
)
from core.llm_provider import LLMProvider
from core.response_verifier import verify_response
from model.report import ValidationRecord
from model.test_case import TestCase
from util.enums import PassPolicy
from util.functions import clip_words, percentage
from util.timing import timed
from util.types import ReportSummary, ValidationReport

logger = logging.getLogger(__name__)


def passes(result: VerificationResult, policy: PassPolicy) -> bool:
    if policy == PassPolicy.WORD_OR_MEANING:
        return bool(result.word_match) or result.is_accurate
    return result.is_accurate


def build_report(records: Sequence[ValidationRecord]) -> ValidationReport:
    total = len(records)
    passed = sum(1 for r in records if r.passed)
    summary: ReportSummary = {
        "total_tests": total,
        "passed": passed,
        "failed": total - passed,
        "pass_rate": f"{percentage(passed, total):.2f}%",
    }
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "summary": summary,
        "results": [r.model_dump() for r in records],
    }


def save_report(report: ValidationReport, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("verify.report.saved path=%s", out)
    return out


class VerificationService:
    """
    Sequential batch runner: ask the provider about each test case, score the
    answer, apply the pass policy. One call at a time with a fixed pause in
    between; failed calls are recorded and the run moves on.
    """

    def __init__(
        self,
        cfg: Settings = app_settings,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._cfg = cfg
        self._sleep = sleep

    def build_messages(self, case: TestCase) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=self._cfg.VERIFY_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=self._cfg.VERIFY_USER_PROMPT.format(word=case.input.search_query),
            ),
        ]

    async def run_case(
        self, provider: LLMProvider, case: TestCase, policy: PassPolicy
    ) -> ValidationRecord:
        record = ValidationRecord(
            test_id=case.id,
            entry_number=case.entry_number,
            input_query=case.input.search_query,
            provider=provider.provider_id,
        )
        options = GenerationOptions(
            temperature=self._cfg.VERIFY_TEMPERATURE,
            max_output_tokens=self._cfg.VERIFY_MAX_TOKENS,
        )
        with timed(logger, "verify.case", test=case.id) as t:
            answer = await provider.generate_response(self.build_messages(case), options)
        record.latency_ms = t.ms

        if isinstance(answer, ProviderError):
            logger.warning("verify.case.llm_error test=%s err=%s", case.id, answer.message)
            record.error = answer.message
            return record

        result = verify_response(
            case.to_reference(),
            answer.text,
            threshold=self._cfg.VERIFY_ACCURACY_THRESHOLD,
        )
        record = record.model_copy(update=result.to_dict())
        record.model = answer.model_id
        record.passed = passes(result, policy)
        logger.info(
            "verify.case.result test=%s match=%d%% passed=%s response=%r",
            case.id,
            result.match_percentage,
            record.passed,
            clip_words(answer.text, 30),
        )
        return record

    async def run(
        self,
        provider: LLMProvider,
        cases: Sequence[TestCase],
        *,
        max_tests: Optional[int] = None,
        policy: Optional[PassPolicy] = None,
        delay_seconds: Optional[float] = None,
    ) -> list[ValidationRecord]:
        policy = policy or self._cfg.VERIFY_PASS_POLICY
        delay = self._cfg.VERIFY_REQUEST_DELAY_SECONDS if delay_seconds is None else delay_seconds

        runnable = [c for c in cases if c.to_reference().canonical_meaning.strip()]
        if len(runnable) != len(cases):
            logger.warning("verify.skip.no_meaning count=%d", len(cases) - len(runnable))
        if max_tests is not None:
            runnable = runnable[:max_tests]

        logger.info(
            "verify.start provider=%s cases=%d policy=%s",
            provider.provider_id,
            len(runnable),
            policy.value,
        )
        records: list[ValidationRecord] = []
        for i, case in enumerate(runnable):
            if i and delay > 0:
                await self._sleep(delay)
            records.append(await self.run_case(provider, case, policy))
        return records
