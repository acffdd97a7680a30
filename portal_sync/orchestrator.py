"""
Single-pass run: ledger -> prompt -> dedup -> extract -> submit -> record.

    INIT -> LOAD_LEDGER -> PROMPT -> DONE (empty input)
                                  -> DEDUP_CHECK -> DONE (already uploaded)
                                                 -> EXTRACT -> DONE (extraction failed)
                                                            -> SUBMIT -> DONE (submission failed, ledger unchanged)
                                                                      -> RECORD -> DONE (success)

Exactly one URL is processed per run. The ledger only changes in RECORD.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from .errors import SubmissionError
from .ledger import Ledger, key_for_url
from .models import ExtractionResult, FailureKind
from .scraper import Extractor
from .submitter import Submitter

logger = logging.getLogger(__name__)

PROMPT_TEXT = "Paste the company URL here: "


class RunState(str, Enum):
    INIT = "init"
    LOAD_LEDGER = "load_ledger"
    PROMPT = "prompt"
    DEDUP_CHECK = "dedup_check"
    EXTRACT = "extract"
    SUBMIT = "submit"
    RECORD = "record"
    DONE = "done"


class RunOutcome(str, Enum):
    NO_INPUT = "no_input"
    SKIPPED = "skipped"
    EXTRACT_FAILED = "extract_failed"
    SUBMIT_FAILED = "submit_failed"
    SUCCESS = "success"

    @property
    def aborted(self) -> bool:
        return self in (RunOutcome.EXTRACT_FAILED, RunOutcome.SUBMIT_FAILED)


class RunReport(BaseModel):
    """What one run did."""
    outcome: Optional[RunOutcome] = None
    path: List[RunState] = Field(default_factory=list)
    url: str = ""
    key: str = ""
    failure_kind: Optional[FailureKind] = None
    error: str = ""


class Orchestrator:
    """Runs the pipeline for one user-supplied URL."""

    def __init__(self, ledger: Ledger, extractor: Extractor, submitter: Submitter,
                 prompt: Callable[[str], str] = input):
        self.ledger = ledger
        self.extractor = extractor
        self.submitter = submitter
        self.prompt = prompt

    def _enter(self, report: RunReport, state: RunState) -> None:
        report.path.append(state)
        logger.debug(f"→ {state.value}")

    def _finish(self, report: RunReport, outcome: RunOutcome) -> RunReport:
        self._enter(report, RunState.DONE)
        report.outcome = outcome
        return report

    async def run(self) -> RunReport:
        report = RunReport()
        self._enter(report, RunState.INIT)

        self._enter(report, RunState.LOAD_LEDGER)
        self.ledger.load()

        self._enter(report, RunState.PROMPT)
        report.url = (await asyncio.to_thread(self.prompt, PROMPT_TEXT) or "").strip()
        if not report.url:
            logger.info("⚠️  No URL provided, exiting...")
            return self._finish(report, RunOutcome.NO_INPUT)

        self._enter(report, RunState.DEDUP_CHECK)
        report.key = key_for_url(report.url)
        if self.ledger.contains(report.key):
            logger.info(f"⚡ Already uploaded: {report.key}")
            return self._finish(report, RunOutcome.SKIPPED)

        self._enter(report, RunState.EXTRACT)
        result: ExtractionResult = await asyncio.to_thread(self.extractor.scrape, report.url)
        if not result.ok:
            report.failure_kind = result.kind
            report.error = result.detail
            retry_hint = "retryable" if result.kind and result.kind.retryable else "not retryable"
            logger.error(f"❌ Extraction failed ({result.kind.value if result.kind else 'unknown'}, {retry_hint})")
            return self._finish(report, RunOutcome.EXTRACT_FAILED)

        self._enter(report, RunState.SUBMIT)
        try:
            await self.submitter.submit_profile(result.profile)
        except SubmissionError as e:
            report.error = str(e)
            logger.error(f"❌ Upload failed: {e}")
            return self._finish(report, RunOutcome.SUBMIT_FAILED)

        self._enter(report, RunState.RECORD)
        self.ledger.record(report.key)
        logger.info(f"✅ {report.key} migrated")
        return self._finish(report, RunOutcome.SUCCESS)
