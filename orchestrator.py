"""
Core pipeline driving resumes from upload to analysis result.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable, List, Optional

from data_models import BatchSummary, CandidateResult, ResumeRecord, ResumeStatus
from errors import DuplicateContentError, ScreenerError
from name_resolver import resolve_names, unique_display_names
from resume_loader import extract_text
from session import ScreeningSession

LOGGER = logging.getLogger(__name__)

BATCH_SIZE = 5
MISSING_INPUT_MESSAGE = "Please provide at least one valid resume and a job description."

BatchCallback = Callable[[int, int, List[CandidateResult]], None]


class BatchOrchestrator:
    """Parses queued resumes and analyzes ready ones in fixed-size batches."""

    def __init__(
        self,
        session: ScreeningSession,
        client,
        batch_size: int = BATCH_SIZE,
        resolve_candidate_names: bool = True,
        on_batch_complete: Optional[BatchCallback] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            session: Session holding records and the job description.
            client: Gemini client (``analyze_resume`` / ``extract_candidate_name``).
            batch_size: Records per parsing scan and per concurrent analysis batch.
            resolve_candidate_names: Ask the model for candidate names before analysis.
            on_batch_complete: Called after each analysis batch with
                (batch number, total batches, results so far).
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        self.session = session
        self.client = client
        self.batch_size = batch_size
        self.resolve_candidate_names = resolve_candidate_names
        self.on_batch_complete = on_batch_complete

    async def run(self) -> BatchSummary:
        await self.parse_queued()
        return await self.analyze()

    async def parse_queued(self) -> int:
        """
        Extract text for every queued record.

        Records are taken ``batch_size`` at a time and parsed one by one, so
        duplicate detection sees every earlier result.

        Returns:
            Number of records that became ready.
        """
        ready = 0
        while True:
            queued = self.session.records_with(ResumeStatus.QUEUED)
            if not queued:
                break
            for record in queued[:self.batch_size]:
                if await self._parse_one(record):
                    ready += 1
        LOGGER.info("Parsing finished: %d resume(s) ready", ready)
        return ready

    def _is_duplicate(self, record: ResumeRecord, text: str) -> bool:
        return any(
            other.id != record.id and other.text and other.text == text
            for other in self.session.records
        )

    async def _parse_one(self, record: ResumeRecord) -> bool:
        record = record.advance(ResumeStatus.PARSING)
        if not self.session.replace(record):
            return False
        try:
            text = await asyncio.to_thread(extract_text, record.upload)
            if self._is_duplicate(record, text):
                raise DuplicateContentError()
        except ScreenerError as exc:
            LOGGER.warning("Failed to parse %s: %s", record.upload.name, exc)
            self.session.replace(record.advance(ResumeStatus.ERROR, error=str(exc)))
            return False
        return self.session.replace(record.advance(ResumeStatus.READY, text=text))

    async def analyze(self) -> BatchSummary:
        """
        Analyze every ready record against the session's job description.

        Each batch of ``batch_size`` requests runs concurrently and is awaited
        until every call settles before the next batch starts. Results are
        appended to ``session.results`` after each batch.

        Returns:
            Attempted/succeeded/failed counts for the run.
        """
        summary = BatchSummary()
        session = self.session
        ready = session.records_with(ResumeStatus.READY)
        if not ready or session.job_description.is_empty:
            session.error = MISSING_INPUT_MESSAGE
            return summary

        session.error = None
        session.results = []
        job_description = session.job_description.text

        if self.resolve_candidate_names:
            ready = await resolve_names(self.client, ready, self.batch_size)
        else:
            ready = unique_display_names(ready)

        records = [record.advance(ResumeStatus.ANALYZING) for record in ready]
        for record in records:
            session.replace(record)

        summary.attempted = len(records)
        total_batches = math.ceil(len(records) / self.batch_size)
        for number, start in enumerate(range(0, len(records), self.batch_size), start=1):
            batch = records[start:start + self.batch_size]
            LOGGER.info("Analyzing batch %d of %d (%d resumes)", number, total_batches, len(batch))

            outcomes = await asyncio.gather(
                *(
                    self.client.analyze_resume(record.text, job_description, record.display_name)
                    for record in batch
                ),
                return_exceptions=True,
            )

            completed: List[CandidateResult] = []
            for record, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    message = str(outcome) or "Analysis failed."
                    session.replace(record.advance(ResumeStatus.ERROR, error=message))
                    summary.failed += 1
                    summary.failures.append((record.display_name, message))
                    continue
                session.replace(record.advance(ResumeStatus.DONE))
                completed.append(CandidateResult(name=record.display_name, result=outcome))
                summary.succeeded += 1

            session.results.extend(completed)
            summary.batches += 1
            if self.on_batch_complete:
                self.on_batch_complete(number, total_batches, list(session.results))

        if summary.failed:
            session.error = f"{summary.failed} of {summary.attempted} resume(s) failed analysis."
        LOGGER.info(
            "Analysis finished: %d attempted, %d succeeded, %d failed",
            summary.attempted,
            summary.succeeded,
            summary.failed,
        )
        return summary
