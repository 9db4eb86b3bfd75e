"""
The screening session: resume records, job description, results and the latest error.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from data_models import CandidateResult, FileUpload, JobDescription, ResumeRecord, ResumeStatus
from errors import ScreenerError
from resume_loader import extract_text, load_uploads
from web_fetcher import DEFAULT_TIMEOUT, fetch_job_description, fetch_resume

LOGGER = logging.getLogger(__name__)


class ScreeningSession:
    """
    Owns all mutable screening state.

    Records are immutable values keyed by identity; every update replaces the
    stored record, so each pipeline stage hands back a new record rather than
    mutating a shared one.
    """

    def __init__(self, fetch_timeout: float = DEFAULT_TIMEOUT, scrape_job_pages: bool = True) -> None:
        self._records: Dict[str, ResumeRecord] = {}
        self.job_description = JobDescription()
        self.results: List[CandidateResult] = []
        self.error: Optional[str] = None
        self._fetch_timeout = fetch_timeout
        self._scrape_job_pages = scrape_job_pages

    @property
    def records(self) -> List[ResumeRecord]:
        return list(self._records.values())

    def get(self, record_id: str) -> Optional[ResumeRecord]:
        return self._records.get(record_id)

    def records_with(self, status: ResumeStatus) -> List[ResumeRecord]:
        return [record for record in self._records.values() if record.status is status]

    @property
    def ready_count(self) -> int:
        return sum(1 for r in self._records.values() if r.status in (ResumeStatus.READY, ResumeStatus.DONE))

    @property
    def is_processing(self) -> bool:
        return any(r.status in (ResumeStatus.QUEUED, ResumeStatus.PARSING) for r in self._records.values())

    @property
    def can_analyze(self) -> bool:
        return (
            bool(self.records_with(ResumeStatus.READY))
            and not self.job_description.is_empty
            and not self.is_processing
        )

    def add_file(self, upload: FileUpload, display_name: Optional[str] = None) -> Optional[ResumeRecord]:
        """
        Queue an upload for parsing.

        Returns:
            The new record, or None if the same file is already in the session.
        """
        if upload.identity in self._records:
            LOGGER.info("Skipping %s: already added", upload.name)
            return None
        record = ResumeRecord.create(upload, display_name)
        self._records[record.id] = record
        return record

    def add_files(self, uploads: Iterable[FileUpload]) -> List[ResumeRecord]:
        added = [self.add_file(upload) for upload in uploads]
        return [record for record in added if record is not None]

    def add_paths(self, paths: Iterable[Path]) -> List[ResumeRecord]:
        return self.add_files(load_uploads(paths))

    async def add_urls(self, urls: Iterable[str]) -> List[str]:
        """
        Fetch resumes from URLs and queue them.

        URLs are fetched one at a time; a failing URL does not stop the others.

        Returns:
            One error message per failed URL (also joined into ``self.error``).
        """
        self.error = None
        failures: List[str] = []
        for url in urls:
            url = url.strip()
            if not url:
                continue
            try:
                upload, name = await asyncio.to_thread(fetch_resume, url, self._fetch_timeout)
            except ScreenerError as exc:
                message = f"Failed to fetch {url}: {exc}"
                LOGGER.warning("%s", message)
                failures.append(message)
                continue
            self.add_file(upload, display_name=name)

        if failures:
            self.error = "\n".join(failures)
        return failures

    def replace(self, record: ResumeRecord) -> bool:
        """Store ``record`` in place of the one with the same identity, if still present."""
        if record.id not in self._records:
            LOGGER.debug("Record %s was removed; dropping update", record.id)
            return False
        self._records[record.id] = record
        return True

    def remove(self, record_id: str) -> None:
        self._records.pop(record_id, None)

    def clear(self) -> None:
        self._records.clear()

    def retry(self, record_id: str) -> Optional[ResumeRecord]:
        """
        Re-queue a failed record by removing it and adding its file again.

        Raises:
            ValueError: If the record is not in the error state.
        """
        record = self._records.get(record_id)
        if record is None:
            return None
        if record.status is not ResumeStatus.ERROR:
            raise ValueError(f"Only failed records can be retried (status: {record.status.value})")
        self.remove(record_id)
        return self.add_file(record.upload, record.display_name if record.name_locked else None)

    def set_job_description_text(self, text: str) -> None:
        self.job_description = JobDescription(text=text)

    async def set_job_description_file(self, upload: FileUpload) -> bool:
        """Replace the job description with the contents of ``upload``."""
        self.error = None
        try:
            text = await asyncio.to_thread(extract_text, upload)
        except ScreenerError as exc:
            LOGGER.warning("Failed to read job description %s: %s", upload.name, exc)
            self.error = str(exc)
            return False
        self.job_description = JobDescription(text=text, upload=upload)
        return True

    async def set_job_description_url(self, url: str) -> bool:
        """Replace the job description with the document at ``url``."""
        self.error = None
        try:
            text, upload = await asyncio.to_thread(
                fetch_job_description, url, self._fetch_timeout, self._scrape_job_pages
            )
        except ScreenerError as exc:
            LOGGER.warning("Failed to fetch job description %s: %s", url, exc)
            self.error = str(exc)
            return False
        self.job_description = JobDescription(text=text, upload=upload, source_url=url)
        return True

    def dismiss_error(self) -> None:
        self.error = None
