"""
Config-driven entry point for the AI Resume Screener.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from config import DEFAULT_CONFIG_PATH, Settings, load_settings
from data_models import BatchSummary, FileUpload, ResumeStatus
from llm_handler import GeminiClient
from orchestrator import BatchOrchestrator
from reporting import write_html_summary, write_results_json
from session import ScreeningSession


class TruncatingFormatter(logging.Formatter):
    """Formatter that truncates log messages to a maximum length."""

    def __init__(self, max_length: int = 200, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_length = max_length

    def format(self, record):
        formatted = super().format(record)
        if len(formatted) > self.max_length:
            formatted = formatted[:self.max_length] + "... (truncated)"
        return formatted


def configure_logging(settings: Settings) -> None:
    """
    Configure logging according to settings.

    Args:
        settings: Application settings dataclass.
    """
    log_format = settings.log_format or "%(asctime)s [%(levelname)s] %(message)s"
    datefmt = settings.log_date_format or "%Y-%m-%d %H:%M:%S"

    console_formatter = TruncatingFormatter(max_length=200, fmt=log_format, datefmt=datefmt)
    file_formatter = logging.Formatter(fmt=log_format, datefmt=datefmt)

    handlers = []
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    handlers.append(console_handler)

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(level=log_level, handlers=handlers)

    # Suppress verbose HTTP logging from various libraries
    for name in ("urllib3", "urllib3.connectionpool", "selenium", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


async def load_job_description(session: ScreeningSession, settings: Settings) -> bool:
    if settings.job_description_text:
        session.set_job_description_text(settings.job_description_text)
        return True
    if settings.job_description_url:
        return await session.set_job_description_url(settings.job_description_url)
    return await session.set_job_description_file(FileUpload.from_path(settings.job_description_file))


def _log_progress(batch_number: int, total_batches: int, results) -> None:
    logging.info("Batch %d of %d done, %d candidate(s) analyzed so far", batch_number, total_batches, len(results))


async def screen(settings: Settings) -> BatchSummary:
    """
    Run one screening pass: ingest inputs, parse, analyze and write reports.

    Args:
        settings: Application settings.

    Returns:
        Counts for the analysis run.
    """
    session = ScreeningSession(
        fetch_timeout=settings.request_timeout,
        scrape_job_pages=settings.scrape_job_pages,
    )
    if not await load_job_description(session, settings):
        raise ValueError(f"Could not load job description: {session.error}")

    session.add_paths(settings.resume_paths)
    if settings.resume_urls:
        await session.add_urls(settings.resume_urls)

    client = GeminiClient(settings.gemini_api_key, settings.gemini_model, settings.name_model)
    orchestrator = BatchOrchestrator(
        session,
        client,
        batch_size=settings.batch_size,
        resolve_candidate_names=settings.resolve_names,
        on_batch_complete=_log_progress,
    )
    await orchestrator.parse_queued()
    for record in session.records_with(ResumeStatus.ERROR):
        logging.warning("Skipped %s: %s", record.display_name, record.error)

    summary = await orchestrator.analyze()
    if session.error:
        logging.warning("%s", session.error)

    write_results_json(session.results, settings.results_file, summary)
    write_html_summary(session.results, settings.summary_file)
    return summary


def main() -> None:
    """Execute the resume screening workflow."""
    try:
        settings = load_settings(DEFAULT_CONFIG_PATH)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Configuration error: %s", exc)
        sys.exit(1)

    configure_logging(settings)

    logging.info("Starting AI resume screener")
    logging.info(
        "Configuration: %d resume file(s), %d resume URL(s), batch_size=%d, model=%s",
        len(settings.resume_paths),
        len(settings.resume_urls),
        settings.batch_size,
        settings.gemini_model,
    )

    try:
        summary = asyncio.run(screen(settings))
        logging.info(
            "Analyzed %d resume(s): %d succeeded, %d failed. Summary: %s",
            summary.attempted,
            summary.succeeded,
            summary.failed,
            settings.summary_file,
        )
        logging.info("Finished run successfully.")
    except Exception as exc:
        logging.exception("Fatal error occurred: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
