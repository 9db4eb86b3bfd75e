"""
Candidate display-name resolution and de-duplication.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Sequence

from data_models import ResumeRecord

LOGGER = logging.getLogger(__name__)


def deduplicate_names(names: Iterable[str]) -> List[str]:
    """
    Make names unique by appending a counter to repeats.

    ``["Ann", "Ann", "Ann"]`` becomes ``["Ann", "Ann (1)", "Ann (2)"]``.
    """
    seen = set()
    unique: List[str] = []
    for name in names:
        candidate = name
        counter = 1
        while candidate in seen:
            candidate = f"{name} ({counter})"
            counter += 1
        seen.add(candidate)
        unique.append(candidate)
    return unique


def unique_display_names(records: Sequence[ResumeRecord]) -> List[ResumeRecord]:
    """Rename records so no two share a display name, keeping their order."""
    unique = deduplicate_names(record.display_name for record in records)
    return [record.renamed(name) for record, name in zip(records, unique)]


async def resolve_name(client, resume_text: str, fallback: str) -> str:
    """
    Ask the model for the candidate name, falling back to ``fallback`` on any failure.

    Args:
        client: Object exposing ``async extract_candidate_name(text)``.
        resume_text: Extracted resume text.
        fallback: Name to use when extraction fails (normally the filename).

    Returns:
        The resolved or fallback name.
    """
    try:
        return await client.extract_candidate_name(resume_text)
    except Exception as exc:
        LOGGER.warning("Name extraction failed for %s, keeping filename: %s", fallback, exc)
        return fallback


async def resolve_names(
    client, records: Sequence[ResumeRecord], batch_size: int
) -> List[ResumeRecord]:
    """
    Resolve display names for records and de-duplicate them in order.

    Records whose name came from the document source keep it. Lookups run
    concurrently, ``batch_size`` at a time.

    Args:
        client: Gemini client.
        records: Records with extracted text.
        batch_size: Maximum concurrent name requests.

    Returns:
        Records with their final display names, in the input order.
    """
    names = [record.display_name for record in records]
    pending = [index for index, record in enumerate(records) if not record.name_locked]

    for start in range(0, len(pending), batch_size):
        chunk = pending[start:start + batch_size]
        resolved = await asyncio.gather(
            *(resolve_name(client, records[i].text, records[i].upload.name) for i in chunk)
        )
        for index, name in zip(chunk, resolved):
            names[index] = name

    unique = deduplicate_names(names)
    return [record.renamed(name) for record, name in zip(records, unique)]
