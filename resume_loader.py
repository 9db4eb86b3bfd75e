"""
Utilities for turning uploaded documents into plain text.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

import fitz  # PyMuPDF

from data_models import FileUpload
from errors import ExtractionError

LOGGER = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = {".pdf", ".txt", ".md"}


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in ACCEPTED_EXTENSIONS


def pdf_to_text(upload: FileUpload) -> str:
    """
    Extract text from a PDF held in memory.

    Words on a page are joined with single spaces; every page ends with a newline.

    Args:
        upload: PDF document.

    Returns:
        Concatenated page text.
    """
    try:
        with fitz.open(stream=upload.data, filetype="pdf") as doc:
            pages: List[str] = []
            for page in doc:
                words = page.get_text("words")
                pages.append(" ".join(word[4] for word in words) + "\n")
    except Exception as exc:
        LOGGER.error("PDF parsing error for %s: %s", upload.name, exc)
        raise ExtractionError(f"Failed to parse PDF: {upload.name}. It might be corrupted.") from exc
    return "".join(pages)


def plain_to_text(upload: FileUpload) -> str:
    try:
        return upload.data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"Error reading file: {upload.name}") from exc


def extract_text(upload: FileUpload) -> str:
    """
    Convert an upload into raw text.

    Args:
        upload: Document to read. PDFs are detected by MIME type or extension;
            anything else is decoded as UTF-8 text.

    Returns:
        The document text.

    Raises:
        ExtractionError: If the document cannot be decoded or parsed.
    """
    text = pdf_to_text(upload) if upload.is_pdf else plain_to_text(upload)
    LOGGER.debug("Extracted %d chars from %s", len(text), upload.name)
    return text


def load_uploads(paths: Iterable[Path]) -> List[FileUpload]:
    """
    Read local files with an accepted extension, skipping the rest.

    Args:
        paths: Candidate file paths.

    Returns:
        Uploads for every readable, supported file.
    """
    uploads: List[FileUpload] = []
    for path in paths:
        if not is_supported(path):
            LOGGER.warning("Skipping %s: unsupported file type (accepted: %s)",
                           path, ", ".join(sorted(ACCEPTED_EXTENSIONS)))
            continue
        try:
            uploads.append(FileUpload.from_path(path))
        except OSError as exc:
            LOGGER.warning("Skipping %s: %s", path, exc)
    return uploads
