"""
Exception types raised by the screening pipeline.
"""

from __future__ import annotations

from typing import Optional


class ScreenerError(Exception):
    """Base class for all pipeline errors."""


class ExtractionError(ScreenerError):
    """A file could not be turned into text."""


class DuplicateContentError(ExtractionError):
    """Extracted text matches another record already in the session."""

    def __init__(self, message: str = "Duplicate content detected.") -> None:
        super().__init__(message)


class FetchError(ScreenerError):
    """A remote document could not be downloaded."""


class PartnerLookupError(FetchError):
    """The partner profile API did not yield a resume location."""


class AnalysisError(ScreenerError):
    """A Gemini request failed or returned unusable data."""

    def __init__(self, message: str, candidate_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.candidate_name = candidate_name


class MalformedResponseError(AnalysisError):
    """The model reply did not match the expected response schema."""
