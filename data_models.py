"""
Shared data models used across the application.
"""

from __future__ import annotations

import mimetypes
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from errors import MalformedResponseError

RECOMMENDATIONS: Tuple[str, ...] = ("Reject", "Consider", "Strong Hire")


class ResumeStatus(str, Enum):
    """Lifecycle states of a resume record."""

    QUEUED = "queued"
    PARSING = "parsing"
    READY = "ready"
    ANALYZING = "analyzing"
    DONE = "done"
    ERROR = "error"


ALLOWED_TRANSITIONS: Dict[ResumeStatus, Tuple[ResumeStatus, ...]] = {
    ResumeStatus.QUEUED: (ResumeStatus.PARSING,),
    ResumeStatus.PARSING: (ResumeStatus.READY, ResumeStatus.ERROR),
    ResumeStatus.READY: (ResumeStatus.ANALYZING,),
    ResumeStatus.ANALYZING: (ResumeStatus.DONE, ResumeStatus.ERROR),
    ResumeStatus.DONE: (),
    ResumeStatus.ERROR: (),
}


@dataclass(frozen=True)
class FileUpload:
    """An uploaded or downloaded document held in memory."""

    name: str
    data: bytes = field(repr=False)
    content_type: str = ""
    last_modified: int = field(default_factory=lambda: int(time.time() * 1000))

    @classmethod
    def from_path(cls, path: Path) -> "FileUpload":
        """
        Read a local file into an upload.

        Args:
            path: File to read.

        Returns:
            FileUpload with the file's bytes, guessed MIME type and mtime in ms.
        """
        content_type, _ = mimetypes.guess_type(path.name)
        stat = path.stat()
        return cls(
            name=path.name,
            data=path.read_bytes(),
            content_type=content_type or "",
            last_modified=int(stat.st_mtime * 1000),
        )

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_pdf(self) -> bool:
        return self.content_type == "application/pdf" or self.name.lower().endswith(".pdf")

    @property
    def identity(self) -> str:
        return f"{self.name}-{self.size}-{self.last_modified}"


@dataclass(frozen=True)
class ResumeRecord:
    """One resume tracked through the screening lifecycle."""

    upload: FileUpload
    status: ResumeStatus = ResumeStatus.QUEUED
    text: str = field(default="", repr=False)
    display_name: str = ""
    error: Optional[str] = None
    # Set when the name came from the document source and must not be re-resolved.
    name_locked: bool = False

    @classmethod
    def create(cls, upload: FileUpload, display_name: Optional[str] = None) -> "ResumeRecord":
        return cls(
            upload=upload,
            display_name=display_name or upload.name,
            name_locked=bool(display_name),
        )

    @property
    def id(self) -> str:
        return self.upload.identity

    def advance(self, status: ResumeStatus, **changes: Any) -> "ResumeRecord":
        """
        Return a copy moved to ``status`` with ``changes`` applied.

        Raises:
            ValueError: If the lifecycle does not allow the transition.
        """
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise ValueError(
                f"Invalid status transition for {self.id}: {self.status.value} -> {status.value}"
            )
        return replace(self, status=status, **changes)

    def renamed(self, display_name: str) -> "ResumeRecord":
        return replace(self, display_name=display_name)


@dataclass(frozen=True)
class JobDescription:
    """The job description every resume is compared against."""

    text: str = ""
    upload: Optional[FileUpload] = None
    source_url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def _require_str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise MalformedResponseError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _require_str_list(payload: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedResponseError(f"Field '{key}' must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class AnalysisResult:
    """Validated hiring recommendation for a single resume."""

    relevancy_score: float
    recommendation: str
    summary: str
    pros: Tuple[str, ...]
    cons: Tuple[str, ...]
    red_flags: Tuple[str, ...]
    final_verdict: str
    interview_questions: Tuple[str, ...]

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisResult":
        """
        Validate a decoded model reply and build a result from it.

        Args:
            payload: JSON-decoded response body.

        Returns:
            AnalysisResult with every field checked.

        Raises:
            MalformedResponseError: If any field is missing or has the wrong shape.
        """
        if not isinstance(payload, dict):
            raise MalformedResponseError("Response is not a JSON object")

        score = payload.get("relevancyScore")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise MalformedResponseError(f"Field 'relevancyScore' must be numeric, got {score!r}")
        if not 0 <= score <= 100:
            raise MalformedResponseError(f"Field 'relevancyScore' out of range: {score}")

        recommendation = payload.get("recommendation")
        if recommendation not in RECOMMENDATIONS:
            raise MalformedResponseError(f"Unknown recommendation: {recommendation!r}")

        return cls(
            relevancy_score=score,
            recommendation=recommendation,
            summary=_require_str(payload, "summary"),
            pros=_require_str_list(payload, "pros"),
            cons=_require_str_list(payload, "cons"),
            red_flags=_require_str_list(payload, "redFlags"),
            final_verdict=_require_str(payload, "finalVerdict"),
            interview_questions=_require_str_list(payload, "interviewQuestions"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "relevancyScore": self.relevancy_score,
            "recommendation": self.recommendation,
            "summary": self.summary,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "redFlags": list(self.red_flags),
            "finalVerdict": self.final_verdict,
            "interviewQuestions": list(self.interview_questions),
        }


@dataclass(frozen=True)
class CandidateResult:
    """Analysis result paired with the candidate's display name."""

    name: str
    result: AnalysisResult


@dataclass
class BatchSummary:
    """Counts for one analysis run."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    batches: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)
