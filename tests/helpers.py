"""
Test helpers: payload builders, in-memory documents and a fake Gemini client.
"""

import asyncio
from typing import Callable, Dict, List, Optional

import fitz

from data_models import AnalysisResult, FileUpload
from errors import AnalysisError


def valid_payload(**overrides) -> dict:
    payload = {
        "relevancyScore": 72,
        "recommendation": "Consider",
        "summary": "Solid backend engineer with partial cloud exposure.",
        "pros": ["6 years of Python", "Led a payments migration"],
        "cons": ["No Kubernetes experience"],
        "redFlags": [],
        "finalVerdict": "Worth a technical screen.",
        "interviewQuestions": ["Describe your experience operating services in production."],
    }
    payload.update(overrides)
    return payload


def make_result(score: int = 72, recommendation: str = "Consider") -> AnalysisResult:
    return AnalysisResult.from_payload(valid_payload(relevancyScore=score, recommendation=recommendation))


def text_upload(name: str, text: str, last_modified: int = 1) -> FileUpload:
    return FileUpload(
        name=name,
        data=text.encode("utf-8"),
        content_type="text/plain",
        last_modified=last_modified,
    )


def make_pdf(pages: List[str]) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class FakeGeminiClient:
    """Stands in for GeminiClient without touching the network."""

    def __init__(
        self,
        failures: Optional[Dict[str, Exception]] = None,
        names: Optional[Dict[str, str]] = None,
        on_analyze: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.failures = failures or {}
        self.names = names or {}
        self.on_analyze = on_analyze
        self.analyze_calls: List[str] = []
        self.name_calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def analyze_resume(self, resume_text, job_description, candidate_name=None):
        self.analyze_calls.append(candidate_name)
        if self.on_analyze:
            self.on_analyze(candidate_name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if candidate_name in self.failures:
                raise self.failures[candidate_name]
            return make_result()
        finally:
            self.in_flight -= 1

    async def extract_candidate_name(self, resume_text):
        self.name_calls.append(resume_text)
        await asyncio.sleep(0)
        if resume_text in self.names:
            return self.names[resume_text]
        raise AnalysisError("Failed to extract candidate name from resume.")


