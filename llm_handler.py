"""
LLM client wrapper for resume analysis and candidate-name extraction.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional

import google.generativeai as genai

import rubric
from data_models import RECOMMENDATIONS, AnalysisResult
from errors import AnalysisError, MalformedResponseError
from prompts import build_analysis_prompt, build_name_prompt

LOGGER = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.2
NAME_TEMPERATURE = 0.0

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "relevancyScore": {
            "type": "INTEGER",
            "description": "A relevancy score from 0 to 100 representing how well the resume matches the job description.",
        },
        "recommendation": {
            "type": "STRING",
            "enum": list(RECOMMENDATIONS),
            "description": "A clear hiring recommendation. Must be one of: 'Strong Hire', 'Consider', or 'Reject'.",
        },
        "summary": {
            "type": "STRING",
            "description": "A brief one-paragraph summary of the candidate's fit for the role.",
        },
        "pros": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Key strengths and qualifications of the candidate that align with the job description.",
        },
        "cons": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Potential weaknesses or areas where the resume is lacking.",
        },
        "redFlags": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Recruitment red flags such as employment gaps over 6 months or frequent job hopping. Empty if none are found.",
        },
        "finalVerdict": {
            "type": "STRING",
            "description": "A concluding statement on the candidate's suitability explaining the recommendation.",
        },
        "interviewQuestions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "3-5 tailored interview questions targeting the candidate's weaknesses or unclear areas.",
        },
    },
    "required": [
        "relevancyScore",
        "recommendation",
        "summary",
        "pros",
        "cons",
        "redFlags",
        "finalVerdict",
        "interviewQuestions",
    ],
}

NAME_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "fullName": {
            "type": "STRING",
            "description": "The full name of the candidate as found in the resume.",
        },
    },
    "required": ["fullName"],
}


def _response_text(response: Any) -> str:
    """Pull the text body out of a Gemini response object."""
    try:
        text = response.text
    except (AttributeError, ValueError):
        # .text raises ValueError when the candidate was blocked or empty
        candidates = getattr(response, "candidates", None)
        if not candidates:
            LOGGER.error("Unexpected response format from Gemini: %s", type(response))
            return ""
        text = candidates[0].content.parts[0].text
    return (text or "").strip()


def _decode_json(text: str) -> Any:
    """Decode a JSON object from model output, tolerating surrounding prose."""
    if not text:
        raise MalformedResponseError("Empty response from Gemini")
    if not text.startswith("{"):
        match = re.search(r"\{.*\}", text, re.S)
        if not match:
            raise MalformedResponseError("No JSON object found in response")
        text = match.group(0)
        LOGGER.debug("Extracted JSON from response (first 200 chars): %s", text[:200])
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Invalid JSON in response: {exc}") from exc


class GeminiClient:
    """Wrapper around the Google Gemini API for analyzing resumes."""

    def __init__(self, api_key: str, model_name: str, name_model_name: Optional[str] = None) -> None:
        """
        Initialize the Gemini client.

        Args:
            api_key: Google Gemini API key.
            model_name: Model used for full resume analysis.
            name_model_name: Model used for name extraction (defaults to ``model_name``).
        """
        genai.configure(api_key=api_key)
        self._model_name = model_name
        self._name_model_name = name_model_name or model_name
        self._model = genai.GenerativeModel(self._model_name)
        self._name_model = genai.GenerativeModel(self._name_model_name)
        self._analysis_config = {
            "temperature": ANALYSIS_TEMPERATURE,
            "candidate_count": 1,
            "response_mime_type": "application/json",
            "response_schema": ANALYSIS_SCHEMA,
        }
        self._name_config = {
            "temperature": NAME_TEMPERATURE,
            "candidate_count": 1,
            "response_mime_type": "application/json",
            "response_schema": NAME_SCHEMA,
        }
        LOGGER.info(
            "Gemini client initialized (analysis: %s, names: %s)",
            self._model_name,
            self._name_model_name,
        )

    async def _generate(self, model: Any, prompt: str, generation_config: dict) -> str:
        response = await asyncio.to_thread(
            model.generate_content, prompt, generation_config=generation_config
        )
        text = _response_text(response)
        LOGGER.debug("Raw LLM response (first 200 chars): %s", text[:200])
        return text

    async def extract_candidate_name(self, resume_text: str) -> str:
        """
        Ask the model for the candidate's full name.

        Args:
            resume_text: Extracted resume text (only the first 2000 chars are sent).

        Returns:
            The non-empty full name.

        Raises:
            AnalysisError: On request failure or an unusable reply.
        """
        try:
            text = await self._generate(
                self._name_model, build_name_prompt(resume_text), self._name_config
            )
            payload = _decode_json(text)
        except AnalysisError:
            raise
        except Exception as exc:
            LOGGER.error("Gemini name extraction failed: %s", exc)
            raise AnalysisError("Failed to extract candidate name from resume.") from exc

        full_name = payload.get("fullName") if isinstance(payload, dict) else None
        if not isinstance(full_name, str) or not full_name.strip():
            raise MalformedResponseError("Full name not found or is invalid.")
        return full_name.strip()

    async def analyze_resume(
        self, resume_text: str, job_description: str, candidate_name: Optional[str] = None
    ) -> AnalysisResult:
        """
        Analyze one resume against the job description.

        Args:
            resume_text: Extracted resume text.
            job_description: Job description text.
            candidate_name: Name used to tag errors and log lines.

        Returns:
            Validated AnalysisResult.

        Raises:
            MalformedResponseError: If the reply does not match ANALYSIS_SCHEMA.
            AnalysisError: If the request itself fails.
        """
        prompt = build_analysis_prompt(resume_text, job_description)
        try:
            text = await self._generate(self._model, prompt, self._analysis_config)
            result = AnalysisResult.from_payload(_decode_json(text))
        except MalformedResponseError as exc:
            LOGGER.error("Malformed analysis for %s: %s", candidate_name, exc)
            raise MalformedResponseError(
                f"Received malformed data from API: {exc}", candidate_name
            ) from exc
        except Exception as exc:
            LOGGER.error("Gemini analysis failed for %s: %s", candidate_name, exc)
            raise AnalysisError(f"Failed to get analysis from AI: {exc}", candidate_name) from exc

        expected = rubric.recommendation_for(result.relevancy_score)
        if expected != result.recommendation:
            LOGGER.warning(
                "Recommendation '%s' for %s does not match score %.0f (expected '%s')",
                result.recommendation,
                candidate_name,
                result.relevancy_score,
                expected,
            )
        LOGGER.info(
            "Analysis for %s: score %.0f, %s",
            candidate_name,
            result.relevancy_score,
            result.recommendation,
        )
        return result
