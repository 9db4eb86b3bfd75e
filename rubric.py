"""
Weighted scoring rubric the analysis prompt instructs the model to apply.

The model does the evidence gathering. The prompt renders its weights,
thresholds and worked examples from these helpers, and the analysis client
checks returned recommendations against the same thresholds.
"""

from __future__ import annotations

from data_models import RECOMMENDATIONS

REJECT, CONSIDER, STRONG_HIRE = RECOMMENDATIONS

MUST_HAVE_POINTS = 60
EXPERIENCE_POINTS = 25
NICE_TO_HAVE_POINTS = 15

STRONG_HIRE_THRESHOLD = 85
CONSIDER_THRESHOLD = 60

RED_FLAG_HEURISTICS = (
    "Date Inaccuracies: employment or education dates that are in the future (after today's date). "
    "This is a critical error.",
    "Employment Gaps: unexplained gaps between employment periods that are longer than 6 months.",
    "Frequent Job Hopping: 3 or more jobs within a 5-year period where each job lasted for less "
    "than 1.5 years.",
    "Career Regression: clear steps down in title or responsibility without explanation.",
    "Vague Descriptions: job descriptions that are overly generic or lack specific, measurable "
    "achievements.",
)


def _coverage_points(found: int, total: int, weight: int) -> float:
    if total <= 0 or found <= 0:
        return 0.0
    return min(found, total) / total * weight


def must_have_points(found: int, total: int) -> float:
    """Points for must-have skills with explicit evidence: found / total * 60."""
    return _coverage_points(found, total, MUST_HAVE_POINTS)


def nice_to_have_points(found: int, total: int) -> float:
    """Points for nice-to-have skills with explicit evidence: found / total * 15."""
    return _coverage_points(found, total, NICE_TO_HAVE_POINTS)


def experience_points(candidate_years: float, required_years: float) -> float:
    """Points for years of experience, proportional and capped at 25."""
    if candidate_years <= 0:
        return 0.0
    if required_years <= 0:
        return float(EXPERIENCE_POINTS)
    return min(candidate_years / required_years, 1.0) * EXPERIENCE_POINTS


def total_score(
    must_have_found: int,
    must_have_total: int,
    candidate_years: float,
    required_years: float,
    nice_found: int,
    nice_total: int,
) -> float:
    return (
        must_have_points(must_have_found, must_have_total)
        + experience_points(candidate_years, required_years)
        + nice_to_have_points(nice_found, nice_total)
    )


def recommendation_for(score: float) -> str:
    """Map a 0-100 score to its recommendation band."""
    if score >= STRONG_HIRE_THRESHOLD:
        return STRONG_HIRE
    if score >= CONSIDER_THRESHOLD:
        return CONSIDER
    return REJECT
