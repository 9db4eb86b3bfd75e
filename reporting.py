"""
Summary reporting utilities (HTML dashboard and JSON export).
"""

from __future__ import annotations

import json
import logging
from html import escape
from pathlib import Path
from typing import Iterable, List, Optional

import rubric
from data_models import BatchSummary, CandidateResult

LOGGER = logging.getLogger(__name__)

RECOMMENDATION_CLASSES = {
    "Strong Hire": "badge-strong",
    "Consider": "badge-consider",
    "Reject": "badge-reject",
}


def score_band(score: float) -> str:
    """CSS class for a score, using the rubric's recommendation thresholds."""
    if score >= rubric.STRONG_HIRE_THRESHOLD:
        return "score-high"
    if score >= rubric.CONSIDER_THRESHOLD:
        return "score-mid"
    return "score-low"


def rank_results(results: Iterable[CandidateResult]) -> List[CandidateResult]:
    """Order results by score (highest first), then by name."""
    return sorted(results, key=lambda c: (-c.result.relevancy_score, c.name))


def write_results_json(
    results: Iterable[CandidateResult], output_path: Path, summary: Optional[BatchSummary] = None
) -> None:
    """
    Persist analysis results to JSON.

    Args:
        results: Candidate results.
        output_path: Destination file path.
        summary: Optional batch counts to include.
    """
    payload = {
        "candidates": [
            {"name": candidate.name, **candidate.result.to_payload()}
            for candidate in rank_results(results)
        ],
    }
    if summary is not None:
        payload["batch"] = {
            "attempted": summary.attempted,
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "failures": [{"name": name, "error": error} for name, error in summary.failures],
        }

    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    LOGGER.info("Wrote results JSON to %s", output_path)


def _list_section(title: str, items: Iterable[str], css_class: str) -> str:
    items = list(items)
    if not items:
        return ""
    rendered = "".join(f"<li>{escape(item)}</li>" for item in items)
    return f'<div class="{css_class}"><h3>{escape(title)}</h3><ul>{rendered}</ul></div>'


def _badge(recommendation: str) -> str:
    css_class = RECOMMENDATION_CLASSES.get(recommendation, "")
    return f'<span class="badge {css_class}">{escape(recommendation)}</span>'


def _candidate_card(index: int, candidate: CandidateResult) -> str:
    result = candidate.result
    return (
        f'<section class="card" id="candidate-{index}">'
        f'<div class="card-header"><h2>{escape(candidate.name)}</h2>'
        f'{_badge(result.recommendation)}'
        f'<span class="score {score_band(result.relevancy_score)}">{result.relevancy_score:.0f}</span></div>'
        f'<p class="summary">{escape(result.summary)}</p>'
        '<div class="columns">'
        f'{_list_section("Pros", result.pros, "pros")}'
        f'{_list_section("Cons", result.cons, "cons")}'
        "</div>"
        f'{_list_section("Red Flags", result.red_flags, "red-flags")}'
        f'<div class="verdict"><h3>Final Verdict</h3><p>{escape(result.final_verdict)}</p></div>'
        f'{_list_section("Suggested Interview Questions", result.interview_questions, "questions")}'
        "</section>"
    )


def write_html_summary(results: Iterable[CandidateResult], output_path: Path) -> None:
    """
    Generate an HTML dashboard with a comparison table and one card per candidate.

    Args:
        results: Candidate results.
        output_path: Destination HTML file path.
    """
    ranked = rank_results(results)

    rows = []
    for index, candidate in enumerate(ranked):
        result = candidate.result
        rows.append(
            "<tr>"
            f'<td><a href="#candidate-{index}">{escape(candidate.name)}</a></td>'
            f'<td class="{score_band(result.relevancy_score)}">{result.relevancy_score:.0f}</td>'
            f"<td>{_badge(result.recommendation)}</td>"
            f"<td>{len(result.pros)}</td>"
            f"<td>{len(result.cons)}</td>"
            f"<td>{len(result.red_flags)}</td>"
            f"<td>{escape(result.summary)}</td>"
            "</tr>"
        )
    cards = [_candidate_card(index, candidate) for index, candidate in enumerate(ranked)]

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Candidate Comparison</title>

    <!-- jQuery -->
    <script src="https://code.jquery.com/jquery-3.7.1.min.js" integrity="sha256-/JqT3SQfawRcv/BIHPThkBvs0OEvtFFmqPF/lYI/Cxo=" crossorigin="anonymous"></script>

    <!-- DataTables CSS -->
    <link rel="stylesheet" href="https://cdn.datatables.net/1.13.7/css/jquery.dataTables.min.css">

    <!-- DataTables JS -->
    <script src="https://cdn.datatables.net/1.13.7/js/jquery.dataTables.min.js"></script>

    <style>
        body {{
            font-family: Arial, sans-serif;
            margin: 2rem;
            background-color: #f7f1ec;
            color: #333;
        }}
        h1, h2 {{
            color: #677472;
        }}
        .info {{
            color: #677472;
            margin-bottom: 1.5rem;
        }}
        table {{
            border-collapse: collapse;
            width: 100%;
            background-color: white;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
        }}
        th, td {{
            border: 1px solid #e0e0e0;
            padding: 12px;
            text-align: left;
        }}
        th {{
            background-color: #677472;
            color: white;
        }}
        a {{
            color: #677472;
            text-decoration: none;
            font-weight: 500;
        }}
        .badge {{
            display: inline-block;
            padding: 4px 12px;
            border-radius: 999px;
            font-weight: bold;
            font-size: 0.85rem;
        }}
        .badge-strong {{ background-color: #d1fae5; color: #065f46; }}
        .badge-consider {{ background-color: #fef3c7; color: #92400e; }}
        .badge-reject {{ background-color: #fee2e2; color: #991b1b; }}
        .score-high {{ color: #059669; font-weight: bold; }}
        .score-mid {{ color: #d97706; font-weight: bold; }}
        .score-low {{ color: #dc2626; font-weight: bold; }}
        .card {{
            background-color: white;
            margin-top: 2rem;
            padding: 1.5rem;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            border-left: 3px solid #677472;
        }}
        .card-header {{
            display: flex;
            align-items: center;
            gap: 1rem;
        }}
        .card-header .score {{
            margin-left: auto;
            font-size: 2rem;
        }}
        .columns {{
            display: flex;
            gap: 2rem;
        }}
        .columns > div {{
            flex: 1;
        }}
        .red-flags h3 {{ color: #b45309; }}
    </style>
</head>
<body>
    <h1>Candidate Comparison</h1>
    <p class="info">Candidates analyzed: {len(ranked)}</p>
    <table id="comparisonTable">
        <thead>
            <tr>
                <th>Candidate</th>
                <th>Score</th>
                <th>Recommendation</th>
                <th>Pros</th>
                <th>Cons</th>
                <th>Red Flags</th>
                <th>Summary</th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows)}
        </tbody>
    </table>

    {''.join(cards)}

    <script>
        $(document).ready(function() {{
            $('#comparisonTable').DataTable({{
                order: [[1, 'desc']],  // Sort by score descending by default
                paging: false,
                columnDefs: [
                    {{ targets: [1, 3, 4, 5], type: 'num' }}
                ]
            }});
        }});
    </script>
</body>
</html>"""

    output_path.write_text(html, encoding="utf-8")
    LOGGER.info("Wrote HTML summary to %s", output_path)
