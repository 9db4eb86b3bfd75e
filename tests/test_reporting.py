import json

from data_models import AnalysisResult, BatchSummary, CandidateResult
from reporting import rank_results, score_band, write_html_summary, write_results_json
from tests.helpers import make_result, valid_payload


def _candidates():
    return [
        CandidateResult("Bob", make_result(score=55, recommendation="Reject")),
        CandidateResult("Ann", make_result(score=91, recommendation="Strong Hire")),
        CandidateResult("Cid", make_result(score=55, recommendation="Reject")),
    ]


def test_rank_by_score_then_name():
    assert [c.name for c in rank_results(_candidates())] == ["Ann", "Bob", "Cid"]


def test_score_bands():
    assert score_band(85) == "score-high"
    assert score_band(60) == "score-mid"
    assert score_band(59) == "score-low"


def test_results_json(tmp_path):
    summary = BatchSummary(attempted=4, succeeded=3, failed=1, failures=[("Dee", "timeout")])
    path = tmp_path / "results.json"

    write_results_json(_candidates(), path, summary)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [c["name"] for c in data["candidates"]] == ["Ann", "Bob", "Cid"]
    assert data["candidates"][0]["relevancyScore"] == 91
    assert data["candidates"][0]["redFlags"] == []
    assert data["batch"] == {
        "attempted": 4,
        "succeeded": 3,
        "failed": 1,
        "failures": [{"name": "Dee", "error": "timeout"}],
    }


def test_html_summary_escapes_model_text(tmp_path):
    result = AnalysisResult.from_payload(valid_payload(
        summary="Knows <script>alert(1)</script>",
        redFlags=["Gap of 8 months & counting"],
    ))
    path = tmp_path / "summary.html"

    write_html_summary([CandidateResult("Jane <Doe>", result)], path)

    html = path.read_text(encoding="utf-8")
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "Jane &lt;Doe&gt;" in html
    assert "Gap of 8 months &amp; counting" in html
    assert 'id="comparisonTable"' in html
    assert "Candidates analyzed: 1" in html


def test_html_summary_omits_empty_red_flags(tmp_path):
    path = tmp_path / "summary.html"
    write_html_summary([CandidateResult("Ann", make_result())], path)
    assert "<h3>Red Flags</h3>" not in path.read_text(encoding="utf-8")
