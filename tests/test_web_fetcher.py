import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from selenium.common.exceptions import WebDriverException

import web_fetcher
from errors import FetchError, PartnerLookupError
from web_fetcher import (
    DEFAULT_FILENAME,
    JOB_DESCRIPTION_SELECTORS,
    TIGIHR_LOOKUP_URL,
    fetch_document,
    fetch_job_description,
    fetch_resume,
    filename_from_url,
    html_to_text,
    resolve_partner_url,
    scrape_job_description,
)


def _response(status=200, body=b"", content_type="application/pdf", reason="OK"):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body
    response.headers["Content-Type"] = content_type
    return response


@pytest.fixture
def http(monkeypatch):
    """Route requests.request through a table of canned responses."""
    routes = {}
    calls = []

    def fake_request(method, url, timeout=None, **kwargs):
        calls.append((method, url, kwargs))
        outcome = routes[(method, url)]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(web_fetcher.requests, "request", fake_request)
    return SimpleNamespace(routes=routes, calls=calls)


@pytest.mark.parametrize("url, expected", [
    ("https://example.com/files/resume.pdf", "resume.pdf"),
    ("https://example.com/files/resume.pdf?token=abc", "resume.pdf"),
    ("https://example.com/files/Jane%20Doe.pdf", "Jane Doe.pdf"),
    ("https://example.com/", DEFAULT_FILENAME),
])
def test_filename_from_url(url, expected):
    assert filename_from_url(url) == expected


def test_fetch_document(http):
    url = "https://example.com/cv.pdf"
    http.routes[("GET", url)] = _response(body=b"%PDF", content_type="application/PDF; charset=binary")

    upload = fetch_document(url)

    assert upload.name == "cv.pdf"
    assert upload.data == b"%PDF"
    assert upload.content_type == "application/pdf"
    assert upload.is_pdf


def test_unreachable_host_mentions_cors(http):
    url = "https://blocked.example.com/cv.pdf"
    http.routes[("GET", url)] = requests.ConnectionError("refused")

    with pytest.raises(FetchError, match="CORS"):
        fetch_document(url)


def test_http_error_reports_status(http):
    url = "https://example.com/missing.pdf"
    http.routes[("GET", url)] = _response(status=404, reason="Not Found")

    with pytest.raises(FetchError) as excinfo:
        fetch_document(url)
    assert str(excinfo.value) == "Fetch failed: 404 Not Found"
    assert "CORS" not in str(excinfo.value)


def test_timeout_reported_as_fetch_failure(http):
    url = "https://slow.example.com/cv.pdf"
    http.routes[("GET", url)] = requests.Timeout("read timed out")

    with pytest.raises(FetchError, match="Fetch failed: read timed out"):
        fetch_document(url)


def test_partner_profile_resolved(http):
    body = json.dumps({"data": {"resume_path": "https://cdn.example.com/r/jane.pdf", "full_name": "Jane Doe"}})
    http.routes[("POST", TIGIHR_LOOKUP_URL)] = _response(body=body.encode(), content_type="application/json")
    http.routes[("GET", "https://cdn.example.com/r/jane.pdf")] = _response(body=b"%PDF")

    upload, name = fetch_resume("https://tigihr.com/talent/abc123")

    assert name == "Jane Doe"
    assert upload.name == "jane.pdf"
    assert http.calls[0] == ("POST", TIGIHR_LOOKUP_URL, {"json": {"profile_id": "abc123"}})


def test_partner_error_flag(http):
    body = json.dumps({"isError": True, "data": {"resume_path": "https://cdn.example.com/x.pdf"}})
    http.routes[("POST", TIGIHR_LOOKUP_URL)] = _response(body=body.encode(), content_type="application/json")

    with pytest.raises(PartnerLookupError, match="Could not find resume in TigiHR profile."):
        resolve_partner_url("https://tigihr.com/talent/abc123")


def test_partner_api_failure(http):
    http.routes[("POST", TIGIHR_LOOKUP_URL)] = _response(status=500, reason="Internal Server Error")

    with pytest.raises(PartnerLookupError, match="TigiHR API failed: Internal Server Error"):
        resolve_partner_url("https://tigihr.com/talent/abc123")


def test_partner_url_without_profile_id(http):
    with pytest.raises(PartnerLookupError, match="Invalid TigiHR URL."):
        resolve_partner_url("https://tigihr.com/talent/")
    assert http.calls == []


def test_plain_resume_url_has_no_name(http):
    url = "https://example.com/cv.txt"
    http.routes[("GET", url)] = _response(body=b"Jane", content_type="text/plain")

    upload, name = fetch_resume(url)
    assert name is None
    assert upload.data == b"Jane"


def test_job_description_html_is_scraped(http, monkeypatch):
    url = "https://jobs.example.com/view/42"
    http.routes[("GET", url)] = _response(body=b"<html></html>", content_type="text/html; charset=utf-8")
    monkeypatch.setattr(web_fetcher, "scrape_job_description", lambda target: f"rendered {target}")

    text, upload = fetch_job_description(url)
    assert text == f"rendered {url}"
    assert upload.content_type == "text/html"


def test_job_description_document_is_extracted(http):
    url = "https://jobs.example.com/jd.md"
    http.routes[("GET", url)] = _response(body=b"# Backend Engineer", content_type="text/markdown")

    text, _ = fetch_job_description(url)
    assert text == "# Backend Engineer"


def test_scrape_job_description(monkeypatch):
    driver = MagicMock()
    posting = SimpleNamespace(text="  Build   reliable APIs.\n" * 40)
    driver.find_elements.side_effect = (
        lambda by, selector: [posting] if selector == JOB_DESCRIPTION_SELECTORS[0] else []
    )
    monkeypatch.setattr(web_fetcher, "_create_driver", lambda: driver)

    text = scrape_job_description("https://jobs.example.com/view/42", wait_seconds=0)

    assert text.startswith("Build reliable APIs. Build reliable APIs.")
    assert "  " not in text
    driver.get.assert_called_once_with("https://jobs.example.com/view/42")
    driver.quit.assert_called_once()


def test_scrape_failure_closes_browser(monkeypatch):
    driver = MagicMock()
    driver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")
    monkeypatch.setattr(web_fetcher, "_create_driver", lambda: driver)

    with pytest.raises(FetchError, match="ERR_NAME_NOT_RESOLVED"):
        scrape_job_description("https://nowhere.invalid/job")
    driver.quit.assert_called_once()


@pytest.mark.parametrize("content_type", ["text/html", "application/xhtml+xml; charset=utf-8"])
def test_unscraped_job_page_is_stripped(http, content_type, caplog):
    url = "https://jobs.example.com/view/7"
    markup = (
        b"<html><head><style>p { color: red; }</style><script>var x = 1;</script></head>"
        b"<body><h1>Backend Engineer</h1><!-- nav --><p>Python &amp; AWS,\n 5+ years</p></body></html>"
    )
    http.routes[("GET", url)] = _response(body=markup, content_type=content_type)

    with caplog.at_level("WARNING", logger="web_fetcher"):
        text, _ = fetch_job_description(url, scrape_html=False)

    assert text == "Backend Engineer Python & AWS, 5+ years"
    assert "scraping is off" in caplog.text


def test_xhtml_job_page_is_scraped(http, monkeypatch):
    url = "https://jobs.example.com/view/8"
    http.routes[("GET", url)] = _response(body=b"<html/>", content_type="application/xhtml+xml")
    monkeypatch.setattr(web_fetcher, "scrape_job_description", lambda target: "rendered")

    text, _ = fetch_job_description(url)
    assert text == "rendered"


def test_empty_job_page_rejected(http):
    url = "https://jobs.example.com/view/9"
    http.routes[("GET", url)] = _response(body=b"<html><body> </body></html>", content_type="text/html")

    with pytest.raises(FetchError, match="No job description text found"):
        fetch_job_description(url, scrape_html=False)


def test_html_to_text_drops_markup_only():
    assert html_to_text("<div>Senior&nbsp;Engineer</div><br/>Remote") == "Senior\xa0Engineer Remote"
