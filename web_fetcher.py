"""
Fetching resumes and job descriptions from URLs.
"""

from __future__ import annotations

import logging
import re
from html import unescape
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

import requests
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from data_models import FileUpload
from errors import FetchError, PartnerLookupError
from resume_loader import extract_text

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_FILENAME = "file_from_url"
MAX_JOB_DESCRIPTION_CHARS = 20000
HTML_CONTENT_TYPES = {"text/html", "application/xhtml+xml"}

TIGIHR_PROFILE_PREFIX = "https://tigihr.com/talent/"
TIGIHR_LOOKUP_URL = "https://api-v1.tigihr.com/profile/getProfileBaseUserDetail"

UNREACHABLE_MESSAGE = (
    "Could not fetch the URL. The host may be unreachable, or the request may have "
    "been blocked by a CORS (cross-origin) policy."
)

JOB_DESCRIPTION_SELECTORS = [
    ".jobs-description__content.jobs-description-content",
    ".jobs-description__content--condensed",
    "[class*='job-description' i]",
    "[class*='posting-description' i]",
    "[class*='description' i]",
    "article",
    "main",
]


def filename_from_url(url: str) -> str:
    """Return the last path segment of ``url`` (query stripped), or a default name."""
    segment = urlparse(url).path.rsplit("/", 1)[-1]
    return unquote(segment) or DEFAULT_FILENAME


def _send(method: str, url: str, timeout: float, **kwargs) -> requests.Response:
    """
    Issue an HTTP request, translating transport failures into FetchError.

    Status codes are left for the caller to check.
    """
    try:
        return requests.request(method, url, timeout=timeout, **kwargs)
    except requests.ConnectionError as exc:
        LOGGER.warning("Connection to %s failed: %s", url, exc)
        raise FetchError(UNREACHABLE_MESSAGE) from exc
    except requests.RequestException as exc:
        LOGGER.warning("Request to %s failed: %s", url, exc)
        raise FetchError(f"Fetch failed: {exc}") from exc


def fetch_document(url: str, timeout: float = DEFAULT_TIMEOUT) -> FileUpload:
    """
    Download a document and wrap it as an upload.

    Args:
        url: HTTP(S) URL of the document.
        timeout: Request timeout in seconds.

    Returns:
        FileUpload named after the URL path.

    Raises:
        FetchError: On connection failure or a non-success status.
    """
    response = _send("GET", url, timeout)
    if not response.ok:
        raise FetchError(f"Fetch failed: {response.status_code} {response.reason}")

    content_type = response.headers.get("Content-Type", "").split(";")[0].strip().lower()
    upload = FileUpload(name=filename_from_url(url), data=response.content, content_type=content_type)
    LOGGER.info("Fetched %s (%d bytes, %s)", url, upload.size, content_type or "unknown type")
    return upload


def is_partner_url(url: str) -> bool:
    return url.startswith(TIGIHR_PROFILE_PREFIX)


def resolve_partner_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> Tuple[str, Optional[str]]:
    """
    Look up the resume behind a TigiHR talent profile URL.

    Args:
        url: Profile URL of the form ``https://tigihr.com/talent/<profile_id>``.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (resume document URL, candidate full name or None).

    Raises:
        PartnerLookupError: If the profile id is missing or the lookup fails.
    """
    remainder = urlparse(url[len(TIGIHR_PROFILE_PREFIX):]).path
    parts = [part for part in remainder.split("/") if part]
    if not parts:
        raise PartnerLookupError("Invalid TigiHR URL.")
    profile_id = parts[-1]

    response = _send("POST", TIGIHR_LOOKUP_URL, timeout, json={"profile_id": profile_id})
    if not response.ok:
        raise PartnerLookupError(f"TigiHR API failed: {response.reason}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise PartnerLookupError("TigiHR API returned an invalid response.") from exc

    data = payload.get("data") if isinstance(payload, dict) and not payload.get("isError") else None
    if not isinstance(data, dict) or not data.get("resume_path"):
        raise PartnerLookupError("Could not find resume in TigiHR profile.")

    LOGGER.debug("Resolved TigiHR profile %s to %s", profile_id, data["resume_path"])
    return data["resume_path"], data.get("full_name") or None


def fetch_resume(url: str, timeout: float = DEFAULT_TIMEOUT) -> Tuple[FileUpload, Optional[str]]:
    """
    Fetch a resume, resolving partner profile URLs first.

    Returns:
        Tuple of (upload, source-supplied candidate name or None).
    """
    candidate_name = None
    if is_partner_url(url):
        url, candidate_name = resolve_partner_url(url, timeout)
    return fetch_document(url, timeout), candidate_name


def fetch_job_description(
    url: str, timeout: float = DEFAULT_TIMEOUT, scrape_html: bool = True
) -> Tuple[str, FileUpload]:
    """
    Fetch a job description document and return its text.

    HTML pages are rendered with headless Chrome when ``scrape_html`` is set,
    since most job boards build the posting client-side. Otherwise their tags
    are stripped from the downloaded markup.

    Returns:
        Tuple of (job description text, downloaded upload).
    """
    upload = fetch_document(url, timeout)
    if upload.content_type not in HTML_CONTENT_TYPES:
        return extract_text(upload), upload
    if scrape_html:
        return scrape_job_description(url), upload

    LOGGER.warning("Job page scraping is off; using tag-stripped markup from %s", url)
    text = html_to_text(extract_text(upload))
    if not text:
        raise FetchError(f"No job description text found at {url}")
    return text[:MAX_JOB_DESCRIPTION_CHARS], upload


def html_to_text(markup: str) -> str:
    """Strip scripts, styles and tags from static HTML and collapse whitespace."""
    markup = re.sub(r"(?is)<(script|style|noscript)\b.*?</\1\s*>", " ", markup)
    markup = re.sub(r"(?s)<!--.*?-->", " ", markup)
    text = unescape(re.sub(r"<[^>]+>", " ", markup))
    return re.sub(r"\s+", " ", text).strip()


def _create_driver() -> webdriver.Chrome:
    """
    Create and configure a headless Chrome WebDriver.

    Returns:
        Configured Chrome WebDriver instance.
    """
    chrome_options = Options()
    chrome_options.add_argument("--headless")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument("--window-size=1920,1080")
    try:
        return webdriver.Chrome(options=chrome_options)
    except WebDriverException as exc:
        LOGGER.error("Failed to initialize Chrome WebDriver: %s", exc)
        raise


def scrape_job_description(url: str, wait_seconds: float = 10) -> str:
    """
    Render a job posting page and extract the description text.

    Args:
        url: Job posting URL.
        wait_seconds: How long to wait for the first description container.

    Returns:
        Whitespace-normalized description text.

    Raises:
        FetchError: If the browser cannot load the page or it has no text.
    """
    driver: Optional[webdriver.Chrome] = None
    try:
        driver = _create_driver()
        LOGGER.debug("Navigating to %s", url)
        driver.get(url)

        try:
            WebDriverWait(driver, timeout=wait_seconds).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, JOB_DESCRIPTION_SELECTORS[0]))
            )
        except TimeoutException:
            LOGGER.debug("Primary description container not found on %s", url)

        description = ""
        for selector in JOB_DESCRIPTION_SELECTORS:
            elements = driver.find_elements(By.CSS_SELECTOR, selector)
            text = " ".join(elem.text.strip() for elem in elements if elem.text.strip())
            text = re.sub(r"\s+", " ", text).strip()
            if len(text) > len(description):
                description = text
            if len(description) > 400:
                break

        if len(description) < 200:
            LOGGER.debug("Using full page text as last resort")
            body_text = driver.find_element(By.TAG_NAME, "body").text
            description = re.sub(r"\s+", " ", body_text).strip()
    except WebDriverException as exc:
        LOGGER.error("Selenium error while fetching job description from %s: %s", url, exc)
        raise FetchError(f"Could not render job posting: {exc.msg or exc}") from exc
    finally:
        if driver:
            driver.quit()

    if not description:
        raise FetchError(f"No job description text found at {url}")
    return description[:MAX_JOB_DESCRIPTION_CHARS]
