"""
Application configuration management.

Loads non-sensitive configuration from JSON and sensitive values
(e.g. Gemini API key) from environment variables or secret files.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("screener_config.json")
DEFAULT_SUMMARY_DIR = Path("summaries")
SUMMARY_FILENAME = "candidate_summary.html"
RESULTS_FILENAME = "candidate_results.json"

DEFAULT_ANALYSIS_MODEL = "gemini-2.5-pro"
DEFAULT_NAME_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    resume_paths: Tuple[Path, ...]
    resume_urls: Tuple[str, ...]
    job_description_file: Optional[Path]
    job_description_url: Optional[str]
    job_description_text: Optional[str]
    gemini_api_key: str
    gemini_model: str
    name_model: str
    batch_size: int
    resolve_names: bool
    request_timeout: float
    scrape_job_pages: bool
    summary_file: Path
    results_file: Path
    log_file: Optional[Path]
    log_format: Optional[str]
    log_date_format: Optional[str]
    debug: bool


def _read_json(path: Path) -> Dict[str, Any]:
    """Read a JSON file into a dictionary."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file missing: {path}") from None
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in configuration file: {path}") from exc


def _resolve_path(base: Path, value: Optional[str]) -> Optional[Path]:
    """Resolve a possibly relative path against a base directory."""
    if not value:
        return None
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (base / candidate).resolve()


def _load_secret(base: Path, key_path: Optional[str]) -> Optional[str]:
    """Load a secret value from a text file."""
    if not key_path:
        return None
    secret_file = _resolve_path(base, key_path)
    if secret_file and secret_file.exists():
        return secret_file.read_text(encoding="utf-8").strip()
    LOGGER.warning("Secret file %s not found; skipping", secret_file)
    return None


def _string_list(config: Dict[str, Any], key: str) -> List[str]:
    values = config.get(key) or []
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ValueError(f"Config '{key}' must be a list of strings.")
    return [v.strip() for v in values if v.strip()]


def load_settings(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Load application settings from config file and environment variables.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Settings dataclass populated with configuration values.
    """
    config_path = config_path.resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    config = _read_json(config_path)
    base_dir = config_path.parent

    resume_paths = tuple(_resolve_path(base_dir, p) for p in _string_list(config, "resumes"))
    resume_urls = tuple(_string_list(config, "resume_urls"))
    if not resume_paths and not resume_urls:
        raise ValueError("Config must define 'resumes' and/or 'resume_urls'.")
    for path in resume_paths:
        if not path.exists():
            raise FileNotFoundError(f"Resume file not found: {path}")

    job_description_file = _resolve_path(base_dir, config.get("job_description_file"))
    job_description_url = config.get("job_description_url") or None
    job_description_text = config.get("job_description_text") or None
    sources = [s for s in (job_description_file, job_description_url, job_description_text) if s]
    if len(sources) != 1:
        raise ValueError(
            "Config must define exactly one of 'job_description_file', "
            "'job_description_url' or 'job_description_text'."
        )
    if job_description_file and not job_description_file.exists():
        raise FileNotFoundError(f"Job description file not found: {job_description_file}")

    batch_size = int(config.get("batch_size", 5))
    if batch_size <= 0:
        raise ValueError("Config 'batch_size' must be > 0.")

    request_timeout = float(config.get("request_timeout", 30))
    if request_timeout <= 0:
        raise ValueError("Config 'request_timeout' must be > 0.")

    log_file_str = config.get("log_file")
    if log_file_str:
        # Replace timestamp placeholder if present
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_str = log_file_str.replace("YYYYMMDD_HHMMSS", timestamp)
        log_file = _resolve_path(base_dir, log_file_str)
        log_file.parent.mkdir(parents=True, exist_ok=True)
    else:
        log_file = None

    summary_dir = (base_dir / DEFAULT_SUMMARY_DIR).resolve()
    summary_file = _resolve_path(base_dir, config.get("summary_file")) or summary_dir / SUMMARY_FILENAME
    results_file = _resolve_path(base_dir, config.get("results_file")) or summary_dir / RESULTS_FILENAME
    summary_file.parent.mkdir(parents=True, exist_ok=True)
    results_file.parent.mkdir(parents=True, exist_ok=True)

    secret_key = _load_secret(base_dir, config.get("google_api_key_file"))
    api_key = secret_key or os.environ.get("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise ValueError(
            "Gemini API key missing. Set GEMINI_API_KEY env or provide google_api_key_file."
        )

    return Settings(
        resume_paths=resume_paths,
        resume_urls=resume_urls,
        job_description_file=job_description_file,
        job_description_url=job_description_url,
        job_description_text=job_description_text,
        gemini_api_key=api_key,
        gemini_model=config.get("gemini_model", DEFAULT_ANALYSIS_MODEL),
        name_model=config.get("name_model", DEFAULT_NAME_MODEL),
        batch_size=batch_size,
        resolve_names=bool(config.get("resolve_names", True)),
        request_timeout=request_timeout,
        scrape_job_pages=bool(config.get("scrape_job_pages", True)),
        summary_file=summary_file,
        results_file=results_file,
        log_file=log_file,
        log_format=config.get("log_format"),
        log_date_format=config.get("log_date_format"),
        debug=bool(config.get("debug", False)),
    )
