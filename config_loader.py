"""Configuration loading utilities."""

import json
import os
from pathlib import Path

DEFAULT_API_BASE = "http://localhost:8080"
DEFAULT_TIMEOUT = 60.0
DEFAULT_SCORE_THRESHOLD = 70
DEFAULT_EXPORT_FILENAME = "tailored-resume.pdf"


def load_config(config_path: str | None = None) -> dict:
    """Load configuration from config.json."""
    if config_path is None:
        config_path = Path(__file__).parent / "config.json"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        config = json.load(f)

    return config


def get_api_base(config: dict) -> str:
    """Get the remote service base URL.

    RESUME_TAILOR_API_BASE overrides config.json so the same checkout can
    point at a local or a deployed backend.
    """
    url = os.environ.get("RESUME_TAILOR_API_BASE")
    if not url:
        url = config.get("service", {}).get("base_url", DEFAULT_API_BASE)
    return url.rstrip("/")


def get_timeout(config: dict) -> float:
    """Get the per-request timeout in seconds."""
    raw = os.environ.get("RESUME_TAILOR_TIMEOUT")
    if raw:
        try:
            return float(raw)
        except ValueError:
            raise ValueError(
                f"RESUME_TAILOR_TIMEOUT must be a number of seconds, got {raw!r}"
            ) from None
    return float(config.get("service", {}).get("timeout_seconds", DEFAULT_TIMEOUT))


def get_job_defaults(config: dict) -> dict:
    """Get default job metadata overrides (title, company, location, ...)."""
    return dict(config.get("job_defaults", {}))


def get_score_threshold(config: dict) -> float:
    """Score at or above which an ATS result counts as good."""
    return config.get("workflow", {}).get("good_score_threshold", DEFAULT_SCORE_THRESHOLD)


def get_page_geometry(config: dict) -> dict:
    """Get export page geometry overrides, in points."""
    return dict(config.get("export", {}).get("page", {}))


def get_export_filename(config: dict) -> str:
    return config.get("export", {}).get("filename", DEFAULT_EXPORT_FILENAME)


def get_output_format(config: dict) -> str:
    """Get the default export format ("pdf", "docx" or "both")."""
    return config.get("export", {}).get("output_format", "pdf")
