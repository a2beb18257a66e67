"""Pydantic models for Resume Tailor services.

Session state, decoded remote responses, notifications and page layout
types shared by the CLI and the services. Services return these models;
callers handle presentation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class Severity(str, Enum):
    """Notification severities, ordered from best to worst."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class OutputFormat(str, Enum):
    """Document output formats."""

    PDF = "pdf"
    DOCX = "docx"
    BOTH = "both"


class Operation(str, Enum):
    """User-triggered workflow transitions."""

    UPLOAD_RESUME = "upload_resume"
    SAVE_JOB = "save_job"
    FETCH_SCORE = "fetch_score"
    TAILOR = "tailor"


# =============================================================================
# Session
# =============================================================================


class Session(BaseModel):
    """Identifiers and derived results for one workflow session.

    Score and tailored text only describe the current (resume_id, job_id)
    pair, so binding either id clears both in the same step.
    """

    resume_id: str | None = None
    job_id: str | None = None
    ats_score: int | float | None = None
    tailored_text: str = ""

    @property
    def ready(self) -> bool:
        """True once both a resume and a job description are stored remotely."""
        return self.resume_id is not None and self.job_id is not None

    @property
    def pair(self) -> tuple[str | None, str | None]:
        return (self.resume_id, self.job_id)

    def missing_ids(self) -> list[str]:
        missing = []
        if self.resume_id is None:
            missing.append("resume_id")
        if self.job_id is None:
            missing.append("job_id")
        return missing

    def bind_resume(self, resume_id: str) -> None:
        self.resume_id = resume_id
        self._clear_results()

    def bind_job(self, job_id: str) -> None:
        self.job_id = job_id
        self._clear_results()

    def _clear_results(self) -> None:
        self.ats_score = None
        self.tailored_text = ""


# =============================================================================
# Request Models
# =============================================================================


class JobMetadata(BaseModel):
    """Optional job description metadata sent as query parameters."""

    title: str = Field(default="Job Position", description="Job title")
    company: str = Field(default="Company", description="Hiring company")
    location: str = Field(default="", description="Job location")
    employment_type: str = Field(default="Full-time", description="Employment type")
    experience_level: str = Field(default="Mid-level", description="Experience level")

    def to_query_params(self) -> dict[str, str]:
        return {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "employmentType": self.employment_type,
            "experienceLevel": self.experience_level,
        }


# =============================================================================
# Decoded Response Models
# =============================================================================


class IdentifierResponse(BaseModel):
    """Decoded upload / save response."""

    id: str
    raw: Any = None


class ScoreResponse(BaseModel):
    """Decoded ATS score response.

    ``score`` is the canonical value; the rest is the optional analysis the
    service may attach.
    """

    score: int | float
    basic_score: int | float | None = None
    detailed_score: int | float | None = None
    matching_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    breakdown: dict[str, Any] = Field(default_factory=dict)
    raw: Any = None


class TailorResponse(BaseModel):
    """Decoded tailoring response."""

    resume_id: str
    job_id: str
    ats_score: int | float | None = None
    tailored_text: str = ""
    raw: Any = None


class HealthStatus(BaseModel):
    """Liveness probe result."""

    status: str
    raw: str

    @property
    def ok(self) -> bool:
        return self.status == "OK"


# =============================================================================
# Outcomes
# =============================================================================


class Notification(BaseModel):
    """A single-line, user-facing message."""

    severity: Severity
    message: str


class TransitionOutcome(BaseModel):
    """Result of one workflow transition."""

    operation: Operation
    ok: bool
    notification: Notification
    value: Any = None
    error: str | None = None
    open_result: bool = False


# =============================================================================
# Layout Models
# =============================================================================


class PageGeometry(BaseModel):
    """Page layout in points (1/72 inch). Cursor grows downward from the top edge."""

    page_width: float = 595.28
    page_height: float = 841.89
    margin_left: float = 50
    margin_top: float = 60
    bottom_bound: float = 770
    max_line_width: float = 500
    line_height: float = 17
    font_name: str = "Helvetica"
    font_size: float = 11


class Page(BaseModel):
    """One emitted page of wrapped lines."""

    model_config = ConfigDict(frozen=True)

    number: int
    lines: tuple[str, ...] = ()

    @property
    def line_count(self) -> int:
        return len(self.lines)


class ExportResult(BaseModel):
    """Result from exporting text as a paginated document."""

    page_count: int
    line_count: int
    artifacts: dict[str, str] = Field(default_factory=dict)
