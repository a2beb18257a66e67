"""Response normalizer - decode loosely shaped service responses.

The remote service has returned the same value under different field
names across versions. Each extractor probes a fixed precedence list and
the decoders build the typed response models once, at the boundary.
"""

import json
from collections.abc import Mapping
from typing import Any

from .exceptions import MissingIdentifier
from .models import IdentifierResponse, ScoreResponse, TailorResponse

# Most specific field first.
SCORE_FIELDS = ("detailedScore", "basicScore", "atsScore", "score")
TAILOR_SCORE_FIELDS = ("atsScore", "score")

UPSTREAM_ERROR_MARKERS = (
    "HF API error",
    "HF Chat API error",
    "Enhanced HF Chat API error",
)


def identifier_fields(kind: str) -> tuple[str, ...]:
    """Field names that may carry the id of a stored ``kind`` ("resume" or "job").

    Examples:
        "resume" -> ("id", "resumeId", "resumeID")
        "job" -> ("id", "jobId", "jobID")
    """
    return ("id", f"{kind}Id", f"{kind}ID")


def is_numeric(value: Any) -> bool:
    """True for ints and floats; booleans do not count as scores."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_identifier(payload: Any, kind: str) -> str:
    """Return the first present id field of an upload/save response.

    Raises:
        MissingIdentifier: If the payload has none of the recognized fields.
    """
    if not isinstance(payload, Mapping):
        raise MissingIdentifier(kind)

    for field in identifier_fields(kind):
        value = payload.get(field)
        # Null, empty, 0 and false are placeholders, not stored ids.
        if value is None or value == "" or value is False or value == 0:
            continue
        return str(value)

    raise MissingIdentifier(kind, sorted(str(k) for k in payload.keys()))


def extract_score(payload: Any) -> int | float:
    """Return the best available score, or 0 when the response carries none."""
    if isinstance(payload, Mapping):
        for field in SCORE_FIELDS:
            value = payload.get(field)
            if is_numeric(value):
                return value
    elif is_numeric(payload):
        # Bare number body.
        return payload
    return 0


def extract_optional_score(payload: Any) -> int | float | None:
    """Score attached to a tailoring response, if any."""
    if not isinstance(payload, Mapping):
        return None
    for field in TAILOR_SCORE_FIELDS:
        value = payload.get(field)
        if is_numeric(value):
            return value
    return None


def extract_tailored_text(payload: Any) -> str:
    """Return the tailored text, falling back to the whole body as text."""
    if isinstance(payload, Mapping):
        text = payload.get("tailoredText")
        if text is not None:
            return str(text)
        return json.dumps(payload)
    if payload is None:
        return ""
    return str(payload)


def is_upstream_error(text: str | None) -> bool:
    """Check whether generated text is actually an upstream error message."""
    if not text:
        return False
    return text.startswith(UPSTREAM_ERROR_MARKERS)


def decode_identifier_response(payload: Any, kind: str) -> IdentifierResponse:
    return IdentifierResponse(id=extract_identifier(payload, kind), raw=payload)


def decode_score_response(payload: Any) -> ScoreResponse:
    """Decode an ATS score response, keeping any analysis details it carries."""
    if not isinstance(payload, Mapping):
        return ScoreResponse(score=extract_score(payload), raw=payload)

    basic = payload.get("basicScore")
    detailed = payload.get("detailedScore")
    breakdown = payload.get("breakdown")

    return ScoreResponse(
        score=extract_score(payload),
        basic_score=basic if is_numeric(basic) else None,
        detailed_score=detailed if is_numeric(detailed) else None,
        matching_keywords=_string_list(payload.get("matchingKeywords")),
        missing_keywords=_string_list(payload.get("missingKeywords")),
        suggestions=_string_list(payload.get("suggestions")),
        breakdown=dict(breakdown) if isinstance(breakdown, Mapping) else {},
        raw=payload,
    )


def decode_tailor_response(payload: Any, resume_id: str, job_id: str) -> TailorResponse:
    """Decode a tailoring response; ids the service does not echo default to the request's."""
    echoed_resume = echoed_job = None
    if isinstance(payload, Mapping):
        echoed_resume = payload.get("resumeId")
        echoed_job = payload.get("jobId")

    return TailorResponse(
        resume_id=str(echoed_resume) if echoed_resume is not None else resume_id,
        job_id=str(echoed_job) if echoed_job is not None else job_id,
        ats_score=extract_optional_score(payload),
        tailored_text=extract_tailored_text(payload),
        raw=payload,
    )


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []
