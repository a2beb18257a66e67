"""Typed exception hierarchy for Resume Tailor services.

Services raise these exceptions instead of printing to console.
The workflow service catches them at the transition boundary and turns
them into notifications; the CLI presents whatever escapes elsewhere.
"""


class ResumeTailorError(Exception):
    """Base exception for all Resume Tailor service errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NetworkFailure(ResumeTailorError):
    """Raised when the remote service is unreachable or answers non-2xx."""

    def __init__(self, operation: str, reason: str | None = None, status_code: int | None = None):
        msg = f"{operation} failed"
        if reason:
            msg += f": {reason}"
        super().__init__(
            msg,
            {"operation": operation, "reason": reason, "status_code": status_code},
        )
        self.operation = operation
        self.reason = reason
        self.status_code = status_code


class MissingIdentifier(ResumeTailorError):
    """Raised when a successful response carries no recognized id field."""

    def __init__(self, kind: str, payload_keys: list[str] | None = None):
        super().__init__(
            f"{kind.capitalize()} response missing id",
            {"kind": kind, "payload_keys": payload_keys or []},
        )
        self.kind = kind
        self.payload_keys = payload_keys or []


class PreconditionFailed(ResumeTailorError):
    """Raised when a transition needs ids the session does not have yet."""

    def __init__(self, operation: str, missing: list[str]):
        super().__init__(
            f"{operation} needs an uploaded resume and a saved job description "
            f"(missing: {', '.join(missing)})",
            {"operation": operation, "missing": missing},
        )
        self.operation = operation
        self.missing = missing


class UpstreamReportedError(ResumeTailorError):
    """Raised when the tailoring text is really an upstream error message."""

    def __init__(self, text: str):
        super().__init__(
            "Generation service returned an error (showing message). Check the service token/URL.",
            {"text": text},
        )
        self.text = text


class ValidationError(ResumeTailorError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field})
        self.field = field
