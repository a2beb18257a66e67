"""Workflow service - the resume tailoring state machine.

Owns the session (resume id, job id, last score, last tailored text) and
exposes the four user-triggered transitions. Every transition returns a
TransitionOutcome; no failure escapes a transition.
"""

import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path

import httpx

from config_loader import get_job_defaults, get_score_threshold
from tailor_client import UNREACHABLE, TailorClient

from .base_service import BaseService
from .exceptions import (
    NetworkFailure,
    PreconditionFailed,
    ResumeTailorError,
    UpstreamReportedError,
    ValidationError,
)
from .models import (
    HealthStatus,
    JobMetadata,
    Notification,
    Operation,
    Session,
    Severity,
    TransitionOutcome,
)
from .normalizer import (
    decode_identifier_response,
    decode_score_response,
    decode_tailor_response,
    is_upstream_error,
)

logger = logging.getLogger(__name__)

SUPPORTED_RESUME_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt")

# Prefix of the error notification for each transition.
FAILURE_PREFIXES = {
    Operation.UPLOAD_RESUME: "Upload failed",
    Operation.SAVE_JOB: "Save job description failed",
    Operation.FETCH_SCORE: "ATS score failed",
    Operation.TAILOR: "Tailor failed",
}

NotificationListener = Callable[[Notification], None]


class WorkflowService(BaseService):
    """Coordinates upload, job save, scoring and tailoring for one session.

    Overlap prevention is the caller's job (disable the trigger while a
    transition is in flight). Id changes and the score/text reset happen in
    one synchronous step, so no await can observe a new id with an old score.
    """

    def __init__(
        self,
        config: dict | None = None,
        client: TailorClient | None = None,
        session: Session | None = None,
        listener: NotificationListener | None = None,
    ):
        """Initialize the workflow.

        Args:
            config: Configuration dictionary. If None, loads from config.json.
            client: TailorClient instance. If None, creates one from config.
            session: Session to drive. If None, starts an empty one.
            listener: Optional callback receiving every notification.
        """
        super().__init__(config=config, client=client)
        self.session = session if session is not None else Session()
        self.listener = listener
        self.score_threshold = get_score_threshold(self.config)
        self.job_defaults = JobMetadata(**get_job_defaults(self.config))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def upload_resume(self, path: str | Path, content: bytes | None = None) -> TransitionOutcome:
        """Upload a resume file and bind its id to the session.

        Args:
            path: Resume file path. When ``content`` is given, only its name is used.
            content: Raw file bytes, if already read by the caller.
        """
        op = Operation.UPLOAD_RESUME
        try:
            filename, data, content_type = self._read_resume(Path(path), content)
            payload = await self.client.upload_resume(filename, data, content_type)
            decoded = decode_identifier_response(payload, "resume")
        except Exception as e:
            return self._fail(op, e)

        self.session.bind_resume(decoded.id)
        logger.info("Resume uploaded as %s", decoded.id)
        return self._succeed(op, Severity.SUCCESS, f"Uploaded resume (#{decoded.id})", decoded)

    async def save_job(
        self,
        description: str,
        metadata: JobMetadata | None = None,
    ) -> TransitionOutcome:
        """Save a job description and bind its id to the session.

        Args:
            description: Job description text.
            metadata: Optional title/company/...; configured defaults otherwise.
        """
        op = Operation.SAVE_JOB
        try:
            if not description or not description.strip():
                raise ValidationError("Job description cannot be empty", field="description")
            meta = metadata or self.job_defaults
            payload = await self.client.create_job(description, meta.to_query_params())
            decoded = decode_identifier_response(payload, "job")
        except Exception as e:
            return self._fail(op, e)

        self.session.bind_job(decoded.id)
        logger.info("Job description saved as %s", decoded.id)
        return self._succeed(op, Severity.SUCCESS, f"Saved job description (#{decoded.id})", decoded)

    async def fetch_score(self) -> TransitionOutcome:
        """Fetch the ATS score for the current resume / job pair."""
        op = Operation.FETCH_SCORE
        try:
            resume_id, job_id = self._require_pair(op)
            payload = await self.client.get_ats_score(resume_id, job_id)
            decoded = decode_score_response(payload)
        except Exception as e:
            return self._fail(op, e)

        if self.session.pair != (resume_id, job_id):
            return self._discard(op)

        self.session.ats_score = decoded.score
        severity = Severity.SUCCESS if decoded.score >= self.score_threshold else Severity.WARNING
        logger.info("ATS score for %s/%s: %s", resume_id, job_id, decoded.score)
        return self._succeed(op, severity, f"ATS score: {format_score(decoded.score)}", decoded)

    async def tailor(self) -> TransitionOutcome:
        """Request a tailored resume for the current resume / job pair.

        The service reports generation failures inside a successful
        response, so text starting with an upstream-error marker is stored
        and shown but announced as a warning.
        """
        op = Operation.TAILOR
        try:
            resume_id, job_id = self._require_pair(op)
            payload = await self.client.tailor_resume(resume_id, job_id)
            decoded = decode_tailor_response(payload, resume_id, job_id)
        except Exception as e:
            return self._fail(op, e)

        if self.session.pair != (resume_id, job_id):
            return self._discard(op)

        self.session.ats_score = decoded.ats_score
        self.session.tailored_text = decoded.tailored_text

        if is_upstream_error(decoded.tailored_text):
            upstream = UpstreamReportedError(decoded.tailored_text)
            logger.warning("Tailoring returned an upstream error: %s", _single_line(decoded.tailored_text))
            return self._emit(
                TransitionOutcome(
                    operation=op,
                    ok=True,
                    value=decoded,
                    error=type(upstream).__name__,
                    open_result=True,
                    notification=Notification(severity=Severity.WARNING, message=str(upstream)),
                )
            )

        logger.info("Tailored resume generated (%d chars)", len(decoded.tailored_text))
        outcome = self._succeed(op, Severity.SUCCESS, "Tailored resume generated", decoded)
        outcome.open_result = True
        return outcome

    async def check_health(self) -> HealthStatus:
        """Probe the service. Never raises."""
        raw = await self.client.ping()
        text = str(raw).strip()
        if "OK" in text.upper():
            status = "OK"
        else:
            status = text or UNREACHABLE
        return HealthStatus(status=status, raw=text)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_pair(self, op: Operation) -> tuple[str, str]:
        missing = self.session.missing_ids()
        if missing:
            raise PreconditionFailed(op.value, missing)
        return self.session.resume_id, self.session.job_id

    def _read_resume(self, path: Path, content: bytes | None) -> tuple[str, bytes, str]:
        """Validate and load a resume file.

        Returns:
            (filename, bytes, content type)
        """
        if path.suffix.lower() not in SUPPORTED_RESUME_EXTENSIONS:
            raise ValidationError(
                f"Unsupported resume type '{path.suffix or path.name}'. "
                f"Use one of: {', '.join(SUPPORTED_RESUME_EXTENSIONS)}",
                field="file",
            )

        if content is None:
            try:
                content = path.read_bytes()
            except OSError as e:
                raise ValidationError(f"Cannot read {path}: {e.strerror or e}", field="file") from e

        if not content:
            raise ValidationError("Resume file is empty", field="file")

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return path.name, content, content_type

    def _succeed(self, op: Operation, severity: Severity, message: str, value) -> TransitionOutcome:
        return self._emit(
            TransitionOutcome(
                operation=op,
                ok=True,
                value=value,
                notification=Notification(severity=severity, message=message),
            )
        )

    def _fail(self, op: Operation, exc: Exception) -> TransitionOutcome:
        """Turn any failure into an error outcome; the session is left as it was."""
        error = categorize_error(op, exc)

        if isinstance(error, PreconditionFailed):
            message = str(error)
        elif isinstance(error, NetworkFailure):
            message = f"{FAILURE_PREFIXES[op]}: {error.reason}"
        else:
            message = f"{FAILURE_PREFIXES[op]}: {error}"

        if isinstance(exc, (ResumeTailorError, httpx.HTTPError, ValueError)):
            logger.warning("%s: %s", op.value, error)
        else:
            logger.error("%s: unexpected failure: %s", op.value, error, exc_info=exc)

        return self._emit(
            TransitionOutcome(
                operation=op,
                ok=False,
                error=type(error).__name__,
                notification=Notification(severity=Severity.ERROR, message=_single_line(message)),
            )
        )

    def _discard(self, op: Operation) -> TransitionOutcome:
        logger.info("%s result discarded: session ids changed while it ran", op.value)
        return self._emit(
            TransitionOutcome(
                operation=op,
                ok=False,
                notification=Notification(
                    severity=Severity.WARNING,
                    message="Resume or job description changed while the request ran; result discarded",
                ),
            )
        )

    def _emit(self, outcome: TransitionOutcome) -> TransitionOutcome:
        if self.listener is not None:
            try:
                self.listener(outcome.notification)
            except Exception:
                # Listener errors never escape a transition.
                logger.exception("Notification listener failed for %s", outcome.operation.value)
        return outcome


def categorize_error(op: Operation, exc: Exception) -> Exception:
    """Map a raw failure onto the service exception taxonomy."""
    label = op.value.replace("_", " ")

    if isinstance(exc, ResumeTailorError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        reason = f"{response.status_code} {response.reason_phrase}".strip()
        server_message = _server_message(response)
        if server_message:
            reason += f" - {server_message}"
        return NetworkFailure(label, reason, status_code=response.status_code)

    if isinstance(exc, httpx.TimeoutException):
        return NetworkFailure(label, f"request timed out ({exc.__class__.__name__})")

    if isinstance(exc, httpx.HTTPError):
        return NetworkFailure(label, str(exc) or exc.__class__.__name__)

    if isinstance(exc, ValueError):
        return ValidationError(str(exc))

    return ResumeTailorError(str(exc) or exc.__class__.__name__)


def format_score(score: int | float) -> str:
    """Render a score without a trailing ".0"."""
    if isinstance(score, float) and score.is_integer():
        return str(int(score))
    return str(score)


def _server_message(response: httpx.Response) -> str | None:
    """Pull the service's own error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] or None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail") or body.get("error")
        return str(message) if message else None
    if isinstance(body, str):
        return body[:200] or None
    return None


def _single_line(text: str) -> str:
    return " ".join(str(text).split())
