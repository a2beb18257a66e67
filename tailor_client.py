"""HTTP client for the resume tailoring service."""

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 60.0

# Returned by ping() when the service cannot be reached.
UNREACHABLE = "DOWN"

UPLOAD_RESUME_PATH = "/api/resume/upload"
CREATE_JOB_PATH = "/api/job/upload"
ATS_SCORE_PATH = "/api/resume/ats-score"
TAILOR_PATH = "/api/resume/tailor"
PING_PATH = "/api/ai/ping"


class TailorClient:
    """Async wrapper around the tailoring service's REST endpoints.

    Each method is one request/response exchange. Non-2xx answers raise
    ``httpx.HTTPStatusError`` and transport problems (including timeouts)
    raise the matching ``httpx`` exception; callers decide what they mean.
    Only ``ping`` swallows failures.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service root, e.g. "http://localhost:8080".
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (tests use a mock or ASGI transport).
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TailorClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def upload_resume(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """Upload a resume file as multipart form data.

        Returns:
            Decoded response body, expected to carry ``id`` or ``resumeId``.
        """
        if not content:
            raise ValueError("Resume file is empty")

        files = {"file": (filename, content, content_type)}
        response = await self._http.post(UPLOAD_RESUME_PATH, files=files)
        return self._decode(response)

    async def create_job(self, description: str, params: dict[str, str] | None = None) -> Any:
        """Save a job description sent as a plain-text body.

        Args:
            description: Job description text.
            params: Metadata query parameters (title, company, location,
                employmentType, experienceLevel).

        Returns:
            Decoded response body, expected to carry ``id`` or ``jobId``.
        """
        if not description or not description.strip():
            raise ValueError("Job description cannot be empty")

        response = await self._http.post(
            CREATE_JOB_PATH,
            content=description.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            params=params or {},
        )
        return self._decode(response)

    async def get_ats_score(self, resume_id: str, job_id: str) -> Any:
        """Fetch the ATS score for a stored resume / job pair."""
        response = await self._http.get(
            ATS_SCORE_PATH,
            params={"resumeId": resume_id, "jobId": job_id},
        )
        return self._decode(response)

    async def tailor_resume(self, resume_id: str, job_id: str) -> Any:
        """Ask the service to rewrite the resume for the job."""
        response = await self._http.post(
            TAILOR_PATH,
            json={"resumeId": resume_id, "jobId": job_id},
        )
        return self._decode(response)

    async def ping(self) -> str:
        """Liveness probe. Never raises; returns UNREACHABLE on any failure."""
        try:
            response = await self._http.get(PING_PATH)
            response.raise_for_status()
            return response.text
        except Exception as e:
            logger.debug("Ping failed: %s", e)
            return UNREACHABLE

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Raise on non-2xx, then return JSON if the body parses, else the text."""
        response.raise_for_status()
        text = response.text
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
