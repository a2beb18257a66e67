"""Shared test fixtures for Resume Tailor tests."""

import httpx
import pytest

from services.workflow_service import WorkflowService
from tailor_client import TailorClient

BASE_URL = "http://tailor.test"


class FakeTailorService:
    """httpx.MockTransport handler that replays canned responses per route.

    Every request is recorded so tests can assert on what was (or was not)
    sent over the wire.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response=None, **kwargs):
        """Register a response (an httpx.Response, a callable, or Response kwargs)."""
        if response is None:
            response = httpx.Response(kwargs.pop("status_code", 200), **kwargs)
        self.routes[(method.upper(), path)] = response
        return self

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"status": "error", "message": "No such route"})
        if callable(handler):
            return handler(request)
        return handler


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration dictionary."""
    return {
        "service": {
            "base_url": BASE_URL,
            "timeout_seconds": 5,
        },
        "job_defaults": {
            "title": "Job Position",
            "company": "Company",
            "location": "",
            "employment_type": "Full-time",
            "experience_level": "Mid-level",
        },
        "workflow": {
            "good_score_threshold": 70,
        },
        "export": {
            "filename": "tailored-resume.pdf",
            "output_format": "pdf",
            "page": {
                "page_width": 595.28,
                "page_height": 841.89,
                "margin_left": 50,
                "margin_top": 60,
                "bottom_bound": 770,
                "max_line_width": 500,
                "line_height": 17,
                "font_name": "Helvetica",
                "font_size": 11,
            },
        },
    }


@pytest.fixture
def sample_score_payload():
    """ATS score response as the service sends it."""
    return {
        "status": "success",
        "message": "ATS score calculated successfully",
        "resumeId": 7,
        "jobId": 3,
        "basicScore": 55,
        "detailedScore": 82,
        "breakdown": {"skills": 30, "experience": 25},
        "matchingKeywords": ["java", "spring", "rest"],
        "missingKeywords": ["kubernetes"],
        "suggestions": ["Mention Kubernetes experience"],
    }


@pytest.fixture
def sample_tailor_payload():
    """Tailoring response as the service sends it."""
    return {
        "id": 11,
        "resumeId": 7,
        "jobId": 3,
        "atsScore": 88,
        "tailoredText": "JANE DOE\nSenior Java Developer\n\n• Built REST APIs with Spring Boot",
        "candidateName": "Jane Doe",
        "jobTitle": "Java Developer",
    }


@pytest.fixture
def fake_service(sample_score_payload, sample_tailor_payload):
    """Fake remote service answering every route successfully."""
    service = FakeTailorService()
    service.on("POST", "/api/resume/upload", json={"status": "success", "resumeId": 7})
    service.on("POST", "/api/job/upload", json={"status": "success", "jobId": 3})
    service.on("GET", "/api/resume/ats-score", json=sample_score_payload)
    service.on("POST", "/api/resume/tailor", json=sample_tailor_payload)
    service.on("GET", "/api/ai/ping", text="OK")
    return service


@pytest.fixture
def tailor_client(fake_service):
    """TailorClient wired to the fake service."""
    return TailorClient(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(fake_service))


@pytest.fixture
def workflow(test_config, tailor_client):
    """WorkflowService that records its notifications on ``.notifications``."""
    notifications = []
    svc = WorkflowService(config=test_config, client=tailor_client, listener=notifications.append)
    svc.notifications = notifications
    return svc


@pytest.fixture
def resume_file(tmp_path):
    """A small plain-text resume."""
    path = tmp_path / "resume.txt"
    path.write_text("Jane Doe\nSenior Java developer with Spring & MySQL. 5+ yrs.")
    return path
