"""Fixtures for end-to-end tests against an in-process fake backend."""

import re

import httpx
import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from services.workflow_service import WorkflowService
from tailor_client import TailorClient

WORD = re.compile(r"[a-z]+")


def _keywords(text: str) -> set[str]:
    return {w for w in WORD.findall(text.lower()) if len(w) >= 4}


def _file_part(body: bytes) -> bytes:
    """Content of the single file part of a multipart body."""
    _, _, rest = body.partition(b"\r\n\r\n")
    return rest.rsplit(b"\r\n--", 1)[0]


class TailorRequest(BaseModel):
    resumeId: str
    jobId: str


def create_fake_backend() -> FastAPI:
    """A small stand-in for the tailoring backend.

    Scores by keyword overlap and "tailors" by upper-casing the resume.
    Set ``app.state.upstream_error`` to make tailoring report a generation
    failure in a 200 response.
    """
    app = FastAPI(title="Fake Tailor Backend")
    app.state.resumes = {}
    app.state.jobs = {}
    app.state.upstream_error = None

    @app.post("/api/resume/upload")
    async def upload_resume(request: Request):
        body = await request.body()
        if b'name="file"' not in body:
            raise HTTPException(status_code=400, detail="Missing file part")
        resume_id = len(app.state.resumes) + 1
        app.state.resumes[str(resume_id)] = _file_part(body).decode("utf-8", errors="ignore")
        return {"status": "success", "message": "Resume uploaded", "resumeId": resume_id}

    @app.post("/api/job/upload")
    async def upload_job(request: Request, title: str = "Job Position", company: str = "Company"):
        description = (await request.body()).decode("utf-8")
        if not description.strip():
            raise HTTPException(status_code=400, detail="Job description is empty")
        job_id = len(app.state.jobs) + 1
        app.state.jobs[str(job_id)] = description
        return {"status": "success", "jobId": job_id, "title": title, "company": company}

    @app.get("/api/resume/ats-score")
    async def ats_score(resumeId: str, jobId: str):
        resume, job = _lookup(app, resumeId, jobId)
        wanted = _keywords(job)
        matching = sorted(wanted & _keywords(resume))
        missing = sorted(wanted - _keywords(resume))
        basic = round(100 * len(matching) / len(wanted)) if wanted else 0
        return {
            "status": "success",
            "resumeId": resumeId,
            "jobId": jobId,
            "basicScore": basic,
            "matchingKeywords": matching,
            "missingKeywords": missing,
            "suggestions": [f"Mention {word}" for word in missing],
        }

    @app.post("/api/resume/tailor")
    async def tailor(body: TailorRequest):
        resume, _ = _lookup(app, body.resumeId, body.jobId)
        text = app.state.upstream_error or resume.upper()
        return {
            "resumeId": body.resumeId,
            "jobId": body.jobId,
            "atsScore": 90,
            "tailoredText": text,
        }

    @app.get("/api/ai/ping", response_class=PlainTextResponse)
    async def ping():
        return "OK"

    return app


def _lookup(app: FastAPI, resume_id: str, job_id: str) -> tuple[str, str]:
    if resume_id not in app.state.resumes:
        raise HTTPException(status_code=404, detail="Resume not found")
    if job_id not in app.state.jobs:
        raise HTTPException(status_code=404, detail="Job not found")
    return app.state.resumes[resume_id], app.state.jobs[job_id]


@pytest.fixture
def backend():
    return create_fake_backend()


@pytest.fixture
def backend_workflow(test_config, backend):
    """WorkflowService talking to the fake backend over ASGI."""
    client = TailorClient(base_url="http://backend.test", transport=httpx.ASGITransport(app=backend))
    notifications = []
    svc = WorkflowService(config=test_config, client=client, listener=notifications.append)
    svc.notifications = notifications
    return svc
