"""Resume Tailor services - framework-agnostic workflow layer.

Services wrap the remote tailoring client and return structured data
(Pydantic models). No Rich imports, no console output. Callers handle
presentation.
"""

from .base_service import BaseService
from .exceptions import (
    ResumeTailorError,
    NetworkFailure,
    MissingIdentifier,
    PreconditionFailed,
    UpstreamReportedError,
    ValidationError,
)
from .workflow_service import WorkflowService
from .export_service import ExportService

__all__ = [
    # Base
    "BaseService",
    # Services
    "WorkflowService",
    "ExportService",
    # Exceptions
    "ResumeTailorError",
    "NetworkFailure",
    "MissingIdentifier",
    "PreconditionFailed",
    "UpstreamReportedError",
    "ValidationError",
]
