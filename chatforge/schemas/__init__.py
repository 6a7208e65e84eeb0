"""API response schemas."""

from chatforge.schemas.api_schemas import (
    JobErrorResponse,
    JobProcessingResponse,
    JobReadyResponse,
    PromptSubmittedResponse,
    ThinkingModeError,
    job_response,
)

__all__ = [
    "JobErrorResponse",
    "JobProcessingResponse",
    "JobReadyResponse",
    "PromptSubmittedResponse",
    "ThinkingModeError",
    "job_response",
]
