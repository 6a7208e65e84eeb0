"""Pydantic models for the prompt / response / thinking endpoints.

Field names follow the JSON the original HTTP clients already consume
(``id``, ``completedAt``, ``currentMode``).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chatforge.jobs.models import GenerationJob, JobStatus


class PromptSubmittedResponse(BaseModel):
    """Returned by GET /prompt."""

    status: Literal["processing"] = "processing"
    id: str
    message: str = "Request submitted. Use the ID to check the response."


class JobProcessingResponse(BaseModel):
    status: Literal["processing"] = "processing"
    message: str = "Code is still being generated. Please try again in a few seconds."


class JobReadyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ready"] = "ready"
    artifact: str
    prompt: str
    completed_at: str = Field(serialization_alias="completedAt")


class JobErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str


class ThinkingModeError(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str = "Invalid mode. Use ?mode=on or ?mode=off"
    current_mode: str = Field(serialization_alias="currentMode")


def job_response(job: GenerationJob) -> JobProcessingResponse | JobReadyResponse | JobErrorResponse:
    """Map a job record to its query response."""
    if job.status is JobStatus.READY:
        return JobReadyResponse(
            artifact=job.artifact or "",
            prompt=job.prompt,
            completed_at=job.completed_at.isoformat() if job.completed_at else "",
        )
    if job.status is JobStatus.ERROR:
        return JobErrorResponse(error=job.error_message or "")
    return JobProcessingResponse()
