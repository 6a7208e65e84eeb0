"""Generation job schema and status."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class JobStateError(RuntimeError):
    """Raised on an attempt to move a job out of a terminal state."""


class GenerationJob(BaseModel):
    """Prompt-to-artifact job, kept in memory for polling."""

    job_id: str
    prompt: str
    status: JobStatus = JobStatus.PROCESSING
    artifact: str | None = None
    error_message: str | None = None
    skip_intermediate_phase: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not JobStatus.PROCESSING

    def mark_ready(self, artifact: str) -> None:
        self._ensure_processing()
        self.status = JobStatus.READY
        self.artifact = artifact
        self.completed_at = _utcnow()

    def mark_error(self, message: str) -> None:
        self._ensure_processing()
        self.status = JobStatus.ERROR
        self.error_message = message
        self.completed_at = _utcnow()

    def _ensure_processing(self) -> None:
        if self.is_terminal:
            raise JobStateError(f"Job {self.job_id} is already {self.status.value}")
