"""Generation job storage — in-memory, lives as long as the process."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Protocol

from chatforge.jobs.models import GenerationJob

logger = logging.getLogger(__name__)


class JobStore(Protocol):
    def put(self, job_id: str, job: GenerationJob) -> None: ...
    def get(self, job_id: str) -> GenerationJob | None: ...


class InMemoryJobStore:
    """Map job_id -> job. Nothing is ever evicted.

    The lock only matters when orchestrations run on worker threads; under the
    event loop every write already completes between two suspension points.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, GenerationJob] = {}
        self._lock = threading.Lock()

    def put(self, job_id: str, job: GenerationJob) -> None:
        with self._lock:
            self._jobs[job_id] = job

    def get(self, job_id: str) -> GenerationJob | None:
        with self._lock:
            return self._jobs.get(job_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_store: JobStore | None = None


def get_job_store() -> JobStore:
    """Return the process-wide job store."""
    global _store
    if _store is None:
        _store = InMemoryJobStore()
        logger.info("Using in-memory job store")
    return _store


def reset_job_store() -> None:
    """Drop the singleton (tests)."""
    global _store
    _store = None


def _new_job_id() -> str:
    return str(uuid.uuid4())
