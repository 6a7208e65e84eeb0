"""Generation job storage and retrieval."""

from chatforge.jobs.models import GenerationJob, JobStateError, JobStatus
from chatforge.jobs.store import InMemoryJobStore, JobStore, get_job_store, reset_job_store, _new_job_id

__all__ = [
    "GenerationJob",
    "JobStateError",
    "JobStatus",
    "JobStore",
    "InMemoryJobStore",
    "get_job_store",
    "reset_job_store",
    "_new_job_id",
]
