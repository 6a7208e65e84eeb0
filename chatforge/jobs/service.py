"""Job API: submit prompts, query jobs, flip the thinking mode."""

from __future__ import annotations

import asyncio
import logging

from chatforge.generate.mode import GenerationConfig, ThinkingMode, get_generation_config
from chatforge.generate.orchestrator import GenerationOrchestrator, GenerationTimings
from chatforge.jobs.models import GenerationJob
from chatforge.jobs.store import JobStore, get_job_store, _new_job_id

logger = logging.getLogger(__name__)


class JobService:
    def __init__(
        self,
        store: JobStore,
        orchestrator: GenerationOrchestrator,
        config: GenerationConfig,
    ):
        self._store = store
        self._orchestrator = orchestrator
        self._config = config
        self._tasks: set[asyncio.Task] = set()

    def create_job(self, prompt: str) -> GenerationJob:
        """Register a processing job. The current thinking mode is copied into it."""
        if not prompt or not prompt.strip():
            raise ValueError("Prompt parameter is required")
        job = GenerationJob(
            job_id=_new_job_id(),
            prompt=prompt,
            skip_intermediate_phase=self._config.skip_intermediate_phase,
        )
        self._store.put(job.job_id, job)
        logger.info("[%s] Job created (skip_intermediate_phase=%s)", job.job_id, job.skip_intermediate_phase)
        return job

    async def run_job(self, job_id: str) -> GenerationJob:
        job = self._store.get(job_id)
        if job is None:
            raise KeyError(job_id)
        return await self._orchestrator.run(job.job_id, job.prompt, job.skip_intermediate_phase)

    def submit(self, prompt: str) -> GenerationJob:
        """Create a job and start it on the running event loop; returns at once.

        Used by the CLI. The HTTP route schedules ``run_job`` through FastAPI
        BackgroundTasks instead.
        """
        job = self.create_job(prompt)
        task = asyncio.get_running_loop().create_task(self.run_job(job.job_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job

    async def drain(self) -> None:
        """Wait for every job started with ``submit``."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def get(self, job_id: str) -> GenerationJob | None:
        return self._store.get(job_id)

    @property
    def skip_timeout_ms(self) -> int:
        return self._orchestrator.timings.skip_timeout_ms

    @property
    def thinking_mode(self) -> ThinkingMode:
        return self._config.thinking_mode

    def set_thinking_mode(self, mode: ThinkingMode | str) -> ThinkingMode:
        return self._config.set_thinking_mode(mode)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_service: JobService | None = None


def build_job_service(settings=None) -> JobService:
    """Wire a JobService with the Playwright session factory."""
    from chatforge.config import get_settings
    from chatforge.session.playwright_session import PlaywrightSessionFactory

    settings = settings or get_settings()
    orchestrator = GenerationOrchestrator(
        session_factory=PlaywrightSessionFactory(settings),
        store=get_job_store(),
        timings=GenerationTimings.from_settings(settings),
        credential=settings.auth_credential,
        debug_dir=settings.debug_dir if settings.chatforge_debug_dumps else None,
    )
    return JobService(get_job_store(), orchestrator, get_generation_config())


def get_job_service() -> JobService:
    """Return the process-wide job service."""
    global _service
    if _service is None:
        _service = build_job_service()
    return _service
