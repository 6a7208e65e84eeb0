"""Run one generation job against a render session and record the outcome.

Phases: acquire → authenticate → submit → grace delay → (skip) → completion wait →
settle → extract → finalize, with the session released on every exit path.
A completion timeout is soft: extraction still runs and its validity check is what
turns a stuck generation into an error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from chatforge.config import Settings
from chatforge.generate.completion import wait_for_completion
from chatforge.generate.errors import AcquisitionFailure, GenerationError
from chatforge.generate.extractor import (
    MIN_ARTIFACT_CHARS,
    clean_entities,
    extract_payload,
    validate_payload,
)
from chatforge.generate.skip import click_skip_control
from chatforge.jobs.models import GenerationJob
from chatforge.jobs.store import JobStore
from chatforge.session.base import RenderSession, SessionFactory

logger = logging.getLogger(__name__)


@dataclass
class GenerationTimings:
    """Orchestrator-side delays and bounds, in milliseconds."""

    initial_delay_ms: int = 5_000
    skip_timeout_ms: int = 20_000
    skip_poll_ms: int = 500
    completion_timeout_ms: int = 900_000
    completion_poll_ms: int = 3_000
    settle_delay_ms: int = 3_000
    min_artifact_chars: int = MIN_ARTIFACT_CHARS

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationTimings":
        return cls(
            initial_delay_ms=settings.chatforge_initial_delay_ms,
            skip_timeout_ms=settings.chatforge_skip_timeout_ms,
            skip_poll_ms=settings.chatforge_skip_poll_ms,
            completion_timeout_ms=settings.chatforge_completion_timeout_ms,
            completion_poll_ms=settings.chatforge_completion_poll_ms,
            settle_delay_ms=settings.chatforge_settle_delay_ms,
            min_artifact_chars=settings.chatforge_min_artifact_chars,
        )


async def _pause(ms: int) -> None:
    if ms > 0:
        await asyncio.sleep(ms / 1000)


class GenerationOrchestrator:
    def __init__(
        self,
        session_factory: SessionFactory,
        store: JobStore,
        timings: GenerationTimings | None = None,
        credential: str | None = None,
        debug_dir: Path | None = None,
    ):
        self._session_factory = session_factory
        self._store = store
        self.timings = timings or GenerationTimings()
        self._credential = credential
        self._debug_dir = debug_dir

    async def run(self, job_id: str, prompt: str, skip_intermediate_phase: bool = False) -> GenerationJob:
        """Drive the job to ready or error. Never raises."""
        job = self._store.get(job_id)
        if job is None:
            job = GenerationJob(
                job_id=job_id,
                prompt=prompt,
                skip_intermediate_phase=skip_intermediate_phase,
            )
            self._store.put(job_id, job)
        if job.is_terminal:
            logger.warning("[%s] Job already %s, not re-running", job_id, job.status.value)
            return job

        try:
            session = await self._session_factory.acquire()
        except AcquisitionFailure as e:
            logger.error("[%s] Error: %s", job_id, e)
            return self._fail(job, str(e))
        except Exception as e:
            logger.exception("[%s] Session acquisition failed", job_id)
            return self._fail(job, f"Browser launch failed: {e}")

        try:
            artifact = await self._drive(session, job_id, prompt, skip_intermediate_phase)
        except GenerationError as e:
            logger.error("[%s] Error: %s", job_id, e)
            await self._dump_debug(session, job_id)
            return self._fail(job, str(e))
        except Exception as e:
            logger.exception("[%s] Unexpected failure", job_id)
            await self._dump_debug(session, job_id)
            return self._fail(job, str(e) or type(e).__name__)
        else:
            job.mark_ready(artifact)
            self._store.put(job_id, job)
            logger.info("[%s] Code generated successfully (%d chars)", job_id, len(artifact))
            return job
        finally:
            await self._release(session, job_id)

    async def _drive(self, session: RenderSession, job_id: str, prompt: str, skip: bool) -> str:
        t = self.timings
        await self._authenticate(session, job_id)

        logger.info("[%s] Submitting prompt...", job_id)
        await session.submit_prompt(prompt)

        await _pause(t.initial_delay_ms)

        if skip:
            logger.info("[%s] Thinking mode is OFF - searching for Skip button...", job_id)
            found = await click_skip_control(
                session,
                timeout_ms=t.skip_timeout_ms,
                poll_interval_ms=t.skip_poll_ms,
                job_id=job_id,
            )
            if found:
                logger.info("[%s] Skip button clicked", job_id)
            else:
                logger.info("[%s] Skip button not found after %d ms", job_id, t.skip_timeout_ms)

        logger.info("[%s] Waiting for response...", job_id)
        await wait_for_completion(
            session,
            timeout_ms=t.completion_timeout_ms,
            poll_interval_ms=t.completion_poll_ms,
            job_id=job_id,
        )

        await _pause(t.settle_delay_ms)

        logger.info("[%s] Extracting code...", job_id)
        payload = validate_payload(await extract_payload(session), t.min_artifact_chars)
        return clean_entities(payload)

    async def _authenticate(self, session: RenderSession, job_id: str) -> None:
        if not self._credential:
            logger.info("[%s] No auth token configured, continuing anonymously", job_id)
            return
        logger.info("[%s] Injecting auth token...", job_id)
        try:
            await session.authenticate(self._credential)
        except Exception as e:
            logger.warning("[%s] Failed to inject token (non-fatal): %s", job_id, e)
            return
        logger.info("[%s] Token injected.", job_id)

    def _fail(self, job: GenerationJob, message: str) -> GenerationJob:
        job.mark_error(message)
        self._store.put(job.job_id, job)
        return job

    async def _dump_debug(self, session: RenderSession, job_id: str) -> None:
        if self._debug_dir is None:
            return
        try:
            paths = await session.dump_debug(self._debug_dir / job_id)
            logger.info("[%s] Saved debug files: %s", job_id, ", ".join(p.name for p in paths))
        except Exception as e:
            logger.warning("[%s] Failed to save debug files: %s", job_id, e)

    async def _release(self, session: RenderSession, job_id: str) -> None:
        try:
            await session.release()
        except Exception as e:
            logger.warning("[%s] Session release failed: %s", job_id, e)
