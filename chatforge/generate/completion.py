"""Completion detection: poll the session until the answer has rendered."""

from __future__ import annotations

import asyncio
import logging
import time

from chatforge.session.base import RenderSession

logger = logging.getLogger(__name__)

# Animated dots shown while the model is still answering
LOADING_INDICATOR_SELECTOR = ".container.svelte-1devy8o"
# Preview frame carrying the generated document
RESULT_FRAME_SELECTOR = "iframe[srcdoc]"


def completion_predicate(loading_display: str | None, has_result: bool) -> bool:
    """Both signals from one DOM evaluation.

    ``loading_display`` is the computed ``display`` of the loading indicator, or None
    when the indicator is absent.
    """
    loading_gone = loading_display is None or loading_display == "none"
    return loading_gone and has_result


async def wait_for_completion(
    session: RenderSession,
    timeout_ms: int,
    poll_interval_ms: int,
    job_id: str = "-",
) -> bool:
    """Return True once the session reports completion, False if ``timeout_ms`` elapses.

    Each poll is a fresh evaluation; an earlier True is never reused.
    """
    deadline = time.monotonic() + timeout_ms / 1000
    while True:
        if await session.is_complete():
            logger.info("[%s] Generation complete", job_id)
            return True
        if time.monotonic() >= deadline:
            logger.warning("[%s] Completion not observed within %d ms", job_id, timeout_ms)
            return False
        logger.debug("[%s] Still generating...", job_id)
        await asyncio.sleep(poll_interval_ms / 1000)
