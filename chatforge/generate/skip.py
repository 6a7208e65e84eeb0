"""Best-effort click of the optional "Skip Thinking" control."""

from __future__ import annotations

import asyncio
import logging
import time

from chatforge.session.base import SKIP_CONTROL, ControlDescriptor, RenderSession

logger = logging.getLogger(__name__)


async def click_skip_control(
    session: RenderSession,
    timeout_ms: int = 20_000,
    poll_interval_ms: int = 500,
    descriptor: ControlDescriptor = SKIP_CONTROL,
    job_id: str = "-",
) -> bool:
    """Search for the control until found (click once, return True) or the bound expires.

    Never raises: a failed attempt is logged and the search goes on.
    """
    deadline = time.monotonic() + timeout_ms / 1000
    while time.monotonic() < deadline:
        try:
            if await session.find_and_activate(descriptor):
                return True
        except Exception as e:
            logger.info("[%s] Error while searching for Skip button: %s", job_id, e)
        await asyncio.sleep(poll_interval_ms / 1000)
    return False
