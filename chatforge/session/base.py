"""Render session protocol — the capabilities the orchestrator drives."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class ControlDescriptor:
    """Locates a clickable control: a container found by selector, then a control inside it."""

    container: str
    control: str = "button"


# Optional "Skip Thinking" control shown while the model reasons
SKIP_CONTROL = ControlDescriptor(container='div[aria-label="Skip Thinking"]', control="button")


class RenderSession(Protocol):
    """One isolated browser session, owned by exactly one job."""

    async def authenticate(self, credential: str) -> None:
        """Inject the credential into session storage and cookies."""
        ...

    async def submit_prompt(self, text: str) -> None:
        """Open the chat with the prompt, fill the input, and press Enter."""
        ...

    async def is_complete(self) -> bool:
        """Single evaluation of the completion predicate."""
        ...

    async def find_and_activate(self, descriptor: ControlDescriptor) -> bool:
        """Click the control if it is present right now."""
        ...

    async def read_artifact_attribute(self) -> str | None:
        """Raw (entity-encoded) srcdoc of the result frame, or None."""
        ...

    async def dump_debug(self, directory: Path) -> list[Path]:
        """Write diagnostic files (page HTML, screenshot) and return their paths."""
        ...

    async def release(self) -> None:
        """Tear the session down. Safe to call more than once."""
        ...


class SessionFactory(Protocol):
    async def acquire(self) -> RenderSession: ...
