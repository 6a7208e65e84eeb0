"""Thinking-mode toggle, the one piece of mutable runtime config.

Mode "on" lets the model show its reasoning; "off" clicks the Skip control, i.e.
``skip_intermediate_phase=True``. Jobs copy the flag when they are submitted.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel

from chatforge.config import get_settings

logger = logging.getLogger(__name__)


class ThinkingMode(str, Enum):
    ON = "on"
    OFF = "off"


class GenerationConfig(BaseModel):
    skip_intermediate_phase: bool = False

    @property
    def thinking_mode(self) -> ThinkingMode:
        return ThinkingMode.OFF if self.skip_intermediate_phase else ThinkingMode.ON

    def set_thinking_mode(self, mode: ThinkingMode | str) -> ThinkingMode:
        """Set the mode; raises ValueError for anything but "on"/"off"."""
        mode = ThinkingMode(mode)
        self.skip_intermediate_phase = mode is ThinkingMode.OFF
        logger.info("Thinking mode set to: %s", mode.value.upper())
        return mode


_config: GenerationConfig | None = None


def get_generation_config() -> GenerationConfig:
    """Return the process-wide config, seeded from CHATFORGE_THINKING_MODE."""
    global _config
    if _config is None:
        mode = ThinkingMode(get_settings().chatforge_thinking_mode.lower())
        _config = GenerationConfig(skip_intermediate_phase=mode is ThinkingMode.OFF)
    return _config


def reset_generation_config() -> None:
    global _config
    _config = None
