"""Generation engine: drive a render session from prompt to extracted artifact."""

from chatforge.generate.completion import completion_predicate, wait_for_completion
from chatforge.generate.errors import (
    AcquisitionFailure,
    AuthInjectionFailure,
    ExtractionFailure,
    GenerationError,
    InputNotFound,
    NavigationTimeout,
)
from chatforge.generate.extractor import extract_payload, select_document
from chatforge.generate.mode import GenerationConfig, ThinkingMode, get_generation_config
from chatforge.generate.orchestrator import GenerationOrchestrator, GenerationTimings
from chatforge.generate.skip import click_skip_control

__all__ = [
    "AcquisitionFailure",
    "AuthInjectionFailure",
    "ExtractionFailure",
    "GenerationConfig",
    "GenerationError",
    "GenerationOrchestrator",
    "GenerationTimings",
    "InputNotFound",
    "NavigationTimeout",
    "ThinkingMode",
    "click_skip_control",
    "completion_predicate",
    "extract_payload",
    "get_generation_config",
    "select_document",
    "wait_for_completion",
]
