"""Failure taxonomy for a generation job.

Every class carries a human-readable message; the orchestrator stores ``str(exc)``
as the job's error cause.
"""


class GenerationError(Exception):
    """Base class for failures raised while driving a render session."""


class AcquisitionFailure(GenerationError):
    """The render session could not be started. Fatal."""


class AuthInjectionFailure(GenerationError):
    """The credential could not be written into the session. Logged, never fatal."""


class NavigationTimeout(GenerationError):
    """The chat page did not load within its bound. Fatal."""


class InputNotFound(GenerationError):
    """The prompt input never appeared. Fatal."""


class ExtractionFailure(GenerationError):
    """No usable document could be read from the result element. Fatal."""
