"""Pytest configuration and shared fixtures."""

import html
import os
import tempfile
from pathlib import Path

import pytest

# Keep settings-created directories out of the project tree
os.environ.setdefault("CHATFORGE_DATA_DIR", tempfile.mkdtemp(prefix="chatforge-test-"))

from chatforge.generate.errors import AcquisitionFailure
from chatforge.generate.mode import GenerationConfig, reset_generation_config
from chatforge.generate.orchestrator import GenerationOrchestrator, GenerationTimings
from chatforge.jobs.service import JobService
from chatforge.jobs.store import InMemoryJobStore, reset_job_store


INNER_DOCUMENT = (
    '<html lang="en"><head><meta charset="utf-8"><title>Hello</title></head>'
    "<body><h1>Hello world</h1><p>Generated page body with enough text to pass the "
    "minimum length check.</p></body></html>"
)


def wrap_in_srcdoc(inner: str) -> str:
    """Outer preview document around ``inner``, entity-escaped like a srcdoc attribute."""
    outer = (
        "<!DOCTYPE html><html><head><style>body{margin:0}</style></head>"
        f'<body><div class="preview">{inner}</div></body></html>'
    )
    return html.escape(outer)


class FakeSession:
    """Scripted RenderSession.

    ``completion`` is consumed one value per ``is_complete`` call; the last value
    repeats once the script runs out.
    """

    def __init__(
        self,
        completion=(True,),
        srcdoc=None,
        skip_found_on=None,
        skip_errors=0,
        submit_error=None,
        auth_error=None,
        extract_error=None,
    ):
        self.completion = list(completion)
        self.srcdoc = srcdoc
        self.skip_found_on = skip_found_on
        self.skip_errors = skip_errors
        self.submit_error = submit_error
        self.auth_error = auth_error
        self.extract_error = extract_error
        self.calls: list[str] = []
        self.credentials: list[str] = []
        self.prompts: list[str] = []
        self.completion_checks = 0
        self.skip_attempts = 0
        self.release_count = 0
        self.dumped: list[Path] = []

    async def authenticate(self, credential):
        self.calls.append("authenticate")
        self.credentials.append(credential)
        if self.auth_error:
            raise self.auth_error

    async def submit_prompt(self, text):
        self.calls.append("submit_prompt")
        self.prompts.append(text)
        if self.submit_error:
            raise self.submit_error

    async def is_complete(self):
        self.calls.append("is_complete")
        self.completion_checks += 1
        if len(self.completion) > 1:
            return self.completion.pop(0)
        return self.completion[0]

    async def find_and_activate(self, descriptor):
        self.calls.append("find_and_activate")
        self.skip_attempts += 1
        if self.skip_attempts <= self.skip_errors:
            raise RuntimeError("Execution context was destroyed")
        return self.skip_found_on is not None and self.skip_attempts >= self.skip_found_on

    async def read_artifact_attribute(self):
        self.calls.append("read_artifact_attribute")
        if self.extract_error:
            raise self.extract_error
        return self.srcdoc

    async def dump_debug(self, directory):
        self.dumped.append(directory)
        return []

    async def release(self):
        self.release_count += 1


class FakeSessionFactory:
    def __init__(self, session=None, error=None):
        self.session = session or FakeSession()
        self.error = error
        self.acquired = 0

    async def acquire(self):
        self.acquired += 1
        if self.error:
            raise self.error
        return self.session


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_job_store()
    reset_generation_config()
    yield
    reset_job_store()
    reset_generation_config()


@pytest.fixture
def fast_timings():
    """No fixed delays; millisecond-scale polling bounds."""
    return GenerationTimings(
        initial_delay_ms=0,
        skip_timeout_ms=30,
        skip_poll_ms=1,
        completion_timeout_ms=30,
        completion_poll_ms=1,
        settle_delay_ms=0,
    )


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def make_orchestrator(store, fast_timings):
    def _make(session=None, error=None, credential="test-token", debug_dir=None):
        factory = FakeSessionFactory(session=session, error=error)
        orchestrator = GenerationOrchestrator(
            session_factory=factory,
            store=store,
            timings=fast_timings,
            credential=credential,
            debug_dir=debug_dir,
        )
        return orchestrator, factory

    return _make


@pytest.fixture
def make_service(store, make_orchestrator):
    def _make(session=None, error=None, skip=False):
        orchestrator, factory = make_orchestrator(session=session, error=error)
        service = JobService(store, orchestrator, GenerationConfig(skip_intermediate_phase=skip))
        return service, factory

    return _make


@pytest.fixture
def acquisition_error():
    return AcquisitionFailure("Browser launch failed: chromium not installed")
