"""Tests for the generation orchestrator against a scripted session."""

import asyncio
import html

import pytest

from chatforge.generate.errors import AuthInjectionFailure, InputNotFound, NavigationTimeout
from chatforge.jobs import GenerationJob, JobStatus

from conftest import INNER_DOCUMENT, FakeSession, wrap_in_srcdoc


def _run(orchestrator, job_id="job-1", prompt="hello", skip=False):
    return asyncio.run(orchestrator.run(job_id, prompt, skip))


def test_ready_with_inner_document(make_orchestrator, store):
    """Completion after one poll, srcdoc wraps a tagged document → ready."""
    session = FakeSession(completion=[True], srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, factory = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.READY
    assert job.artifact == INNER_DOCUMENT
    assert job.error_message is None
    assert job.completed_at is not None
    assert store.get("job-1") is job
    assert session.prompts == ["hello"]
    assert session.release_count == 1
    assert factory.acquired == 1


def test_phase_order(make_orchestrator):
    session = FakeSession(completion=[True], srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)
    _run(orchestrator)
    assert session.calls == ["authenticate", "submit_prompt", "is_complete", "read_artifact_attribute"]


def test_artifact_is_entity_cleaned_and_trimmed(make_orchestrator):
    inner = (
        '<html lang="en"><body><pre>&lt;button&gt;Tom &amp;amp; Jerry&lt;/button&gt;</pre>'
        "<p>" + "padding " * 20 + "</p></body></html>"
    )
    session = FakeSession(srcdoc="\n  " + html.escape(inner) + "  \n")
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.READY
    assert "<pre><button>Tom &amp; Jerry</button></pre>" in job.artifact
    assert job.artifact == job.artifact.strip()


def test_soft_timeout_then_missing_attribute_is_error(make_orchestrator):
    """Never completes, and nothing to extract afterwards → error."""
    session = FakeSession(completion=[False], srcdoc=None)
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert "Extraction failed" in job.error_message
    assert job.artifact is None
    assert session.completion_checks >= 1
    assert session.release_count == 1


def test_soft_timeout_still_extracts(make_orchestrator):
    """A completion timeout is not an error by itself."""
    session = FakeSession(completion=[False], srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.READY
    assert job.artifact == INNER_DOCUMENT


def test_short_extraction_is_error(make_orchestrator):
    session = FakeSession(srcdoc=html.escape('<html lang="en"><body>tiny</body></html>'))
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert job.error_message == "Extraction failed: code too short or empty"


@pytest.mark.parametrize(
    "error",
    [
        InputNotFound("Input field not found within 120000 ms"),
        NavigationTimeout("Navigation to https://chat.z.ai/ timed out"),
    ],
)
def test_submit_failure_skips_completion_wait(make_orchestrator, error):
    session = FakeSession(submit_error=error, srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert job.error_message == str(error)
    assert session.completion_checks == 0
    assert "read_artifact_attribute" not in session.calls
    assert session.release_count == 1


def test_skip_control_not_found_is_not_fatal(make_orchestrator):
    session = FakeSession(skip_found_on=None, srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator, skip=True)

    assert job.status is JobStatus.READY
    assert session.skip_attempts >= 1
    assert session.completion_checks >= 1


def test_skip_control_clicked_before_completion_wait(make_orchestrator):
    session = FakeSession(skip_found_on=2, srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)

    _run(orchestrator, skip=True)

    assert session.skip_attempts == 2
    assert session.calls.index("find_and_activate") < session.calls.index("is_complete")


def test_skip_phase_not_run_when_disabled(make_orchestrator):
    session = FakeSession(skip_found_on=1, srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session)

    _run(orchestrator, skip=False)

    assert session.skip_attempts == 0


def test_acquisition_failure_is_error(make_orchestrator, acquisition_error):
    orchestrator, factory = make_orchestrator(error=acquisition_error)

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert job.error_message == "Browser launch failed: chromium not installed"
    assert factory.session.calls == []
    assert factory.session.release_count == 0


def test_unexpected_acquisition_error_is_error(make_orchestrator):
    orchestrator, _ = make_orchestrator(error=OSError("no display"))

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert "no display" in job.error_message


def test_auth_failure_is_not_fatal(make_orchestrator):
    session = FakeSession(
        auth_error=AuthInjectionFailure("net::ERR_NAME_NOT_RESOLVED"),
        srcdoc=wrap_in_srcdoc(INNER_DOCUMENT),
    )
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.READY
    assert session.credentials == ["test-token"]


def test_no_credential_skips_authentication(make_orchestrator):
    session = FakeSession(srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session, credential=None)

    job = _run(orchestrator)

    assert job.status is JobStatus.READY
    assert "authenticate" not in session.calls


def test_unexpected_extraction_error_releases_once(make_orchestrator):
    session = FakeSession(extract_error=RuntimeError("Target page, context or browser has been closed"))
    orchestrator, _ = make_orchestrator(session=session)

    job = _run(orchestrator)

    assert job.status is JobStatus.ERROR
    assert "has been closed" in job.error_message
    assert session.release_count == 1


def test_debug_dump_on_error_path(make_orchestrator, tmp_path):
    session = FakeSession(srcdoc=None)
    orchestrator, _ = make_orchestrator(session=session, debug_dir=tmp_path)

    _run(orchestrator, job_id="job-dbg")

    assert session.dumped == [tmp_path / "job-dbg"]


def test_no_debug_dump_on_success(make_orchestrator, tmp_path):
    session = FakeSession(srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, _ = make_orchestrator(session=session, debug_dir=tmp_path)

    _run(orchestrator)

    assert session.dumped == []


def test_terminal_job_is_not_rerun(make_orchestrator, store):
    job = GenerationJob(job_id="done", prompt="hello")
    job.mark_error("earlier failure")
    store.put("done", job)
    session = FakeSession(srcdoc=wrap_in_srcdoc(INNER_DOCUMENT))
    orchestrator, factory = make_orchestrator(session=session)

    result = _run(orchestrator, job_id="done")

    assert result.status is JobStatus.ERROR
    assert result.error_message == "earlier failure"
    assert factory.acquired == 0
