"""Tests for completion detection and the skip-control search."""

import asyncio

import pytest

from chatforge.generate.completion import completion_predicate, wait_for_completion
from chatforge.generate.skip import click_skip_control

from conftest import FakeSession


@pytest.mark.parametrize(
    "loading_display, has_result, expected",
    [
        (None, True, True),
        ("none", True, True),
        ("flex", True, False),
        (None, False, False),
        ("none", False, False),
        ("block", False, False),
    ],
)
def test_completion_predicate_needs_both_signals(loading_display, has_result, expected):
    assert completion_predicate(loading_display, has_result) is expected


class TestWaitForCompletion:

    def test_returns_true_on_first_positive_poll(self):
        session = FakeSession(completion=[False, False, True])
        assert asyncio.run(wait_for_completion(session, timeout_ms=1000, poll_interval_ms=1)) is True
        assert session.completion_checks == 3

    def test_returns_false_when_bound_elapses(self):
        session = FakeSession(completion=[False])
        assert asyncio.run(wait_for_completion(session, timeout_ms=20, poll_interval_ms=1)) is False
        assert session.completion_checks >= 2

    def test_evaluates_fresh_each_poll(self):
        # An early True would end the wait at once; it is the first observation that counts
        session = FakeSession(completion=[False, True])
        asyncio.run(wait_for_completion(session, timeout_ms=1000, poll_interval_ms=1))
        assert session.completion_checks == 2


class TestClickSkipControl:

    def test_found_after_a_few_polls(self):
        session = FakeSession(skip_found_on=3)
        assert asyncio.run(click_skip_control(session, timeout_ms=1000, poll_interval_ms=1)) is True
        assert session.skip_attempts == 3

    def test_transient_errors_are_swallowed(self):
        session = FakeSession(skip_found_on=3, skip_errors=2)
        assert asyncio.run(click_skip_control(session, timeout_ms=1000, poll_interval_ms=1)) is True

    def test_not_found_returns_false(self):
        session = FakeSession(skip_found_on=None)
        assert asyncio.run(click_skip_control(session, timeout_ms=20, poll_interval_ms=1)) is False
        assert session.skip_attempts >= 1

    def test_always_failing_search_returns_false(self):
        session = FakeSession(skip_found_on=1, skip_errors=10_000)
        assert asyncio.run(click_skip_control(session, timeout_ms=20, poll_interval_ms=1)) is False
