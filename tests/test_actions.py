# tests/test_actions.py
"""
Tests for retried actions.
"""

import threading

import pytest
from selenium.common.exceptions import (ElementClickInterceptedException,
                                        StaleElementReferenceException)

from uiauto_poll.actions import RetryableAction
from uiauto_poll.config import TimeConfig
from uiauto_poll.exceptions import ActionError
from uiauto_poll.outcomes import (Completed, ErrorKind, Failed, Success,
                                  TimedOut, TransientFailure)
from uiauto_poll.poller import ConditionPoller
from uiauto_poll.policy import WaitPolicy


@pytest.fixture
def action(poller):
    return RetryableAction(poller)


class FlakyButton:
    """Click fails with an intercepted click until `failures` runs out."""

    def __init__(self, failures, events):
        self.failures = failures
        self.events = events

    def click(self):
        self.events.append("click")
        if self.failures > 0:
            self.failures -= 1
            raise ElementClickInterceptedException("element click intercepted")
        return "clicked"


class TestAttempt:
    """Tests for RetryableAction.attempt()."""

    def test_before_retry_never_runs_before_first_attempt(self, action):
        events = []
        result = action.attempt(
            lambda: Success(events.append("act")),
            WaitPolicy(timeout=5.0, poll_interval=0.5),
            before_retry=lambda: events.append("scroll"),
        )
        assert isinstance(result, Completed)
        assert events == ["act"]

    def test_before_retry_runs_attempts_minus_one_times(self, action):
        events = []
        button = FlakyButton(2, events)
        result = action.attempt_callable(
            button.click,
            WaitPolicy(timeout=5.0, poll_interval=0.5),
            before_retry=lambda: events.append("scroll"),
        )
        assert isinstance(result, Completed)
        assert result.attempts == 3
        assert events == ["click", "scroll", "click", "scroll", "click"]

    def test_before_retry_count_on_timeout(self, action):
        events = []
        button = FlakyButton(100, events)
        result = action.attempt_callable(
            button.click,
            WaitPolicy(timeout=2.0, poll_interval=0.5),
            before_retry=lambda: events.append("scroll"),
        )
        assert isinstance(result, TimedOut)
        assert result.attempts == 4
        assert events.count("scroll") == 3

    def test_before_retry_failure_counts_as_attempt_failure(self, action):
        state = {"scrolls": 0}

        def scroll():
            state["scrolls"] += 1
            if state["scrolls"] == 1:
                raise StaleElementReferenceException("stale")

        calls = []

        def act():
            calls.append(1)
            if len(calls) == 1:
                return TransientFailure(ErrorKind.NOT_INTERACTABLE, "covered")
            return Success("ok")

        result = action.attempt(act, WaitPolicy(timeout=5.0, poll_interval=0.5), before_retry=scroll)

        assert isinstance(result, Completed)
        assert result.attempts == 3
        assert len(calls) == 2

    def test_fatal_action_stops(self, action, clock):
        def explode():
            raise RuntimeError("driver gone")

        result = action.attempt_callable(explode, WaitPolicy(timeout=5.0, poll_interval=0.5))
        assert isinstance(result, Failed)
        assert result.attempts == 1
        assert clock.sleeps == []

    def test_reports_preparation_count(self, action, sink):
        events = []
        action.attempt_callable(
            FlakyButton(1, events).click,
            WaitPolicy(timeout=5.0, poll_interval=0.5),
            before_retry=lambda: None,
            description="click on 'save'",
        )
        assert "Ran retry preparation 1 time(s) for click on 'save'" in sink.of("info")


class TestPerform:
    """Tests for the hard and soft variants."""

    def test_perform_returns_value(self, action):
        events = []
        value = action.perform(FlakyButton(1, events).click, WaitPolicy(timeout=5.0, poll_interval=0.5))
        assert value == "clicked"

    def test_perform_raises_action_error_on_timeout(self, action):
        events = []
        with pytest.raises(ActionError) as exc_info:
            action.perform(
                FlakyButton(100, events).click,
                WaitPolicy(timeout=1.0, poll_interval=0.5),
                description="click",
                element_name="save",
            )
        error = exc_info.value
        assert error.kind is ErrorKind.NOT_INTERACTABLE
        assert error.attempts == 2
        assert error.element_name == "save"
        assert isinstance(error.cause, ElementClickInterceptedException)
        assert "ElementClickInterceptedException" in error.get_cause_traceback()

    def test_perform_raises_action_error_on_fatal(self, action):
        def explode():
            raise RuntimeError("driver gone")

        with pytest.raises(ActionError) as exc_info:
            action.perform(explode, WaitPolicy(timeout=1.0, poll_interval=0.5))
        assert exc_info.value.kind is ErrorKind.OTHER
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_perform_if_present_does_not_raise(self, action, sink):
        events = []
        result = action.perform_if_present(
            FlakyButton(100, events).click,
            WaitPolicy(timeout=1.0, poll_interval=0.5),
            description="dismiss banner",
        )
        assert isinstance(result, TimedOut)
        assert result.last_kind is ErrorKind.NOT_INTERACTABLE
        assert any(line.startswith("Skipped dismiss banner after 2 attempt(s)") for line in sink.of("warn"))

    def test_perform_if_present_success_is_quiet(self, action, sink):
        result = action.perform_if_present(lambda: None, WaitPolicy(timeout=1.0, poll_interval=0.5))
        assert result.ok
        assert sink.of("warn") == []


class TestPerCallState:
    """Retry bookkeeping belongs to a single call, not to the instance."""

    def test_preparation_count_does_not_carry_over(self, action, sink):
        policy = WaitPolicy(timeout=5.0, poll_interval=0.5)
        action.attempt_callable(FlakyButton(2, []).click, policy, before_retry=lambda: None, description="first")
        action.attempt_callable(FlakyButton(1, []).click, policy, before_retry=lambda: None, description="second")
        action.attempt_callable(FlakyButton(0, []).click, policy, before_retry=lambda: None, description="third")

        assert sink.of("info") == [
            "Iterated 3 time(s) for first!",
            "Ran retry preparation 2 time(s) for first",
            "Iterated 2 time(s) for second!",
            "Ran retry preparation 1 time(s) for second",
        ]

    def test_shared_instance_across_threads(self, sink):
        action = RetryableAction(ConditionPoller(sink=sink))
        policy = WaitPolicy(timeout=5.0, poll_interval=0.01)
        results = {}

        def run(name, failures):
            results[name] = action.attempt_callable(
                FlakyButton(failures, []).click,
                policy,
                before_retry=lambda: None,
                description=name,
            )

        workers = [
            threading.Thread(target=run, args=("left", 4)),
            threading.Thread(target=run, args=("right", 1)),
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join(5.0)

        assert results["left"].attempts == 5
        assert results["right"].attempts == 2
        assert "Ran retry preparation 4 time(s) for left" in sink.of("info")
        assert "Ran retry preparation 1 time(s) for right" in sink.of("info")


class TestDefaultPolicy:

    def test_action_timeout_setting_applies(self, action):
        with TimeConfig.override(action_timeout={"timeout": 1.0, "interval": 0.5}):
            result = action.attempt_callable(FlakyButton(100, []).click)
        assert isinstance(result, TimedOut)
        assert result.attempts == 2
