# uiauto_poll/poller.py
"""
@file poller.py
@brief Bounded-retry condition polling engine.

A single loop drives every wait and retried action in the package: it
evaluates a probe, classifies transient failures, paces attempts by the
policy interval and stops deterministically once the timeout is spent.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from .classifier import DEFAULT_CLASSIFIER, ErrorClassifier
from .outcomes import (Cancelled, Completed, ErrorKind, Failed, FatalFailure,
                       Pending, Probe, PollResult, Success, TimedOut,
                       TransientFailure)
from .policy import WaitPolicy
from .polllogger import POLL_LOGGER
from .scope import NullTimeoutScope, RemoteTimeoutScope

# Kinds that prove the target is gone during a negative check.
# Other transient kinds count as one confirmation each.
ABSENCE_KINDS = frozenset({ErrorKind.STALE_REFERENCE})

# Consecutive confirmations a negative check needs before completing.
# A clean read that no longer shows the positive state is a confirmation.
NEGATIVE_CONFIRMATIONS = 2


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


class ConditionPoller:
    """
    Runs a probe until it succeeds, fails fatally, is cancelled or the
    policy timeout expires. Holds no state between calls.
    """

    def __init__(
        self,
        classifier: Optional[ErrorClassifier] = None,
        scope: Optional[RemoteTimeoutScope] = None,
        sink=None,
        clock: Callable[[], float] = _now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        @param classifier Decides which failure transitions are logged
        @param scope Remote implicit-wait scope shrunk around each attempt
        @param sink LogSink with info/warn/success (defaults to POLL_LOGGER)
        @param clock Monotonic clock in seconds
        @param sleep Sleep function used between attempts
        """
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self.scope = scope or NullTimeoutScope()
        self.sink = sink if sink is not None else POLL_LOGGER
        self._clock = clock
        self._sleep = sleep

    def run(
        self,
        probe: Probe,
        policy: WaitPolicy,
        *,
        description: str = "condition",
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> PollResult:
        start_time = self._clock()
        last_kind: Optional[ErrorKind] = None
        last_message: Optional[str] = None
        last_error: Optional[BaseException] = None
        attempts = 0
        confirmations = 0
        result: Optional[PollResult] = None

        while True:
            elapsed = self._clock() - start_time
            if attempts > 0 and elapsed >= policy.timeout:
                break
            if cancel_check is not None and cancel_check():
                result = Cancelled(last_kind, attempts, elapsed)
                break

            attempts += 1
            with self.scope.shrink_to(policy.probe_timeout):
                outcome = probe()
            elapsed = self._clock() - start_time

            if isinstance(outcome, Success):
                if not policy.negative_check:
                    result = Completed(outcome.value, attempts, elapsed)
                    break
                # positive state still holds
                confirmations = 0
            elif isinstance(outcome, Pending):
                if policy.negative_check:
                    confirmations += 1
            elif isinstance(outcome, TransientFailure):
                if self.classifier.should_log_transition(last_kind, outcome.kind):
                    self.sink.warn(f"Iterating... ({outcome.kind.value}: {outcome.message})")
                last_kind = outcome.kind
                last_message = outcome.message
                last_error = outcome.error
                if policy.negative_check:
                    if outcome.kind in ABSENCE_KINDS:
                        result = Completed(None, attempts, elapsed)
                        break
                    confirmations += 1
            elif isinstance(outcome, FatalFailure):
                result = Failed(outcome.kind, outcome.message, attempts, elapsed, outcome.error)
                break
            else:
                raise TypeError(f"Probe returned {outcome!r}, expected a ProbeOutcome")

            if confirmations >= NEGATIVE_CONFIRMATIONS:
                result = Completed(None, attempts, elapsed)
                break

            time_left = policy.timeout - (self._clock() - start_time)
            if time_left > 0:
                self._sleep(min(policy.poll_interval, time_left))

        if result is None:
            result = TimedOut(
                last_kind,
                attempts,
                elapsed=self._clock() - start_time,
                timeout=policy.timeout,
                last_message=last_message,
                last_error=last_error,
            )

        if attempts > 1:
            self.sink.info(f"Iterated {attempts} time(s) for {description}!")
        return result

    def wait_until(
        self,
        predicate: Callable[[], object],
        policy: WaitPolicy,
        *,
        description: str = "condition",
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> PollResult:
        """Poll a raw predicate until it returns a truthy value."""
        return self.run(
            self.classifier.condition_probe(predicate, description),
            policy,
            description=description,
            cancel_check=cancel_check,
        )
