# uiauto_poll/actions.py
"""
@file actions.py
@brief Mutating UI actions retried with the polling discipline.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .config import TimeConfig
from .exceptions import ActionError
from .outcomes import Completed, Failed, PollResult, Probe, ProbeOutcome, TimedOut
from .poller import ConditionPoller
from .policy import WaitPolicy


class RetryableAction:
    """
    ConditionPoller specialized so a probe is "attempt the action once".

    before_retry runs before every attempt after the first, e.g. to scroll
    an element into view again before re-trying a click. Without an explicit
    policy the action_timeout setting of the current TimeConfig applies.
    """

    def __init__(self, poller: Optional[ConditionPoller] = None):
        self.poller = poller or ConditionPoller()

    def attempt(
        self,
        action: Probe,
        policy: Optional[WaitPolicy] = None,
        before_retry: Optional[Callable[[], Any]] = None,
        *,
        description: str = "action",
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> PollResult:
        attempt_no = 0
        prepared_count = 0

        def probe() -> ProbeOutcome:
            nonlocal attempt_no, prepared_count
            attempt_no += 1
            if attempt_no > 1 and before_retry is not None:
                prepared_count += 1
                prepared = self.poller.classifier.evaluate(before_retry)
                if not prepared.ok:
                    return prepared
            return action()

        result = self.poller.run(
            probe, _resolve_policy(policy), description=description, cancel_check=cancel_check
        )
        if prepared_count:
            self.poller.sink.info(
                f"Ran retry preparation {prepared_count} time(s) for {description}"
            )
        return result

    def attempt_callable(
        self,
        func: Callable[[], Any],
        policy: Optional[WaitPolicy] = None,
        before_retry: Optional[Callable[[], Any]] = None,
        *,
        description: str = "action",
    ) -> PollResult:
        """attempt() for a raw callable; exceptions are classified."""
        return self.attempt(
            self.poller.classifier.action_probe(func),
            policy,
            before_retry,
            description=description,
        )

    def perform(
        self,
        func: Callable[[], Any],
        policy: Optional[WaitPolicy] = None,
        before_retry: Optional[Callable[[], Any]] = None,
        *,
        description: str = "action",
        element_name: Optional[str] = None,
    ) -> Any:
        """Hard variant: raise ActionError unless the action completed."""
        result = self.attempt_callable(func, policy, before_retry, description=description)
        if isinstance(result, Completed):
            return result.value
        error = to_action_error(result, description, element_name)
        raise error from error.cause

    def perform_if_present(
        self,
        func: Callable[[], Any],
        policy: Optional[WaitPolicy] = None,
        before_retry: Optional[Callable[[], Any]] = None,
        *,
        description: str = "action",
    ) -> PollResult:
        """Soft variant: log the failure and hand the result back."""
        result = self.attempt_callable(func, policy, before_retry, description=description)
        if not result.ok:
            self.poller.sink.warn(
                f"Skipped {description} after {result.attempts} attempt(s): "
                f"{_failure_details(result)}"
            )
        return result


def _resolve_policy(policy: Optional[WaitPolicy]) -> WaitPolicy:
    return policy or TimeConfig.current().policy("action_timeout")


def _failure_details(result: PollResult) -> str:
    if isinstance(result, Failed):
        return result.message
    if isinstance(result, TimedOut):
        return result.last_message or "condition never held"
    return "cancelled"


def to_action_error(
    result: PollResult,
    action: str,
    element_name: Optional[str] = None,
) -> ActionError:
    """Build the distinguished error for a result that did not complete."""
    if isinstance(result, Failed):
        kind, cause = result.kind, result.error
    elif isinstance(result, TimedOut):
        kind, cause = result.last_kind, result.last_error
    else:
        kind, cause = getattr(result, "last_kind", None), None
    return ActionError(
        action=action,
        element_name=element_name,
        details=_failure_details(result),
        kind=kind,
        attempts=result.attempts,
        cause=cause,
    )
