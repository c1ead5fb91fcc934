# uiauto_poll/classifier.py
"""
@file classifier.py
@brief Buckets remote-probe failures into transient and fatal kinds.

Any WebDriverException is a remote-communication failure and is transient.
Anything else propagates as a fatal outcome and is never retried.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple, Type

from selenium.common.exceptions import (ElementClickInterceptedException,
                                        ElementNotInteractableException,
                                        ElementNotVisibleException,
                                        InvalidElementStateException,
                                        NoSuchElementException,
                                        StaleElementReferenceException,
                                        WebDriverException)

from .outcomes import (ErrorKind, FatalFailure, Pending, Probe, ProbeOutcome,
                       Success, TransientFailure)

# Checked in order; subclasses must come before their bases.
KIND_MAP: Tuple[Tuple[Type[BaseException], ErrorKind], ...] = (
    (StaleElementReferenceException, ErrorKind.STALE_REFERENCE),
    (ElementClickInterceptedException, ErrorKind.NOT_INTERACTABLE),
    (ElementNotVisibleException, ErrorKind.NOT_INTERACTABLE),
    (ElementNotInteractableException, ErrorKind.NOT_INTERACTABLE),
    (InvalidElementStateException, ErrorKind.NOT_INTERACTABLE),
    (NoSuchElementException, ErrorKind.NOT_FOUND),
)


def _message(error: BaseException) -> str:
    msg = getattr(error, "msg", None) or str(error)
    return f"{type(error).__name__}: {msg.strip()}" if msg else type(error).__name__


class ErrorClassifier:
    """Pure classification of raw failures from the remote surface."""

    def __init__(
        self,
        transient: Tuple[Type[BaseException], ...] = (WebDriverException,),
        extra_kinds: Optional[Dict[Type[BaseException], ErrorKind]] = None,
    ):
        """
        @param transient Exception types treated as remote-communication failures
        @param extra_kinds Additional type -> ErrorKind mappings, checked first
        """
        self._transient = tuple(transient)
        extra = tuple((extra_kinds or {}).items())
        self._kinds = extra + KIND_MAP

    def classify(self, error: BaseException) -> ErrorKind:
        for error_type, kind in self._kinds:
            if isinstance(error, error_type):
                return kind
        return ErrorKind.OTHER

    def is_transient(self, error: BaseException) -> bool:
        return isinstance(error, self._transient)

    @staticmethod
    def should_log_transition(
        previous_kind: Optional[ErrorKind],
        current_kind: ErrorKind,
    ) -> bool:
        """True only when the kind changed since the previous failure."""
        return previous_kind != current_kind

    def outcome_for(self, error: BaseException) -> ProbeOutcome:
        kind = self.classify(error)
        if self.is_transient(error):
            return TransientFailure(kind, _message(error), error)
        return FatalFailure(kind, _message(error), error)

    def evaluate(self, func: Callable[[], Any]) -> ProbeOutcome:
        """Invoke func once and wrap its result or failure as an outcome."""
        try:
            return Success(func())
        except Exception as e:
            return self.outcome_for(e)

    def action_probe(self, func: Callable[[], Any]) -> Probe:
        """Probe that succeeds whenever func returns without raising."""
        return lambda: self.evaluate(func)

    def condition_probe(
        self,
        predicate: Callable[[], Any],
        description: str = "condition",
    ) -> Probe:
        """Probe that succeeds only when predicate returns a truthy value."""
        def probe() -> ProbeOutcome:
            outcome = self.evaluate(predicate)
            if isinstance(outcome, Success) and not outcome.value:
                return Pending(f"{description} did not hold")
            return outcome
        return probe


DEFAULT_CLASSIFIER = ErrorClassifier()
