# uiauto_poll/exceptions.py
"""
@file exceptions.py
@brief Custom exception classes for the polling engine.
"""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .outcomes import ErrorKind


class UIAutoError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(UIAutoError):
    """Raised when timing configuration is invalid."""
    pass


class WaitPolicyError(ConfigError):
    """Raised when a WaitPolicy is constructed with invalid values."""
    pass


class ScopeError(UIAutoError):
    """Raised when the remote timeout scope is entered twice on one thread."""
    pass


class TimeoutError(UIAutoError):
    """
    Raised when a poll session exhausts its budget.

    This exception preserves the last transient failure seen before the
    timeout, so the caller can tell "timed out after N attempts with kind K"
    apart from a plain falsy condition.

    Attributes:
        original_exception: The last exception observed before timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        last_kind: ErrorKind of the last transient failure (None if none)
        attempt_count: Number of attempts made
        elapsed_time: Actual elapsed time in seconds
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.last_kind: Optional[ErrorKind] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.last_kind is not None:
            details.append(f"Last kind: {self.last_kind.value}")
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            if getattr(current, "original_exception", None) is not None:
                current = current.original_exception
            else:
                return current
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""
        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))


class ProbeFailedError(UIAutoError):
    """Raised for a probe outcome that was classified as fatal."""

    def __init__(
        self,
        description: str,
        kind: ErrorKind,
        message: str,
        attempts: int,
        cause: Optional[BaseException] = None,
    ):
        self.description = description
        self.kind = kind
        self.message = message
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            f"Fatal failure during {description} on attempt {attempts}: "
            f"{kind.value}: {message}"
        )


class PollCancelledError(UIAutoError):
    """Raised when a caller-supplied cancellation check stopped a poll."""

    def __init__(self, description: str, attempts: int):
        self.description = description
        self.attempts = attempts
        super().__init__(f"Cancelled {description} after {attempts} attempt(s)")


class ActionError(UIAutoError):
    """
    Raised when a retried UI action fails.

    Carries the last observed ErrorKind and message so callers can decide
    between a hard failure and an "if present" soft failure.
    """

    def __init__(
        self,
        action: str,
        element_name: Optional[str] = None,
        details: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        attempts: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.element_name = element_name
        self.details = details
        self.kind = kind
        self.attempts = attempts
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"ActionError: action='{self.action}'"
        if self.element_name:
            base += f" element='{self.element_name}'"
        if self.kind is not None:
            base += f" kind={self.kind.value}"
        if self.attempts is not None:
            base += f" attempts={self.attempts}"
        if self.details:
            base += f" details='{self.details}'"
        if self.cause:
            base += f" cause='{type(self.cause).__name__}: {self.cause}'"
        return base

    def get_cause_traceback(self) -> str:
        """
        Get a formatted traceback string from the cause exception.

        @return Formatted traceback string or empty string if no cause
        """
        if self.cause is None:
            return ""
        return "".join(traceback.format_exception(
            type(self.cause),
            self.cause,
            self.cause.__traceback__
        ))
