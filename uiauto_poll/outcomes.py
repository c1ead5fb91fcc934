# uiauto_poll/outcomes.py
"""
@file outcomes.py
@brief Probe outcomes and poll results.

A probe reports one of Success, Pending, TransientFailure or FatalFailure.
A poll session ends in Completed, TimedOut, Failed or Cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .exceptions import PollCancelledError, ProbeFailedError, TimeoutError

T = TypeVar("T")


class ErrorKind(Enum):
    """Classification of a failure raised by the remote surface."""
    STALE_REFERENCE = "stale_reference"
    NOT_INTERACTABLE = "not_interactable"
    NOT_FOUND = "not_found"
    OTHER = "other"


# --- Probe outcomes ---

@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Pending:
    """The read succeeded but the awaited condition did not hold."""
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class TransientFailure:
    kind: ErrorKind
    message: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class FatalFailure:
    kind: ErrorKind
    message: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False


ProbeOutcome = Union[Success, Pending, TransientFailure, FatalFailure]
Probe = Callable[[], ProbeOutcome]


# --- Poll results ---

@dataclass(frozen=True)
class Completed(Generic[T]):
    value: T
    attempts: int
    elapsed: float

    @property
    def ok(self) -> bool:
        return True

    def raise_for_status(self, description: str = "condition") -> Completed[T]:
        return self


@dataclass(frozen=True)
class TimedOut:
    last_kind: Optional[ErrorKind]
    attempts: int
    elapsed: float = 0.0
    timeout: Optional[float] = None
    last_message: Optional[str] = None
    last_error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False

    def raise_for_status(self, description: str = "condition") -> Any:
        if self.last_kind is not None:
            message = (
                f"Timed out waiting for {description} after {self.timeout}s "
                f"({self.attempts} attempts). Last error: {self.last_message}"
            )
        else:
            message = (
                f"Timed out waiting for {description} after {self.timeout}s "
                f"(condition never held)"
            )
        error = TimeoutError(message)
        error.original_exception = self.last_error
        error.description = description
        error.timeout = self.timeout
        error.last_kind = self.last_kind
        error.attempt_count = self.attempts
        error.elapsed_time = self.elapsed
        raise error


@dataclass(frozen=True)
class Failed:
    """A probe outcome was fatal; polling stopped without retrying."""
    kind: ErrorKind
    message: str
    attempts: int
    elapsed: float = 0.0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False

    def raise_for_status(self, description: str = "condition") -> Any:
        raise ProbeFailedError(
            description, self.kind, self.message, self.attempts, cause=self.error
        ) from self.error


@dataclass(frozen=True)
class Cancelled:
    last_kind: Optional[ErrorKind]
    attempts: int
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return False

    def raise_for_status(self, description: str = "condition") -> Any:
        raise PollCancelledError(description, self.attempts)


PollResult = Union[Completed, TimedOut, Failed, Cancelled]
