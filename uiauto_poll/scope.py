# uiauto_poll/scope.py
"""
@file scope.py
@brief Scoped shrink/restore of the remote session's implicit wait.

Each probe attempt shrinks the driver's implicit wait so a single slow
lookup cannot consume the whole poll budget. The original value is put
back when the handle is restored, on every path.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from selenium.common.exceptions import WebDriverException

from .config import TimeConfig
from .exceptions import ScopeError


class ScopedHandle:
    """Restores a saved value once. Usable as a context manager."""

    def __init__(self, restore_fn: Callable[[], None]):
        self._restore_fn = restore_fn
        self._restored = False

    @property
    def restored(self) -> bool:
        return self._restored

    def restore(self) -> None:
        if self._restored:
            return
        self._restored = True
        self._restore_fn()

    def __enter__(self) -> ScopedHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()


class RemoteTimeoutScope:
    """Interface for the remote surface's single internal wait setting."""

    def shrink_to(self, seconds: float) -> ScopedHandle:
        raise NotImplementedError


class NullTimeoutScope(RemoteTimeoutScope):
    """No remote session: nothing to shrink."""

    def shrink_to(self, seconds: float) -> ScopedHandle:
        return ScopedHandle(lambda: None)


class ImplicitWaitScope(RemoteTimeoutScope):
    """
    Shrinks a Selenium/Appium driver's implicit wait for one probe.

    The scope is non-reentrant: other threads block until the current
    handle is restored, a second shrink on the same thread is an error.
    The driver's own implicit wait is read on the first shrink only.
    """

    def __init__(self, driver: Any, fallback_timeout: Optional[float] = None):
        """
        @param driver WebDriver exposing implicitly_wait()
        @param fallback_timeout Value restored when the driver cannot report
               its current implicit wait (defaults to TimeConfig driver_timeout)
        """
        self._driver = driver
        self._fallback_timeout = fallback_timeout
        self._lock = threading.Lock()
        self._owner: Optional[int] = None
        self._original: Optional[float] = None

    def original_timeout(self) -> float:
        """Implicit wait to restore. Read from the driver once per scope."""
        if self._original is None:
            self._original = self._read_timeout()
        return self._original

    def _read_timeout(self) -> float:
        try:
            timeouts = getattr(self._driver, "timeouts", None)
        except WebDriverException:
            # remote GET failed; the configured value is restored instead
            timeouts = None
        value = getattr(timeouts, "implicit_wait", None)
        if isinstance(value, (int, float)):
            return float(value)
        if self._fallback_timeout is not None:
            return self._fallback_timeout
        return TimeConfig.current().driver_timeout

    def shrink_to(self, seconds: float) -> ScopedHandle:
        if self._owner == threading.get_ident():
            raise ScopeError("Implicit wait is already shrunk on this thread")
        self._lock.acquire()
        self._owner = threading.get_ident()
        try:
            original = self.original_timeout()
            self._driver.implicitly_wait(seconds)
        except BaseException:
            self._owner = None
            self._lock.release()
            raise

        def _restore() -> None:
            try:
                self._driver.implicitly_wait(original)
            finally:
                self._owner = None
                self._lock.release()

        return ScopedHandle(_restore)
