# tests/conftest.py
"""
Shared fakes for the polling tests.
"""

import pytest

from uiauto_poll.config import TimeConfig
from uiauto_poll.poller import ConditionPoller
from uiauto_poll.scope import RemoteTimeoutScope, ScopedHandle


class FakeClock:
    """Clock whose time only moves when sleep() or advance() is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds):
        self.now += seconds


class RecordingSink:
    """LogSink that keeps every line."""

    def __init__(self):
        self.lines = []

    def info(self, msg):
        self.lines.append(("info", msg))

    def warn(self, msg):
        self.lines.append(("warn", msg))

    def success(self, msg):
        self.lines.append(("success", msg))

    def of(self, level):
        return [msg for lvl, msg in self.lines if lvl == level]


class FakeScope(RemoteTimeoutScope):
    """Remote timeout scope that records the value seen by the driver."""

    def __init__(self, original=15.0):
        self.value = original
        self.original = original
        self.shrinks = 0

    def shrink_to(self, seconds):
        saved = self.value
        self.value = seconds
        self.shrinks += 1

        def _restore():
            self.value = saved

        return ScopedHandle(_restore)


class FakeDriver:
    """Driver exposing only the implicit-wait surface."""

    def __init__(self, implicit_wait=15.0, report_timeouts=True, timeouts_error=None):
        self.calls = []
        self.timeout_reads = 0
        self._implicit_wait = implicit_wait
        self._report_timeouts = report_timeouts
        self._timeouts_error = timeouts_error

    @property
    def timeouts(self):
        self.timeout_reads += 1
        if self._timeouts_error is not None:
            raise self._timeouts_error
        if not self._report_timeouts:
            return None
        driver = self

        class _Timeouts:
            implicit_wait = driver._implicit_wait

        return _Timeouts()

    def implicitly_wait(self, seconds):
        self.calls.append(seconds)
        self._implicit_wait = seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def scope():
    return FakeScope()


@pytest.fixture
def poller(clock, sink, scope):
    return ConditionPoller(scope=scope, sink=sink, clock=clock, sleep=clock.sleep)


@pytest.fixture(autouse=True)
def reset_time_config():
    TimeConfig.reset_to_defaults()
    yield
    TimeConfig.reset_to_defaults()
