# uiauto_poll/__init__.py
"""
UIAuto Poll - bounded-retry condition polling for browser/mobile UI automation.

This package provides:
- ConditionPoller: the retry loop shared by every wait and retried action
- RetryableAction: mutating actions retried with the same discipline
- ErrorClassifier: transient/fatal bucketing of WebDriver failures
- WaitPolicy / TimeConfig: wait policies and timing presets
- Element helpers: state checks, attribute checks, click with scroll-on-retry
"""

from uiauto_poll.actions import RetryableAction
from uiauto_poll.classifier import DEFAULT_CLASSIFIER, ErrorClassifier
from uiauto_poll.conditions import (ElementState, attribute_contains_value,
                                    click_element, click_if_present,
                                    element_contains_attribute, element_is,
                                    verify_element_state)
from uiauto_poll.config import TimeConfig, load_timing_file
from uiauto_poll.exceptions import (ActionError, ConfigError,
                                    PollCancelledError, ProbeFailedError,
                                    ScopeError, TimeoutError, UIAutoError,
                                    WaitPolicyError)
from uiauto_poll.outcomes import (Cancelled, Completed, ErrorKind, Failed,
                                  FatalFailure, Pending, Success, TimedOut,
                                  TransientFailure)
from uiauto_poll.poller import ConditionPoller
from uiauto_poll.policy import WaitPolicy
from uiauto_poll.polllogger import POLL_LOGGER, PollLogger
from uiauto_poll.scope import (ImplicitWaitScope, NullTimeoutScope,
                               RemoteTimeoutScope, ScopedHandle)

__all__ = [
    "RetryableAction",
    "DEFAULT_CLASSIFIER",
    "ErrorClassifier",
    "ElementState",
    "attribute_contains_value",
    "click_element",
    "click_if_present",
    "element_contains_attribute",
    "element_is",
    "verify_element_state",
    "TimeConfig",
    "load_timing_file",
    "ActionError",
    "ConfigError",
    "PollCancelledError",
    "ProbeFailedError",
    "ScopeError",
    "TimeoutError",
    "UIAutoError",
    "WaitPolicyError",
    "Cancelled",
    "Completed",
    "ErrorKind",
    "Failed",
    "FatalFailure",
    "Pending",
    "Success",
    "TimedOut",
    "TransientFailure",
    "ConditionPoller",
    "WaitPolicy",
    "POLL_LOGGER",
    "PollLogger",
    "ImplicitWaitScope",
    "NullTimeoutScope",
    "RemoteTimeoutScope",
    "ScopedHandle",
]

__version__ = "1.0.0"
