# uiauto_poll/policy.py
"""
@file policy.py
@brief Immutable wait policy for a single poll session.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import WaitPolicyError

DEFAULT_PROBE_TIMEOUT = 0.5


@dataclass(frozen=True)
class WaitPolicy:
    """
    Timeout, pacing and negative-check semantics for one poll.

    timeout and poll_interval are seconds. probe_timeout is the implicit
    wait the remote session is shrunk to while a single probe runs.
    """
    timeout: float
    poll_interval: float = 0.5
    negative_check: bool = False
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise WaitPolicyError(f"timeout must be > 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise WaitPolicyError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.poll_interval > self.timeout:
            raise WaitPolicyError(
                f"poll_interval ({self.poll_interval}) must not exceed timeout ({self.timeout})"
            )
        if self.probe_timeout <= 0:
            raise WaitPolicyError(f"probe_timeout must be > 0, got {self.probe_timeout}")

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        negative_check: Optional[bool] = None,
        probe_timeout: Optional[float] = None,
    ) -> WaitPolicy:
        """Create a new policy with overrides applied (validated again)."""
        return replace(
            self,
            timeout=timeout if timeout is not None else self.timeout,
            poll_interval=poll_interval if poll_interval is not None else self.poll_interval,
            negative_check=negative_check if negative_check is not None else self.negative_check,
            probe_timeout=probe_timeout if probe_timeout is not None else self.probe_timeout,
        )
