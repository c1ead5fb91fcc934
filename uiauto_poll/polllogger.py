# uiauto_poll/polllogger.py
"""
@file polllogger.py
@brief Log sink for poll transitions and retry summaries.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Optional


class PollLogger:
    """Thread-safe log sink with console/file output."""

    LEVELS = {"info": 20, "success": 25, "warning": 30}

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = True
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "info"

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "info",
    ) -> None:
        """Configure logger settings."""
        level = level.lower()
        if level not in self.LEVELS:
            raise ValueError(f"PollLogger level must be one of {sorted(self.LEVELS)}")
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def info(self, msg: str) -> None:
        self._emit("info", msg)

    def warn(self, msg: str) -> None:
        self._emit("warning", msg)

    def success(self, msg: str) -> None:
        self._emit("success", msg)

    def _emit(self, level: str, msg: str) -> None:
        if not self._enabled:
            return
        if self.LEVELS[level] < self.LEVELS[self._level]:
            return

        timestamp = time.strftime("%H:%M:%S")
        line = f"[{level}] [poll] time={timestamp} {msg}"

        if self._console:
            print(line, flush=True)

        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with self._lock:
                with open(self._file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError:
            pass


POLL_LOGGER = PollLogger()
