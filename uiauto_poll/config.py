# uiauto_poll/config.py
"""
@file config.py
@brief Centralized timeout configuration for polls and retried actions.
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError, WaitPolicyError
from .policy import WaitPolicy
from .timings import (SCALAR_FIELDS, TIMEOUT_FIELDS, build_preset_values,
                      list_presets)

_SETTING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "timeout": {"type": "number", "exclusiveMinimum": 0},
        "interval": {"type": "number", "exclusiveMinimum": 0},
    },
    "additionalProperties": False,
}

TIMING_FILE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "preset": {"type": "string", "enum": sorted(list_presets())},
        "overrides": {
            "type": "object",
            "properties": {
                **{name: _SETTING_SCHEMA for name in TIMEOUT_FIELDS},
                **{name: {"type": "number", "exclusiveMinimum": 0} for name in SCALAR_FIELDS},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


@dataclass
class TimeoutSettings:
    """Individual timeout settings for a specific wait or action type."""
    timeout: float
    interval: float

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
    ) -> TimeoutSettings:
        """Create a new settings instance with overrides applied."""
        return TimeoutSettings(
            timeout=timeout if timeout is not None else self.timeout,
            interval=interval if interval is not None else self.interval,
        )


class TimeConfig:
    """
    Timeout configuration for the framework.

    Precedence per run: base defaults -> preset -> file/CLI overrides.
    """

    _default_instance: Optional[TimeConfig] = None
    _local = threading.local()
    _lock = threading.Lock()

    def __init__(self, preset: Optional[str] = None):
        self._apply_values(build_preset_values(preset or "default"))

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in TIMEOUT_FIELDS:
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                )
            else:
                raise ConfigError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

        for name in SCALAR_FIELDS:
            if name not in values:
                raise ConfigError(f"Missing timing setting for {name}")
            setattr(self, name, float(values[name]))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in TIMEOUT_FIELDS:
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {"timeout": setting.timeout, "interval": setting.interval}
        for name in SCALAR_FIELDS:
            data[name] = getattr(self, name)
        return data

    def clone(self) -> TimeConfig:
        """Return a deep clone of this config."""
        clone = TimeConfig()
        clone._apply_values(self.to_dict())
        return clone

    def policy(
        self,
        name: str,
        negative_check: bool = False,
        timeout: Optional[float] = None,
    ) -> WaitPolicy:
        """Build a WaitPolicy from the named setting."""
        if name not in TIMEOUT_FIELDS:
            raise ConfigError(f"Unknown TimeConfig field: {name}")
        setting: TimeoutSettings = getattr(self, name)
        effective_timeout = timeout if timeout is not None else setting.timeout
        try:
            return WaitPolicy(
                timeout=effective_timeout,
                poll_interval=min(setting.interval, effective_timeout),
                negative_check=negative_check,
                probe_timeout=self.probe_timeout,
            )
        except WaitPolicyError as e:
            raise ConfigError(f"Invalid wait policy for {name}: {e}") from e

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a deterministic run-scope config snapshot."""
        try:
            cfg = cls(preset)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg

    @classmethod
    def default(cls) -> TimeConfig:
        """Get the process default configuration (singleton)."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls()
        return cls._default_instance

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        """Install per-thread run configuration snapshot."""
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        cls._local.run_config = None

    @classmethod
    def current(cls) -> TimeConfig:
        """Get the current effective configuration."""
        override = getattr(cls._local, "override", None)
        if override is not None:
            return override

        run_cfg = getattr(cls._local, "run_config", None)
        if run_cfg is not None:
            return run_cfg

        return cls.default()

    @classmethod
    def apply_preset(cls, preset: str) -> None:
        cls.install_run_config(cls.build_from(preset=preset))

    @classmethod
    @contextmanager
    def override(cls, **kwargs: Any) -> Generator[TimeConfig, None, None]:
        """Context manager for temporary configuration overrides."""
        previous = getattr(cls._local, "override", None)
        new_config = cls.current().clone()
        _apply_overrides(new_config, kwargs)

        cls._local.override = new_config
        try:
            yield new_config
        finally:
            cls._local.override = previous

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Reset default and clear all thread-local config state."""
        with cls._lock:
            cls._default_instance = cls()
        cls._local.override = None
        cls._local.run_config = None


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key in TIMEOUT_FIELDS:
            base_setting: TimeoutSettings = getattr(config, key)
            if isinstance(value, TimeoutSettings):
                setattr(config, key, deepcopy(value))
            elif isinstance(value, dict):
                setattr(config, key, base_setting.with_overrides(
                    timeout=value.get("timeout"),
                    interval=value.get("interval"),
                ))
            else:
                raise ConfigError(f"Invalid override for {key}: {value}")
        elif key in SCALAR_FIELDS:
            setattr(config, key, float(value))
        else:
            raise ConfigError(f"Unknown TimeConfig field: {key}")


def load_timing_file(path: str) -> TimeConfig:
    """
    Load a YAML timing file and build a TimeConfig from it.

    Expected layout:

        preset: ci
        overrides:
          state_wait: {timeout: 12, interval: 0.3}
          probe_timeout: 0.25
    """
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Timing file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse timing file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Timing file must be a mapping at root.")

    errors = sorted(Draft202012Validator(TIMING_FILE_SCHEMA).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = [f"Timing file validation failed: {path}"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))

    return TimeConfig.build_from(
        preset=data.get("preset", "default"),
        overrides=data.get("overrides") or {},
    )


def configure_for_ci() -> None:
    """Configure timeouts optimized for CI/CD environments (run scope)."""
    TimeConfig.apply_preset("ci")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()
