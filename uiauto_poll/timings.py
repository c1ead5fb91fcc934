# uiauto_poll/timings.py
"""
@file timings.py
@brief Timing presets and defaults for polling and retried actions.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "state_wait": {"timeout": 10.0, "interval": 0.5},
    "absent_wait": {"timeout": 15.0, "interval": 0.5},
    "attribute_wait": {"timeout": 10.0, "interval": 0.5},
    "action_timeout": {"timeout": 10.0, "interval": 0.5},
    "click_action": {"timeout": 10.0, "interval": 0.5},
}

SCALAR_FIELDS: Dict[str, float] = {
    "probe_timeout": 0.5,
    "driver_timeout": 15.0,
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "state_wait": {"timeout": 5.0, "interval": 0.25},
        "absent_wait": {"timeout": 8.0, "interval": 0.25},
        "attribute_wait": {"timeout": 5.0, "interval": 0.25},
        "action_timeout": {"timeout": 5.0, "interval": 0.25},
        "probe_timeout": 0.25,
        "driver_timeout": 10.0,
    },
    "slow": {
        "state_wait": {"timeout": 20.0, "interval": 0.75},
        "absent_wait": {"timeout": 30.0, "interval": 1.0},
        "attribute_wait": {"timeout": 20.0, "interval": 0.75},
        "action_timeout": {"timeout": 20.0, "interval": 0.75},
        "probe_timeout": 1.0,
        "driver_timeout": 30.0,
    },
    "ci": {
        "state_wait": {"timeout": 30.0, "interval": 1.0},
        "absent_wait": {"timeout": 45.0, "interval": 1.0},
        "attribute_wait": {"timeout": 30.0, "interval": 1.0},
        "action_timeout": {"timeout": 30.0, "interval": 1.0},
        "probe_timeout": 1.0,
        "driver_timeout": 30.0,
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = {}
    values.update(deepcopy(TIMEOUT_FIELDS))
    values.update(deepcopy(SCALAR_FIELDS))

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():

        # action_timeout also overrides every *_action field
        if key == "action_timeout":
            for timeout_key in values.keys():
                if timeout_key.endswith("_action"):
                    base = deepcopy(values[timeout_key])
                    base.update(value)
                    values[timeout_key] = base

        if key in TIMEOUT_FIELDS:
            base = deepcopy(values[key])
            base.update(value)
            values[key] = base
        else:
            values[key] = value

    return values
