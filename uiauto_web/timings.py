"""
@file timings.py
@brief Timing presets and defaults for page interaction runs (milliseconds).
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMING_FIELDS: Dict[str, int] = {
    "page_load_wait": 2000,
    "after_input_wait": 300,
    "after_click_wait": 500,
    "after_alert_wait": 1000,
    "after_reset_wait": 500,
    "navigation_timeout": 15000,
    "default_timeout": 20000,
}

SCREENSHOT_FIELDS: Dict[str, Any] = {
    "fullPage": True,
    "type": "png",
    "timeout": 10000,
}

ERROR_HANDLING_FIELDS: Dict[str, bool] = {
    "continue_on_interaction_error": True,
    "capture_error_screenshots": False,
}

PRESET_OVERRIDES: Dict[str, Dict[str, int]] = {
    "fast": {
        "page_load_wait": 500,
        "after_input_wait": 100,
        "after_click_wait": 150,
        "after_alert_wait": 300,
        "after_reset_wait": 150,
    },
    "slow": {
        "page_load_wait": 4000,
        "after_input_wait": 600,
        "after_click_wait": 1000,
        "after_alert_wait": 2000,
        "after_reset_wait": 1000,
        "navigation_timeout": 30000,
        "default_timeout": 40000,
    },
    "ci": {
        "page_load_wait": 3000,
        "after_input_wait": 400,
        "after_click_wait": 800,
        "after_alert_wait": 1500,
        "after_reset_wait": 800,
        "navigation_timeout": 30000,
        "default_timeout": 30000,
    },
}


def list_presets() -> Dict[str, Dict[str, int]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, int]:
    preset_key = (preset or "default").lower()
    values = deepcopy(TIMING_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    values.update(overrides)
    return values
