"""
@file config.py
@brief Run-scope timing, screenshot and error-handling configuration.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional

from .timings import (ERROR_HANDLING_FIELDS, SCREENSHOT_FIELDS, TIMING_FIELDS,
                      build_preset_values, list_presets)


@dataclass(frozen=True)
class TimingSettings:
    """Fixed settle delays and Playwright timeouts, in milliseconds."""
    page_load_wait: int = TIMING_FIELDS["page_load_wait"]
    after_input_wait: int = TIMING_FIELDS["after_input_wait"]
    after_click_wait: int = TIMING_FIELDS["after_click_wait"]
    after_alert_wait: int = TIMING_FIELDS["after_alert_wait"]
    after_reset_wait: int = TIMING_FIELDS["after_reset_wait"]
    navigation_timeout: int = TIMING_FIELDS["navigation_timeout"]
    default_timeout: int = TIMING_FIELDS["default_timeout"]

    def with_overrides(self, overrides: Dict[str, Any]) -> TimingSettings:
        """Create a new settings instance with overrides applied."""
        unknown = set(overrides) - set(TIMING_FIELDS)
        if unknown:
            raise ValueError(f"Unknown timing field(s): {sorted(unknown)}")
        values = {k: int(v) for k, v in overrides.items() if v is not None}
        return replace(self, **values)


@dataclass(frozen=True)
class ScreenshotSettings:
    full_page: bool = SCREENSHOT_FIELDS["fullPage"]
    type: str = SCREENSHOT_FIELDS["type"]
    timeout: int = SCREENSHOT_FIELDS["timeout"]

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> ScreenshotSettings:
        d = d or {}
        return cls(
            full_page=d.get("fullPage", SCREENSHOT_FIELDS["fullPage"]) is not False,
            type=str(d.get("type") or SCREENSHOT_FIELDS["type"]),
            timeout=int(d.get("timeout", SCREENSHOT_FIELDS["timeout"])),
        )


@dataclass(frozen=True)
class ErrorPolicy:
    """What the orchestrator does when a step fails."""
    continue_on_interaction_error: bool = ERROR_HANDLING_FIELDS["continue_on_interaction_error"]
    capture_error_screenshots: bool = ERROR_HANDLING_FIELDS["capture_error_screenshots"]

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> ErrorPolicy:
        d = d or {}
        return cls(
            continue_on_interaction_error=d.get("continue_on_interaction_error") is not False,
            capture_error_screenshots=bool(d.get("capture_error_screenshots", False)),
        )


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable snapshot handed to the resolver, executor and runner.

    Precedence for timings: base defaults -> preset -> strategy file
    (default preset only) -> CLI overrides.
    """
    preset: str = "default"
    timing: TimingSettings = field(default_factory=TimingSettings)
    screenshots: ScreenshotSettings = field(default_factory=ScreenshotSettings)
    errors: ErrorPolicy = field(default_factory=ErrorPolicy)

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        file_settings: Optional[Dict[str, Any]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> RunConfig:
        """Build a deterministic run-scope config snapshot."""
        file_settings = file_settings or {}
        timing = TimingSettings(**build_preset_values(preset))

        file_timing = file_settings.get("timing_settings") or {}
        if file_timing and (preset or "default").lower() == "default":
            known = {k: v for k, v in file_timing.items() if k in TIMING_FIELDS}
            timing = timing.with_overrides(known)

        if overrides:
            timing = timing.with_overrides(overrides)

        return cls(
            preset=(preset or "default").lower(),
            timing=timing,
            screenshots=ScreenshotSettings.from_dict(file_settings.get("screenshot_settings")),
            errors=ErrorPolicy.from_dict(file_settings.get("error_handling")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def available_presets() -> Dict[str, Dict[str, int]]:
    return list_presets()
