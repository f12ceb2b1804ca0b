"""
@file steps.py
@brief Typed step and strategy records parsed from the strategy file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import ConfigError


@dataclass(frozen=True)
class InputStep:
    target: str
    value: Any
    action: str = field(default="input", init=False)


@dataclass(frozen=True)
class ClickStep:
    target: str
    action: str = field(default="click", init=False)


@dataclass(frozen=True)
class ScreenshotStep:
    name: Optional[str] = None
    action: str = field(default="screenshot", init=False)


@dataclass(frozen=True)
class InputSequenceStep:
    target: str
    values: Tuple[Any, ...]
    click_after_each: Optional[str] = None
    screenshot_after_each: bool = False
    name_pattern: Optional[str] = None
    action: str = field(default="input_sequence", init=False)

    def shot_name(self, value: Any, position: int) -> str:
        if not self.name_pattern:
            return f"sequence_{position}"
        return self.name_pattern.replace("{value}", str(value)).replace("{index}", str(position))


@dataclass(frozen=True)
class HandleAlertStep:
    screenshot: Optional[str] = None
    action: str = field(default="handle_alert", init=False)


Step = Union[InputStep, ClickStep, ScreenshotStep, InputSequenceStep, HandleAlertStep]


@dataclass(frozen=True)
class Sequence:
    description: str
    steps: Tuple[Step, ...] = ()


@dataclass(frozen=True)
class Strategy:
    name: str
    description: str
    file_patterns: Tuple[str, ...] = ()
    content_keywords: Tuple[str, ...] = ()
    test_sequences: Tuple[Sequence, ...] = ()

    @property
    def total_steps(self) -> int:
        return sum(len(seq.steps) for seq in self.test_sequences)


def _require(d: Dict[str, Any], key: str, where: str) -> Any:
    if key not in d or d[key] in (None, ""):
        raise ConfigError(f"{where}: missing required key '{key}'")
    return d[key]


def parse_step(d: Dict[str, Any], where: str = "step") -> Step:
    """Turn one raw step mapping into its typed record."""
    if not isinstance(d, dict):
        raise ConfigError(f"{where}: step must be a mapping, got {type(d).__name__}")
    action = d.get("action")

    if action == "input":
        if "value" not in d:
            raise ConfigError(f"{where}: missing required key 'value'")
        return InputStep(target=str(_require(d, "target", where)), value=d["value"])

    if action == "click":
        return ClickStep(target=str(_require(d, "target", where)))

    if action == "screenshot":
        name = d.get("name")
        return ScreenshotStep(name=str(name) if name else None)

    if action == "input_sequence":
        values = d.get("values") or []
        if not isinstance(values, list):
            raise ConfigError(f"{where}: 'values' must be a list")
        click_after = d.get("click_after_each")
        return InputSequenceStep(
            target=str(_require(d, "target", where)),
            values=tuple(values),
            click_after_each=str(click_after) if click_after else None,
            screenshot_after_each=bool(d.get("screenshot_after_each", False)),
            name_pattern=d.get("name_pattern"),
        )

    if action == "handle_alert":
        shot = d.get("screenshot")
        return HandleAlertStep(screenshot=str(shot) if shot else None)

    raise ConfigError(f"{where}: unknown action '{action}'")


def parse_strategy(name: str, d: Dict[str, Any]) -> Strategy:
    where = f"test_strategies.{name}"
    if not isinstance(d, dict):
        raise ConfigError(f"{where} must be a mapping")

    sequences: List[Sequence] = []
    for i, raw_seq in enumerate(d.get("test_sequences") or []):
        if not isinstance(raw_seq, dict):
            raise ConfigError(f"{where}.test_sequences[{i}] must be a mapping")
        steps = tuple(
            parse_step(raw_step, f"{where}.test_sequences[{i}].steps[{j}]")
            for j, raw_step in enumerate(raw_seq.get("steps") or [])
        )
        sequences.append(Sequence(description=str(raw_seq.get("description", f"sequence_{i}")), steps=steps))

    return Strategy(
        name=name,
        description=str(d.get("description") or name),
        file_patterns=tuple(str(p) for p in d.get("file_patterns") or []),
        content_keywords=tuple(str(k) for k in d.get("content_keywords") or []),
        test_sequences=tuple(sequences),
    )
