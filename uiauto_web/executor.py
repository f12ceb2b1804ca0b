"""
@file executor.py
@brief Executes one typed step against the live page.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from playwright.async_api import Page

from .actionlogger import ACTION_LOGGER
from .artifacts import capture_page
from .config import RunConfig
from .exceptions import StepError
from .resolver import ElementResolver
from .steps import (ClickStep, HandleAlertStep, InputSequenceStep, InputStep,
                    ScreenshotStep, Step)

log = logging.getLogger(__name__)


def as_input_text(value: Any) -> str:
    """Render a step value the way the page would see it typed."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class StepResult:
    index: int
    action: str
    target: Optional[str] = None
    ok: bool = True
    skipped: bool = False
    error: Optional[str] = None
    screenshots: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if not self.ok:
            return "failed"
        return "skipped" if self.skipped else "passed"

    def to_record(self) -> Dict[str, Any]:
        rec: Dict[str, Any] = {
            "index": self.index,
            "action": self.action,
            "target": self.target,
            "status": self.status,
        }
        if self.error:
            rec["error"] = self.error
        return rec


class StepExecutor:
    """
    Interprets Step records against one page. Never raises for a failing
    step; the outcome is reported in StepResult and the caller decides
    whether the sequence goes on.
    """

    def __init__(self, page: Page, resolver: ElementResolver, screenshot_dir: str, config: RunConfig):
        self.page = page
        self.resolver = resolver
        self.screenshot_dir = screenshot_dir
        self.config = config

    async def screenshot(self, name: str, index: int, result: Optional[StepResult] = None) -> Optional[str]:
        path = await capture_page(self.page, self.screenshot_dir, name, index, self.config.screenshots)
        if path and result is not None:
            result.screenshots.append(path)
        return path

    async def _settle(self, ms: int) -> None:
        if ms > 0:
            await self.page.wait_for_timeout(ms)

    async def execute(self, step: Step, index: int) -> StepResult:
        """Execute a single step. @param index Monotonic step index, used in screenshot names."""
        result = StepResult(index=index, action=step.action, target=getattr(step, "target", None))
        start = time.monotonic()
        try:
            await self._dispatch(step, index, result)
        except Exception as e:
            err = StepError(step.action, index, target=result.target, cause=e)
            log.error("Step %d failed: %s", index, err)
            result.ok = False
            result.error = str(err)
            ACTION_LOGGER.log(
                action=step.action,
                role=result.target,
                index=index,
                status="error",
                duration_ms=int((time.monotonic() - start) * 1000),
                exception=e,
                event="step_finish",
            )
            if self.config.errors.capture_error_screenshots:
                await self.screenshot(f"error_step_{index}", index, result)
            return result

        ACTION_LOGGER.log(
            action=step.action,
            role=result.target,
            index=index,
            status=result.status,
            duration_ms=int((time.monotonic() - start) * 1000),
            event="step_finish",
        )
        return result

    async def _dispatch(self, step: Step, index: int, result: StepResult) -> None:
        if isinstance(step, InputStep):
            await self._input(step, result)
        elif isinstance(step, ClickStep):
            await self._click(step, result)
        elif isinstance(step, ScreenshotStep):
            await self.screenshot(step.name or f"step_{index}", index, result)
        elif isinstance(step, InputSequenceStep):
            await self._input_sequence(step, index, result)
        elif isinstance(step, HandleAlertStep):
            # dialogs are accepted by the run-wide handler
            if step.screenshot:
                await self.screenshot(step.screenshot, index, result)
        else:
            raise TypeError(f"Unsupported step type: {type(step).__name__}")

    async def _fill(self, role: str, selector: str, value: Any) -> None:
        text = as_input_text(value)
        log.info("Fill %r into %s", text, selector)
        start = time.monotonic()
        await self.page.fill(selector, text)
        ACTION_LOGGER.log(
            action="fill",
            role=role,
            selector=selector,
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"value": text},
            event="interaction",
        )
        await self._settle(self.config.timing.after_input_wait)

    async def _press(self, role: str, selector: str) -> None:
        log.info("Click %s", selector)
        start = time.monotonic()
        await self.page.click(selector)
        ACTION_LOGGER.log(
            action="click",
            role=role,
            selector=selector,
            duration_ms=int((time.monotonic() - start) * 1000),
            event="interaction",
        )
        await self._settle(self.config.timing.after_click_wait)

    async def _input(self, step: InputStep, result: StepResult) -> None:
        selector = await self.resolver.resolve(step.target)
        if selector is None:
            log.warning("No visible element for role '%s', skipping input", step.target)
            result.skipped = True
            return
        await self._fill(step.target, selector, step.value)

    async def _click(self, step: ClickStep, result: StepResult) -> None:
        selector = await self.resolver.resolve(step.target)
        if selector is None:
            log.warning("No visible element for role '%s', skipping click", step.target)
            result.skipped = True
            return
        await self._press(step.target, selector)

    async def _input_sequence(self, step: InputSequenceStep, index: int, result: StepResult) -> None:
        selector = await self.resolver.resolve(step.target)
        if selector is None or not step.values:
            log.warning("Input sequence on '%s' skipped (element not found or no values)", step.target)
            result.skipped = True
            return

        total = len(step.values)
        for i, value in enumerate(step.values):
            log.info("Sequence input %d/%d: %r", i + 1, total, value)
            await self._fill(step.target, selector, value)

            if step.click_after_each:
                click_selector = await self.resolver.resolve(step.click_after_each)
                if click_selector:
                    await self._press(step.click_after_each, click_selector)

            if step.screenshot_after_each:
                await self.screenshot(step.shot_name(value, i), index * 100 + i, result)
