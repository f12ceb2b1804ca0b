# uiauto_web/runner.py
"""
@file runner.py
@brief Strategy runner: per-file orchestration, batch mode and reports.
"""

from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from playwright.async_api import Dialog, Page

from .actionlogger import ACTION_LOGGER
from .artifacts import capture_page, ensure_dir, write_json
from .config import RunConfig
from .detector import detect_application_type
from .executor import StepExecutor, StepResult
from .repository import StrategyRepository
from .resolver import ElementResolver
from .steps import Strategy

log = logging.getLogger(__name__)

REPORT_FILENAME = "strategy_test_report.json"
SUMMARY_FILENAME = "intelligent_test_summary.json"

FSM_EXTRACT_JS = """() => {
  const el = document.getElementById("fsm") ||
    document.querySelector('script[type="application/json"]');
  if (!el) return null;
  try { return JSON.parse(el.textContent); } catch (e) { return null; }
}"""


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def discover_html_files(folder: str) -> List[str]:
    """Sorted *.html file names directly under folder ([] when unreadable)."""
    try:
        names = os.listdir(folder)
    except OSError as e:
        log.error("Cannot read HTML folder %s: %s", folder, e)
        return []
    return sorted(n for n in names if n.endswith(".html") and os.path.isfile(os.path.join(folder, n)))


def html_file_uri(folder: str, html_file: str) -> str:
    return Path(folder, html_file).resolve().as_uri()


@dataclass
class FileRun:
    """Mutable state of one file's run; finalized into the report."""
    html_file: str
    folder: str
    application_type: str
    strategy: Strategy
    step_index: int = 0
    screenshots: List[str] = field(default_factory=list)
    steps: List[Dict[str, Any]] = field(default_factory=list)

    def next_index(self) -> int:
        self.step_index += 1
        return self.step_index

    def add_result(self, result: StepResult) -> None:
        self.screenshots.extend(result.screenshots)
        self.steps.append(result.to_record())


class StrategyRunner:
    """
    Opens each HTML file, auto-accepts dialogs, runs the detected strategy's
    sequences and writes strategy_test_report.json next to its screenshots.
    """

    def __init__(
        self,
        repo: StrategyRepository,
        html_dir: str = "html",
        visuals_dir: str = "visuals",
        config: Optional[RunConfig] = None,
    ):
        self.repo = repo
        self.html_dir = os.path.abspath(html_dir)
        self.visuals_dir = os.path.abspath(visuals_dir)
        self.config = config or RunConfig.build_from(file_settings=repo.settings)

    def read_page_source(self, html_file: str) -> str:
        path = os.path.join(self.html_dir, html_file)
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            log.debug("Cannot read %s for keyword detection: %s", path, e)
            return ""

    def detect(self, html_file: str) -> str:
        return detect_application_type(self.repo, html_file, self.read_page_source(html_file))

    def folder_for(self, html_file: str) -> str:
        return os.path.join(self.visuals_dir, Path(html_file).stem)

    def clear_previous_artifacts(self, folder: str) -> None:
        stale = glob.glob(os.path.join(folder, "*.png")) + glob.glob(os.path.join(folder, "*.jpg"))
        for path in stale:
            os.remove(path)
        if stale:
            log.debug("Removed %d screenshots from a previous run in %s", len(stale), folder)

    async def extract_fsm(self, page: Page) -> Optional[Any]:
        """Embedded FSM JSON of the page; informational only."""
        try:
            return await page.evaluate(FSM_EXTRACT_JS)
        except Exception as e:
            log.warning("Could not read embedded FSM: %s", e)
            return None

    async def _shoot(self, page: Page, run: FileRun, name: str) -> Optional[str]:
        path = await capture_page(page, run.folder, name, run.next_index(), self.config.screenshots)
        if path:
            run.screenshots.append(path)
        return path

    async def run_file(
        self,
        page: Page,
        html_file: str,
        strategy_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Run one HTML file through its strategy and write its report.

        @param html_file File name relative to html_dir
        @param strategy_name Force a strategy instead of detecting one
        @return The report dict (also written to disk)
        """
        application_type = strategy_name or self.detect(html_file)
        strategy = self.repo.get_strategy(application_type)
        folder = self.folder_for(html_file)
        ensure_dir(folder)
        self.clear_previous_artifacts(folder)

        run = FileRun(html_file=html_file, folder=folder, application_type=application_type, strategy=strategy)
        ACTION_LOGGER.set_run_id(str(uuid4()))
        log.info("Running strategy '%s' (%s) on %s", application_type, strategy.description, html_file)

        timing = self.config.timing
        await page.goto(
            html_file_uri(self.html_dir, html_file),
            wait_until="domcontentloaded",
            timeout=timing.navigation_timeout,
        )
        if timing.page_load_wait > 0:
            await page.wait_for_timeout(timing.page_load_wait)

        async def on_dialog(dialog: Dialog) -> None:
            try:
                log.info("Dialog (%s): %s", dialog.type, dialog.message)
                await self._shoot(page, run, "alert")
                await dialog.accept()
                if timing.after_alert_wait > 0:
                    await page.wait_for_timeout(timing.after_alert_wait)
            except Exception as e:
                log.error("Dialog handling failed: %s", e)

        page.on("dialog", on_dialog)
        try:
            await self._shoot(page, run, "initial")

            fsm = await self.extract_fsm(page)
            if fsm:
                topic = fsm.get("topic") if isinstance(fsm, dict) else None
                log.info("Embedded FSM found: %s", topic or "unknown topic")

            await self._run_sequences(page, run)

            await self._shoot(page, run, "final")
        finally:
            page.remove_listener("dialog", on_dialog)

        report = {
            "timestamp": utc_timestamp(),
            "html_file": html_file,
            "application_type": application_type,
            "strategy_used": strategy.description,
            "fsm_config": fsm,
            "total_screenshots": len(run.screenshots),
            "total_steps": run.step_index,
            "screenshot_folder": folder,
            "steps": run.steps,
        }
        write_json(os.path.join(folder, REPORT_FILENAME), report)
        log.info("Finished %s: %d screenshots, %d steps", html_file, len(run.screenshots), run.step_index)
        return report

    async def _run_sequences(self, page: Page, run: FileRun) -> None:
        resolver = ElementResolver(page, self.repo.element_selectors)
        executor = StepExecutor(page, resolver, run.folder, self.config)
        policy = self.config.errors

        for sequence in run.strategy.test_sequences:
            log.info("Sequence: %s", sequence.description)
            for step in sequence.steps:
                result = await executor.execute(step, run.next_index())
                run.add_result(result)
                if not result.ok and not policy.continue_on_interaction_error:
                    log.warning("Sequence '%s' aborted after failed step %d", sequence.description, result.index)
                    break

    async def run_batch(
        self,
        page: Page,
        files: Optional[List[str]] = None,
        summary_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run every file one at a time; a failing file is recorded, not fatal."""
        files = discover_html_files(self.html_dir) if files is None else list(files)
        log.info("Found %d HTML files in %s", len(files), self.html_dir)

        results: List[Dict[str, Any]] = []
        total_screenshots = 0

        for html_file in files:
            try:
                report = await self.run_file(page, html_file)
            except Exception as e:
                log.error("%s failed: %s: %s", html_file, type(e).__name__, e)
                results.append({
                    "file": html_file,
                    "application_type": "unknown",
                    "strategy": "none",
                    "screenshots": 0,
                    "status": "failed",
                    "error": f"{type(e).__name__}: {e}",
                })
                continue

            total_screenshots += report["total_screenshots"]
            results.append({
                "file": html_file,
                "application_type": report["application_type"],
                "strategy": report["strategy_used"],
                "screenshots": report["total_screenshots"],
                "status": "success",
            })

        summary = build_batch_summary(results, total_screenshots)
        path = summary_path or os.path.join(self.visuals_dir, SUMMARY_FILENAME)
        write_json(path, summary)
        log.info(
            "Batch finished: %d files, %d screenshots, success rate %s (%s)",
            summary["total_files"], total_screenshots, summary["success_rate"], path,
        )
        return summary


def _unique(items: List[Any]) -> List[Any]:
    seen: Dict[Any, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


def build_batch_summary(results: List[Dict[str, Any]], total_screenshots: int) -> Dict[str, Any]:
    """Machine-readable batch summary."""
    success = sum(1 for r in results if r.get("status") == "success")
    rate = (success / len(results) * 100) if results else 0.0
    return {
        "timestamp": utc_timestamp(),
        "total_files": len(results),
        "total_screenshots": total_screenshots,
        "success_count": success,
        "success_rate": f"{rate:.1f}%",
        "application_types": _unique([r.get("application_type") for r in results]),
        "strategies_used": _unique([r.get("strategy") for r in results if r.get("strategy")]),
        "results": results,
    }
