"""
@file edge_cases.py
@brief Deep insert-sequence pass for tree-like demos (single node, skewed trees, odd values).
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from playwright.async_api import Page

from .artifacts import capture_page, ensure_dir
from .exceptions import ElementNotFoundError
from .executor import as_input_text
from .resolver import ElementResolver
from .runner import StrategyRunner, discover_html_files, html_file_uri

log = logging.getLogger(__name__)

EDGE_CASE_DIR = "edge_cases"


@dataclass(frozen=True)
class EdgeCase:
    description: str
    values: Tuple[Any, ...]

    @property
    def slug(self) -> str:
        return re.sub(r"\s+", "_", self.description.strip())


DEFAULT_CASES: Tuple[EdgeCase, ...] = (
    EdgeCase("single node", (1,)),
    EdgeCase("right skewed", (1, 2, 3, 4, 5)),
    EdgeCase("left skewed", (5, 4, 3, 2, 1)),
    EdgeCase("special values", (0, -1, 100, 999)),
)


@dataclass(frozen=True)
class EdgeCaseSettings:
    strategy: str = "binary_search_tree"
    file_keywords: Tuple[str, ...] = ("bst", "tree", "binary")
    reset_selector: str = 'button:has-text("Reset"), button:has-text("Clear")'
    input_role: str = "number_input"
    button_role: str = "insert_button"
    start_index: int = 200
    cases: Tuple[EdgeCase, ...] = DEFAULT_CASES

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> EdgeCaseSettings:
        d = d or {}
        base = cls()
        cases = d.get("cases")
        return cls(
            strategy=str(d.get("strategy", base.strategy)),
            file_keywords=tuple(str(k).lower() for k in d.get("file_keywords", base.file_keywords)),
            reset_selector=str(d.get("reset_selector", base.reset_selector)),
            input_role=str(d.get("input_role", base.input_role)),
            button_role=str(d.get("button_role", base.button_role)),
            start_index=int(d.get("start_index", base.start_index)),
            cases=tuple(EdgeCase(str(c["description"]), tuple(c["values"])) for c in cases) if cases else base.cases,
        )


class EdgeCaseRunner:
    """
    Runs the regular strategy on each matching file, then replays every
    edge case on a freshly loaded page with a screenshot per inserted value.
    """

    def __init__(self, runner: StrategyRunner, settings: Optional[EdgeCaseSettings] = None):
        self.runner = runner
        self.settings = settings or EdgeCaseSettings.from_dict(runner.repo.edge_cases)

    def select_files(self, files: Optional[List[str]] = None) -> List[str]:
        files = discover_html_files(self.runner.html_dir) if files is None else files
        keywords = self.settings.file_keywords
        return [f for f in files if any(k in f.lower() for k in keywords)]

    async def run(self, page: Page, files: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        selected = self.select_files(files)
        if not selected:
            log.warning("No files match edge-case keywords %s", list(self.settings.file_keywords))
            return []

        log.info("Edge-case pass over %d file(s)", len(selected))
        outcomes: List[Dict[str, Any]] = []
        for html_file in selected:
            try:
                outcomes.append(await self.run_file(page, html_file))
            except Exception as e:
                log.error("Edge-case pass failed for %s: %s: %s", html_file, type(e).__name__, e)
                outcomes.append({"file": html_file, "status": "failed", "error": f"{type(e).__name__}: {e}"})
        return outcomes

    async def run_file(self, page: Page, html_file: str) -> Dict[str, Any]:
        repo = self.runner.repo
        strategy = self.settings.strategy if repo.has_strategy(self.settings.strategy) else None
        report = await self.runner.run_file(page, html_file, strategy_name=strategy)

        timing = self.runner.config.timing
        folder = os.path.join(self.runner.folder_for(html_file), EDGE_CASE_DIR)
        ensure_dir(folder)
        self.runner.clear_previous_artifacts(folder)
        await page.goto(
            html_file_uri(self.runner.html_dir, html_file),
            wait_until="domcontentloaded",
            timeout=timing.navigation_timeout,
        )
        if timing.page_load_wait > 0:
            await page.wait_for_timeout(timing.page_load_wait)

        resolver = ElementResolver(page, repo.element_selectors)
        index = self.settings.start_index
        screenshots: List[str] = []

        for case in self.settings.cases:
            log.info("Edge case %s: %s", case.description, list(case.values))
            await self._reset(page)

            for value in case.values:
                index += 1
                try:
                    input_sel = await resolver.resolve_required(self.settings.input_role)
                    button_sel = await resolver.resolve_required(self.settings.button_role)
                    await page.fill(input_sel, as_input_text(value))
                    await page.click(button_sel)
                    if timing.after_click_wait > 0:
                        await page.wait_for_timeout(timing.after_click_wait)
                except ElementNotFoundError as e:
                    log.warning("Edge case %s stopped: %s", case.description, e.role)
                    break
                except Exception as e:
                    log.error("Inserting %r failed: %s", value, e)
                    break
                path = await capture_page(
                    page, folder, f"edge_{case.slug}_{value}", index, self.runner.config.screenshots
                )
                if path:
                    screenshots.append(path)

        return {
            "file": html_file,
            "status": "success",
            "strategy": report["strategy_used"],
            "screenshots": report["total_screenshots"] + len(screenshots),
            "edge_case_screenshots": screenshots,
        }

    async def _reset(self, page: Page) -> None:
        try:
            await page.click(self.settings.reset_selector)
        except Exception as e:
            log.info("Could not reset page: %s", e)
            return
        wait = self.runner.config.timing.after_reset_wait
        if wait > 0:
            await page.wait_for_timeout(wait)
