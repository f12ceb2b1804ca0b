"""
Shared fixtures: an in-memory stand-in for a Playwright page.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

import pytest

from uiauto_web.repository import StrategyRepository

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "samples"


class FakeDialog:
    def __init__(self, message: str, page: "FakePage", dialog_type: str = "alert"):
        self.message = message
        self.type = dialog_type
        self._page = page
        self.accepted = False

    async def accept(self, prompt_text: Optional[str] = None) -> None:
        self.accepted = True
        self._page.calls.append(("accept", self.message))


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def is_visible(self) -> bool:
        self._page.probes.append(self._selector)
        if self._selector in self._page.broken:
            raise RuntimeError(f"detached: {self._selector}")
        return self._selector in self._page.visible


class FakePage:
    """Records every page call in order; screenshots write real files."""

    def __init__(
        self,
        visible: Optional[Set[str]] = None,
        broken: Optional[Set[str]] = None,
        fsm: Any = None,
    ):
        self.visible: Set[str] = set(visible or ())
        self.broken: Set[str] = set(broken or ())
        self.fsm = fsm
        self.calls: List[tuple] = []
        self.probes: List[str] = []
        self.handlers: Dict[str, List[Callable]] = {}
        self.dialog_on_click: Dict[str, str] = {}
        self.fail_on_fill: Set[str] = set()
        self.fail_on_click: Set[str] = set()
        self.fail_goto = False
        self.fail_goto_for: Set[str] = set()
        self.fail_screenshot = False
        self.dialogs: List[FakeDialog] = []

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def goto(self, url: str, wait_until: str = "load", timeout: Optional[int] = None) -> None:
        self.calls.append(("goto", url))
        if self.fail_goto or any(name in url for name in self.fail_goto_for):
            raise RuntimeError("net::ERR_FILE_NOT_FOUND")

    async def fill(self, selector: str, value: str) -> None:
        if selector in self.fail_on_fill:
            raise RuntimeError(f"element is not editable: {selector}")
        self.calls.append(("fill", selector, value))

    async def click(self, selector: str) -> None:
        if selector in self.fail_on_click:
            raise RuntimeError(f"no element matches {selector}")
        self.calls.append(("click", selector))
        if selector in self.dialog_on_click:
            dialog = FakeDialog(self.dialog_on_click[selector], self)
            self.dialogs.append(dialog)
            for handler in list(self.handlers.get("dialog", [])):
                await handler(dialog)

    async def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait", timeout))

    async def screenshot(self, path: str, full_page: bool = True, type: str = "png", timeout: int = 0) -> bytes:
        if self.fail_screenshot:
            raise RuntimeError("screenshot timed out")
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(b"\x89PNG\r\n\x1a\n")
        self.calls.append(("screenshot", os.path.basename(path)))
        return b""

    async def evaluate(self, expression: str) -> Any:
        return self.fsm

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self.handlers.get(event, []).remove(handler)

    def actions(self) -> List[tuple]:
        """Only fill/click/wait calls, in order."""
        return [c for c in self.calls if c[0] in {"fill", "click", "wait"}]

    def shots(self) -> List[str]:
        return [c[1] for c in self.calls if c[0] == "screenshot"]


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def sample_strategies_path() -> Path:
    return SAMPLES_DIR / "test-strategies.json"


@pytest.fixture
def write_strategies(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    def _write(data: Dict[str, Any], name: str = "test-strategies.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def bst_repo() -> StrategyRepository:
    return StrategyRepository.from_dict({
        "test_strategies": {
            "binary_search_tree": {
                "description": "BST demo",
                "file_patterns": ["*bst*", "*tree*"],
                "content_keywords": ["binary search tree"],
                "test_sequences": [
                    {
                        "description": "insert three",
                        "steps": [
                            {
                                "action": "input_sequence",
                                "target": "number_input",
                                "values": [1, 2, 3],
                                "click_after_each": "insert_button",
                            },
                            {"action": "screenshot", "name": "built"},
                        ],
                    }
                ],
            },
            "stack": {
                "description": "Stack demo",
                "file_patterns": ["*stack*"],
                "content_keywords": ["push"],
                "test_sequences": [],
            },
        },
        "element_selectors": {
            "number_input": ["#insert-input", "input[type=number]"],
            "insert_button": ["#insert-btn", "button.insert"],
        },
        "timing_settings": {"page_load_wait": 0, "after_input_wait": 300, "after_click_wait": 500, "after_alert_wait": 0},
    })
