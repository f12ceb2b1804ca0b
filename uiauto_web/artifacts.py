"""
Screenshot and report artifacts for page runs.
Numbered PNGs per HTML file; ordering is encoded in the filename prefix.
"""
from __future__ import annotations
import json
import logging
import os
import re
from typing import Any, Dict, Optional

from playwright.async_api import Page

from .config import ScreenshotSettings

log = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[\\/:*?\"<>|\s]+")


def ensure_dir(path: str) -> None:
    """Ensure directory exists."""
    os.makedirs(path, exist_ok=True)


def screenshot_filename(index: int, name: str, ext: str = "png") -> str:
    """
    @param index Step index (zero-padded to 3 digits, never truncated)
    @param name Screenshot name; path separators and whitespace become '_'
    """
    safe = _UNSAFE.sub("_", str(name)).strip("_") or "shot"
    return f"{index:03d}_{safe}.{ext}"


async def capture_page(
    page: Page,
    out_dir: str,
    name: str,
    index: int,
    settings: Optional[ScreenshotSettings] = None,
) -> Optional[str]:
    """
    Capture the current page. Returns file path or None if capture fails.
    """
    settings = settings or ScreenshotSettings()
    ensure_dir(out_dir)
    filename = screenshot_filename(index, name, "jpg" if settings.type == "jpeg" else "png")
    path = os.path.join(out_dir, filename)
    try:
        await page.screenshot(
            path=path,
            full_page=settings.full_page,
            type=settings.type,
            timeout=settings.timeout,
        )
    except Exception as e:
        log.error("Screenshot failed %s: %s", filename, e)
        return None
    log.info("Screenshot %s", filename)
    return path


def write_json(path: str, data: Dict[str, Any]) -> str:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path
