# uiauto_web/session.py
from __future__ import annotations
import logging
from typing import Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright


class BrowserSession:
    """
    Owns the Playwright driver, one browser and the single page a run uses.

        async with BrowserSession(headless=True, default_timeout=20000) as page:
            ...
    """

    def __init__(
        self,
        browser: str = "chromium",
        headless: bool = True,
        default_timeout: int = 20000,
        logger: Optional[logging.Logger] = None,
    ):
        self.browser_name = browser
        self.headless = bool(headless)
        self.default_timeout = int(default_timeout)
        self.log = logger or logging.getLogger("uiauto_web")
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def start(self) -> Page:
        self.log.info("Launching %s (headless=%s)", self.browser_name, self.headless)
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_name, None)
        if launcher is None:
            await self.close()
            raise ValueError(f"Unknown browser: {self.browser_name}")
        self._browser = await launcher.launch(headless=self.headless)
        self.page = await self._browser.new_page()
        self.page.set_default_timeout(self.default_timeout)
        return self.page

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self.page = None

    async def __aenter__(self) -> Page:
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
