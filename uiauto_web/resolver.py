# uiauto_web/resolver.py
"""
@file resolver.py
@brief Resolves semantic element roles to a visible selector on the current page.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from playwright.async_api import Page

from .exceptions import ElementNotFoundError, LocatorAttempt

log = logging.getLogger(__name__)


class ElementResolver:
    """
    Tries each selector configured for a role, in order, and returns the
    first one whose element exists and reports itself visible.
    """

    def __init__(self, page: Page, selectors: Mapping[str, Sequence[str]]):
        """
        @param page Playwright page the run owns
        @param selectors Element selector table (role -> ordered selectors)
        """
        self.page = page
        self.selectors: Dict[str, List[str]] = {role: list(sels) for role, sels in selectors.items()}
        self.last_attempts: List[LocatorAttempt] = []

    async def _probe(self, role: str, selector: str) -> LocatorAttempt:
        try:
            visible = await self.page.locator(selector).first.is_visible()
            return LocatorAttempt(role=role, selector=selector, visible=bool(visible))
        except Exception as e:
            return LocatorAttempt(role=role, selector=selector, visible=False, error=f"{type(e).__name__}: {e}")

    async def resolve(self, role: str) -> Optional[str]:
        """
        Resolve a role to a selector.

        @param role Semantic role name from element_selectors
        @return First visible selector, or None when no candidate qualifies
        """
        attempts: List[LocatorAttempt] = []
        self.last_attempts = attempts

        for selector in self.selectors.get(role, []):
            attempt = await self._probe(role, selector)
            attempts.append(attempt)
            if attempt.visible:
                log.debug("Resolved role '%s' -> %s", role, selector)
                return selector

        log.debug("%s", ElementNotFoundError(role, attempts))
        return None

    async def resolve_required(self, role: str) -> str:
        """Like resolve(), but raises ElementNotFoundError instead of returning None."""
        selector = await self.resolve(role)
        if selector is None:
            raise ElementNotFoundError(role, list(self.last_attempts))
        return selector
