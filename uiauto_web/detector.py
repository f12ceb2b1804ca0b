"""
@file detector.py
@brief Picks the strategy for a target HTML file by name pattern, then by content keyword.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern

from .repository import FALLBACK_STRATEGY, StrategyRepository


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> Pattern[str]:
    """'*bst*' -> /.*bst.*/ ; every character other than '*' is literal, match is unanchored."""
    parts = [re.escape(chunk) for chunk in pattern.lower().split("*")]
    return re.compile(".*".join(parts))


def matches_file_pattern(file_name: str, pattern: str) -> bool:
    return glob_to_regex(pattern).search(file_name.lower()) is not None


def detect_application_type(repo: StrategyRepository, file_name: str, content: str = "") -> str:
    """
    Return exactly one strategy name from repo.

    First pass checks every strategy's file_patterns in file order, second
    pass checks content_keywords against the page text. First match wins;
    nothing matching yields the fallback strategy.
    """
    strategies = repo.strategies

    for name, strategy in strategies.items():
        for pattern in strategy.file_patterns:
            if matches_file_pattern(file_name, pattern):
                return name

    text = (content or "").lower()
    if text:
        for name, strategy in strategies.items():
            if any(kw and kw.lower() in text for kw in strategy.content_keywords):
                return name

    return FALLBACK_STRATEGY
