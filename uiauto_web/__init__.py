# uiauto_web/__init__.py
"""
UIAuto Web - strategy-driven interaction runner for static HTML pages.

This package provides:
- StrategyRepository: strategy file loading and validation
- detect_application_type: file name / content to strategy matching
- ElementResolver: semantic role to visible selector
- StepExecutor: typed step execution against a Playwright page
- StrategyRunner: per-file and batch orchestration with JSON reports
- EdgeCaseRunner: insert-sequence edge cases for tree-like demos
"""

from uiauto_web.config import ErrorPolicy, RunConfig, ScreenshotSettings, TimingSettings
from uiauto_web.detector import detect_application_type
from uiauto_web.edge_cases import EdgeCase, EdgeCaseRunner, EdgeCaseSettings
from uiauto_web.exceptions import (
    UIAutoError,
    ConfigError,
    ElementNotFoundError,
    StepError,
    LocatorAttempt,
)
from uiauto_web.executor import StepExecutor, StepResult
from uiauto_web.repository import FALLBACK_STRATEGY, StrategyRepository
from uiauto_web.resolver import ElementResolver
from uiauto_web.runner import StrategyRunner, discover_html_files
from uiauto_web.session import BrowserSession
from uiauto_web.steps import (
    ClickStep,
    HandleAlertStep,
    InputSequenceStep,
    InputStep,
    ScreenshotStep,
    Sequence,
    Step,
    Strategy,
    parse_step,
)

__all__ = [
    "StrategyRepository",
    "FALLBACK_STRATEGY",
    "detect_application_type",
    "ElementResolver",
    "StepExecutor",
    "StepResult",
    "StrategyRunner",
    "discover_html_files",
    "EdgeCase",
    "EdgeCaseRunner",
    "EdgeCaseSettings",
    "BrowserSession",
    "RunConfig",
    "TimingSettings",
    "ScreenshotSettings",
    "ErrorPolicy",
    "UIAutoError",
    "ConfigError",
    "ElementNotFoundError",
    "StepError",
    "LocatorAttempt",
    "Step",
    "InputStep",
    "ClickStep",
    "ScreenshotStep",
    "InputSequenceStep",
    "HandleAlertStep",
    "Sequence",
    "Strategy",
    "parse_step",
]

__version__ = "1.0.0"
