# uiauto_web/exceptions.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional


class UIAutoError(Exception):
    """Base exception for the framework."""


class ConfigError(UIAutoError):
    """Raised when the strategy file (JSON/YAML) is invalid."""


@dataclass
class LocatorAttempt:
    role: str
    selector: str
    visible: bool = False
    error: Optional[str] = None


class ElementNotFoundError(UIAutoError):
    def __init__(self, role: str, attempts: List[LocatorAttempt]):
        self.role = role
        self.attempts = attempts
        super().__init__(self.__str__())

    def __str__(self) -> str:
        lines = [f"ElementNotFoundError: role='{self.role}'"]
        if not self.attempts:
            lines.append("No selectors configured for this role")
        for i, a in enumerate(self.attempts, start=1):
            lines.append(f"  {i}. {a.selector} visible={a.visible} err={a.error}")
        return "\n".join(lines)


class StepError(UIAutoError):
    def __init__(
        self,
        action: str,
        index: int,
        target: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.index = index
        self.target = target
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"StepError: action='{self.action}' index={self.index}"
        if self.target:
            base += f" target='{self.target}'"
        if self.cause:
            base += f" cause='{type(self.cause).__name__}: {self.cause}'"
        return base
