"""
@file actionlogger.py
@brief Structured per-step event logging (line or jsonl), off unless enabled.
"""

from __future__ import annotations

import json
import os
import threading
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ActionLogger:
    """Thread-safe step event logger with line/jsonl output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._run_id = "default"
        self._format = "line"
        self._max_traceback_chars = 4000

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
        max_traceback_chars: int = 4000,
    ) -> None:
        """Configure logger settings."""
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("ActionLogger format must be 'line' or 'jsonl'")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()
            self._format = fmt
            self._max_traceback_chars = max(256, int(max_traceback_chars))
            if run_id:
                self._run_id = run_id

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def set_run_id(self, run_id: str) -> None:
        if run_id:
            with self._lock:
                self._run_id = run_id

    def log(
        self,
        *,
        action: str,
        role: Optional[str] = None,
        selector: Optional[str] = None,
        index: Optional[int] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        event: Optional[str] = None,
    ) -> None:
        """Emit a step event."""
        if not self._enabled:
            return

        event_obj: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event or "step",
            "action": action,
            "index": index,
            "role": role,
            "selector": selector,
            "status": status,
            "duration_ms": duration_ms,
            "metadata": self._redact_metadata(dict(metadata or {})),
            "run_id": self._run_id,
        }
        if exception is not None:
            event_obj["exception"] = self._format_exception(exception)

        line = self._format_output(event_obj)

        if self._console:
            print(line, flush=True)

        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with open(self._file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            pass

    def _format_output(self, event: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"), default=str)
        return self._format_line(event)

    def _format_line(self, event: Dict[str, Any]) -> str:
        parts = [event["timestamp"], event["level"], event["action"]]
        if event.get("event"):
            parts.append(f"event={event['event']}")
        if event.get("index") is not None:
            parts.append(f"index={event['index']}")
        if event.get("role"):
            parts.append(f"role='{event['role']}'")
        if event.get("selector"):
            parts.append(f"selector='{event['selector']}'")
        if event.get("status"):
            parts.append(f"status={event['status']}")
        if event.get("duration_ms") is not None:
            parts.append(f"duration_ms={event['duration_ms']}")
        parts.append(f"run_id={event['run_id']}")
        for key, value in (event.get("metadata") or {}).items():
            parts.append(f"{key}={value}")
        exc = event.get("exception")
        if exc:
            parts.append(f"exc_type={exc.get('type')}")
            parts.append(f"exc_message={exc.get('message')}")
        return " | ".join(parts)

    @staticmethod
    def _redact_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
        sensitive_keys = {"password", "passwd", "secret", "token"}
        redacted = {}
        for key, value in metadata.items():
            if key.lower() in sensitive_keys:
                redacted[key] = "***"
            elif key == "value" and len(str(value)) > 40:
                redacted[key] = f"{str(value)[:40]}..."
            else:
                redacted[key] = value
        return redacted

    def _format_exception(self, exception: BaseException) -> Dict[str, Any]:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
        if len(tb) > self._max_traceback_chars:
            tb = tb[: self._max_traceback_chars] + "...<truncated>"
        cause = getattr(exception, "__cause__", None)
        return {
            "type": type(exception).__name__,
            "message": str(exception),
            "traceback": tb.strip(),
            "cause_type": type(cause).__name__ if cause is not None else None,
            "cause_message": str(cause) if cause is not None else None,
        }


ACTION_LOGGER = ActionLogger()
