"""JSONL event log for LineSense requests.

Each event is one JSON object per line. ``bind`` returns a child logger that
stamps request fields (provider, command) on every event it writes, so one
request's events can be grepped out of a shared log file.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from linesense.paths import state_root

LogLevel = Literal["off", "error", "warning", "info", "debug"]

_THRESHOLDS: dict[str, int] = {"debug": 10, "info": 20, "warning": 30, "error": 40, "off": 100}
_ALIASES = {"warn": "warning", "none": "off", "disabled": "off", "0": "off"}

_runtime_logger: "RuntimeLogger | None" = None


def parse_level(value: str | None, default: LogLevel = "warning") -> LogLevel:
    if not value:
        return default
    normalized = value.strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized not in _THRESHOLDS:
        return default
    return normalized  # type: ignore[return-value]


def default_log_file() -> Path:
    return state_root() / "logs" / "linesense.runtime.jsonl"


class RuntimeLogger:
    """Appends events at or above ``level`` to ``sink_path``; no sink means no output."""

    def __init__(
        self,
        level: LogLevel,
        sink_path: Path | None,
        *,
        bound: dict[str, Any] | None = None,
        lock: threading.Lock | None = None,
    ) -> None:
        self.level = level
        self.sink_path = sink_path
        self.bound = dict(bound or {})
        self._lock = lock or threading.Lock()

    def enabled(self, level: str) -> bool:
        return self.sink_path is not None and _THRESHOLDS[level] >= _THRESHOLDS[self.level]

    def bind(self, **fields: Any) -> RuntimeLogger:
        return RuntimeLogger(self.level, self.sink_path, bound={**self.bound, **fields}, lock=self._lock)

    def _emit(self, level: str, event: str, fields: dict[str, Any]) -> None:
        if not self.enabled(level):
            return
        assert self.sink_path is not None
        record = {
            "ts": datetime.now(UTC).isoformat(),
            "level": level,
            "event": event,
            "pid": os.getpid(),
            **self.bound,
            **fields,
        }
        line = json.dumps(record, sort_keys=True, default=str)
        with self._lock:
            self.sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self.sink_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)


def configure_runtime_logging(
    *,
    level: str | None = None,
    log_file: str | Path | None = None,
) -> RuntimeLogger:
    """Install the process-wide logger.

    Arguments win over ``LINESENSE_LOG_LEVEL`` / ``LINESENSE_LOG_FILE``. At
    level ``off`` no sink is resolved, so the state directory is not touched.
    """
    global _runtime_logger

    effective_level = parse_level(level or os.getenv("LINESENSE_LOG_LEVEL"))
    if effective_level == "off":
        _runtime_logger = RuntimeLogger("off", None)
        return _runtime_logger

    target = log_file or os.getenv("LINESENSE_LOG_FILE")
    sink = Path(target).expanduser().resolve() if target else default_log_file()
    _runtime_logger = RuntimeLogger(effective_level, sink)
    _runtime_logger.info("logging.configured", configured_level=effective_level, sink_path=str(sink))
    return _runtime_logger


def get_runtime_logger() -> RuntimeLogger:
    global _runtime_logger
    if _runtime_logger is None:
        _runtime_logger = configure_runtime_logging()
    return _runtime_logger
