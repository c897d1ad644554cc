"""
Structured Logging & Probe Metrics

Provides:
  - ``JSONFormatter``       – single-line JSON log formatter
  - ``configure_logging``   – installs the root handler from settings
  - ``ProbeMetrics``        – in-process metric accumulator per probe invocation
"""
from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Attributes present on every LogRecord; anything else came in via ``extra``.
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "taskName",
))

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ---------------------------------------------------------------------------
# JSON log formatter
# ---------------------------------------------------------------------------

class JSONFormatter(logging.Formatter):
    """
    Emit log records as single-line JSON objects.

    Extra structured fields passed through ``extra=`` are attached at the top
    level of the payload.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        try:
            return json.dumps(payload, default=str)
        except (TypeError, ValueError):
            return json.dumps({"message": str(payload)})


class _AppStreamHandler(logging.StreamHandler):
    """Marker type for the handler owned by :func:`configure_logging`."""


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Install a single stream handler on the root logger.

    Calling it again replaces the handler installed by the previous call, so
    the CLI and the app factory can both use it.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, _AppStreamHandler):
            root.removeHandler(handler)

    handler = _AppStreamHandler()
    handler.setFormatter(JSONFormatter() if json_logs else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())


# ---------------------------------------------------------------------------
# ProbeMetrics – per-invocation accumulator
# ---------------------------------------------------------------------------

class ProbeMetrics:
    """
    Collects execution metrics for a single probe invocation.

    Call :meth:`start` at the beginning of a probe, :meth:`stop` at the end,
    and :meth:`to_dict` to retrieve a snapshot::

        metrics = ProbeMetrics("https://example.com/mcp").start()
        metrics.increment("requests")
        metrics.increment("fallbacks")
        metrics.stop(success=True)
    """

    def __init__(self, target: Optional[str]) -> None:
        self.target = target
        self._start_time: Optional[float] = None
        self._stop_time: Optional[float] = None
        self._counters: Dict[str, int] = {}
        self.success: Optional[bool] = None
        self.error: Optional[str] = None

    def start(self) -> "ProbeMetrics":
        self._start_time = time.monotonic()
        return self

    def stop(self, success: bool = True, error: Optional[str] = None) -> "ProbeMetrics":
        self._stop_time = time.monotonic()
        self.success = success
        self.error = error
        return self

    @property
    def duration_seconds(self) -> Optional[float]:
        if self._start_time is None:
            return None
        end = self._stop_time if self._stop_time is not None else time.monotonic()
        return round(end - self._start_time, 3)

    def increment(self, name: str, amount: int = 1) -> None:
        """Increment integer counter *name* by *amount*."""
        self._counters[name] = self._counters.get(name, 0) + amount

    def count(self, name: str) -> int:
        return self._counters.get(name, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "duration_seconds": self.duration_seconds,
            "success": self.success,
            "error": self.error,
            "counters": dict(self._counters),
        }
