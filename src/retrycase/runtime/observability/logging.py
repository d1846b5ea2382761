"""Structured logging for retry execution.

Key-value logging with bound context:
- Human-readable console output for development
- JSON Lines (orjson) for production log shipping
- In-memory capture for tests

Quick Start:
    >>> from retrycase.runtime.observability import get_logger, configure_logging
    >>>
    >>> # Configure (once at startup); defaults come from RETRYCASE_LOG_*
    >>> configure_logging(format="console", level="DEBUG")
    >>>
    >>> log = get_logger("billing")
    >>> log.info("charging card", attempt=2)
    # => 10:30:45.123 [info] charging card attempt=2 logger="billing"
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TextIO, runtime_checkable

import orjson

from retrycase.foundation.errors import ConfigurationException, ErrorCode

LogValue = str | int | float | bool | None
LogContext = dict[str, LogValue]


@dataclass(slots=True)
class LogEntry:
    """Single rendered log event."""

    timestamp: float
    level: str
    event: str
    context: LogContext

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context.

    Immutable - bind() returns a new logger with merged context. The level
    threshold is read at call time so module-level loggers follow later
    configure_logging() calls.

    Example:
        >>> log = BoundLogger(context={"logger": "retrycase.retry"})
        >>> log.bind(operation="fetch").info("retry scheduled", attempt=1)
    """

    context: LogContext = field(default_factory=dict)

    def bind(self, **kw: LogValue) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw})

    def _log(self, level: int, event: str, **kw: LogValue) -> None:
        if level < _default_level:
            return
        entry = LogEntry(
            timestamp=time.time(),
            level=logging.getLevelName(level).lower(),
            event=event,
            context={**self.context, **kw},
        )
        _get_renderer().render(entry)

    def debug(self, event: str, **kw: LogValue) -> None:
        self._log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: LogValue) -> None:
        self._log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: LogValue) -> None:
        self._log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: LogValue) -> None:
        self._log(logging.ERROR, event, **kw)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable output: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        parts: list[str] = []
        if self.show_timestamp:
            parts.append(entry.ts_human)
        parts.append(f"[{entry.level}]")
        parts.append(entry.event)
        parts.extend(f"{k}={_format_value(v)}" for k, v in sorted(entry.context.items()))
        print(" ".join(parts), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        data = {"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event, **entry.context}
        print(orjson.dumps(data, default=str).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer."""

    def render(self, entry: LogEntry) -> None:
        pass


@dataclass(slots=True)
class MemoryRenderer:
    """Keeps entries in a list for assertions in tests."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self) -> list[str]:
        return [e.event for e in self.entries]


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


# Shared by all threads; writes hold _config_lock
_config_lock = threading.Lock()
_renderer: LogRenderer | None = None
_default_level: int = logging.INFO

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
    renderer: LogRenderer | None = None,
) -> LogRenderer:
    """Configure global structured logging for every thread.

    Args:
        format: "console", "json" or "none" (default: LoggingSettings.format)
        level: Minimum level name (default: LoggingSettings.level)
        output: Output stream (default: stderr for console, stdout for json)
        renderer: Explicit renderer, overrides format

    Returns:
        Configured renderer instance

    Raises:
        ConfigurationException: Unknown format or level (INVALID_SETTING)
    """
    global _renderer, _default_level

    if format is None or level is None:
        from retrycase.foundation.config import get_settings
        settings = get_settings().logging
        format = format or settings.format
        level = level or settings.level

    if level.upper() not in _LEVELS:
        raise ConfigurationException.create(
            "level", f"Unknown level: {level}. Use one of: {', '.join(_LEVELS)}", ErrorCode.INVALID_SETTING
        )

    if renderer is None:
        match format:
            case "console": renderer = ConsoleRenderer(output=output or sys.stderr)
            case "json": renderer = JsonRenderer(output=output or sys.stdout)
            case "none": renderer = NoOpRenderer()
            case _: raise ConfigurationException.create(
                "format", f"Unknown format: {format}. Use 'console', 'json', or 'none'", ErrorCode.INVALID_SETTING
            )

    with _config_lock:
        _default_level = getattr(logging, level.upper())
        _renderer = renderer
    return renderer


def get_logger(name: str | None = None, **initial_context: LogValue) -> BoundLogger:
    """Get a structured logger; name is bound as 'logger'."""
    ctx: LogContext = dict(initial_context)
    if name:
        ctx["logger"] = name
    return BoundLogger(context=ctx)


def _get_renderer() -> LogRenderer:
    global _renderer
    renderer = _renderer
    if renderer is None:
        with _config_lock:
            if _renderer is None:
                _renderer = ConsoleRenderer()
            renderer = _renderer
    return renderer


def _format_value(v: LogValue) -> str:
    if isinstance(v, str):
        return f'"{v}"'
    if isinstance(v, bool):
        return str(v).lower()
    return str(v)
