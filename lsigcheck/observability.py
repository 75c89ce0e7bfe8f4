"""
Structured Logging

JSON-per-line (or plain text) logging for the checker components, with the
component layer, operation name, timing and error code attached to every
record.

    ┌─────────────────────────────────────────────────────────┐
    │  logger.warning("rejected", error_code=..., pc=...)     │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │                 LsigLogger (per layer)                   │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │        StructuredHandler (json) │ text handler          │
    └─────────────────────────────────────────────────────────┘

Level and format come from ``observability.log_level`` and
``observability.log_format`` in the configuration.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import sys
import time
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Layer(Enum):
    """Checker components for log categorization."""
    VARINT = "varint"
    LANGSPEC = "langspec"
    OPCODES = "opcodes"
    VALIDATOR = "validator"
    CONFIG = "config"
    CLI = "cli"


@dataclass
class LogEvent:
    """Structured log event."""
    timestamp: str
    level: str
    logger: str
    message: str
    layer: str = ""
    operation: str = ""
    duration_ms: Optional[float] = None
    error_code: str = ""
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding empty values."""
        d = asdict(self)
        return {k: v for k, v in d.items() if v is not None and v != "" and v != {}}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class StructuredHandler(logging.Handler):
    """Logging handler that outputs structured JSON."""

    def __init__(self, stream: Any = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = LogEvent(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                level=record.levelname.lower(),
                logger=record.name,
                message=record.getMessage(),
                layer=getattr(record, "layer", ""),
                operation=getattr(record, "operation", ""),
                duration_ms=getattr(record, "duration_ms", None),
                error_code=getattr(record, "error_code", ""),
                context=getattr(record, "context", {}),
            )

            if record.exc_info:
                event.exception = "".join(traceback.format_exception(*record.exc_info))

            # Resolved per record so redirected stderr is honored.
            stream = self.stream or sys.stderr
            stream.write(event.to_json() + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class TextHandler(logging.StreamHandler):
    """Plain text handler: ``<time> <level> <logger>: <message> key=value ...``."""

    def __init__(self, stream: Any = None):
        super().__init__(stream)
        self._explicit_stream = stream is not None

    def emit(self, record: logging.LogRecord) -> None:
        if not self._explicit_stream:
            self.stream = sys.stderr
        super().emit(record)

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S")
        line = f"{ts} {record.levelname} {record.name}: {record.getMessage()}"
        error_code = getattr(record, "error_code", "")
        if error_code:
            line += f" error_code={error_code}"
        for key, value in (getattr(record, "context", None) or {}).items():
            line += f" {key}={value}"
        return line


_HANDLER_TYPES = (StructuredHandler, TextHandler)


class LsigLogger:
    """
    Structured logger for a checker component.

    Level and format default to the current configuration.
    """

    def __init__(
        self,
        name: str,
        layer: Layer,
        level: Optional[LogLevel] = None,
        log_format: Optional[str] = None,
    ):
        self.name = name
        self.layer = layer
        self._logger = logging.getLogger(f"lsigcheck.{layer.value}.{name}")

        if level is None or log_format is None:
            from lsigcheck.config import get_config
            obs = get_config().observability
            if level is None:
                # Bad values are reported by ConfigManager.validate().
                try:
                    level = LogLevel(obs.log_level.get())
                except ValueError:
                    level = LogLevel.WARNING
            log_format = log_format or obs.log_format.get()

        self._logger.setLevel(getattr(logging, level.value.upper()))

        for handler in list(self._logger.handlers):
            if isinstance(handler, _HANDLER_TYPES):
                self._logger.removeHandler(handler)
        handler = TextHandler() if log_format == "text" else StructuredHandler()
        self._logger.addHandler(handler)

    def _log(
        self,
        level: int,
        message: str,
        operation: str = "",
        error_code: str = "",
        duration_ms: Optional[float] = None,
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        extra = {
            "layer": self.layer.value,
            "operation": operation,
            "error_code": error_code,
            "duration_ms": duration_ms,
            "context": context,
        }
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)

    def error(
        self,
        message: str,
        error_code: str = "",
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        self._log(logging.ERROR, message, error_code=error_code, exc_info=exc_info, **context)

    def operation(
        self,
        name: str,
        duration_ms: float,
        success: bool = True,
        **context: Any,
    ) -> None:
        """Log an operation completion."""
        level = logging.DEBUG if success else logging.WARNING
        status = "completed" if success else "failed"
        self._log(
            level,
            f"Operation {name} {status}",
            operation=name,
            duration_ms=duration_ms,
            **context,
        )


_loggers: Dict[str, LsigLogger] = {}
_overrides: Dict[str, Any] = {"level": None, "log_format": None}


def get_logger(name: str, layer: Layer) -> LsigLogger:
    """Get (or create) the logger for a component."""
    key = f"{layer.value}.{name}"
    logger = _loggers.get(key)
    if logger is None:
        logger = LsigLogger(name, layer, _overrides["level"], _overrides["log_format"])
        _loggers[key] = logger
    return logger


def configure_logging(level: Optional[LogLevel] = None, log_format: Optional[str] = None) -> None:
    """
    Rebuild component loggers, e.g. after the configuration changed.

    An explicit level or format also applies to loggers created later.
    """
    _overrides["level"] = level
    _overrides["log_format"] = log_format
    for key, logger in list(_loggers.items()):
        _loggers[key] = LsigLogger(logger.name, logger.layer, level, log_format)


T = TypeVar("T")


def timed_operation(
    logger: LsigLogger,
    operation_name: str,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for timing and logging operations."""
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            start = time.monotonic()
            success = True
            try:
                return func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.monotonic() - start) * 1000
                logger.operation(operation_name, duration_ms, success)
        return wrapper
    return decorator
