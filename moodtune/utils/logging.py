"""
Structured logging for MoodTune.

`StructuredLogger` attaches keyword fields (and, inside an operation, the
operation's context) to every record and writes one line per record, as
JSON or as readable text.
"""
import copy
import json
import logging
import sys
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Generator

SECRET_KEYS = {'password', 'secret', 'token', 'api_key', 'auth'}
REDACTED = "***REDACTED***"


@dataclass
class LogContext:
    """Context attached to every record emitted inside an operation."""
    component: str
    operation: str
    metadata: Optional[Dict[str, Any]] = None


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, 'context', None)
        if context is not None:
            entry["context"] = asdict(context)
        entry.update(getattr(record, 'extra_fields', None) or {})
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human readable lines with the extra fields appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, 'extra_fields', None)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class StructuredLogger:
    """Logger that attaches operation context and keyword fields to each record."""

    def __init__(self, name: str, level: str = "INFO", fmt: str = "json"):
        """
        Args:
            name: Name of the underlying stdlib logger
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            fmt: 'json' for one JSON object per line, 'text' otherwise
        """
        self.name = name
        self.level = level.upper()
        self.fmt = fmt
        self._context: Optional[LogContext] = None

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, self.level))
        self.logger.propagate = False
        # replace rather than stack handlers when the same name is reused
        for existing in list(self.logger.handlers):
            self.logger.removeHandler(existing)
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
        self.logger.addHandler(stream)

    def _log(self, level: int, message: str, exc_info: bool = False, **fields) -> None:
        self.logger.log(level, message, exc_info=exc_info,
                        extra={'context': self._context, 'extra_fields': fields})

    def debug(self, message: str, **fields) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **fields)

    def metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Emit `name`=`value` as an INFO record, optionally tagged."""
        fields: Dict[str, Any] = {"metric_name": name, "metric_value": value}
        if tags:
            fields["tags"] = tags
        self.info(f"Metric: {name}", **fields)

    def with_context(self, context: LogContext) -> 'StructuredLogger':
        """Return a logger writing through the same handlers but carrying `context`."""
        child = copy.copy(self)
        child._context = context
        return child

    @contextmanager
    def operation_context(self, component: str, operation: str,
                          **metadata) -> Generator['StructuredLogger', None, None]:
        """Log start, completion or failure of an operation with its duration.

        Exceptions are logged and re-raised.
        """
        log = self.with_context(LogContext(component=component, operation=operation, metadata=metadata))
        log.info(f"Starting operation: {operation}", operation_status="started")
        started = time.perf_counter()
        try:
            yield log
        except Exception as e:
            log.error(
                f"Operation failed: {operation}",
                exc_info=True,
                operation_status="failed",
                duration_seconds=time.perf_counter() - started,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        log.info(
            f"Operation completed: {operation}",
            operation_status="completed",
            duration_seconds=time.perf_counter() - started,
        )

    def log_config(self, config: Dict[str, Any], exclude_secrets: bool = True) -> None:
        """Log configuration, redacting secret-looking keys at any depth."""
        self.info("Configuration loaded", config=redact_secrets(config) if exclude_secrets else config)


def redact_secrets(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of `data` with secret-looking keys replaced.

    Empty values are left as they are, so a missing token stays visible as
    missing.
    """
    redacted: Dict[str, Any] = {}
    for key, value in data.items():
        if any(secret in str(key).lower() for secret in SECRET_KEYS):
            redacted[key] = REDACTED if value else value
        elif isinstance(value, dict):
            redacted[key] = redact_secrets(value)
        else:
            redacted[key] = value
    return redacted


def get_logger(name: str, level: str = "INFO", fmt: str = "json") -> StructuredLogger:
    """Factory function to create a StructuredLogger instance."""
    return StructuredLogger(name, level, fmt)
