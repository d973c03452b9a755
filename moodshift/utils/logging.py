"""
Structured logging utilities for MoodShift.
"""
import json
import logging
import sys
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Generator


SECRET_KEYS = frozenset({'password', 'secret', 'key', 'token', 'api_key', 'auth'})


@dataclass
class LogContext:
    """Context information for structured logging."""
    component: str
    operation: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, carrying context and extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage()
        }
        context = getattr(record, 'context', None)
        if context:
            log_entry["context"] = asdict(context)
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            log_entry.update(extra_fields)
        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }
        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with key=value extras appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            line += " " + " ".join(f"{k}={v}" for k, v in extra_fields.items())
        return line


class StructuredLogger:
    """Structured logger that outputs JSON-formatted logs with stack traces and context information."""

    def __init__(self, name: str, level: str = "INFO", fmt: str = "json"):
        """Initialize the structured logger.

        Args:
            name: Logger name (typically module name)
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            fmt: Output format, 'json' or 'text'
        """
        self.name = name
        self.fmt = fmt
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
        self.logger.addHandler(handler)
        self.logger.propagate = False
        self._context: Optional[LogContext] = None

    def _log(self, level: str, message: str, exc_info: bool = False, **kwargs) -> None:
        """Internal logging method."""
        extra = {
            'context': self._context,
            'extra_fields': kwargs
        }
        getattr(self.logger, level.lower())(
            message,
            extra=extra,
            exc_info=exc_info
        )

    def info(self, message: str, **kwargs) -> None:
        """Log an info message.

        Args:
            message: Log message
            **kwargs: Additional fields to include in log
        """
        self._log("INFO", message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log an error message.

        Args:
            message: Log message
            exc_info: Include exception information
            **kwargs: Additional fields to include in log
        """
        self._log("ERROR", message, exc_info=exc_info, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log("WARNING", message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log("DEBUG", message, **kwargs)

    def metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Log a metric value.

        Args:
            name: Metric name
            value: Metric value
            tags: Optional tags for the metric
        """
        metric_data = {
            "metric_name": name,
            "metric_value": value
        }
        if tags:
            metric_data["tags"] = tags
        self._log("INFO", f"Metric: {name}", **metric_data)

    def with_context(self, context: LogContext) -> 'StructuredLogger':
        """Return a logger sharing this one's handler but carrying the given context."""
        contextual = object.__new__(StructuredLogger)
        contextual.name = self.name
        contextual.fmt = self.fmt
        contextual.logger = self.logger
        contextual._context = context
        return contextual

    @contextmanager
    def operation_context(self, component: str, operation: str, **metadata) -> Generator['StructuredLogger', None, None]:
        """Context manager for operation logging with automatic start/end logging.

        Args:
            component: Component name performing the operation
            operation: Operation name
            **metadata: Additional metadata for the operation

        Yields:
            StructuredLogger instance with operation context
        """
        context = LogContext(
            component=component,
            operation=operation,
            metadata=metadata
        )
        contextual_logger = self.with_context(context)
        contextual_logger.debug(
            f"Starting operation: {operation}",
            operation_status="started"
        )
        start_time = time.perf_counter()
        try:
            yield contextual_logger
            contextual_logger.info(
                f"Completed operation: {operation}",
                operation_status="completed",
                duration_seconds=time.perf_counter() - start_time
            )
        except Exception as e:
            contextual_logger.error(
                f"Failed operation: {operation}",
                exc_info=True,
                operation_status="failed",
                duration_seconds=time.perf_counter() - start_time,
                error_type=type(e).__name__,
                error_message=str(e)
            )
            raise

    def log_config(self, config: Dict[str, Any], exclude_secrets: bool = True) -> None:
        """Log configuration with optional secret filtering.

        Args:
            config: Configuration dictionary to log
            exclude_secrets: Whether to filter out sensitive information
        """
        if exclude_secrets:
            config = self._filter_secrets(config, SECRET_KEYS)
        self.info("Configuration loaded", config=config)

    def _filter_secrets(self, data: Dict[str, Any], secret_keys: frozenset) -> Dict[str, Any]:
        filtered = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(secret_key in key_lower for secret_key in secret_keys):
                filtered[key] = "***REDACTED***"
            elif isinstance(value, dict):
                filtered[key] = self._filter_secrets(value, secret_keys)
            else:
                filtered[key] = value
        return filtered
