"""Contextual logging for the exporter.

``logger`` is a module-level adapter over the stdlib ``pgbouncer_exporter``
logger.  ``logger.with_context(...)`` returns a child that stamps every
record with the given fields; both formatters below render them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_ROOT_LOGGER_NAME = "pgbouncer_exporter"
_TEXT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dict of bound context fields."""

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None) -> None:
        super().__init__(logger, context or {})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextualLogger":
        """Return a child logger with ``context`` merged into the bound fields."""
        return ContextualLogger(self.logger, {**self.extra, **context})


class TextFormatter(logging.Formatter):
    """Plain text lines with bound context appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            line = f"{line} [{pairs}]"
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "context", None) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Install a single stream handler on the exporter's root logger."""
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False


logger = ContextualLogger(logging.getLogger(_ROOT_LOGGER_NAME))
