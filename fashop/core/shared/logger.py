"""
Logging setup.

``configure_logging`` installs a single stdout handler on the root logger,
formatted according to ``LOG_FORMAT``:

- ``colored``: level-colored lines for local development
- ``json``: one JSON object per line for log shipping
- ``plain``: uncolored lines

Context passed to a ``ContextLogger`` (see ``get_service_logger``) is
stored on the record as ``context`` and rendered as ``key=value`` pairs,
or as top-level keys in JSON.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from fashop.config.settings import Settings, get_settings

LINE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Keyword arguments understood by logging itself; anything else is context
_LOGGING_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class PlainFormatter(logging.Formatter):
    """Text line followed by the record's context fields."""

    def __init__(self):
        super().__init__(LINE_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _record_context(record)
        if context:
            fields = " ".join(f"{key}={value}" for key, value in context.items())
            line = f"{line} | {fields}"
        return line


class ColoredFormatter(PlainFormatter):
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        line = super().format(record)
        return f"{color}{line}{self.RESET}" if color else line


class JSONFormatter(logging.Formatter):
    """One JSON object per record, context fields flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in _record_context(record).items():
            entry.setdefault(key, value)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


FORMATTERS: dict[str, type[logging.Formatter]] = {
    "plain": PlainFormatter,
    "colored": ColoredFormatter,
    "json": JSONFormatter,
}


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure the root logger from ``LOG_LEVEL`` and ``LOG_FORMAT``.

    Also tunes library loggers: SQL statements follow ``DB_ECHO`` and
    httpx request lines are only shown at DEBUG.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(FORMATTERS.get(settings.LOG_FORMAT, PlainFormatter)())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DB_ECHO else logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter carrying structured context.

    Extra keyword arguments on a call are merged into the context of that
    record only::

        log = get_service_logger("notifications").with_context(order_number="FA-123456")
        log.warning("SMS not delivered", provider="local")
    """

    def with_context(self, **context: Any) -> "ContextLogger":
        return ContextLogger(self.logger, {**self.extra, **context})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in _LOGGING_KWARGS}
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **fields}
        kwargs["extra"] = extra
        return msg, kwargs


def get_service_logger(service_name: str) -> ContextLogger:
    """Logger ``fashop.services.<name>`` tagged with the service name."""
    return ContextLogger(logging.getLogger(f"fashop.services.{service_name}"), {"service": service_name})
