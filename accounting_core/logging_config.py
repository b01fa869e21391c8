"""
Logging configuration.

Two output formats are supported:
- console: human-readable lines for local development
- json: one JSON object per line for log aggregation

Selected through the LOG_FORMAT and LOG_LEVEL settings.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone

from accounting_core.config import Settings

# Attributes every LogRecord carries; anything else came in via extra=
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logging_config(settings: Settings) -> dict:
    """Build a dictConfig mapping for the given settings."""
    if settings.LOG_FORMAT == "json":
        formatter = {"()": "accounting_core.logging_config.JsonFormatter"}
    else:
        formatter = {
            "format": "[{asctime}] {levelname} {name} {message}",
            "style": "{",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "accounting_core": {
                "handlers": ["console"],
                "level": settings.LOG_LEVEL,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "INFO" if settings.DEBUG else "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(get_logging_config(settings))
