"""Console and structured JSON logging setup."""

from __future__ import annotations

import json
import logging
from typing import Any

_EXTRA_FIELDS = ("severity", "code", "generator_status")


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


def log_notification(monitor: Any, notification: Any) -> None:
    """Event-bus listener that mirrors engine notifications into the log.

    Bind ``monitor`` with :func:`functools.partial` so each record carries
    the generator status at the moment the notification was published.
    """
    level = {
        "info": logging.INFO,
        "warning": logging.WARNING,
        "critical": logging.CRITICAL,
    }.get(notification.severity.value, logging.INFO)
    logging.getLogger("genwatch.notifications").log(
        level,
        notification.message,
        extra={
            "severity": notification.severity.value,
            "code": notification.code,
            "generator_status": monitor.status.value,
        },
    )


def setup_logging(json_format: bool = False) -> None:
    """Configure root logger. Use json_format=True for production."""
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
