"""
Logging setup for the Schooney record console.

The CLI callback calls `configure_logging` once per invocation, before any
view is opened. Library modules only call `get_logger(__name__)` and pass
event context through `extra=`; the JSON formatter lifts those keys to the
top level of each line so a shipped log can be filtered by them.

Events worth knowing:

- session.py: "Filters applied" (view, choices, matched), "Sort changed"
- mailing: "Bulk send started" / "Bulk send finished" (batch_size, sent,
  failed, quota_count), "Single send finished", "Simulated delivery failed"
- storage.py: "Email quota reset for new day" (day),
  "Session started" / "Session ended", and warnings when a
  stored quota or term list does not validate and defaults are used
- sinks.py: "Document written" (path, mime_type)

Example JSON line::

    {"level": "INFO", "logger": "schooney.session", "message": "Filters applied",
     "view": "payments", "choices": {"invoice_status": "overdue"}, "matched": 5}
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    for key, value in vars(record).items():
        if key not in _STANDARD_ATTRS and not key.startswith("_"):
            payload[key] = value
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Install the root handler for one console run.

    Parameters
    ----------
    level : str
        LOG_LEVEL from settings. At INFO a run shows its filter and send
        events; DEBUG adds selection pruning and sample data generation.
    json_logs : bool
        JSON_LOGS from settings; one JSON object per line with the `extra=`
        context as top-level keys. Otherwise a single readable line.
    force : bool
        Replace handlers already installed. With False an existing
        configuration is left untouched.
    """
    if not force and logging.getLogger().handlers:
        return

    formatter_name = "json" if json_logs else "console"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter_name,
                    "level": level,
                }
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the given name. If name is None, returns the root logger.
    """
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
