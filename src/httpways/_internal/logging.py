"""Logging setup for httpways.

Client modules log through child loggers of the ``httpways`` namespace.
Request-level records may carry ``method``, ``url`` and ``status`` extras,
which the JSON formatter lifts into top-level keys.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

_ROOT = "httpways"

# Extra attributes copied into JSON log lines when present on a record.
_REQUEST_FIELDS = ("method", "url", "status", "latency_ms")


class _JsonFormatter(logging.Formatter):
    """One-line JSON formatter: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _REQUEST_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def level_for(verbose: bool) -> int:
    """Map the CLI ``--verbose`` switch to a logging level."""
    return logging.DEBUG if verbose else logging.WARNING


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool = False,
) -> logging.Logger:
    """Configure and return the ``httpways`` root logger.

    Repeated calls replace the previous handler, so there is always exactly
    one, writing to whatever ``sys.stderr`` is at call time.

    Args:
        level: Logging level (e.g., ``logging.DEBUG``). Defaults to INFO.
        json_format: Emit one JSON object per line instead of plain text.

    Returns:
        The configured ``httpways`` logger.
    """
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)

    if json_format:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Prevent propagation to the root logger to avoid duplicate output
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger, e.g. ``get_logger("clients.builder")``."""
    return logging.getLogger(f"{_ROOT}.{name}")
