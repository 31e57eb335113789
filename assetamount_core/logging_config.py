"""
Logging for hosts embedding AssetAmount.

The library only logs configuration events (config file loaded, decimal
precision changed, logging configured) under the ``assetamount`` logger.
Each event may carry structured ``fields`` passed through ``extra``:

    log.info("Decimal precision changed", extra={"fields": {"new_precision": 120}})

Two renderings are available:
  - **human** – ``12:00:01 INFO  assetamount.precision: ... new_precision=120``
  - **json**  – one object per line, fields merged under ``"fields"``

Usage:
    from assetamount_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="assetamount.log")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

LOGGER_NAME = "assetamount"
FORMATS = ("human", "json")


def _fields(record: logging.LogRecord) -> dict[str, Any]:
    return dict(getattr(record, "fields", None) or {})


class _JSONFormatter(logging.Formatter):
    """One JSON object per configuration event."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        fields = _fields(record)
        if fields:
            event["fields"] = fields
        return json.dumps(event, default=str)


class _HumanFormatter(logging.Formatter):
    """Single line with the event fields appended as ``key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{ts} {record.levelname:<5} {record.name}: {record.getMessage()}"
        fields = _fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


_FORMATTERS = {"human": _HumanFormatter, "json": _JSONFormatter}


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Route the ``assetamount`` logger to stderr and, optionally, a file.

    The host's root logger is left alone and records do not propagate to
    it.  Calling this again replaces the previous handlers.

    Parameters
    ----------
    level : str
        Logging level name; unknown names fall back to INFO.
    fmt : str
        ``"human"`` or ``"json"`` for the stderr handler.
    log_file : str, optional
        Extra destination, always written as JSON lines.
    """
    if fmt not in _FORMATTERS:
        raise ValueError(f"Unknown log format {fmt!r}; expected one of {FORMATS}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setFormatter(_FORMATTERS[fmt]())
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(path)))
        handlers[-1].setFormatter(_JSONFormatter())
    for handler in handlers:
        logger.addHandler(handler)

    logger.debug(
        "Logging configured",
        extra={"fields": {"level": level.upper(), "format": fmt, "file": log_file}},
    )
    return logger
