"""JSON-lines logging for ghostify.

Each record becomes one JSON object on one line, so publishing runs can be
piped into ``jq`` or shipped to a log collector as-is::

    {"ts": "2026-01-05T09:14:02.511803+00:00", "level": "INFO",
     "logger": "ghostify.client", "message": "post created",
     "op": "publish_note", "post_id": "65a1f0", "status": "draft"}

Structured fields ride along in ``extra={"extra_fields": {...}}``::

    log = get_logger("ghostify.client")
    log.info("post created", extra={"extra_fields": {"post_id": post_id}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_RESERVED_KEYS = frozenset({"ts", "level", "logger", "message"})


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single JSON line.

    The keys ``ts``, ``level``, ``logger`` and ``message`` are always
    present.  Fields passed through ``extra_fields`` are merged in, but
    never overwrite those four.  Exception and stack information is
    attached under ``exception`` and ``stack_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            for key, value in extra_fields.items():
                if key not in _RESERVED_KEYS:
                    entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


# One handler per logger name; repeated get_logger() calls are no-ops.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "ghostify",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the structured logger called *name*, configuring it once.

    Parameters
    ----------
    name:
        Logger name, ``"ghostify"`` or a dotted child such as
        ``"ghostify.transport"``.
    level:
        Threshold applied on first configuration.  Accepts an ``int`` or a
        level name (``"debug"``, ``"INFO"``...).
    stream:
        Handler stream; ``sys.stderr`` by default.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


def set_level(level: int | str) -> None:
    """Change the threshold of every logger configured by :func:`get_logger`."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    for name in _configured_loggers:
        logging.getLogger(name).setLevel(level)
