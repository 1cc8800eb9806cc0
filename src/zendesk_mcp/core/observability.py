from __future__ import annotations

import logging
from typing import Any, Dict

RESERVED_LOG_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}

OBSERVABILITY_LOGGER = "zendesk_mcp.observability"


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in RESERVED_LOG_KEYS}


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit one structured event; fields ride along as LogRecord extras so
    LogfmtFormatter (or caplog) can read them as attributes.
    """
    log = logger or logging.getLogger(OBSERVABILITY_LOGGER)
    log.log(level, event, extra=_clean_fields(fields))


__all__ = ["log_event", "OBSERVABILITY_LOGGER"]
