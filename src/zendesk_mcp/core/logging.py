import logging
import os
import sys
from typing import Any, Optional

from .config import LOG_LEVEL_ENV

LOG_EXTRA_FIELDS = (
    "request_id",
    "tool",
    "method",
    "endpoint",
    "path",
    "status",
    "duration_ms",
    "attempt",
    "max_attempts",
    "delay_ms",
    "kind",
    "error_type",
    "error",
)


class LogfmtFormatter(logging.Formatter):
    """logfmt-style formatter; extras that are absent on a record are skipped."""

    def format(self, record: logging.LogRecord) -> str:
        kv: list[str] = [
            f"level={record.levelname.lower()}",
            f"logger={record.name}",
        ]

        msg = record.getMessage()
        if msg:
            kv.append(f"event={self._fmt_val(msg)}")

        for key in LOG_EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is None:
                continue
            kv.append(f"{key}={self._fmt_val(val)}")

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        s = str(val).replace("\n", "\\n")
        if " " in s or "=" in s or '"' in s:
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: Optional[str] = None) -> None:
    """
    Install the logfmt formatter on the root logger.
    Output goes to stderr: stdout belongs to the stdio MCP transport.
    """
    level = level or os.getenv(LOG_LEVEL_ENV, "INFO")

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS"]
