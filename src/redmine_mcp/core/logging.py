import logging
import sys
from typing import Any, Iterable, Optional, TextIO

# Extras rendered after the message, in this order, when present on a record.
LOG_EXTRA_FIELDS = (
    "request_id",
    "tool",
    "method",
    "path",
    "status",
    "error_kind",
    "duration_ms",
    "attempt",
)

# httpx logs every request at INFO, full URL included.
NOISY_LOGGERS = ("httpx", "httpcore")


class LogfmtFormatter(logging.Formatter):
    """key=value lines; records without extras still format cleanly."""

    def __init__(
        self, fields: Iterable[str] = LOG_EXTRA_FIELDS, timestamps: bool = True
    ):
        super().__init__()
        self.fields = tuple(fields)
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        kv: list[str] = []
        if self.timestamps:
            kv.append(f"ts={self.formatTime(record, '%Y-%m-%dT%H:%M:%S')}")
        kv.append(f"level={record.levelname.lower()}")
        kv.append(f"logger={record.name}")

        msg = record.getMessage()
        if msg:
            # log_event records carry the bare event name as the message
            key = "event" if getattr(record, "event", None) == msg else "msg"
            kv.append(f"{key}={self._fmt_val(msg)}")

        for key in self.fields:
            val = getattr(record, key, None)
            if val is not None:
                kv.append(f"{key}={self._fmt_val(val)}")

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")
            kv.append(f"exc={self._fmt_val(record.exc_info[1])}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        s = str(val).replace("\n", "\\n")
        if not s or " " in s or "=" in s or '"' in s:
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Route all logging to stderr (or *stream*) as logfmt.

    stdout carries the MCP stdio channel, so nothing may log there.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)

    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


__all__ = ["LOG_EXTRA_FIELDS", "LogfmtFormatter", "setup_logging"]
