from __future__ import annotations

import logging
from typing import Any, Dict

from .context import get_request_id

# Attributes every LogRecord already has; passing one of them in `extra`
# makes Logger.makeRecord raise KeyError.
RESERVED_LOG_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

DEFAULT_LOGGER = "redmine_mcp.observability"


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
    Emit one structured record whose message is the event name.
    - Fields travel as LogRecord attributes for LogfmtFormatter.
    - request_id defaults to the current invocation's id.
    - Reserved LogRecord attribute names are dropped.
    """
    log = logger or logging.getLogger(DEFAULT_LOGGER)
    if not log.isEnabledFor(level):
        return
    fields.setdefault("request_id", get_request_id())
    log.log(level, event, extra={"event": event, **_clean_fields(fields)})


__all__ = ["DEFAULT_LOGGER", "RESERVED_LOG_KEYS", "log_event"]
