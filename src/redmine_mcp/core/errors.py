from __future__ import annotations

from enum import IntEnum

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from .client import RedmineClientError, RedmineHTTPError, RedmineParseError
from .config import ConfigError, MissingApiKeyError, MissingBaseUrlError


class ErrorKind(IntEnum):
    """Failure taxonomy of a tool invocation, valued as JSON-RPC error codes."""

    METHOD_NOT_FOUND = METHOD_NOT_FOUND
    INVALID_PARAMS = INVALID_PARAMS
    INTERNAL_ERROR = INTERNAL_ERROR

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


__all__ = [
    "ErrorKind",
    "RedmineClientError",
    "RedmineHTTPError",
    "RedmineParseError",
    "ConfigError",
    "MissingApiKeyError",
    "MissingBaseUrlError",
]
