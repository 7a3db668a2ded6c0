"""redmine_mcp package exports."""

from .core import (
    ClientProvider,
    ErrorKind,
    Failure,
    RedmineClient,
    RedmineClientError,
    RedmineConfig,
    RedmineHTTPError,
    RedmineParseError,
    RetryConfig,
    Success,
    ToolCatalog,
    ToolDispatcher,
    build_catalog,
    resolve_config,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "RedmineClient",
    "RetryConfig",
    "ClientProvider",
    "RedmineConfig",
    "resolve_config",
    # Exceptions
    "RedmineClientError",
    "RedmineHTTPError",
    "RedmineParseError",
    # Tools
    "ToolCatalog",
    "ToolDispatcher",
    "build_catalog",
    "ErrorKind",
    "Success",
    "Failure",
]
