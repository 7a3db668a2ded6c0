"""Core domain surface for redmine-mcp (transport-agnostic)."""

from .catalog import ToolCatalog, ToolDescriptor
from .client import (
    RedmineClient,
    RedmineClientError,
    RedmineHTTPError,
    RedmineParseError,
    RetryConfig,
)
from .config import (
    ConfigError,
    MissingApiKeyError,
    MissingBaseUrlError,
    RedmineConfig,
    create_client_from_env,
    load_env_config,
    resolve_config,
)
from .context import ClientProvider, apply_request_id, get_request_id, reset_request_id
from .dispatcher import ToolDispatcher
from .errors import ErrorKind
from .registry import build_catalog, discover_tool_modules, iter_tool_descriptors
from .results import Failure, Result, Success

__all__ = [
    # Client
    "RedmineClient",
    "RetryConfig",
    "ClientProvider",
    # Exceptions
    "RedmineClientError",
    "RedmineHTTPError",
    "RedmineParseError",
    # Config helpers
    "RedmineConfig",
    "ConfigError",
    "MissingApiKeyError",
    "MissingBaseUrlError",
    "create_client_from_env",
    "load_env_config",
    "resolve_config",
    # Catalog / dispatch
    "ToolCatalog",
    "ToolDescriptor",
    "ToolDispatcher",
    "build_catalog",
    "discover_tool_modules",
    "iter_tool_descriptors",
    # Results
    "ErrorKind",
    "Success",
    "Failure",
    "Result",
    # Context
    "apply_request_id",
    "get_request_id",
    "reset_request_id",
]
