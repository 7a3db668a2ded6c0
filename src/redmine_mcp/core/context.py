"""Per-invocation request id and the lazily built backend client."""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Callable, Optional

from .config import RedmineConfig

if TYPE_CHECKING:
    from .client import RedmineClient

log = logging.getLogger("redmine_mcp.core.context")

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def ensure_request_id(candidate: Optional[str] = None) -> str:
    return candidate or uuid.uuid4().hex


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def apply_request_id(request_id: Optional[str] = None) -> Token:
    """Set the request id for the current task; returns a token for reset()."""
    return _request_id_var.set(ensure_request_id(request_id))


def reset_request_id(token: Token) -> None:
    _request_id_var.reset(token)


def _default_factory(config: RedmineConfig) -> "RedmineClient":
    from .client import RedmineClient

    return RedmineClient(base_url=config.url, api_key=config.api_key)


class ClientProvider:
    """
    Callable that hands out one shared RedmineClient.

    The client is built on first use from the current configuration and kept
    until rebuild() swaps the configuration; the next call then builds anew.
    """

    def __init__(
        self,
        config: Optional[RedmineConfig] = None,
        *,
        factory: Callable[[RedmineConfig], "RedmineClient"] = _default_factory,
    ):
        self._config = config
        self._factory = factory
        self._client: Optional["RedmineClient"] = None

    @property
    def config(self) -> Optional[RedmineConfig]:
        return self._config

    @property
    def is_built(self) -> bool:
        return self._client is not None

    def __call__(self) -> "RedmineClient":
        if self._client is None:
            if self._config is None:
                raise RuntimeError("No Redmine configuration available.")
            self._client = self._factory(self._config)
            log.info("Built Redmine client for %s", self._config.url)
        return self._client

    async def rebuild(self, config: RedmineConfig) -> None:
        """Drop the current client (closing it) and remember the new config."""
        await self.aclose()
        self._config = config

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()


__all__ = [
    "ClientProvider",
    "apply_request_id",
    "ensure_request_id",
    "get_request_id",
    "reset_request_id",
]
