from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .catalog import ToolCatalog
from .client import RedmineClient
from .context import apply_request_id, reset_request_id
from .observability import log_event
from .results import Failure, Result, Success

log = logging.getLogger("redmine_mcp.core.dispatcher")


def format_validation_error(name: str, exc: ValidationError) -> str:
    """One line naming every violated constraint, e.g. 'id: Field required'."""
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return f"Invalid arguments for {name}: " + "; ".join(problems)


class ToolDispatcher:
    """
    Runs one invocation end-to-end: lookup, validation, handler, envelope.

    It knows nothing about individual tools; every outcome, including
    unexpected exceptions from a handler, comes back as a Success or Failure.
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        client_provider: Callable[[], RedmineClient] | RedmineClient,
    ):
        if isinstance(client_provider, RedmineClient):
            _client = client_provider

            def client_provider():
                return _client

        self.catalog = catalog
        self._client_provider = client_provider

    def list_operations(self) -> List[Dict[str, Any]]:
        return self.catalog.list()

    async def invoke(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        *,
        request_id: Optional[str] = None,
    ) -> Result:
        token = apply_request_id(request_id)
        start = time.perf_counter()
        try:
            result = await self._invoke(name, arguments)
            self._log_outcome(name, result, start)
            return result
        finally:
            reset_request_id(token)

    @staticmethod
    def _log_outcome(name: str, result: Result, start: float) -> None:
        duration_ms = int((time.perf_counter() - start) * 1000)
        if isinstance(result, Success):
            log_event(
                "tool_call", log, tool=name, status="ok", duration_ms=duration_ms
            )
            return
        log_event(
            "tool_call",
            log,
            level=logging.WARNING,
            tool=name,
            status="error",
            error_kind=result.kind.label,
            duration_ms=duration_ms,
        )

    async def _invoke(
        self, name: str, arguments: Optional[Mapping[str, Any]]
    ) -> Result:
        descriptor = self.catalog.resolve(name)
        if descriptor is None:
            return Failure.method_not_found(f"Tool not found: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return Failure.invalid_params(
                f"Invalid arguments for {name}: expected an object, "
                f"got {type(arguments).__name__}"
            )

        try:
            validated = descriptor.input_model.model_validate(dict(arguments))
        except ValidationError as exc:
            return Failure.invalid_params(format_validation_error(name, exc))

        try:
            client = self._client_provider()
            result = await descriptor.handler(client, validated)
        except Exception as exc:
            log.debug("Tool %s failed", name, exc_info=True)
            message = str(exc).strip() or f"Internal error while executing {name}"
            return Failure.internal_error(message)

        if isinstance(result, (Success, Failure)):
            return result
        return Success(result)


__all__ = ["ToolDispatcher", "format_validation_error"]
