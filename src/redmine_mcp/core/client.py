import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .context import get_request_id

API_KEY_HEADER = "X-Redmine-API-Key"


class RedmineClientError(Exception):
    """Base error for client failures."""


class RedmineHTTPError(RedmineClientError):
    """Non-2xx answer from Redmine; str() is the backend's own error text."""

    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        errors: Optional[List[str]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.errors = errors or []
        self.response_text = response_text


class RedmineParseError(RedmineClientError):
    pass


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...
    retry_statuses: frozenset[int] = frozenset({502, 503, 504})


class RedmineClient:
    """
    Thin async HTTP client for the Redmine REST API (JSON flavour).
    - Handles auth header, base URL, timeouts, transport retries
    - Returns raw dict payloads; tools own the reshaping
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (base_url or "").strip()
        api_key = (api_key or "").strip()

        if not base_url:
            raise ValueError("base_url must be provided.")
        if not api_key:
            raise ValueError("api_key must be provided.")

        # Relative paths ("issues.json") must resolve below any sub-path.
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("redmine_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                API_KEY_HEADER: api_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "RedmineClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Core request method.
        - Retries connection errors/timeouts and 502/503/504 per RetryConfig
        - Raises RedmineHTTPError on non-2xx HTTP responses
        - Raises RedmineClientError on network/timeout errors after retries
        - Raises RedmineParseError if the body isn't a JSON object
        - Returns {} for empty bodies (Redmine answers PUT/DELETE with 204)
        """
        method = method.upper()
        path = path.lstrip("/")
        start = time.perf_counter()
        attempt = 0

        while True:
            try:
                resp = await self.http.request(method, path, params=params, json=json)
                duration_ms = int((time.perf_counter() - start) * 1000)

                self.log.debug(
                    "redmine_call",
                    extra={
                        "request_id": get_request_id(),
                        "tool": tool,
                        "method": method,
                        "path": path,
                        "status": resp.status_code,
                        "duration_ms": duration_ms,
                        "attempt": attempt,
                    },
                )

                if (
                    resp.status_code in self.retry.retry_statuses
                    and attempt < self.retry.max_retries
                ):
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue

                if resp.status_code < 200 or resp.status_code >= 300:
                    raise self._to_http_error(resp, method=method)

                return self._safe_json(resp)

            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if attempt < self.retry.max_retries:
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                raise RedmineClientError(
                    f"Network/timeout error calling {method} {path}: {exc}"
                ) from exc

            except httpx.HTTPError as exc:
                raise RedmineClientError(
                    f"HTTPX error calling {method} {path}: {exc}"
                ) from exc

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        if not resp.content or not resp.content.strip():
            return {}

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise RedmineParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise RedmineParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> RedmineHTTPError:
        url = str(resp.request.url)
        errors: List[str] = []
        response_text: Optional[str] = None
        message = resp.reason_phrase or f"HTTP {resp.status_code}"

        try:
            parsed = resp.json()
        except ValueError:
            parsed = None
            response_text = (resp.text or "")[:500] or None

        if isinstance(parsed, dict):
            # Redmine validation errors: {"errors": ["Subject cannot be blank", ...]}
            raw_errors = parsed.get("errors")
            if isinstance(raw_errors, list):
                errors = [str(e) for e in raw_errors if e]
            elif isinstance(raw_errors, str) and raw_errors:
                errors = [raw_errors]
            if errors:
                message = ", ".join(errors)
            else:
                message = parsed.get("error") or parsed.get("message") or message

        return RedmineHTTPError(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=str(message),
            errors=errors,
            response_text=response_text,
        )

    async def get(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("GET", path, params=params, tool=tool)

    async def post(
        self, path: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.request("POST", path, json=json, tool=tool)

    async def put(
        self, path: str, *, json: Dict[str, Any], tool: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.request("PUT", path, json=json, tool=tool)

    async def delete(self, path: str, *, tool: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("DELETE", path, tool=tool)
