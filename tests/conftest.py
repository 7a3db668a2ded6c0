from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pytest
from redmine_mcp.core.dispatcher import ToolDispatcher
from redmine_mcp.core.registry import build_catalog

BASE_URL = "https://redmine.test"


@dataclass
class Call:
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Optional[Dict[str, Any]] = None
    tool: Optional[str] = None


class FakeClient:
    """In-memory stand-in for RedmineClient that records every call."""

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], Dict[str, Any]]] = None,
        error: Optional[Exception] = None,
    ):
        self.responses = responses or {}
        self.error = error
        self.calls: List[Call] = []

    async def _call(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(Call(method, path, **kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.get((method, path), {})

    async def get(self, path, *, params=None, tool=None):
        return await self._call("GET", path, params=params, tool=tool)

    async def post(self, path, *, json, tool=None):
        return await self._call("POST", path, json=json, tool=tool)

    async def put(self, path, *, json, tool=None):
        return await self._call("PUT", path, json=json, tool=tool)

    async def delete(self, path, *, tool=None):
        return await self._call("DELETE", path, tool=tool)


@pytest.fixture(scope="session")
def catalog():
    return build_catalog()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def dispatcher(catalog, fake_client):
    return ToolDispatcher(catalog, lambda: fake_client)


@pytest.fixture
def make_dispatcher(catalog):
    def _make(client):
        return ToolDispatcher(catalog, lambda: client)

    return _make
