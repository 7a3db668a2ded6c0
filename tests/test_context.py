import asyncio

import pytest
from redmine_mcp.core.config import RedmineConfig
from redmine_mcp.core.context import (
    ClientProvider,
    apply_request_id,
    get_request_id,
    reset_request_id,
)


class StubClient:
    def __init__(self, config):
        self.config = config
        self.closed = False

    async def aclose(self):
        self.closed = True


ALPHA = RedmineConfig(url="https://alpha.test", api_key="a")
BETA = RedmineConfig(url="https://beta.test", api_key="b")


def test_client_is_built_lazily_and_reused():
    provider = ClientProvider(ALPHA, factory=StubClient)
    assert not provider.is_built

    first = provider()
    second = provider()

    assert provider.is_built
    assert first is second
    assert first.config == ALPHA


@pytest.mark.asyncio
async def test_rebuild_closes_old_client_and_uses_new_config():
    provider = ClientProvider(ALPHA, factory=StubClient)
    old = provider()

    await provider.rebuild(BETA)

    assert old.closed
    assert not provider.is_built
    new = provider()
    assert new is not old
    assert new.config == BETA


def test_missing_configuration_raises():
    provider = ClientProvider(factory=StubClient)

    with pytest.raises(RuntimeError, match="No Redmine configuration"):
        provider()


@pytest.mark.asyncio
async def test_aclose_without_client_is_noop():
    provider = ClientProvider(ALPHA, factory=StubClient)
    await provider.aclose()
    assert not provider.is_built


def test_request_id_apply_and_reset():
    assert get_request_id() is None

    token = apply_request_id("req-1")
    assert get_request_id() == "req-1"
    reset_request_id(token)

    assert get_request_id() is None


def test_request_id_generated_when_absent():
    token = apply_request_id()
    try:
        assert get_request_id()
    finally:
        reset_request_id(token)


@pytest.mark.asyncio
async def test_request_ids_are_task_local():
    async def worker(rid):
        token = apply_request_id(rid)
        try:
            await asyncio.sleep(0)
            return get_request_id()
        finally:
            reset_request_id(token)

    assert await asyncio.gather(worker("a"), worker("b")) == ["a", "b"]
