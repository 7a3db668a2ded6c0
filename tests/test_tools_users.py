import pytest
import respx
from httpx import Response
from redmine_mcp.core.client import RedmineClient
from redmine_mcp.core.dispatcher import ToolDispatcher
from redmine_mcp.core.errors import ErrorKind
from redmine_mcp.core.results import Failure, Success


@pytest.fixture
def client():
    return RedmineClient(base_url="https://redmine.test", api_key="mock-key")


@pytest.fixture
def tools(catalog, client):
    return ToolDispatcher(catalog, client)


@pytest.mark.asyncio
@respx.mock
async def test_get_current_user(client, tools):
    respx.get("https://redmine.test/users/current.json").mock(
        return_value=Response(200, json={"user": {"id": 1, "login": "admin"}})
    )

    async with client:
        result = await tools.invoke("get_current_user", {})

    assert result == Success({"item": {"id": 1, "login": "admin"}})


@pytest.mark.asyncio
async def test_get_current_user_rejects_arguments(fake_client, dispatcher):
    result = await dispatcher.invoke("get_current_user", {"id": 1})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS


@pytest.mark.asyncio
@respx.mock
async def test_list_users_filters(client, tools):
    route = respx.get("https://redmine.test/users.json").mock(
        return_value=Response(
            200,
            json={
                "users": [{"id": 3, "login": "ann"}],
                "total_count": 1,
                "offset": 0,
                "limit": 25,
            },
        )
    )

    async with client:
        result = await tools.invoke(
            "list_users", {"status": 1, "name": "ann", "group_id": 4}
        )

    assert result.payload["items"] == [{"id": 3, "login": "ann"}]
    params = route.calls[0].request.url.params
    assert params["status"] == "1"
    assert params["name"] == "ann"
    assert params["group_id"] == "4"


@pytest.mark.asyncio
async def test_create_user_requires_mail(fake_client, dispatcher):
    result = await dispatcher.invoke(
        "create_user", {"login": "ann", "firstname": "Ann", "lastname": "Lee"}
    )

    assert isinstance(result, Failure)
    assert "mail" in result.message
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_create_user_posts_user_body(fake_client, dispatcher):
    fake_client.responses[("POST", "users.json")] = {
        "user": {"id": 9, "login": "ann"}
    }

    result = await dispatcher.invoke(
        "create_user",
        {
            "login": "ann",
            "firstname": "Ann",
            "lastname": "Lee",
            "mail": "ann@example.org",
        },
    )

    assert result == Success({"item": {"id": 9, "login": "ann"}})
    assert fake_client.calls[0].json == {
        "user": {
            "login": "ann",
            "firstname": "Ann",
            "lastname": "Lee",
            "mail": "ann@example.org",
        }
    }


@pytest.mark.asyncio
@respx.mock
async def test_get_user_memberships_uses_include(client, tools):
    route = respx.get("https://redmine.test/users/3.json").mock(
        return_value=Response(
            200,
            json={
                "user": {
                    "id": 3,
                    "memberships": [
                        {"id": 1, "project": {"id": 1, "name": "Alpha"}},
                        {"id": 2, "project": {"id": 2, "name": "Beta"}},
                    ],
                }
            },
        )
    )

    async with client:
        result = await tools.invoke("get_user_memberships", {"id": 3})

    assert route.calls[0].request.url.params["include"] == "memberships"
    assert result.payload["total_count"] == 2
    assert result.payload["offset"] == 0
    assert result.payload["limit"] == 2
    assert [m["project"]["name"] for m in result.payload["items"]] == [
        "Alpha",
        "Beta",
    ]


@pytest.mark.asyncio
async def test_get_user_groups_without_groups(fake_client, dispatcher):
    fake_client.responses[("GET", "users/3.json")] = {"user": {"id": 3}}

    result = await dispatcher.invoke("get_user_groups", {"id": 3})

    assert result.payload == {"items": [], "total_count": 0, "offset": 0, "limit": 0}
    assert fake_client.calls[0].params == {"include": "groups"}


@pytest.mark.asyncio
@respx.mock
async def test_forbidden_user_lookup(client, tools):
    respx.get("https://redmine.test/users/5.json").mock(return_value=Response(403))

    async with client:
        result = await tools.invoke("get_user", {"id": 5})

    assert result == Failure(ErrorKind.INTERNAL_ERROR, "Forbidden")
