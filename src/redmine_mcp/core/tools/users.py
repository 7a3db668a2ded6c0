from __future__ import annotations

from typing import Any, Dict, List

from redmine_mcp.core.catalog import ToolDescriptor
from redmine_mcp.core.client import RedmineClient
from redmine_mcp.core.models import (
    NoInput,
    UserCreateInput,
    UserIdInput,
    UserListInput,
    UserUpdateInput,
)
from redmine_mcp.core.results import Result, Success
from redmine_mcp.core.tools._resources import (
    ResourceSpec,
    build_crud_tools,
    item_envelope,
    list_envelope,
    resource_path,
)

USERS = ResourceSpec(
    collection="users",
    key="user",
    noun="user",
    plural="users",
    id_model=UserIdInput,
    list_model=UserListInput,
    create_model=UserCreateInput,
    update_model=UserUpdateInput,
)


async def get_current_user(client: RedmineClient, args: NoInput) -> Result:
    payload = await client.get("users/current.json", tool="get_current_user")
    return Success(item_envelope(payload, "user"))


async def _user_with(
    client: RedmineClient, user_id: int, include: str, *, tool: str
) -> Dict[str, Any]:
    payload = await client.get(
        resource_path("users", user_id), params={"include": include}, tool=tool
    )
    return item_envelope(payload, "user")["item"]


def _included_list(user: Dict[str, Any], key: str) -> Dict[str, Any]:
    """
    Redmine embeds included associations in the user object without paging,
    so the envelope describes the whole list as one page.
    """
    items: List[Any] = user.get(key) or []
    return list_envelope({key: items}, key, {"offset": 0, "limit": len(items)})


async def get_user_memberships(client: RedmineClient, args: UserIdInput) -> Result:
    user = await _user_with(
        client, args.id, "memberships", tool="get_user_memberships"
    )
    return Success(_included_list(user, "memberships"))


async def get_user_groups(client: RedmineClient, args: UserIdInput) -> Result:
    user = await _user_with(client, args.id, "groups", tool="get_user_groups")
    return Success(_included_list(user, "groups"))


TOOLS = build_crud_tools(USERS)
# get_current_user sits right after get_user in the advertised catalog.
TOOLS.insert(
    2,
    ToolDescriptor(
        name="get_current_user",
        description="Get details of the current user based on the API key",
        input_model=NoInput,
        handler=get_current_user,
    ),
)
TOOLS += [
    ToolDescriptor(
        name="get_user_memberships",
        description="Get all project memberships for a user",
        input_model=UserIdInput,
        handler=get_user_memberships,
    ),
    ToolDescriptor(
        name="get_user_groups",
        description="Get all groups a user belongs to",
        input_model=UserIdInput,
        handler=get_user_groups,
    ),
]
