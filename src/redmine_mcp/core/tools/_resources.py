"""
Shared handler builder for Redmine resource families.

Every family (issues, projects, users, time entries) exposes the same five
operations over ``<collection>.json`` and ``<collection>/<id>.json``; only the
input models and the JSON keys differ. Family modules add their own helpers
on top using the envelope functions below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type
from urllib.parse import quote

from ..catalog import ToolDescriptor
from ..client import RedmineClient, RedmineParseError
from ..models import ToolInput
from ..results import Failure, Result, Success

DomainCheck = Callable[[Any], Optional[str]]


def forwarded(
    args: ToolInput, *, exclude: Iterable[str] = (), keep_null: bool = False
) -> Dict[str, Any]:
    """
    Fields the caller actually supplied, under their wire names.

    Request bodies pass keep_null=True so an explicit null reaches Redmine
    and clears the field; query strings have no null, so it is dropped there.
    """
    return args.model_dump(
        by_alias=True,
        exclude_unset=True,
        exclude_none=not keep_null,
        exclude=set(exclude),
    )


def resource_path(collection: str, item_id: Any, suffix: str = "") -> str:
    return f"{collection}/{quote(str(item_id), safe='')}{suffix}.json"


def list_envelope(
    payload: Dict[str, Any], key: str, params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Reshape a Redmine collection response into
    {"items", "total_count", "offset", "limit"}.
    Missing paging fields fall back to what was requested (or the item count).
    """
    items = payload.get(key)
    if not isinstance(items, list):
        raise RedmineParseError(f"Expected '{key}' list in Redmine response.")
    params = params or {}

    def _int_or(value: Any, default: int) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return default

    requested_offset = _int_or(params.get("offset"), 0)
    requested_limit = _int_or(params.get("limit"), len(items))

    return {
        "items": items,
        "total_count": _int_or(payload.get("total_count"), len(items)),
        "offset": _int_or(payload.get("offset"), requested_offset),
        "limit": _int_or(payload.get("limit"), requested_limit),
    }


def item_envelope(
    payload: Dict[str, Any], key: str, *, required: bool = True
) -> Dict[str, Any]:
    item = payload.get(key)
    if required and not isinstance(item, dict):
        raise RedmineParseError(f"Expected '{key}' object in Redmine response.")
    return {"item": item}


async def fetch_list(
    client: RedmineClient,
    path: str,
    key: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    tool: Optional[str] = None,
) -> Dict[str, Any]:
    payload = await client.get(path, params=params or None, tool=tool)
    return list_envelope(payload, key, params)


@dataclass(frozen=True)
class ResourceSpec:
    """What differs between two Redmine resource families."""

    collection: str  # "time_entries": URL segment and list JSON key
    key: str  # "time_entry": singular JSON key
    noun: str  # "time entry"
    plural: str  # "time entries"
    id_model: Type[ToolInput]
    list_model: Type[ToolInput]
    create_model: Type[ToolInput]
    update_model: Type[ToolInput]
    check: Optional[DomainCheck] = None

    @property
    def label(self) -> str:
        return self.noun.capitalize()


async def update_item(
    client: RedmineClient,
    spec: ResourceSpec,
    item_id: Any,
    fields: Dict[str, Any],
    *,
    tool: Optional[str] = None,
) -> Success:
    payload = await client.put(
        resource_path(spec.collection, item_id), json={spec.key: fields}, tool=tool
    )
    # Redmine answers updates with 204 No Content
    return Success(item_envelope(payload, spec.key, required=False))


def build_crud_tools(spec: ResourceSpec) -> List[ToolDescriptor]:
    """Produce list/get/create/update/delete descriptors for one family."""
    list_name = f"list_{spec.collection}"
    get_name = f"get_{spec.key}"
    create_name = f"create_{spec.key}"
    update_name = f"update_{spec.key}"
    delete_name = f"delete_{spec.key}"

    async def list_items(client: RedmineClient, args: ToolInput) -> Result:
        envelope = await fetch_list(
            client,
            f"{spec.collection}.json",
            spec.collection,
            forwarded(args),
            tool=list_name,
        )
        return Success(envelope)

    async def get_item(client: RedmineClient, args: ToolInput) -> Result:
        payload = await client.get(
            resource_path(spec.collection, args.id), tool=get_name
        )
        return Success(item_envelope(payload, spec.key))

    async def create_item(client: RedmineClient, args: ToolInput) -> Result:
        if spec.check is not None:
            problem = spec.check(args)
            if problem:
                return Failure.invalid_params(problem)
        payload = await client.post(
            f"{spec.collection}.json",
            json={spec.key: forwarded(args, keep_null=True)},
            tool=create_name,
        )
        return Success(item_envelope(payload, spec.key))

    async def update(client: RedmineClient, args: ToolInput) -> Result:
        if spec.check is not None:
            problem = spec.check(args)
            if problem:
                return Failure.invalid_params(problem)
        return await update_item(
            client,
            spec,
            args.id,
            forwarded(args, exclude={"id"}, keep_null=True),
            tool=update_name,
        )

    async def delete_item(client: RedmineClient, args: ToolInput) -> Result:
        await client.delete(resource_path(spec.collection, args.id), tool=delete_name)
        return Success(f"{spec.label} {args.id} has been deleted")

    return [
        ToolDescriptor(
            name=list_name,
            description=f"List Redmine {spec.plural} with optional filtering",
            input_model=spec.list_model,
            handler=list_items,
        ),
        ToolDescriptor(
            name=get_name,
            description=f"Get details of a specific Redmine {spec.noun}",
            input_model=spec.id_model,
            handler=get_item,
        ),
        ToolDescriptor(
            name=create_name,
            description=f"Create a new Redmine {spec.noun}",
            input_model=spec.create_model,
            handler=create_item,
        ),
        ToolDescriptor(
            name=update_name,
            description=f"Update an existing Redmine {spec.noun}",
            input_model=spec.update_model,
            handler=update,
        ),
        ToolDescriptor(
            name=delete_name,
            description=f"Delete a Redmine {spec.noun}",
            input_model=spec.id_model,
            handler=delete_item,
        ),
    ]


__all__ = [
    "ResourceSpec",
    "build_crud_tools",
    "fetch_list",
    "forwarded",
    "item_envelope",
    "list_envelope",
    "resource_path",
    "update_item",
]
