from __future__ import annotations

from typing import Optional

from redmine_mcp.core.catalog import ToolDescriptor
from redmine_mcp.core.client import RedmineClient
from redmine_mcp.core.models import (
    IssueTimeEntriesInput,
    ProjectTimeEntriesInput,
    TimeEntryCreateInput,
    TimeEntryFields,
    TimeEntryIdInput,
    TimeEntryListInput,
    TimeEntryUpdateInput,
    UserTimeEntriesInput,
)
from redmine_mcp.core.results import Result, Success
from redmine_mcp.core.tools._resources import (
    ResourceSpec,
    build_crud_tools,
    fetch_list,
    forwarded,
)


def check_time_entry(args: TimeEntryFields) -> Optional[str]:
    if isinstance(args, TimeEntryCreateInput) and (
        args.issue_id is None and args.project_id is None
    ):
        return "Either issue_id or project_id must be provided"
    return None


TIME_ENTRIES = ResourceSpec(
    collection="time_entries",
    key="time_entry",
    noun="time entry",
    plural="time entries",
    id_model=TimeEntryIdInput,
    list_model=TimeEntryListInput,
    create_model=TimeEntryCreateInput,
    update_model=TimeEntryUpdateInput,
    check=check_time_entry,
)


async def _entries_for(client: RedmineClient, args, *, tool: str) -> Result:
    envelope = await fetch_list(
        client, "time_entries.json", "time_entries", forwarded(args), tool=tool
    )
    return Success(envelope)


async def get_issue_time_entries(
    client: RedmineClient, args: IssueTimeEntriesInput
) -> Result:
    return await _entries_for(client, args, tool="get_issue_time_entries")


async def get_project_time_entries(
    client: RedmineClient, args: ProjectTimeEntriesInput
) -> Result:
    return await _entries_for(client, args, tool="get_project_time_entries")


async def get_user_time_entries(
    client: RedmineClient, args: UserTimeEntriesInput
) -> Result:
    return await _entries_for(client, args, tool="get_user_time_entries")


TOOLS = build_crud_tools(TIME_ENTRIES) + [
    ToolDescriptor(
        name="get_issue_time_entries",
        description="Get all time entries for a specific issue",
        input_model=IssueTimeEntriesInput,
        handler=get_issue_time_entries,
    ),
    ToolDescriptor(
        name="get_project_time_entries",
        description="Get all time entries for a specific project",
        input_model=ProjectTimeEntriesInput,
        handler=get_project_time_entries,
    ),
    ToolDescriptor(
        name="get_user_time_entries",
        description="Get all time entries for a specific user",
        input_model=UserTimeEntriesInput,
        handler=get_user_time_entries,
    ),
]
