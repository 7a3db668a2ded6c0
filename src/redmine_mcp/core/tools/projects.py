from __future__ import annotations

from redmine_mcp.core.catalog import ToolDescriptor
from redmine_mcp.core.client import RedmineClient
from redmine_mcp.core.models import (
    ProjectCreateInput,
    ProjectIdInput,
    ProjectIssuesInput,
    ProjectListInput,
    ProjectUpdateInput,
)
from redmine_mcp.core.results import Result, Success
from redmine_mcp.core.tools._resources import (
    ResourceSpec,
    build_crud_tools,
    fetch_list,
    forwarded,
    resource_path,
)

PROJECTS = ResourceSpec(
    collection="projects",
    key="project",
    noun="project",
    plural="projects",
    id_model=ProjectIdInput,
    list_model=ProjectListInput,
    create_model=ProjectCreateInput,
    update_model=ProjectUpdateInput,
)


async def get_project_members(client: RedmineClient, args: ProjectIdInput) -> Result:
    envelope = await fetch_list(
        client,
        resource_path("projects", args.id, "/memberships"),
        "memberships",
        tool="get_project_members",
    )
    return Success(envelope)


async def get_project_versions(client: RedmineClient, args: ProjectIdInput) -> Result:
    envelope = await fetch_list(
        client,
        resource_path("projects", args.id, "/versions"),
        "versions",
        tool="get_project_versions",
    )
    return Success(envelope)


async def get_project_issues(
    client: RedmineClient, args: ProjectIssuesInput
) -> Result:
    params = forwarded(args, exclude={"id"})
    params["project_id"] = args.id
    envelope = await fetch_list(
        client, "issues.json", "issues", params, tool="get_project_issues"
    )
    return Success(envelope)


TOOLS = build_crud_tools(PROJECTS) + [
    ToolDescriptor(
        name="get_project_members",
        description="Get the members of a Redmine project",
        input_model=ProjectIdInput,
        handler=get_project_members,
    ),
    ToolDescriptor(
        name="get_project_versions",
        description="Get the versions of a Redmine project",
        input_model=ProjectIdInput,
        handler=get_project_versions,
    ),
    ToolDescriptor(
        name="get_project_issues",
        description="List the issues of a Redmine project with optional filtering",
        input_model=ProjectIssuesInput,
        handler=get_project_issues,
    ),
]
