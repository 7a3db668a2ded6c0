from __future__ import annotations

from typing import Optional

from redmine_mcp.core.catalog import ToolDescriptor
from redmine_mcp.core.client import RedmineClient
from redmine_mcp.core.models import (
    IssueAssignInput,
    IssueCommentInput,
    IssueCreateInput,
    IssueFields,
    IssueIdInput,
    IssueListInput,
    IssueStatusInput,
    IssueUpdateInput,
)
from redmine_mcp.core.results import Result
from redmine_mcp.core.tools._resources import (
    ResourceSpec,
    build_crud_tools,
    forwarded,
    update_item,
)


def check_done_ratio(args: IssueFields) -> Optional[str]:
    """done_ratio is a percentage; Redmine silently ignores other values."""
    if args.done_ratio is not None and not 0 <= args.done_ratio <= 100:
        return "Done ratio must be between 0 and 100"
    return None


ISSUES = ResourceSpec(
    collection="issues",
    key="issue",
    noun="issue",
    plural="issues",
    id_model=IssueIdInput,
    list_model=IssueListInput,
    create_model=IssueCreateInput,
    update_model=IssueUpdateInput,
    check=check_done_ratio,
)


async def add_issue_comment(client: RedmineClient, args: IssueCommentInput) -> Result:
    return await update_item(
        client, ISSUES, args.id, {"notes": args.notes}, tool="add_issue_comment"
    )


async def assign_issue(client: RedmineClient, args: IssueAssignInput) -> Result:
    return await update_item(
        client,
        ISSUES,
        args.id,
        {"assigned_to_id": args.assigned_to_id},
        tool="assign_issue",
    )


async def update_issue_status(client: RedmineClient, args: IssueStatusInput) -> Result:
    return await update_item(
        client,
        ISSUES,
        args.id,
        forwarded(args, exclude={"id"}, keep_null=True),
        tool="update_issue_status",
    )


TOOLS = build_crud_tools(ISSUES) + [
    ToolDescriptor(
        name="add_issue_comment",
        description="Add a comment (journal note) to a Redmine issue",
        input_model=IssueCommentInput,
        handler=add_issue_comment,
    ),
    ToolDescriptor(
        name="assign_issue",
        description="Assign a Redmine issue to a user",
        input_model=IssueAssignInput,
        handler=assign_issue,
    ),
    ToolDescriptor(
        name="update_issue_status",
        description="Change the status of a Redmine issue, optionally with a note",
        input_model=IssueStatusInput,
        handler=update_issue_status,
    ),
]
