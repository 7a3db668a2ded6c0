"""
Tool input models.

Each model is both the advertised inputSchema (via model_json_schema) and the
validator applied before a handler runs. Models are flat, strict and forbid
unknown keys; domain rules that JSON Schema cannot express live in handlers.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Projects are addressable by numeric id or by identifier slug.
ProjectRef = Union[int, str]


class ToolInput(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class Paging(ToolInput):
    offset: Optional[int] = Field(None, description="Number of records to skip")
    limit: Optional[int] = Field(
        None, description="Maximum number of records to return"
    )


class NoInput(ToolInput):
    pass


# --- Issues ---


class IssueIdInput(ToolInput):
    id: int = Field(description="Issue ID")


class IssueListInput(Paging):
    project_id: Optional[ProjectRef] = Field(
        None, description="Filter by project ID or identifier"
    )
    tracker_id: Optional[int] = Field(None, description="Filter by tracker ID")
    status_id: Optional[Union[int, str]] = Field(
        None, description='Filter by status ID. Use "open", "closed" or "*"'
    )
    assigned_to_id: Optional[Union[int, str]] = Field(
        None, description='Filter by assigned user ID, or "me"'
    )
    parent_id: Optional[int] = Field(None, description="Filter by parent issue ID")
    sort: Optional[str] = Field(
        None, description='Sort order, e.g. "updated_on:desc"'
    )


class IssueFields(ToolInput):
    subject: Optional[str] = Field(None, description="Issue subject")
    description: Optional[str] = Field(None, description="Issue description")
    priority_id: Optional[int] = Field(None, description="Priority ID")
    tracker_id: Optional[int] = Field(None, description="Tracker ID")
    status_id: Optional[int] = Field(None, description="Status ID")
    assigned_to_id: Optional[int] = Field(None, description="Assigned user ID")
    parent_issue_id: Optional[int] = Field(None, description="Parent issue ID")
    start_date: Optional[str] = Field(None, description="Start date (YYYY-MM-DD)")
    due_date: Optional[str] = Field(None, description="Due date (YYYY-MM-DD)")
    estimated_hours: Optional[float] = Field(None, description="Estimated hours")
    done_ratio: Optional[int] = Field(None, description="Done ratio (0-100)")


class IssueCreateInput(IssueFields):
    project_id: ProjectRef = Field(description="Project ID or identifier")
    subject: str = Field(description="Issue subject")


class IssueUpdateInput(IssueFields):
    id: int = Field(description="Issue ID")
    notes: Optional[str] = Field(None, description="Notes to add to the issue")


class IssueCommentInput(ToolInput):
    id: int = Field(description="Issue ID")
    notes: str = Field(description="Comment text")


class IssueAssignInput(ToolInput):
    id: int = Field(description="Issue ID")
    assigned_to_id: int = Field(description="User ID to assign")


class IssueStatusInput(ToolInput):
    id: int = Field(description="Issue ID")
    status_id: int = Field(description="New status ID")
    notes: Optional[str] = Field(None, description="Optional note for the change")


# --- Projects ---


class ProjectIdInput(ToolInput):
    id: ProjectRef = Field(description="Project ID or identifier")


class ProjectListInput(Paging):
    pass


class ProjectFields(ToolInput):
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    homepage: Optional[str] = Field(None, description="Project homepage URL")
    is_public: Optional[bool] = Field(
        None, description="Whether the project is public"
    )
    inherit_members: Optional[bool] = Field(
        None, description="Whether to inherit members from parent project"
    )
    parent_id: Optional[int] = Field(None, description="Parent project ID")


class ProjectCreateInput(ProjectFields):
    name: str = Field(description="Project name")
    identifier: str = Field(description="Project identifier (used in URL)")


class ProjectUpdateInput(ProjectFields):
    id: ProjectRef = Field(description="Project ID or identifier")


class ProjectIssuesInput(Paging):
    id: ProjectRef = Field(description="Project ID or identifier")
    status_id: Optional[Union[int, str]] = Field(
        None, description='Filter by status ID. Use "open", "closed" or "*"'
    )
    tracker_id: Optional[int] = Field(None, description="Filter by tracker ID")
    assigned_to_id: Optional[Union[int, str]] = Field(
        None, description='Filter by assigned user ID, or "me"'
    )


# --- Users ---


class UserIdInput(ToolInput):
    id: int = Field(description="User ID")


class UserListInput(Paging):
    status: Optional[int] = Field(
        None, description="Filter by status (1=active, 2=registered, 3=locked)"
    )
    name: Optional[str] = Field(
        None, description="Filter by login, first name, last name or mail"
    )
    group_id: Optional[int] = Field(None, description="Filter by group ID")


class UserFields(ToolInput):
    login: Optional[str] = Field(None, description="User login")
    firstname: Optional[str] = Field(None, description="User first name")
    lastname: Optional[str] = Field(None, description="User last name")
    mail: Optional[str] = Field(None, description="User email")
    password: Optional[str] = Field(None, description="User password")
    auth_source_id: Optional[int] = Field(None, description="Authentication source ID")
    mail_notification: Optional[str] = Field(
        None, description="Mail notification preference"
    )
    must_change_passwd: Optional[bool] = Field(
        None, description="Whether user must change password on next login"
    )


class UserCreateInput(UserFields):
    login: str = Field(description="User login")
    firstname: str = Field(description="User first name")
    lastname: str = Field(description="User last name")
    mail: str = Field(description="User email")


class UserUpdateInput(UserFields):
    id: int = Field(description="User ID")


# --- Time entries ---


class DateRange(ToolInput):
    from_: Optional[str] = Field(
        None, alias="from", description="Filter by start date (YYYY-MM-DD)"
    )
    to: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")


class TimeEntryIdInput(ToolInput):
    id: int = Field(description="Time entry ID")


class TimeEntryListInput(Paging, DateRange):
    user_id: Optional[int] = Field(None, description="Filter by user ID")
    project_id: Optional[ProjectRef] = Field(
        None, description="Filter by project ID or identifier"
    )
    issue_id: Optional[int] = Field(None, description="Filter by issue ID")
    activity_id: Optional[int] = Field(None, description="Filter by activity ID")


class TimeEntryFields(ToolInput):
    issue_id: Optional[int] = Field(None, description="Issue ID")
    project_id: Optional[ProjectRef] = Field(
        None, description="Project ID or identifier"
    )
    spent_on: Optional[str] = Field(None, description="Date (YYYY-MM-DD)")
    hours: Optional[float] = Field(None, description="Hours spent")
    activity_id: Optional[int] = Field(None, description="Activity ID")
    comments: Optional[str] = Field(None, description="Comments")


class TimeEntryCreateInput(TimeEntryFields):
    issue_id: Optional[int] = Field(
        None, description="Issue ID (either issue_id or project_id is required)"
    )
    project_id: Optional[ProjectRef] = Field(
        None,
        description="Project ID or identifier (either issue_id or project_id is required)",  # noqa: E501
    )
    spent_on: str = Field(description="Date (YYYY-MM-DD)")
    hours: float = Field(description="Hours spent")
    activity_id: int = Field(description="Activity ID")


class TimeEntryUpdateInput(TimeEntryFields):
    id: int = Field(description="Time entry ID")


class IssueTimeEntriesInput(Paging):
    issue_id: int = Field(description="Issue ID")


class ProjectTimeEntriesInput(Paging, DateRange):
    project_id: ProjectRef = Field(description="Project ID or identifier")


class UserTimeEntriesInput(Paging, DateRange):
    user_id: int = Field(description="User ID")
