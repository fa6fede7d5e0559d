"""Domain models handed to UI code, plus the mapping back to wire payloads.

The wire speaks snake_case with comma-joined list fields and ISO strings.
These models hold real ``datetime`` values, ``labels`` as a set, and dump to
camelCase with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

from ..core.clock import format_timestamp, parse_timestamp, utcnow_iso
from ..core.listfields import LIST_FIELDS, join_list, split_list

IssueType = Literal["story", "bug", "task", "epic"]
Priority = Literal["low", "medium", "high", "critical"]
Status = Literal["todo", "progress", "done"]
UserRole = Literal["trainer", "student"]

ISSUE_WIRE_FIELDS = (
    "title",
    "description",
    "type",
    "priority",
    "status",
    "assignee",
    "reported_by",
    "project",
    "environment",
    "labels",
    "sprint",
    "epic_link",
    "steps_to_reproduce",
    "actual_result",
    "expected_result",
    "attachments",
    "status_date",
    "raised_date",
    "closed_date",
)


class DomainModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: (None if value == "" else value) for key, value in data.items()}
        return data


class Project(DomainModel):
    id: str
    name: str
    code: str
    description: Optional[str] = None
    user_role: Optional[UserRole] = None
    created_at: datetime
    updated_at: datetime


class Issue(DomainModel):
    id: str
    title: str
    description: Optional[str] = None
    type: IssueType
    priority: Priority
    status: Status
    assignee: Optional[str] = None
    reported_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    status_date: Optional[datetime] = None
    raised_date: Optional[datetime] = None
    closed_date: Optional[datetime] = None
    project: Optional[str] = None
    environment: Optional[str] = None
    labels: Optional[set[str]] = None
    sprint: Optional[str] = None
    epic_link: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    actual_result: Optional[str] = None
    expected_result: Optional[str] = None
    attachments: Optional[list[str]] = None

    @field_validator("labels", "attachments", mode="before")
    @classmethod
    def split_joined(cls, value: Any) -> Any:
        if value is None:
            return None
        return split_list(value) or None

    @field_validator("status_date", "raised_date", "closed_date", mode="before")
    @classmethod
    def lenient_date(cls, value: Any) -> Optional[datetime]:
        # Rows written before dates were validated may hold free text; show them as unset.
        return parse_timestamp(value)


class IssueDraft(DomainModel):
    """Fields a user fills in before the server assigns id and timestamps."""

    title: str
    description: Optional[str] = None
    type: IssueType = "story"
    priority: Priority = "medium"
    status: Status = "todo"
    assignee: Optional[str] = None
    reported_by: Optional[str] = None
    raised_date: Optional[datetime] = None
    project: Optional[str] = None
    environment: Optional[str] = None
    labels: Optional[set[str]] = None
    sprint: Optional[str] = None
    epic_link: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    actual_result: Optional[str] = None
    expected_result: Optional[str] = None
    attachments: Optional[list[str]] = None

    def to_wire(self) -> dict[str, Any]:
        payload = issue_fields_to_wire(self.model_dump(exclude_none=True))
        payload.setdefault("raised_date", utcnow_iso())
        return payload


class Comment(DomainModel):
    id: str
    issue_id: str
    comment_text: str
    action_taken: Optional[str] = None
    solution_summary: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


def issue_fields_to_wire(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Translate domain field names (camelCase or snake_case) to wire names.

    Unknown or server-managed keys are dropped, list fields are comma-joined
    and datetimes become ISO strings.
    """

    payload: dict[str, Any] = {}
    for key, value in fields.items():
        name = to_snake(key)
        if name not in ISSUE_WIRE_FIELDS:
            continue
        if name in LIST_FIELDS:
            value = join_list(sorted(value) if isinstance(value, (set, frozenset)) else value)
        elif isinstance(value, datetime):
            value = format_timestamp(value)
        payload[name] = value
    return payload


def comment_to_wire(
    issue_id: str,
    comment_text: str,
    *,
    action_taken: str | None = None,
    solution_summary: str | None = None,
    created_by: str | None = None,
) -> dict[str, Any]:
    return {
        "issue_id": issue_id,
        "comment_text": comment_text,
        "action_taken": action_taken,
        "solution_summary": solution_summary,
        "created_by": created_by,
    }


__all__ = [
    "Comment",
    "Issue",
    "IssueDraft",
    "Project",
    "comment_to_wire",
    "issue_fields_to_wire",
]
