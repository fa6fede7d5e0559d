"""Pydantic schemas that describe issue payloads on the wire.

Field names are snake_case. ``labels`` and ``attachments`` are accepted as
either a comma-joined string or a JSON array, and always leave the API as a
comma-joined string (``None`` when empty).
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..core.listfields import join_list, split_list


class IssueFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: Optional[str] = None
    type: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    assignee: Optional[str] = None
    reported_by: Optional[str] = None
    project: Optional[str] = None
    environment: Optional[str] = None
    labels: Optional[list[str]] = None
    sprint: Optional[str] = None
    epic_link: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    actual_result: Optional[str] = None
    expected_result: Optional[str] = None
    attachments: Optional[list[str]] = None
    raised_date: Optional[str] = None
    closed_date: Optional[str] = None

    @field_validator("labels", "attachments", mode="before")
    @classmethod
    def split_joined(cls, value: Any) -> Any:
        if value is None:
            return None
        try:
            return split_list(value)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

class IssueCreate(IssueFields):
    # Presence and non-blankness are enforced by the record service so the
    # error reads the same whichever way a title goes missing.
    title: Optional[str] = None

class IssueUpdate(IssueFields):
    title: Optional[str] = None
    status_date: Optional[str] = None

class IssueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    type: str
    priority: str
    status: str
    assignee: Optional[str] = None
    reported_by: Optional[str] = None
    project: Optional[str] = None
    environment: Optional[str] = None
    labels: list[str] = Field(default_factory=list)
    sprint: Optional[str] = None
    epic_link: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    actual_result: Optional[str] = None
    expected_result: Optional[str] = None
    attachments: list[str] = Field(default_factory=list)
    created_at: str
    updated_at: str
    status_date: Optional[str] = None
    raised_date: Optional[str] = None
    closed_date: Optional[str] = None

    @field_validator("labels", "attachments", mode="before")
    @classmethod
    def split_joined(cls, value: Any) -> list[str]:
        return split_list(value)

    @field_serializer("labels", "attachments")
    def join_items(self, value: list[str]) -> Optional[str]:
        return join_list(value)

class DeleteAck(BaseModel):
    message: str
