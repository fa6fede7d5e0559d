from __future__ import annotations

from pydantic import BaseModel, Field

from .issue import IssueOut


class BoardColumnOut(BaseModel):
    id: str
    title: str
    status: str
    issues: list[IssueOut] = Field(default_factory=list)


class BoardOut(BaseModel):
    query: str = ""
    total: int
    columns: list[BoardColumnOut]


class StatsOut(BaseModel):
    total: int
    todo: int
    in_progress: int
    in_progress_percent: int
    completed: int
    completed_percent: int
    team_members: int
    recent: list[IssueOut] = Field(default_factory=list)
