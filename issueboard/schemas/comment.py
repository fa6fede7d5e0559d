from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CommentCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    issue_id: Optional[str] = None
    comment_text: Optional[str] = None
    action_taken: Optional[str] = None
    solution_summary: Optional[str] = None
    created_by: Optional[str] = None


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issue_id: str
    comment_text: str
    action_taken: Optional[str] = None
    solution_summary: Optional[str] = None
    created_by: Optional[str] = None
    created_at: str
    updated_at: str
