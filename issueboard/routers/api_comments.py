"""Beginner-friendly overview for this module.

WHAT: Handles the logic defined in "issueboard/routers/api_comments.py" for the IssueBoard app.
WHEN: Invoked when its functions or classes are imported and called.
WHY: Provides supporting behaviour so the service runs smoothly.
HOW: Read the inline comments and docstrings below for the step-by-step flow.

File: issueboard/routers/api_comments.py
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..crud.comments import create_comment, list_comments_for_issue
from ..deps.store import get_store
from ..schemas.comment import CommentCreate, CommentOut
from ..storage.base import RecordStore

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/{issue_id}", response_model=list[CommentOut])
def api_list_comments(issue_id: str, store: RecordStore = Depends(get_store)):
    return [CommentOut.model_validate(comment) for comment in list_comments_for_issue(store, issue_id)]


@router.post("", response_model=CommentOut)
def api_create_comment(payload: CommentCreate, store: RecordStore = Depends(get_store)):
    comment = create_comment(store, payload.model_dump(exclude_unset=True))
    return CommentOut.model_validate(comment)
