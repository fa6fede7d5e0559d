from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core.clock import new_id, sort_key, utcnow_iso
from ..core.errors import ValidationError
from ..core.text import clean_text
from ..storage.base import COMMENT_FIELDS, Record, RecordStore, blank_record

logger = logging.getLogger(__name__)

OPTIONAL_FIELDS = ("action_taken", "solution_summary", "created_by")


def _text(payload: Mapping[str, Any], field: str) -> str | None:
    return clean_text(field, payload.get(field))


def list_comments_for_issue(store: RecordStore, issue_id: str) -> list[Record]:
    """Comments attached to ``issue_id``, oldest first."""

    comments = [c for c in store.load_comments(issue_id) if c.get("issue_id") == issue_id]
    comments.sort(key=lambda comment: sort_key(comment.get("created_at")))
    return comments


def create_comment(store: RecordStore, payload: Mapping[str, Any]) -> Record:
    # The referenced issue is not looked up; a comment can point at an issue
    # that was never created or has since been deleted.
    issue_id = _text(payload, "issue_id")
    if not issue_id:
        raise ValidationError("issue_id is required", details={"field": "issue_id"})
    comment_text = _text(payload, "comment_text")
    if not comment_text:
        raise ValidationError("comment_text is required", details={"field": "comment_text"})

    now = utcnow_iso()
    record = blank_record(COMMENT_FIELDS)
    record.update(
        id=new_id(),
        issue_id=issue_id,
        comment_text=comment_text,
        created_at=now,
        updated_at=now,
    )
    for field in OPTIONAL_FIELDS:
        record[field] = _text(payload, field)
    store.add_comment(record)
    logger.info("comment.created", extra={"extra_data": {"comment_id": record["id"], "issue_id": issue_id}})
    return record


__all__ = ["create_comment", "list_comments_for_issue"]
