"""CRUD helpers for issues.

Every function takes the active ``RecordStore`` first, validates and stamps
the payload, then hands a complete record to the store.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from ..core.clock import format_timestamp, later_than, new_id, parse_timestamp, sort_key, utcnow_iso
from ..core.errors import NotFoundError, ValidationError
from ..core.issue_types import (
    DEFAULT_ISSUE_TYPE,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    ISSUE_TYPE_CHOICES,
    PRIORITY_CHOICES,
    STATUS_CHOICES,
    normalize_choice,
)
from ..core.listfields import LIST_FIELDS, split_list
from ..core.text import clean_text
from ..storage.base import ISSUE_FIELDS, Record, RecordStore, blank_record

logger = logging.getLogger(__name__)

SERVER_MANAGED_FIELDS = ("id", "created_at", "updated_at")
EDITABLE_FIELDS = tuple(field for field in ISSUE_FIELDS if field not in SERVER_MANAGED_FIELDS)
DATE_FIELDS = ("status_date", "raised_date", "closed_date")
CHOICE_FIELDS = {
    "type": (ISSUE_TYPE_CHOICES, DEFAULT_ISSUE_TYPE),
    "priority": (PRIORITY_CHOICES, DEFAULT_PRIORITY),
    "status": (STATUS_CHOICES, DEFAULT_STATUS),
}
DELETED_MESSAGE = "Issue deleted successfully"


def _clean_date(field: str, value: Any) -> str | None:
    if isinstance(value, datetime):
        return format_timestamp(value)
    text = clean_text(field, value)
    if text is None:
        return None
    parsed = parse_timestamp(text)
    if parsed is None:
        raise ValidationError(f"{field} must be an ISO 8601 timestamp", details={"field": field})
    return format_timestamp(parsed)


def _clean_value(field: str, value: Any) -> Any:
    if field in LIST_FIELDS:
        try:
            items = split_list(value)
        except TypeError as exc:
            raise ValidationError(f"{field} must be a string or a list", details={"field": field}) from exc
        for item in items:
            clean_text(field, item)
        return items
    if field in DATE_FIELDS:
        return _clean_date(field, value)
    if isinstance(value, str):
        return clean_text(field, value)
    return value


def _clean_payload(payload: Mapping[str, Any]) -> Record:
    """Keep editable fields only and normalise their values."""

    return {
        field: _clean_value(field, payload[field])
        for field in EDITABLE_FIELDS
        if field in payload
    }


def _check_choice(field: str, value: Any, *, default: str | None) -> str:
    choices, _ = CHOICE_FIELDS[field]
    try:
        normalized = normalize_choice(value, choices, default=default)
    except ValueError as exc:
        raise ValidationError(f"{field}: {exc}", details={"field": field}) from exc
    if normalized is None:
        raise ValidationError(f"{field} is required", details={"field": field})
    return normalized


def _require_title(value: Any) -> str:
    title = str(value).strip() if value is not None else ""
    if not title:
        raise ValidationError("title is required", details={"field": "title"})
    return title


def list_issues(store: RecordStore) -> list[Record]:
    """Every issue, newest first."""

    issues = store.load_issues()
    issues.sort(key=lambda issue: sort_key(issue.get("created_at")), reverse=True)
    return issues


def get_issue(store: RecordStore, issue_id: str) -> Record:
    issue = store.get_issue(issue_id)
    if issue is None:
        raise NotFoundError("Issue", issue_id)
    return issue


def create_issue(store: RecordStore, payload: Mapping[str, Any]) -> Record:
    data = _clean_payload(payload)
    title = _require_title(data.get("title"))
    now = utcnow_iso()

    record = blank_record(ISSUE_FIELDS)
    record.update(data)
    record["id"] = new_id()
    record["title"] = title
    for field, (_, default) in CHOICE_FIELDS.items():
        record[field] = _check_choice(field, data.get(field), default=default)
    record["created_at"] = now
    record["updated_at"] = now
    record["status_date"] = now
    record["raised_date"] = data.get("raised_date") or now

    store.add_issue(record)
    logger.info(
        "issue.created",
        extra={"extra_data": {"issue_id": record["id"], "status": record["status"]}},
    )
    return record


def update_issue(store: RecordStore, issue_id: str, payload: Mapping[str, Any]) -> Record:
    """Merge ``payload`` over the stored issue.

    Only keys present in ``payload`` change. ``updated_at`` always moves
    forward; ``status_date`` follows real status changes; ``closed_date`` is
    left entirely to the caller.
    """

    existing = get_issue(store, issue_id)
    changes = _clean_payload(payload)
    if "title" in changes:
        changes["title"] = _require_title(changes["title"])
    for field in CHOICE_FIELDS:
        if field in changes:
            changes[field] = _check_choice(field, changes[field], default=None)

    merged = {**existing, **changes}
    now = later_than(existing.get("updated_at"))
    merged["updated_at"] = now
    status_changed = "status" in changes and changes["status"] != existing.get("status")
    if status_changed and not changes.get("status_date"):
        merged["status_date"] = now

    stored = store.replace_issue(issue_id, merged)
    if stored is None:
        raise NotFoundError("Issue", issue_id)
    logger.info(
        "issue.updated",
        extra={"extra_data": {"issue_id": issue_id, "fields": sorted(changes)}},
    )
    return stored


def delete_issue(store: RecordStore, issue_id: str, *, cascade_comments: bool = False) -> dict[str, str]:
    if not store.remove_issue(issue_id):
        raise NotFoundError("Issue", issue_id)
    removed_comments = store.remove_comments(issue_id) if cascade_comments else 0
    logger.info(
        "issue.deleted",
        extra={"extra_data": {"issue_id": issue_id, "removed_comments": removed_comments}},
    )
    return {"message": DELETED_MESSAGE}


__all__ = [
    "DELETED_MESSAGE",
    "EDITABLE_FIELDS",
    "create_issue",
    "delete_issue",
    "get_issue",
    "list_issues",
    "update_issue",
]
