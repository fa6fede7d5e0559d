"""CRUD helpers for projects, including the first-boot seed rows."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core.clock import new_id, utcnow_iso
from ..core.errors import ValidationError
from ..core.issue_types import USER_ROLE_CHOICES, normalize_choice
from ..core.text import clean_text
from ..storage.base import PROJECT_FIELDS, Record, RecordStore, blank_record

logger = logging.getLogger(__name__)

DEFAULT_PROJECTS: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "name": "Student Learning Platform",
        "code": "SLP",
        "description": "Issues related to student learning activities and coursework",
        "user_role": "student",
    },
    {
        "id": "2",
        "name": "Training Management System",
        "code": "TMS",
        "description": "Issues related to training content and instructor tools",
        "user_role": "trainer",
    },
    {
        "id": "3",
        "name": "Tekstac Core Platform",
        "code": "TCP",
        "description": "Core platform issues affecting all users",
        "user_role": None,
    },
)


def _text(payload: Mapping[str, Any], field: str) -> str | None:
    return clean_text(field, payload.get(field))


def list_projects(store: RecordStore) -> list[Record]:
    """Every project ordered by name."""

    projects = store.load_projects()
    projects.sort(key=lambda project: (project.get("name") or "").casefold())
    return projects


def create_project(store: RecordStore, payload: Mapping[str, Any]) -> Record:
    name = _text(payload, "name")
    if not name:
        raise ValidationError("name is required", details={"field": "name"})
    code = _text(payload, "code")
    if not code:
        raise ValidationError("code is required", details={"field": "code"})
    code = code.upper()
    taken = {(project.get("code") or "").upper() for project in store.load_projects()}
    if code in taken:
        raise ValidationError(f"project code {code!r} already exists", details={"field": "code"})
    try:
        user_role = normalize_choice(payload.get("user_role"), USER_ROLE_CHOICES)
    except ValueError as exc:
        raise ValidationError(f"user_role: {exc}", details={"field": "user_role"}) from exc

    now = utcnow_iso()
    record = blank_record(PROJECT_FIELDS)
    record.update(
        id=new_id(),
        name=name,
        code=code,
        description=_text(payload, "description"),
        user_role=user_role,
        created_at=now,
        updated_at=now,
    )
    store.add_project(record)
    logger.info("project.created", extra={"extra_data": {"project_id": record["id"], "code": code}})
    return record


def ensure_seeded(store: RecordStore) -> bool:
    """Write the default projects when the collection is empty.

    Safe to call on every start-up; a collection that already has rows is
    left alone. Returns ``True`` when rows were written.
    """

    if store.load_projects():
        return False
    now = utcnow_iso()
    for seed in DEFAULT_PROJECTS:
        record = blank_record(PROJECT_FIELDS)
        record.update(seed)
        record["created_at"] = now
        record["updated_at"] = now
        store.add_project(record)
    logger.info("project.seeded", extra={"extra_data": {"count": len(DEFAULT_PROJECTS)}})
    return True


__all__ = ["DEFAULT_PROJECTS", "create_project", "ensure_seeded", "list_projects"]
