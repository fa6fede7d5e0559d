"""The persistence contract shared by every backend.

Records cross this boundary as plain dicts keyed by the snake_case column
names of the SQLAlchemy models, with list-valued fields held as real lists.
Ordering is the record service's job; stores return rows in whatever order
they keep them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..core.listfields import LIST_FIELDS
from ..models.comment import Comment
from ..models.issue import Issue
from ..models.project import Project

Record = dict[str, Any]

PROJECT_FIELDS: tuple[str, ...] = tuple(column.name for column in Project.__table__.columns)
ISSUE_FIELDS: tuple[str, ...] = tuple(column.name for column in Issue.__table__.columns)
COMMENT_FIELDS: tuple[str, ...] = tuple(column.name for column in Comment.__table__.columns)


def blank_record(fields: tuple[str, ...]) -> Record:
    return {field: ([] if field in LIST_FIELDS else None) for field in fields}


class RecordStore(ABC):
    """Durable CRUD over the projects, issues and comments collections.

    There is no atomicity across collections. A write that returns normally
    must be visible to the next read made through the same store.
    """

    backend: str = "abstract"

    def ensure_ready(self) -> None:
        """Create whatever directories or tables the backend needs."""

    def close(self) -> None:
        """Release backend resources."""

    # ---------- projects ----------
    @abstractmethod
    def load_projects(self) -> list[Record]: ...

    @abstractmethod
    def add_project(self, record: Record) -> Record: ...

    # ---------- issues ----------
    @abstractmethod
    def load_issues(self) -> list[Record]: ...

    @abstractmethod
    def get_issue(self, issue_id: str) -> Record | None: ...

    @abstractmethod
    def add_issue(self, record: Record) -> Record: ...

    @abstractmethod
    def replace_issue(self, issue_id: str, record: Record) -> Record | None:
        """Overwrite the stored issue; ``None`` when ``issue_id`` is unknown."""

    @abstractmethod
    def remove_issue(self, issue_id: str) -> bool:
        """Hard-delete the issue; ``False`` when ``issue_id`` is unknown."""

    # ---------- comments ----------
    @abstractmethod
    def load_comments(self, issue_id: str | None = None) -> list[Record]: ...

    @abstractmethod
    def add_comment(self, record: Record) -> Record: ...

    @abstractmethod
    def remove_comments(self, issue_id: str) -> int:
        """Delete every comment attached to ``issue_id`` and return the count."""


__all__ = [
    "COMMENT_FIELDS",
    "ISSUE_FIELDS",
    "PROJECT_FIELDS",
    "Record",
    "RecordStore",
    "blank_record",
]
