"""Relational backend built on SQLAlchemy.

Works with the bundled SQLite default as well as a hosted database URL. One
short-lived session is opened per operation.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import StorageError
from ..core.listfields import LIST_FIELDS
from ..db.session import Base, make_session_factory
from ..models.comment import Comment
from ..models.issue import Issue
from ..models.project import Project
from .base import Record, RecordStore

logger = logging.getLogger(__name__)


def _to_record(row) -> Record:
    record: Record = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if column.name in LIST_FIELDS:
            value = list(value or [])
        record[column.name] = value
    return record


def _assign(row, record: Record) -> None:
    for column in row.__table__.columns:
        if column.name in record:
            value = record[column.name]
            if column.name in LIST_FIELDS:
                value = list(value) if value else None
            setattr(row, column.name, value)


class SqlStore(RecordStore):
    backend = "sql"

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    def ensure_ready(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            logger.error("Could not create tables", exc_info=True)
            raise StorageError("Failed to prepare database") from exc

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Database error during %s", action, exc_info=True)
            raise StorageError(f"Failed to {action}") from exc
        finally:
            db.close()

    # ---------- projects ----------
    def load_projects(self) -> list[Record]:
        with self._session("read projects") as db:
            return [_to_record(row) for row in db.execute(select(Project)).scalars().all()]

    def add_project(self, record: Record) -> Record:
        with self._session("create project") as db:
            project = Project()
            _assign(project, record)
            db.add(project)
            db.commit()
            return _to_record(project)

    # ---------- issues ----------
    def load_issues(self) -> list[Record]:
        with self._session("read issues") as db:
            return [_to_record(row) for row in db.execute(select(Issue)).scalars().all()]

    def get_issue(self, issue_id: str) -> Record | None:
        with self._session("read issue") as db:
            issue = db.get(Issue, issue_id)
            return _to_record(issue) if issue is not None else None

    def add_issue(self, record: Record) -> Record:
        with self._session("create issue") as db:
            issue = Issue()
            _assign(issue, record)
            db.add(issue)
            db.commit()
            return _to_record(issue)

    def replace_issue(self, issue_id: str, record: Record) -> Record | None:
        with self._session("update issue") as db:
            issue = db.get(Issue, issue_id)
            if issue is None:
                return None
            _assign(issue, {key: value for key, value in record.items() if key != "id"})
            db.commit()
            return _to_record(issue)

    def remove_issue(self, issue_id: str) -> bool:
        with self._session("delete issue") as db:
            issue = db.get(Issue, issue_id)
            if issue is None:
                return False
            db.delete(issue)
            db.commit()
            return True

    # ---------- comments ----------
    def load_comments(self, issue_id: str | None = None) -> list[Record]:
        stmt = select(Comment)
        if issue_id is not None:
            stmt = stmt.where(Comment.issue_id == issue_id)
        with self._session("read comments") as db:
            return [_to_record(row) for row in db.execute(stmt).scalars().all()]

    def add_comment(self, record: Record) -> Record:
        with self._session("create comment") as db:
            comment = Comment()
            _assign(comment, record)
            db.add(comment)
            db.commit()
            return _to_record(comment)

    def remove_comments(self, issue_id: str) -> int:
        with self._session("delete comments") as db:
            result = db.execute(delete(Comment).where(Comment.issue_id == issue_id))
            db.commit()
            return result.rowcount or 0


__all__ = ["SqlStore"]
