"""Persistence backends behind a single ``RecordStore`` interface."""

from __future__ import annotations

from ..core.config import AppSettings
from .base import COMMENT_FIELDS, ISSUE_FIELDS, PROJECT_FIELDS, Record, RecordStore
from .spreadsheet import SpreadsheetStore
from .sql import SqlStore


def build_store(settings: AppSettings) -> RecordStore:
    """Pick the backend named by ``STORAGE_BACKEND``."""

    if settings.STORAGE_BACKEND == "sql":
        from ..db.session import build_engine

        return SqlStore(build_engine(settings.DB_URL))
    return SpreadsheetStore(settings.DATA_DIR)


__all__ = [
    "COMMENT_FIELDS",
    "ISSUE_FIELDS",
    "PROJECT_FIELDS",
    "Record",
    "RecordStore",
    "SpreadsheetStore",
    "SqlStore",
    "build_store",
]
