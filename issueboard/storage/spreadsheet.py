"""Flat-file backend: one ``.xlsx`` workbook per collection.

Each workbook holds a single sheet named ``Sheet1`` whose first row lists the
column names. Every mutation reads the whole collection, changes it in memory
and rewrites the whole file. Rewrites land in a temporary file that is then
moved over the original, so readers never see a half-written workbook.

The in-process lock serialises read-modify-write cycles between request
threads. Two *processes* sharing one data directory can still race and the
last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from ..core.errors import StorageError
from ..core.listfields import LIST_FIELDS, split_list
from .base import COMMENT_FIELDS, ISSUE_FIELDS, PROJECT_FIELDS, Record, RecordStore, blank_record

logger = logging.getLogger(__name__)

SHEET_NAME = "Sheet1"


@dataclass(frozen=True)
class Collection:
    name: str
    filename: str
    fields: tuple[str, ...]


PROJECTS = Collection("projects", "projects.xlsx", PROJECT_FIELDS)
ISSUES = Collection("issues", "issues.xlsx", ISSUE_FIELDS)
COMMENTS = Collection("comments", "comments.xlsx", COMMENT_FIELDS)


def _encode_cell(field: str, value: Any) -> Any:
    if field in LIST_FIELDS:
        # JSON keeps commas inside an element intact.
        return json.dumps(list(value), ensure_ascii=False) if value else None
    if value is None or value == "":
        return None
    return str(value)


def _decode_cell(field: str, value: Any) -> Any:
    if field in LIST_FIELDS:
        if value is None or value == "":
            return []
        text = str(value)
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, list):
                return split_list(decoded)
        # Hand-edited or legacy workbooks hold comma-joined strings.
        return split_list(text)
    if value is None:
        return None
    return str(value)


class SpreadsheetStore(RecordStore):
    backend = "spreadsheet"

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()

    def ensure_ready(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create data directory {self.data_dir}") from exc

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / collection.filename

    # ---------- whole-collection I/O ----------
    def _read(self, collection: Collection) -> list[Record]:
        path = self.path_for(collection)
        if not path.exists():
            return []
        try:
            workbook = load_workbook(str(path), read_only=True, data_only=True)
        except (OSError, InvalidFileException, BadZipFile, KeyError) as exc:
            logger.error("Error reading %s", path, exc_info=True)
            raise StorageError(f"Failed to read {collection.name}") from exc
        try:
            if SHEET_NAME not in workbook.sheetnames:
                return []
            rows = workbook[SHEET_NAME].iter_rows(values_only=True)
            header = next(rows, None)
            if not header:
                return []
            keys = [str(cell).strip() if cell is not None else None for cell in header]
            records: list[Record] = []
            for row in rows:
                if not row or all(cell is None for cell in row):
                    continue
                record = blank_record(collection.fields)
                for key, cell in zip(keys, row):
                    if key in record:
                        record[key] = _decode_cell(key, cell)
                records.append(record)
            return records
        finally:
            workbook.close()

    def _write(self, collection: Collection, records: list[Record]) -> None:
        path = self.path_for(collection)
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = SHEET_NAME
        worksheet.append(list(collection.fields))
        tmp_name: str | None = None
        try:
            for row_index, record in enumerate(records, start=2):
                for column_index, field in enumerate(collection.fields, start=1):
                    value = _encode_cell(field, record.get(field))
                    cell = worksheet.cell(row=row_index, column=column_index, value=value)
                    if isinstance(value, str) and value.startswith("="):
                        # Keep user text such as "=SUM(...)" literal instead of a formula.
                        cell.data_type = "s"
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.stem}.", suffix=".tmp.xlsx")
            os.close(fd)
            workbook.save(tmp_name)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, ValueError, IllegalCharacterError) as exc:
            logger.error("Error writing %s", path, exc_info=True)
            raise StorageError(f"Failed to write {collection.name}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    # ---------- projects ----------
    def load_projects(self) -> list[Record]:
        return self._read(PROJECTS)

    def add_project(self, record: Record) -> Record:
        with self._lock:
            rows = self._read(PROJECTS)
            rows.append(record)
            self._write(PROJECTS, rows)
        return record

    # ---------- issues ----------
    def load_issues(self) -> list[Record]:
        return self._read(ISSUES)

    def get_issue(self, issue_id: str) -> Record | None:
        for row in self._read(ISSUES):
            if row.get("id") == issue_id:
                return row
        return None

    def add_issue(self, record: Record) -> Record:
        with self._lock:
            rows = self._read(ISSUES)
            rows.append(record)
            self._write(ISSUES, rows)
        return record

    def replace_issue(self, issue_id: str, record: Record) -> Record | None:
        with self._lock:
            rows = self._read(ISSUES)
            for index, row in enumerate(rows):
                if row.get("id") == issue_id:
                    rows[index] = record
                    self._write(ISSUES, rows)
                    return record
        return None

    def remove_issue(self, issue_id: str) -> bool:
        with self._lock:
            rows = self._read(ISSUES)
            remaining = [row for row in rows if row.get("id") != issue_id]
            if len(remaining) == len(rows):
                return False
            self._write(ISSUES, remaining)
        return True

    # ---------- comments ----------
    def load_comments(self, issue_id: str | None = None) -> list[Record]:
        rows = self._read(COMMENTS)
        if issue_id is None:
            return rows
        return [row for row in rows if row.get("issue_id") == issue_id]

    def add_comment(self, record: Record) -> Record:
        with self._lock:
            rows = self._read(COMMENTS)
            rows.append(record)
            self._write(COMMENTS, rows)
        return record

    def remove_comments(self, issue_id: str) -> int:
        with self._lock:
            rows = self._read(COMMENTS)
            remaining = [row for row in rows if row.get("issue_id") != issue_id]
            removed = len(rows) - len(remaining)
            if removed:
                self._write(COMMENTS, remaining)
        return removed


__all__ = ["COMMENTS", "ISSUES", "PROJECTS", "SHEET_NAME", "Collection", "SpreadsheetStore"]
