"""Timestamp and identifier helpers shared by the record service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def utcnow_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: Any) -> datetime | None:
    """Best-effort parse of stored timestamps; naive values are treated as UTC."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_key(value: Any) -> datetime:
    return parse_timestamp(value) or EPOCH


def later_than(previous: Any) -> str:
    """Current time, nudged forward so it sorts strictly after ``previous``."""

    now = datetime.now(timezone.utc)
    before = parse_timestamp(previous)
    if before is not None and now <= before:
        now = before + timedelta(microseconds=1)
    return format_timestamp(now)


def new_id() -> str:
    return uuid4().hex


__all__ = ["format_timestamp", "later_than", "new_id", "parse_timestamp", "sort_key", "utcnow_iso"]
