"""Kanban board helpers: search, column grouping and dashboard counters.

The helpers accept anything that exposes issue fields, either as attributes
(``IssueOut``, the client ``Issue`` model) or as mapping keys (raw store
records), so the HTTP layer and the client data layer share one
implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from ..core.issue_types import STATUS_DONE, STATUS_PROGRESS, STATUS_TODO


@dataclass(frozen=True)
class ColumnDefinition:
    id: str
    title: str
    status: str


COLUMNS: tuple[ColumnDefinition, ...] = (
    ColumnDefinition(STATUS_TODO, "To Do", STATUS_TODO),
    ColumnDefinition(STATUS_PROGRESS, "In Progress", STATUS_PROGRESS),
    ColumnDefinition(STATUS_DONE, "Done", STATUS_DONE),
)

SEARCH_FIELDS = (
    "title",
    "description",
    "assignee",
    "reported_by",
    "type",
    "priority",
    "status",
    "id",
)


@dataclass
class BoardColumn:
    id: str
    title: str
    status: str
    issues: list[Any] = field(default_factory=list)


def _field(issue: Any, name: str) -> Any:
    if isinstance(issue, Mapping):
        return issue.get(name)
    return getattr(issue, name, None)


def matches(issue: Any, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    for name in SEARCH_FIELDS:
        value = _field(issue, name)
        if value is not None and needle in str(value).lower():
            return True
    return False


def filter_issues(issues: Sequence[Any], query: str | None) -> list[Any]:
    """Case-insensitive substring search; a blank query keeps everything."""

    if not query or not query.strip():
        return list(issues)
    return [issue for issue in issues if matches(issue, query)]


def group_by_status(issues: Iterable[Any]) -> list[BoardColumn]:
    columns = [BoardColumn(col.id, col.title, col.status) for col in COLUMNS]
    by_status = {column.status: column for column in columns}
    for issue in issues:
        column = by_status.get(_field(issue, "status"))
        if column is not None:
            column.issues.append(issue)
    return columns


def build_board(issues: Sequence[Any], query: str | None = None) -> list[BoardColumn]:
    return group_by_status(filter_issues(issues, query))


def _percent(part: int, total: int) -> int:
    if not total:
        return 0
    return round(part / total * 100)


def dashboard_stats(issues: Sequence[Any]) -> dict[str, int]:
    total = len(issues)
    in_progress = sum(1 for issue in issues if _field(issue, "status") == STATUS_PROGRESS)
    completed = sum(1 for issue in issues if _field(issue, "status") == STATUS_DONE)
    assignees = {_field(issue, "assignee") for issue in issues if _field(issue, "assignee")}
    return {
        "total": total,
        "todo": total - in_progress - completed,
        "in_progress": in_progress,
        "in_progress_percent": _percent(in_progress, total),
        "completed": completed,
        "completed_percent": _percent(completed, total),
        "team_members": len(assignees),
    }


def recent_issues(issues: Sequence[Any], limit: int = 3) -> list[Any]:
    """First ``limit`` issues of a newest-first list."""

    return list(issues[:limit])


__all__ = [
    "COLUMNS",
    "BoardColumn",
    "ColumnDefinition",
    "build_board",
    "dashboard_stats",
    "filter_issues",
    "group_by_status",
    "matches",
    "recent_issues",
]
