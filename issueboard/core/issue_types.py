"""Shared issue enumerations, defaults and helpers."""

from __future__ import annotations

ISSUE_TYPE_STORY = "story"
ISSUE_TYPE_BUG = "bug"
ISSUE_TYPE_TASK = "task"
ISSUE_TYPE_EPIC = "epic"

ISSUE_TYPE_CHOICES = (
    ISSUE_TYPE_STORY,
    ISSUE_TYPE_BUG,
    ISSUE_TYPE_TASK,
    ISSUE_TYPE_EPIC,
)

PRIORITY_CHOICES = ("low", "medium", "high", "critical")

STATUS_TODO = "todo"
STATUS_PROGRESS = "progress"
STATUS_DONE = "done"

# Status doubles as the kanban column key.
STATUS_CHOICES = (STATUS_TODO, STATUS_PROGRESS, STATUS_DONE)

USER_ROLE_CHOICES = ("trainer", "student")

DEFAULT_ISSUE_TYPE = ISSUE_TYPE_STORY
DEFAULT_PRIORITY = "medium"
DEFAULT_STATUS = STATUS_TODO


def normalize_choice(value: str | None, choices: tuple[str, ...], *, default: str | None = None) -> str | None:
    """Lowercase ``value`` and return it if it is one of ``choices``.

    Blank values fall back to ``default``. Anything else raises ``ValueError``
    so callers can turn it into their own validation failure.
    """

    if value is None or not str(value).strip():
        return default
    normalized = str(value).strip().lower()
    if normalized not in choices:
        raise ValueError(f"{normalized!r} is not one of: {', '.join(choices)}")
    return normalized


__all__ = [
    "DEFAULT_ISSUE_TYPE",
    "DEFAULT_PRIORITY",
    "DEFAULT_STATUS",
    "ISSUE_TYPE_BUG",
    "ISSUE_TYPE_CHOICES",
    "ISSUE_TYPE_EPIC",
    "ISSUE_TYPE_STORY",
    "ISSUE_TYPE_TASK",
    "PRIORITY_CHOICES",
    "STATUS_CHOICES",
    "STATUS_DONE",
    "STATUS_PROGRESS",
    "STATUS_TODO",
    "USER_ROLE_CHOICES",
    "normalize_choice",
]
