"""Async client data layer for the IssueBoard API."""

from __future__ import annotations

from .api import IssueBoardApi
from .cache import QueryCache
from .data import IssueBoardClient
from .errors import ApiError, BackendTimeoutError, BackendUnavailableError, ClientError
from .models import Comment, Issue, IssueDraft, Project
from .mutations import Mutation, MutationState, Notification

__all__ = [
    "ApiError",
    "BackendTimeoutError",
    "BackendUnavailableError",
    "ClientError",
    "Comment",
    "Issue",
    "IssueBoardApi",
    "IssueBoardClient",
    "IssueDraft",
    "Mutation",
    "MutationState",
    "Notification",
    "Project",
    "QueryCache",
]
