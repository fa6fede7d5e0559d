"""Client data layer: cached reads, retried fetches and tracked mutations.

Reads are served from ``QueryCache`` while fresh and otherwise refetched with
a small bounded retry. Every successful write invalidates the cache entries
it affects, so the next read always reflects the write. Writes are never
retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from ..core.config import AppSettings, get_settings
from ..services.board import BoardColumn, build_board, dashboard_stats
from .api import IssueBoardApi
from .cache import MISSING, QueryCache, QueryKey
from .errors import ApiError, ClientError
from .models import Comment, Issue, IssueDraft, Project, comment_to_wire, issue_fields_to_wire
from .mutations import Mutation, Notification, Notifier, log_notification

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROJECTS_KEY: QueryKey = ("projects",)
ISSUES_KEY: QueryKey = ("issues",)


def comments_key(issue_id: str) -> QueryKey:
    return ("comments", issue_id)


def _retryable(exc: ClientError) -> bool:
    # Client mistakes (4xx) will fail the same way on every attempt.
    return not (isinstance(exc, ApiError) and exc.status_code < 500)


class IssueBoardClient:
    def __init__(
        self,
        api: IssueBoardApi | None = None,
        *,
        cache: QueryCache | None = None,
        read_retries: int | None = None,
        retry_delay: float | None = None,
        notify: Notifier | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api = api or IssueBoardApi(settings=settings)
        self.cache = cache or QueryCache(stale_seconds=settings.CLIENT_STALE_SECONDS)
        self.read_retries = settings.CLIENT_READ_RETRIES if read_retries is None else read_retries
        self.retry_delay = settings.CLIENT_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
        self.notify = notify or log_notification

        self.create_issue: Mutation[Issue] = Mutation(
            self._create_issue,
            on_success=self._issue_created,
            on_error=self._failed("Failed to create defect. Please try again."),
        )
        self.update_issue: Mutation[Issue] = Mutation(
            self._update_issue,
            on_success=lambda result, args, kwargs: self.cache.invalidate(*ISSUES_KEY),
            on_error=self._failed("Failed to update issue. Please try again."),
        )
        self.delete_issue: Mutation[None] = Mutation(
            self._delete_issue,
            on_success=self._issue_deleted,
            on_error=self._failed("Failed to delete issue. Please try again."),
        )
        self.create_comment: Mutation[Comment] = Mutation(
            self._create_comment,
            on_success=self._comment_created,
            on_error=self._failed("Failed to add comment. Please try again."),
        )

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "IssueBoardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---------- reads ----------
    async def _query(self, key: QueryKey, fetch: Callable[[], Awaitable[Any]], parse: Callable[[Any], T]) -> T:
        cached = self.cache.get(key)
        if cached is not MISSING:
            return cached
        attempt = 0
        while True:
            try:
                raw = await fetch()
                break
            except ClientError as exc:
                if attempt >= self.read_retries or not _retryable(exc):
                    raise
                attempt += 1
                logger.warning("Retrying %s after %s (attempt %d)", key, exc, attempt)
                if self.retry_delay:
                    await asyncio.sleep(self.retry_delay)
        value = parse(raw)
        self.cache.set(key, value)
        return value

    async def projects(self) -> list[Project]:
        return await self._query(
            PROJECTS_KEY,
            self.api.get_projects,
            lambda rows: [Project.model_validate(row) for row in rows],
        )

    async def issues(self) -> list[Issue]:
        return await self._query(
            ISSUES_KEY,
            self.api.get_issues,
            lambda rows: [Issue.model_validate(row) for row in rows],
        )

    async def comments(self, issue_id: str) -> list[Comment]:
        if not issue_id:
            return []
        return await self._query(
            comments_key(issue_id),
            lambda: self.api.get_comments(issue_id),
            lambda rows: [Comment.model_validate(row) for row in rows],
        )

    async def board(self, query: str | None = None) -> list[BoardColumn]:
        return build_board(await self.issues(), query)

    async def stats(self) -> dict[str, int]:
        return dashboard_stats(await self.issues())

    # ---------- writes ----------
    async def _create_issue(self, draft: IssueDraft | Mapping[str, Any]) -> Issue:
        if not isinstance(draft, IssueDraft):
            draft = IssueDraft.model_validate(draft)
        created = await self.api.create_issue(draft.to_wire())
        return Issue.model_validate(created)

    async def _update_issue(self, issue_id: str, updates: Mapping[str, Any]) -> Issue:
        updated = await self.api.update_issue(issue_id, issue_fields_to_wire(updates))
        return Issue.model_validate(updated)

    async def _delete_issue(self, issue_id: str) -> None:
        await self.api.delete_issue(issue_id)

    async def _create_comment(
        self,
        issue_id: str,
        comment_text: str,
        *,
        action_taken: Optional[str] = None,
        solution_summary: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Comment:
        payload = comment_to_wire(
            issue_id,
            comment_text,
            action_taken=action_taken,
            solution_summary=solution_summary,
            created_by=created_by,
        )
        created = await self.api.create_comment(payload)
        return Comment.model_validate(created)

    # ---------- mutation callbacks ----------
    def _issue_created(self, result: Issue, args: tuple, kwargs: dict) -> None:
        self.cache.invalidate(*ISSUES_KEY)
        self.notify(Notification("Defect created", "Your defect has been reported successfully."))

    def _issue_deleted(self, result: None, args: tuple, kwargs: dict) -> None:
        issue_id = args[0] if args else kwargs.get("issue_id")
        self.cache.invalidate(*ISSUES_KEY)
        if issue_id:
            self.cache.invalidate(*comments_key(issue_id))
        self.notify(Notification("Issue deleted", "The issue has been deleted successfully."))

    def _comment_created(self, result: Comment, args: tuple, kwargs: dict) -> None:
        self.cache.invalidate(*comments_key(result.issue_id))
        self.notify(Notification("Comment added", "Your comment has been added successfully."))

    def _failed(self, description: str) -> Callable[[Exception, tuple, dict], None]:
        def handler(exc: Exception, args: tuple, kwargs: dict) -> None:
            logger.error("%s (%s)", description, exc)
            self.notify(Notification("Error", description, variant="destructive"))

        return handler


__all__ = ["ISSUES_KEY", "PROJECTS_KEY", "IssueBoardClient", "comments_key"]
