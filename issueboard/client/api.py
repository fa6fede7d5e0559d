"""Thin async wrapper over the IssueBoard HTTP API.

Reads are bounded by ``timeout`` seconds; a read that runs out of time raises
``BackendTimeoutError`` and a refused connection raises
``BackendUnavailableError``. Writes are sent without a timeout: once a write
is on the wire it is never abandoned by this layer.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.config import AppSettings, get_settings
from .errors import ApiError, BackendTimeoutError, BackendUnavailableError, ClientError

logger = logging.getLogger(__name__)


class IssueBoardApi:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = settings.CLIENT_TIMEOUT_SECONDS if timeout is None else timeout
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "IssueBoardApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *(quote(part, safe="") for part in parts)])

    async def _request(
        self,
        method: str,
        *parts: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
        read: bool = False,
    ) -> Any:
        url = self._url(*parts)
        timeout = httpx.Timeout(self.timeout) if read else httpx.Timeout(None)
        try:
            response = await self._client.request(method, url, json=json, params=params, timeout=timeout)
        except httpx.TimeoutException as exc:
            logger.warning("Timed out after %ss on %s %s", self.timeout, method, url)
            raise BackendTimeoutError(
                f"Backend server not responding. Make sure the API is running at {self.base_url}"
            ) from exc
        except httpx.ConnectError as exc:
            logger.warning("Backend unreachable on %s %s", method, url)
            raise BackendUnavailableError(f"Cannot connect to backend at {self.base_url}") from exc
        except httpx.HTTPError as exc:
            raise ClientError(f"{method} {url} failed: {exc}") from exc
        if response.is_error:
            raise ApiError.from_response(response)
        return response.json()

    # ---------- projects ----------
    async def get_projects(self) -> list[dict[str, Any]]:
        return await self._request("GET", "projects", read=True)

    async def create_project(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "projects", json=payload)

    # ---------- issues ----------
    async def get_issues(self) -> list[dict[str, Any]]:
        return await self._request("GET", "issues", read=True)

    async def get_issue(self, issue_id: str) -> dict[str, Any]:
        return await self._request("GET", "issues", issue_id, read=True)

    async def create_issue(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "issues", json=payload)

    async def update_issue(self, issue_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", "issues", issue_id, json=updates)

    async def delete_issue(self, issue_id: str) -> dict[str, Any]:
        return await self._request("DELETE", "issues", issue_id)

    # ---------- comments ----------
    async def get_comments(self, issue_id: str) -> list[dict[str, Any]]:
        return await self._request("GET", "comments", issue_id, read=True)

    async def create_comment(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "comments", json=payload)

    # ---------- board ----------
    async def get_board(self, query: str | None = None) -> dict[str, Any]:
        params = {"q": query} if query else None
        return await self._request("GET", "board", params=params, read=True)

    async def get_stats(self) -> dict[str, Any]:
        return await self._request("GET", "stats", read=True)
