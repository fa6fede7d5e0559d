from __future__ import annotations

from typing import Any

import httpx


class ClientError(Exception):
    """Generic failure talking to the IssueBoard API."""


class BackendUnavailableError(ClientError):
    """The backend could not be reached at all."""


class BackendTimeoutError(BackendUnavailableError):
    """A read did not complete within the configured timeout."""


class ApiError(ClientError):
    """The backend answered with an error status."""

    def __init__(self, status_code: int, message: str, *, code: str | None = None, details: Any = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_validation_error(self) -> bool:
        return self.status_code in (400, 422)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        code = None
        details = None
        message = response.reason_phrase or "Request failed"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = body.get("code")
            details = body.get("details")
            message = body.get("message") or body.get("error") or body.get("detail") or message
        elif response.text:
            message = response.text
        return cls(response.status_code, str(message), code=code, details=details)
