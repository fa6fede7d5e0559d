"""Request-scoped access to the store and settings chosen at start-up."""

from __future__ import annotations

from fastapi import Request

from ..core.config import AppSettings
from ..storage.base import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings
