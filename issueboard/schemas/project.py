"""Pydantic schemas that describe project payloads for the API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProjectCreate(BaseModel):
    name: str
    code: str
    description: Optional[str] = None
    user_role: Optional[str] = None

class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    description: Optional[str] = None
    user_role: Optional[str] = None
    created_at: str
    updated_at: str
