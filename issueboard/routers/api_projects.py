"""Beginner-friendly overview for this module.

WHAT: Handles the logic defined in "issueboard/routers/api_projects.py" for the IssueBoard app.
WHEN: Invoked when its functions or classes are imported and called.
WHY: Provides supporting behaviour so the service runs smoothly.
HOW: Read the inline comments and docstrings below for the step-by-step flow.

File: issueboard/routers/api_projects.py
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..crud.projects import create_project, list_projects
from ..deps.store import get_store
from ..schemas.project import ProjectCreate, ProjectOut
from ..storage.base import RecordStore

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[ProjectOut])
def api_list_projects(store: RecordStore = Depends(get_store)):
    return [ProjectOut.model_validate(project) for project in list_projects(store)]


@router.post("", response_model=ProjectOut)
def api_create_project(payload: ProjectCreate, store: RecordStore = Depends(get_store)):
    project = create_project(store, payload.model_dump(exclude_unset=True))
    return ProjectOut.model_validate(project)
