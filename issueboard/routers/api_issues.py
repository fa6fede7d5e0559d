from __future__ import annotations

from fastapi import APIRouter, Depends

from ..core.config import AppSettings
from ..crud.issues import create_issue, delete_issue, get_issue, list_issues, update_issue
from ..deps.store import get_app_settings, get_store
from ..schemas.issue import DeleteAck, IssueCreate, IssueOut, IssueUpdate
from ..storage.base import RecordStore

router = APIRouter(prefix="/api/issues", tags=["issues"])


@router.get("", response_model=list[IssueOut])
def api_list_issues(store: RecordStore = Depends(get_store)):
    return [IssueOut.model_validate(issue) for issue in list_issues(store)]


@router.post("", response_model=IssueOut)
def api_create_issue(payload: IssueCreate, store: RecordStore = Depends(get_store)):
    issue = create_issue(store, payload.model_dump(exclude_unset=True))
    return IssueOut.model_validate(issue)


@router.get("/{issue_id}", response_model=IssueOut)
def api_get_issue(issue_id: str, store: RecordStore = Depends(get_store)):
    return IssueOut.model_validate(get_issue(store, issue_id))


@router.put("/{issue_id}", response_model=IssueOut)
def api_update_issue(issue_id: str, payload: IssueUpdate, store: RecordStore = Depends(get_store)):
    issue = update_issue(store, issue_id, payload.model_dump(exclude_unset=True))
    return IssueOut.model_validate(issue)


@router.delete("/{issue_id}", response_model=DeleteAck)
def api_delete_issue(
    issue_id: str,
    store: RecordStore = Depends(get_store),
    settings: AppSettings = Depends(get_app_settings),
):
    return delete_issue(store, issue_id, cascade_comments=settings.CASCADE_COMMENT_DELETE)
