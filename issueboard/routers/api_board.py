"""Read-only board and dashboard views computed from the issue list."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..crud.issues import list_issues
from ..deps.store import get_store
from ..schemas.board import BoardColumnOut, BoardOut, StatsOut
from ..schemas.issue import IssueOut
from ..services.board import build_board, dashboard_stats, recent_issues
from ..storage.base import RecordStore

router = APIRouter(prefix="/api", tags=["board"])


@router.get("/board", response_model=BoardOut)
def api_board(q: str | None = Query(default=None, max_length=200), store: RecordStore = Depends(get_store)):
    issues = [IssueOut.model_validate(issue) for issue in list_issues(store)]
    columns = build_board(issues, q)
    return BoardOut(
        query=(q or "").strip(),
        total=sum(len(column.issues) for column in columns),
        columns=[
            BoardColumnOut(id=column.id, title=column.title, status=column.status, issues=column.issues)
            for column in columns
        ],
    )


@router.get("/stats", response_model=StatsOut)
def api_stats(store: RecordStore = Depends(get_store)):
    issues = [IssueOut.model_validate(issue) for issue in list_issues(store)]
    return StatsOut(**dashboard_stats(issues), recent=recent_issues(issues))
