"""Client data layer: caching, retries, timeouts and mutation side effects."""

import asyncio

import httpx
import pytest

from issueboard import create_app, prepare_store
from issueboard.client import (
    ApiError,
    BackendTimeoutError,
    BackendUnavailableError,
    IssueBoardApi,
    IssueBoardClient,
    IssueDraft,
    MutationState,
    QueryCache,
)
from issueboard.storage import SpreadsheetStore

BASE_URL = "http://testserver/api"


def _issue_row(issue_id="i1", title="Sample", status="todo", **extra):
    row = {
        "id": issue_id,
        "title": title,
        "type": "story",
        "priority": "medium",
        "status": status,
        "created_at": "2024-05-01T09:00:00.000000Z",
        "updated_at": "2024-05-01T09:00:00.000000Z",
        "labels": None,
        "attachments": None,
    }
    row.update(extra)
    return row


def _mock_client(settings, handler, notes=None, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    api = IssueBoardApi(BASE_URL, client=http, settings=settings)
    notify = notes.append if notes is not None else None
    return IssueBoardClient(api, notify=notify, settings=settings, **kwargs), http


def test_reads_are_cached_until_a_write_invalidates(settings):
    calls = {"GET": 0, "POST": 0}

    def handler(request):
        calls[request.method] += 1
        if request.method == "POST":
            return httpx.Response(200, json=_issue_row("i2", "New"))
        return httpx.Response(200, json=[_issue_row(labels="UI,Login")])

    async def scenario():
        client, http = _mock_client(settings, handler, notes=[])
        first = await client.issues()
        again = await client.issues()
        assert first is again
        assert first[0].labels == {"UI", "Login"}
        assert calls["GET"] == 1

        await client.create_issue(IssueDraft(title="New"))
        await client.issues()
        assert calls["GET"] == 2
        await http.aclose()

    asyncio.run(scenario())


def test_stale_entries_are_refetched(settings):
    now = {"t": 0.0}
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=[])

    async def scenario():
        cache = QueryCache(stale_seconds=30, clock=lambda: now["t"])
        client, http = _mock_client(settings, handler, cache=cache)
        await client.projects()
        now["t"] = 29.0
        await client.projects()
        now["t"] = 31.0
        await client.projects()
        await http.aclose()

    asyncio.run(scenario())
    assert calls == ["/api/projects", "/api/projects"]


def test_reads_retry_server_errors(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503, json={"code": "storage_error", "message": "busy"})
        return httpx.Response(200, json=[_issue_row()])

    async def scenario():
        client, http = _mock_client(settings, handler, read_retries=2, retry_delay=0)
        issues = await client.issues()
        await http.aclose()
        return issues

    issues = asyncio.run(scenario())
    assert len(attempts) == 3
    assert issues[0].id == "i1"


def test_client_errors_are_not_retried(settings):
    attempts = []

    def handler(request):
        attempts.append(1)
        return httpx.Response(404, json={"code": "not_found", "message": "Issue not found"})

    async def scenario():
        client, http = _mock_client(settings, handler, read_retries=2, retry_delay=0)
        try:
            await client.comments("x")
        finally:
            await http.aclose()

    with pytest.raises(ApiError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.is_not_found
    assert excinfo.value.code == "not_found"
    assert len(attempts) == 1


def test_read_timeout_surfaces_after_retries(settings):
    attempts = []

    def handler(request):
        attempts.append(request.url.path)
        raise httpx.ReadTimeout("timed out", request=request)

    async def scenario():
        client, http = _mock_client(settings, handler, read_retries=1, retry_delay=0)
        try:
            await client.issues()
        finally:
            await http.aclose()

    with pytest.raises(BackendTimeoutError):
        asyncio.run(scenario())
    assert len(attempts) == 2


def test_connection_refused_is_backend_unavailable(settings):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async def scenario():
        client, http = _mock_client(settings, handler, read_retries=0)
        try:
            await client.projects()
        finally:
            await http.aclose()

    with pytest.raises(BackendUnavailableError):
        asyncio.run(scenario())


def test_empty_issue_id_skips_comment_fetch(settings):
    def handler(request):
        raise AssertionError("no request expected")

    async def scenario():
        client, http = _mock_client(settings, handler)
        result = await client.comments("")
        await http.aclose()
        return result

    assert asyncio.run(scenario()) == []


def test_failed_write_notifies_and_is_not_retried(settings):
    attempts = []
    notes = []

    def handler(request):
        attempts.append(1)
        return httpx.Response(422, json={"code": "validation_error", "message": "title is required"})

    async def scenario():
        client, http = _mock_client(settings, handler, notes=notes)
        try:
            with pytest.raises(ApiError):
                await client.create_issue({"title": "x"})
            return client.create_issue.state
        finally:
            await http.aclose()

    state = asyncio.run(scenario())
    assert state is MutationState.ERROR
    assert len(attempts) == 1
    assert notes[0].variant == "destructive"
    assert notes[0].description == "Failed to create defect. Please try again."


def test_full_workflow_against_the_app(settings):
    store = SpreadsheetStore(settings.DATA_DIR)
    app = create_app(settings, store)
    prepare_store(store, settings)
    notes = []

    async def scenario():
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
        api = IssueBoardApi(BASE_URL, client=http, settings=settings)
        client = IssueBoardClient(api, notify=notes.append, settings=settings)
        try:
            projects = await client.projects()
            assert {p.code for p in projects} == {"SLP", "TMS", "TCP"}

            created = await client.create_issue(
                IssueDraft(title="Upload hangs", type="bug", labels={"upload", "a,b"})
            )
            assert created.labels == {"upload", "a,b"}
            assert created.raised_date is not None

            await client.update_issue(created.id, {"status": "progress", "assignee": "Priya"})
            board = await client.board()
            assert [len(column.issues) for column in board] == [0, 1, 0]
            stats = await client.stats()
            assert stats["in_progress"] == 1
            assert stats["team_members"] == 1

            assert await client.comments(created.id) == []
            await client.create_comment(created.id, "Reproduced on staging", created_by="Ana")
            comments = await client.comments(created.id)
            assert comments[0].comment_text == "Reproduced on staging"
            assert comments[0].model_dump(by_alias=True)["createdBy"] == "Ana"

            await client.delete_issue(created.id)
            assert await client.issues() == []
        finally:
            await client.aclose()
            await http.aclose()

    asyncio.run(scenario())
    assert [note.title for note in notes] == ["Defect created", "Comment added", "Issue deleted"]


def test_unparseable_stored_dates_do_not_break_reads(settings):
    def handler(request):
        return httpx.Response(
            200,
            json=[
                _issue_row("i1", closed_date="next week", raised_date="2024-05-01T08:00:00Z"),
                _issue_row("i2", status="done"),
            ],
        )

    async def scenario():
        client, http = _mock_client(settings, handler)
        try:
            return await client.issues(), await client.stats()
        finally:
            await http.aclose()

    issues, stats = asyncio.run(scenario())
    assert [issue.id for issue in issues] == ["i1", "i2"]
    assert issues[0].closed_date is None
    assert issues[0].raised_date.year == 2024
    assert stats["completed"] == 1
