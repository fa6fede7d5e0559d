import pytest

from issueboard.core.errors import ValidationError
from issueboard.crud.comments import create_comment, list_comments_for_issue
from issueboard.crud.issues import create_issue


def test_comments_are_scoped_to_their_issue_oldest_first(store):
    issue = create_issue(store, {"title": "Chatty"})
    other = create_issue(store, {"title": "Quiet"})

    first = create_comment(store, {"issue_id": issue["id"], "comment_text": "first"})
    create_comment(store, {"issue_id": other["id"], "comment_text": "elsewhere"})
    second = create_comment(
        store,
        {
            "issue_id": issue["id"],
            "comment_text": "second",
            "action_taken": "Restarted the worker",
            "solution_summary": "Cache was stale",
            "created_by": "Ana",
        },
    )

    listed = list_comments_for_issue(store, issue["id"])
    assert [c["id"] for c in listed] == [first["id"], second["id"]]
    assert listed[1]["action_taken"] == "Restarted the worker"
    assert listed[1]["created_by"] == "Ana"
    assert listed[0]["action_taken"] is None


def test_comments_for_unknown_issue_is_empty(store):
    assert list_comments_for_issue(store, "missing") == []


def test_comment_may_reference_unknown_issue(store):
    comment = create_comment(store, {"issue_id": "orphan", "comment_text": "hello"})
    assert comment["created_at"] == comment["updated_at"]
    assert list_comments_for_issue(store, "orphan")[0]["id"] == comment["id"]


@pytest.mark.parametrize(
    "payload",
    [
        {"comment_text": "no issue"},
        {"issue_id": "abc"},
        {"issue_id": "abc", "comment_text": "   "},
    ],
)
def test_comment_requires_issue_and_text(store, payload):
    with pytest.raises(ValidationError):
        create_comment(store, payload)
    assert list_comments_for_issue(store, "abc") == []


def test_comment_text_rejects_control_characters(store):
    with pytest.raises(ValidationError):
        create_comment(store, {"issue_id": "abc", "comment_text": "null \x00 byte"})
    assert list_comments_for_issue(store, "abc") == []
