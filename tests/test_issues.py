"""Record service behaviour for issues, run against every storage backend."""

import pytest

from issueboard.core.clock import parse_timestamp
from issueboard.core.errors import NotFoundError, ValidationError
from issueboard.crud.comments import create_comment, list_comments_for_issue
from issueboard.crud.issues import (
    DELETED_MESSAGE,
    create_issue,
    delete_issue,
    get_issue,
    list_issues,
    update_issue,
)


def test_create_issue_applies_defaults_and_stamps(store):
    issue = create_issue(store, {"title": "Login fails"})

    assert issue["id"]
    assert issue["type"] == "story"
    assert issue["priority"] == "medium"
    assert issue["status"] == "todo"
    assert issue["created_at"] == issue["updated_at"] == issue["status_date"]
    assert issue["raised_date"] == issue["created_at"]

    stored = get_issue(store, issue["id"])
    assert stored["title"] == "Login fails"
    assert stored["labels"] == []


def test_create_issue_ids_are_unique(store):
    ids = {create_issue(store, {"title": f"Issue {n}"})["id"] for n in range(5)}
    assert len(ids) == 5


def test_create_issue_keeps_supplied_raised_date(store):
    issue = create_issue(store, {"title": "Old defect", "raised_date": "2024-01-01T09:00:00.000000Z"})
    assert issue["raised_date"] == "2024-01-01T09:00:00.000000Z"
    assert issue["created_at"] != issue["raised_date"]


@pytest.mark.parametrize("title", [None, "", "   "])
def test_create_issue_requires_title(store, title):
    payload = {"description": "no title"}
    if title is not None:
        payload["title"] = title

    with pytest.raises(ValidationError):
        create_issue(store, payload)

    assert list_issues(store) == []


def test_create_issue_rejects_unknown_status(store):
    with pytest.raises(ValidationError) as excinfo:
        create_issue(store, {"title": "Bad", "status": "blocked"})
    assert excinfo.value.details == {"field": "status"}
    assert list_issues(store) == []


def test_list_issues_newest_first(store):
    first = create_issue(store, {"title": "First"})
    second = create_issue(store, {"title": "Second"})

    listed = [issue["id"] for issue in list_issues(store)]
    assert listed == [second["id"], first["id"]]


def test_get_missing_issue_raises_not_found(store):
    with pytest.raises(NotFoundError) as excinfo:
        get_issue(store, "does-not-exist")
    assert excinfo.value.details == {"id": "does-not-exist"}


def test_moving_issue_to_progress_column(store):
    issue = create_issue(store, {"title": "Drag me", "priority": "high"})

    moved = update_issue(store, issue["id"], {"status": "progress"})

    assert moved["status"] == "progress"
    assert moved["priority"] == "high"
    assert moved["title"] == "Drag me"
    assert moved["created_at"] == issue["created_at"]
    assert parse_timestamp(moved["updated_at"]) > parse_timestamp(issue["updated_at"])
    assert moved["status_date"] == moved["updated_at"]
    assert get_issue(store, issue["id"])["status"] == "progress"


def test_update_without_status_change_keeps_status_date(store):
    issue = create_issue(store, {"title": "Stable"})

    updated = update_issue(store, issue["id"], {"assignee": "Priya", "status": "todo"})

    assert updated["assignee"] == "Priya"
    assert updated["status_date"] == issue["status_date"]
    assert parse_timestamp(updated["updated_at"]) > parse_timestamp(issue["updated_at"])


def test_rapid_updates_move_updated_at_forward(store):
    issue = create_issue(store, {"title": "Busy"})
    stamps = [issue["updated_at"]]
    for n in range(3):
        stamps.append(update_issue(store, issue["id"], {"description": f"rev {n}"})["updated_at"])

    parsed = [parse_timestamp(stamp) for stamp in stamps]
    assert parsed == sorted(parsed)
    assert len(set(parsed)) == len(parsed)


def test_update_ignores_server_managed_fields(store):
    issue = create_issue(store, {"title": "Pinned"})

    updated = update_issue(
        store,
        issue["id"],
        {"id": "hijack", "created_at": "2000-01-01T00:00:00Z", "title": "Renamed"},
    )

    assert updated["id"] == issue["id"]
    assert updated["created_at"] == issue["created_at"]
    assert updated["title"] == "Renamed"


def test_update_rejects_blank_title(store):
    issue = create_issue(store, {"title": "Keep me"})
    with pytest.raises(ValidationError):
        update_issue(store, issue["id"], {"title": "  "})
    assert get_issue(store, issue["id"])["title"] == "Keep me"


def test_update_missing_issue_raises_not_found(store):
    with pytest.raises(NotFoundError):
        update_issue(store, "ghost", {"status": "done"})


def test_labels_round_trip_as_a_set(store):
    issue = create_issue(store, {"title": "Tagged", "labels": "UI, Login,UI"})

    stored = get_issue(store, issue["id"])
    assert set(stored["labels"]) == {"UI", "Login"}

    cleared = update_issue(store, issue["id"], {"labels": None})
    assert cleared["labels"] == []


def test_labels_keep_commas_inside_an_element(store):
    issue = create_issue(store, {"title": "Commas", "attachments": ["shot,1.png", "log.txt"]})
    assert get_issue(store, issue["id"])["attachments"] == ["shot,1.png", "log.txt"]


def test_delete_issue_returns_ack(store):
    issue = create_issue(store, {"title": "Short lived"})

    assert delete_issue(store, issue["id"]) == {"message": DELETED_MESSAGE}
    with pytest.raises(NotFoundError):
        get_issue(store, issue["id"])


def test_delete_missing_issue_leaves_collection_untouched(store):
    create_issue(store, {"title": "Survivor"})

    with pytest.raises(NotFoundError):
        delete_issue(store, "nope")

    assert len(list_issues(store)) == 1


def test_delete_keeps_comments_unless_cascading(store):
    kept = create_issue(store, {"title": "Keeps comments"})
    purged = create_issue(store, {"title": "Drops comments"})
    create_comment(store, {"issue_id": kept["id"], "comment_text": "still here"})
    create_comment(store, {"issue_id": purged["id"], "comment_text": "going away"})

    delete_issue(store, kept["id"])
    delete_issue(store, purged["id"], cascade_comments=True)

    assert len(list_comments_for_issue(store, kept["id"])) == 1
    assert list_comments_for_issue(store, purged["id"]) == []


@pytest.mark.parametrize("field", ["title", "description", "labels"])
def test_control_characters_are_rejected(store, field):
    payload = {"title": "Fine"}
    payload[field] = "ring \x07 bell"

    with pytest.raises(ValidationError) as excinfo:
        create_issue(store, payload)

    assert excinfo.value.details == {"field": field}
    assert list_issues(store) == []


def test_tabs_and_newlines_are_allowed(store):
    issue = create_issue(store, {"title": "Steps", "steps_to_reproduce": "1. open\n2.\tclick"})
    assert get_issue(store, issue["id"])["steps_to_reproduce"] == "1. open\n2.\tclick"


def test_dates_are_validated_and_normalised(store):
    issue = create_issue(store, {"title": "Dated", "raised_date": "2024-03-05T10:15:00+02:00"})
    assert issue["raised_date"] == "2024-03-05T08:15:00.000000Z"

    with pytest.raises(ValidationError) as excinfo:
        update_issue(store, issue["id"], {"closed_date": "next week"})
    assert excinfo.value.details == {"field": "closed_date"}
    assert get_issue(store, issue["id"])["closed_date"] is None

    closed = update_issue(store, issue["id"], {"closed_date": ""})
    assert closed["closed_date"] is None
