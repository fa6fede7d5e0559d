"""Tests for project listing, creation and the first-boot seed."""

import pytest

from issueboard.core.errors import ValidationError
from issueboard.crud.projects import DEFAULT_PROJECTS, create_project, ensure_seeded, list_projects


def test_seed_writes_defaults_once(store):
    assert ensure_seeded(store) is True
    assert ensure_seeded(store) is False

    projects = list_projects(store)
    assert len(projects) == len(DEFAULT_PROJECTS)
    assert {p["code"] for p in projects} == {"SLP", "TMS", "TCP"}
    roles = {p["code"]: p["user_role"] for p in projects}
    assert roles == {"SLP": "student", "TMS": "trainer", "TCP": None}


def test_seed_skips_when_projects_exist(store):
    create_project(store, {"name": "Existing", "code": "EX"})

    assert ensure_seeded(store) is False
    assert [p["code"] for p in list_projects(store)] == ["EX"]


def test_projects_are_ordered_by_name(store):
    create_project(store, {"name": "zeta", "code": "Z"})
    create_project(store, {"name": "Alpha", "code": "A"})
    create_project(store, {"name": "beta", "code": "B"})

    assert [p["name"] for p in list_projects(store)] == ["Alpha", "beta", "zeta"]


def test_create_project_normalises_code_and_role(store):
    project = create_project(
        store,
        {"name": "  Mobile App ", "code": "mob", "user_role": "Trainer", "description": ""},
    )

    assert project["name"] == "Mobile App"
    assert project["code"] == "MOB"
    assert project["user_role"] == "trainer"
    assert project["description"] is None
    assert project["created_at"] == project["updated_at"]


def test_create_project_rejects_duplicate_code(store):
    create_project(store, {"name": "One", "code": "DUP"})

    with pytest.raises(ValidationError):
        create_project(store, {"name": "Two", "code": "dup"})

    assert len(list_projects(store)) == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"code": "NONAME"},
        {"name": "No code"},
        {"name": "Bad role", "code": "BR", "user_role": "admin"},
    ],
)
def test_create_project_validation(store, payload):
    with pytest.raises(ValidationError):
        create_project(store, payload)
    assert list_projects(store) == []
