# -*- coding: utf-8 -*-
from datetime import date

import pytest
from sqlalchemy import select

from extensions.database import db
from models.project import Project, ProjectMember
from models.task import Task
from repositories.project_member_repository import ProjectMemberRepository
from services.project_service import ProjectService
from services.task_service import TaskService
from utils.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from utils.partial_update import ProjectUpdate


def test_create_project_inserts_owner_membership(make_user):
    owner = make_user()

    project = ProjectService.create(owner.id, "  Apollo  ", "Moon landing", start_date="2025-01-01")

    assert project.name == "Apollo"
    assert project.status == "planning"
    assert project.start_date == date(2025, 1, 1)
    member = ProjectMemberRepository.get_by_project_user(project.id, owner.id)
    assert member is not None
    assert member.role == "owner"


def test_create_project_is_atomic(make_user, monkeypatch):
    owner = make_user()

    def boom(**_kwargs):
        raise RuntimeError("membership insert failed")

    monkeypatch.setattr(ProjectMemberRepository, "create", staticmethod(boom))

    with pytest.raises(RuntimeError):
        ProjectService.create(owner.id, "Apollo", "Moon landing")

    assert db.session.execute(select(Project)).scalars().all() == []
    assert db.session.execute(select(ProjectMember)).scalars().all() == []


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"name": "", "description": "d"}, "Project name is required"),
        ({"name": "x" * 101, "description": "d"}, "Project name must be less than 100 characters"),
        ({"name": "ok", "description": ""}, "Project description is required"),
        ({"name": "ok", "description": "d", "status": "archived"}, "Invalid project status"),
        ({"name": "ok", "description": "d", "start_date": "not-a-date"}, "startDate must be an ISO date (YYYY-MM-DD)"),
    ],
)
def test_create_project_validation(make_user, kwargs, message):
    owner = make_user()

    with pytest.raises(ValidationError) as exc:
        ProjectService.create(owner.id, **kwargs)

    assert exc.value.message == message
    assert db.session.execute(select(Project)).scalars().all() == []


def test_list_projects_includes_owned_and_member_projects(make_user, make_project, add_member):
    alice, bob, carol = make_user(), make_user(), make_user()
    own = make_project(alice, name="Alice own")
    shared = make_project(bob, name="Shared")
    make_project(carol, name="Private")
    add_member(shared, alice)

    names = [p.name for p in ProjectService.list(alice.id)]

    assert names == ["Shared", "Alice own"]
    assert own.id in {p.id for p in ProjectService.list(alice.id)}


def test_get_project_denies_non_member_as_not_found(make_user, make_project):
    owner, stranger = make_user(), make_user()
    project = make_project(owner)

    with pytest.raises(AuthorizationError) as exc:
        ProjectService.get(stranger.id, project.id)
    assert exc.value.code == 404
    assert exc.value.message == "Project not found or access denied"

    with pytest.raises(AuthorizationError) as missing:
        ProjectService.get(owner.id, 99999)
    assert missing.value.message == exc.value.message


def test_update_project_owner_only(make_user, make_project, add_member):
    owner, member = make_user(), make_user()
    project = make_project(owner)
    add_member(project, member)

    with pytest.raises(AuthorizationError):
        ProjectService.update(member.id, project.id, ProjectUpdate(name="Hijacked"))

    updated = ProjectService.update(owner.id, project.id, ProjectUpdate(name="Artemis", status="active"))
    assert updated.name == "Artemis"
    assert updated.status == "active"
    assert updated.description == "Moon landing"


def test_update_project_requires_fields(make_user, make_project):
    owner = make_user()
    project = make_project(owner)

    with pytest.raises(ValidationError) as exc:
        ProjectService.update(owner.id, project.id, ProjectUpdate())
    assert exc.value.message == "No fields to update"


def test_update_project_checks_permission_before_validation(make_user, make_project):
    owner, stranger = make_user(), make_user()
    project = make_project(owner)

    with pytest.raises(AuthorizationError):
        ProjectService.update(stranger.id, project.id, ProjectUpdate())


def test_update_project_clears_dates_with_none(make_user, make_project):
    owner = make_user()
    project = make_project(owner, start_date="2025-03-01", end_date="2025-04-01")

    updated = ProjectService.update(owner.id, project.id, ProjectUpdate.from_payload({"endDate": None}))

    assert updated.end_date is None
    assert updated.start_date == date(2025, 3, 1)


def test_update_project_rejects_non_text_description(make_user, make_project):
    owner = make_user()
    project = make_project(owner)

    with pytest.raises(ValidationError) as exc:
        ProjectService.update(owner.id, project.id, ProjectUpdate(description={"x": 1}))

    assert exc.value.message == "description must be a string"
    assert db.session.get(Project, project.id).description == "Moon landing"


def test_update_project_rejects_end_before_start(make_user, make_project):
    owner = make_user()
    project = make_project(owner, start_date="2025-03-01")

    with pytest.raises(ValidationError):
        ProjectService.update(owner.id, project.id, ProjectUpdate(end_date="2025-02-01"))


def test_delete_project_cascades(make_user, make_project, add_member):
    owner, member = make_user(), make_user()
    project = make_project(owner)
    add_member(project, member)
    TaskService.create(owner.id, "Build rocket", project.id)

    with pytest.raises(AuthorizationError):
        ProjectService.delete(member.id, project.id)

    project_id = project.id
    ProjectService.delete(owner.id, project_id)

    assert db.session.get(Project, project_id) is None
    assert db.session.execute(select(Task)).scalars().all() == []
    assert db.session.execute(select(ProjectMember)).scalars().all() == []


def test_add_member_rules(make_user, make_project):
    owner, member, other = make_user(), make_user(), make_user()
    project = make_project(owner)

    added = ProjectService.add_member(owner.id, project.id, member.id, role="manager")
    assert added.role == "manager"

    with pytest.raises(ConflictError):
        ProjectService.add_member(owner.id, project.id, member.id)
    with pytest.raises(ValidationError):
        ProjectService.add_member(owner.id, project.id, other.id, role="owner")
    with pytest.raises(AuthorizationError):
        ProjectService.add_member(member.id, project.id, other.id)
    with pytest.raises(NotFoundError):
        ProjectService.add_member(owner.id, project.id, 99999)

    members = ProjectService.list_members(member.id, project.id)
    assert [m.user_id for m in members] == [owner.id, member.id]


def test_project_events_published(make_user, make_project, fake_redis):
    owner = make_user()
    project = make_project(owner)

    project_id = project.id
    ProjectService.update(owner.id, project_id, ProjectUpdate(status="active"))
    ProjectService.delete(owner.id, project_id)

    events = fake_redis.channel_messages(f"project:{project_id}")
    assert [e["type"] for e in events] == ["project_updated", "project_deleted"]
    assert events[0]["payload"]["updates"]["status"] == "active"


def test_events_can_be_disabled(app, make_user, make_project, fake_redis):
    app.config["EVENTS_ENABLED"] = False
    owner = make_user()
    project = make_project(owner)

    ProjectService.update(owner.id, project.id, ProjectUpdate(status="active"))

    assert fake_redis.published == []
