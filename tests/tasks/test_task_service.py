# -*- coding: utf-8 -*-
from datetime import datetime

import pytest
from sqlalchemy import select

import models.mixins as mixins
from extensions.database import db
from models.task import Task
from services.task_service import TaskService
from utils.exceptions import AuthorizationError, ValidationError
from utils.partial_update import TaskUpdate


@pytest.fixture
def team(make_user, make_project, add_member):
    owner, member, outsider = make_user(username="owner"), make_user(username="member"), make_user(username="outsider")
    project = make_project(owner, name="Apollo")
    add_member(project, member)
    return {"owner": owner, "member": member, "outsider": outsider, "project": project}


def test_create_then_get_round_trip(team):
    owner, project = team["owner"], team["project"]

    created = TaskService.create(
        owner.id, "Design capsule", project.id,
        description="Heat shield first",
        status="in_progress",
        priority="high",
        tags=["design", "capsule", "design"],
    )
    fetched = TaskService.get(owner.id, created.id).to_dict(detail=True)

    assert fetched["title"] == "Design capsule"
    assert fetched["description"] == "Heat shield first"
    assert fetched["status"] == "in_progress"
    assert fetched["priority"] == "high"
    assert fetched["tags"] == ["design", "capsule"]
    assert fetched["reporterId"] == owner.id
    assert fetched["projectName"] == "Apollo"
    assert fetched["reporter"]["username"] == "owner"


def test_create_defaults(team):
    task = TaskService.create(team["member"].id, "Write docs", team["project"].id)

    assert task.status == "todo"
    assert task.priority == "medium"
    assert task.tags == []
    assert task.assignee_id is None


def test_create_by_outsider_is_forbidden(team):
    with pytest.raises(AuthorizationError) as exc:
        TaskService.create(team["outsider"].id, "Sneaky", team["project"].id)

    assert exc.value.code == 403
    assert exc.value.message == "No permission to create tasks in this project"
    assert db.session.execute(select(Task)).scalars().all() == []


def test_create_with_non_member_assignee_writes_nothing(team):
    with pytest.raises(ValidationError) as exc:
        TaskService.create(team["owner"].id, "Fuel", team["project"].id, assignee_id=team["outsider"].id)

    assert exc.value.message == "Assignee must be a member of the project"
    assert db.session.execute(select(Task)).scalars().all() == []


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"title": ""}, "Task title is required"),
        ({"title": "x" * 201}, "Task title must be less than 200 characters"),
        ({"title": "ok", "status": "blocked"}, "Invalid task status"),
        ({"title": "ok", "priority": "critical"}, "Invalid task priority"),
        ({"title": "ok", "estimated_hours": -1}, "estimatedHours must be a non-negative integer"),
        ({"title": "ok", "description": {"x": 1}}, "description must be a string"),
    ],
)
def test_create_validation(team, kwargs, message):
    with pytest.raises(ValidationError) as exc:
        TaskService.create(team["owner"].id, project_id=team["project"].id, **kwargs)
    assert exc.value.message == message


def test_get_task_for_non_member_then_member(team, add_member):
    task = TaskService.create(team["owner"].id, "Launch", team["project"].id)
    outsider = team["outsider"]

    with pytest.raises(AuthorizationError) as exc:
        TaskService.get(outsider.id, task.id)
    assert exc.value.code == 404
    assert exc.value.message == "Task not found or access denied"

    add_member(team["project"], outsider)

    assert TaskService.get(outsider.id, task.id).to_dict(detail=True)["projectName"] == "Apollo"


def test_empty_update_is_rejected_without_write(team):
    task = TaskService.create(team["owner"].id, "Launch", team["project"].id)
    before = task.updated_at

    with pytest.raises(ValidationError) as exc:
        TaskService.update(team["owner"].id, task.id, TaskUpdate())

    assert exc.value.message == "No fields to update"
    assert db.session.get(Task, task.id).updated_at == before



def test_update_rejects_non_text_description(team):
    task = TaskService.create(team["owner"].id, "Launch", team["project"].id, description="first")

    with pytest.raises(ValidationError) as exc:
        TaskService.update(team["owner"].id, task.id, TaskUpdate(description=["not", "text"]))
    assert exc.value.message == "description must be a string"
    assert db.session.get(Task, task.id).description == "first"

    cleared = TaskService.update(team["owner"].id, task.id, TaskUpdate(description=None))
    assert cleared.description is None

def test_update_applies_only_provided_fields(team):
    owner = team["owner"]
    task = TaskService.create(owner.id, "Launch", team["project"].id, description="T-10", priority="low")

    updated = TaskService.update(owner.id, task.id, TaskUpdate.from_payload({
        "status": "in_review",
        "actualHours": 3,
    }))

    assert updated.status == "in_review"
    assert updated.actual_hours == 3
    assert updated.description == "T-10"
    assert updated.priority == "low"


def test_update_by_assignee_and_outsider(team, add_member):
    owner, member, outsider = team["owner"], team["member"], team["outsider"]
    task = TaskService.create(owner.id, "Launch", team["project"].id, assignee_id=member.id)

    assert TaskService.update(member.id, task.id, TaskUpdate(priority="urgent")).priority == "urgent"
    with pytest.raises(AuthorizationError):
        TaskService.update(outsider.id, task.id, TaskUpdate(priority="low"))


def test_assignee_must_be_member_on_update(team):
    owner = team["owner"]
    task = TaskService.create(owner.id, "Launch", team["project"].id)

    with pytest.raises(ValidationError):
        TaskService.assign(owner.id, task.id, team["outsider"].id)
    assert db.session.get(Task, task.id).assignee_id is None

    assert TaskService.assign(owner.id, task.id, team["member"].id).assignee_id == team["member"].id
    assert TaskService.assign(owner.id, task.id, owner.id).assignee_id == owner.id
    assert TaskService.unassign(owner.id, task.id).assignee_id is None


def test_move_to_status_twice_refreshes_updated_at(team, monkeypatch):
    owner = team["owner"]
    task = TaskService.create(owner.id, "Launch", team["project"].id)

    first = datetime(2030, 1, 1, 12, 0, 0)
    second = datetime(2030, 1, 1, 12, 5, 0)

    monkeypatch.setattr(mixins, "utcnow", lambda: first)
    TaskService.move_to_status(owner.id, task.id, "done")
    monkeypatch.setattr(mixins, "utcnow", lambda: second)
    moved = TaskService.move_to_status(owner.id, task.id, "done")

    assert moved.status == "done"
    assert moved.updated_at == second


def test_set_priority_and_tag_helpers(team):
    owner = team["owner"]
    task = TaskService.create(owner.id, "Launch", team["project"].id, tags=["a", "b"])

    assert TaskService.set_priority(owner.id, task.id, "urgent").priority == "urgent"
    assert TaskService.add_tags(owner.id, task.id, ["b", "c", "c"]).tags == ["a", "b", "c"]
    assert TaskService.remove_tags(owner.id, task.id, ["a", "zzz"]).tags == ["b", "c"]


def test_list_filters_by_status_across_projects(team, make_user, make_project):
    owner = team["owner"]
    other = make_project(owner, name="Gemini")
    foreign_owner = make_user()
    foreign = make_project(foreign_owner, name="Foreign")

    t1 = TaskService.create(owner.id, "one", team["project"].id, status="done")
    TaskService.create(owner.id, "two", team["project"].id, status="todo")
    t3 = TaskService.create(owner.id, "three", other.id, status="done")
    TaskService.create(foreign_owner.id, "hidden", foreign.id, status="done")

    result = TaskService.list(owner.id, {"status": "done"})

    assert [t.id for t in result] == [t3.id, t1.id]


def test_list_combines_filters(team):
    owner, member = team["owner"], team["member"]
    project_id = team["project"].id
    TaskService.create(owner.id, "a", project_id, priority="high", assignee_id=member.id)
    target = TaskService.create(owner.id, "b", project_id, priority="high", assignee_id=member.id, status="done")
    TaskService.create(owner.id, "c", project_id, priority="low", assignee_id=member.id, status="done")

    result = TaskService.list(owner.id, {
        "project_id": project_id,
        "status": "done",
        "priority": "high",
        "assignee_id": member.id,
    })

    assert [t.id for t in result] == [target.id]


def test_list_rejects_invalid_filter_values(team):
    with pytest.raises(ValidationError):
        TaskService.list(team["owner"].id, {"status": "blocked"})
    with pytest.raises(ValidationError):
        TaskService.list(team["owner"].id, {"priority": "critical"})


def test_delete_by_reporter_or_owner_only(team):
    owner, member = team["owner"], team["member"]
    by_member = TaskService.create(member.id, "mine", team["project"].id)
    by_owner = TaskService.create(owner.id, "owners", team["project"].id)

    with pytest.raises(AuthorizationError):
        TaskService.delete(member.id, by_owner.id)

    TaskService.delete(member.id, by_member.id)
    TaskService.delete(owner.id, by_owner.id)

    assert db.session.execute(select(Task)).scalars().all() == []


def test_task_events_notify_project_and_assignee(team, fake_redis):
    owner, member = team["owner"], team["member"]
    task = TaskService.create(owner.id, "Launch", team["project"].id)
    fake_redis.published.clear()

    TaskService.assign(owner.id, task.id, member.id)
    TaskService.delete(owner.id, task.id)

    project_events = fake_redis.channel_messages(f"project:{team['project'].id}")
    assert [e["type"] for e in project_events] == ["task_updated", "task_deleted"]
    assert project_events[0]["payload"]["updates"] == {"assigneeId": member.id}

    notifications = fake_redis.channel_messages(f"user:{member.id}")
    assert notifications[0]["type"] == "notification"
    assert notifications[0]["payload"]["kind"] == "task_assigned"
