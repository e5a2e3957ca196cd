from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import g

from models.project import Project
from models.task import Task
from repositories.project_member_repository import ProjectMemberRepository
from utils.exceptions import AuthenticationError, AuthorizationError, ValidationError

PROJECT_DENIED = "Project not found or access denied"
TASK_DENIED = "Task not found or access denied"
TASK_CREATE_DENIED = "No permission to create tasks in this project"
ASSIGNEE_NOT_MEMBER = "Assignee must be a member of the project"


@dataclass
class ProjectAccess:
    """
    请求者相对某个项目的身份，一次查询、多处判断。
    - is_owner: 项目 owner
    - is_member: 存在成员记录（owner 创建项目时即写入成员记录）
    """
    user_id: int
    project_id: int
    is_owner: bool = False
    is_member: bool = False

    @property
    def has_standing(self) -> bool:
        return self.is_owner or self.is_member


def resolve_access(project: Optional[Project], user_id: int) -> ProjectAccess:
    if project is None:
        return ProjectAccess(user_id=user_id, project_id=0)
    is_owner = project.owner_id == user_id
    is_member = is_owner or ProjectMemberRepository.is_member(project.id, user_id)
    return ProjectAccess(
        user_id=user_id,
        project_id=project.id,
        is_owner=is_owner,
        is_member=is_member,
    )


# ---------------- 谓词：只回答 allow / deny，无副作用 ----------------

def can_read_project(project: Optional[Project], user_id: int) -> bool:
    return resolve_access(project, user_id).has_standing


def can_modify_project(project: Optional[Project], user_id: int) -> bool:
    return project is not None and project.owner_id == user_id


def can_read_task(task: Optional[Task], user_id: int) -> bool:
    if task is None:
        return False
    return resolve_access(task.project, user_id).has_standing


def can_update_task(task: Optional[Task], user_id: int) -> bool:
    if task is None:
        return False
    if task.assignee_id is not None and task.assignee_id == user_id:
        return True
    return resolve_access(task.project, user_id).has_standing


def can_create_task(project: Optional[Project], user_id: int) -> bool:
    return resolve_access(project, user_id).has_standing


def can_delete_task(task: Optional[Task], user_id: int) -> bool:
    if task is None:
        return False
    if task.reporter_id == user_id:
        return True
    return task.project is not None and task.project.owner_id == user_id


def is_valid_assignee(project: Optional[Project], assignee_id: Optional[int]) -> bool:
    if project is None or assignee_id is None:
        return False
    return resolve_access(project, assignee_id).has_standing


# ---------------- 断言：拒绝统一呈现为 “not found or access denied” ----------------

def assert_can_read_project(project: Optional[Project], user_id: int) -> Project:
    if not can_read_project(project, user_id):
        raise AuthorizationError(PROJECT_DENIED)
    return project


def assert_can_modify_project(project: Optional[Project], user_id: int) -> Project:
    if not can_modify_project(project, user_id):
        raise AuthorizationError(PROJECT_DENIED)
    return project


def assert_can_read_task(task: Optional[Task], user_id: int) -> Task:
    if not can_read_task(task, user_id):
        raise AuthorizationError(TASK_DENIED)
    return task


def assert_can_update_task(task: Optional[Task], user_id: int) -> Task:
    if not can_update_task(task, user_id):
        raise AuthorizationError(TASK_DENIED)
    return task


def assert_can_delete_task(task: Optional[Task], user_id: int) -> Task:
    if not can_delete_task(task, user_id):
        raise AuthorizationError(TASK_DENIED)
    return task


def assert_can_create_task(project: Optional[Project], user_id: int) -> Project:
    # 项目 id 由调用方提供，这里按 403 返回
    if not can_create_task(project, user_id):
        raise AuthorizationError(TASK_CREATE_DENIED, code=403)
    return project


def assert_valid_assignee(project: Optional[Project], assignee_id: Optional[int]):
    if assignee_id is None:
        return
    if not is_valid_assignee(project, assignee_id):
        raise ValidationError(ASSIGNEE_NOT_MEMBER)


def get_current_user():
    """
    获取当前登录用户（由 auth_required 写入 g.current_user）
    """
    user = getattr(g, "current_user", None)
    if not user:
        raise AuthenticationError("User not authenticated")
    return user
