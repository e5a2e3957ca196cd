# constants/project.py
"""
项目相关的枚举与常量
  - 状态 Status: planning / active / on_hold / completed / cancelled
  - 成员角色 MemberRole: owner / manager / member
"""

from enum import Enum
from utils.exceptions import ValidationError

MAX_PROJECT_NAME_LENGTH = 100


class ProjectStatus(Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


class ProjectMemberRole(Enum):
    OWNER = "owner"
    MANAGER = "manager"
    MEMBER = "member"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


# owner 只在创建项目时写入，不能通过添加成员授予
ASSIGNABLE_MEMBER_ROLES = {ProjectMemberRole.MANAGER.value, ProjectMemberRole.MEMBER.value}


def validate_project_status(status: str):
    if status not in ProjectStatus.values():
        raise ValidationError("Invalid project status")


def validate_project_name(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Project name is required")
    if len(name) > MAX_PROJECT_NAME_LENGTH:
        raise ValidationError(f"Project name must be less than {MAX_PROJECT_NAME_LENGTH} characters")
