from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    全局用户角色：
    - 与项目内成员角色（ProjectMemberRole）相互独立
    - 项目/任务的访问只看 owner / member 关系，不看全局角色
    """

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]
