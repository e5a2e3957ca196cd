# -*- coding: utf-8 -*-
"""
models
--------------------------------------------------------------------
集中导入全部实体，保证 db.create_all() 与 Flask-Migrate 能发现所有表：
- User: 账号
- Project / ProjectMember: 项目及成员关系
- Task: 任务
"""

from .mixins import TimestampMixin
from .user import User
from .project import Project, ProjectMember
from .task import Task

__all__ = ["TimestampMixin", "User", "Project", "ProjectMember", "Task"]
