# -*- coding: utf-8 -*-
"""
project.py
--------------------------------------------------------------------
项目实体及成员：
- Project: 任务的业务边界，恰好一个 owner。
- ProjectMember: 用户在项目内的角色（owner / manager / member）。
约束：
- 创建项目时同一事务内写入 owner 的成员记录，owner 始终是成员。
- 删除项目级联删除任务与成员关系。
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS
from constants.project import ProjectStatus, ProjectMemberRole
from utils.datetime_helpers import datetime_to_iso, date_to_iso, utcnow


class Project(TimestampMixin, db.Model):
    __tablename__ = "projects"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=ProjectStatus.PLANNING.value,
                       server_default=ProjectStatus.PLANNING.value)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    owner_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    owner = db.relationship(
        "User", backref=db.backref("owned_projects", passive_deletes=True)
    )
    members = db.relationship(
        "ProjectMember", back_populates="project", cascade="all, delete-orphan"
    )
    tasks = db.relationship(
        "Task", back_populates="project", cascade="all, delete-orphan"
    )

    def to_dict(self, include_owner: bool = True):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "startDate": date_to_iso(self.start_date),
            "endDate": date_to_iso(self.end_date),
            "ownerId": self.owner_id,
            "createdAt": datetime_to_iso(self.created_at),
            "updatedAt": datetime_to_iso(self.updated_at),
        }
        if include_owner and self.owner is not None:
            data["owner"] = {
                "firstName": self.owner.first_name,
                "lastName": self.owner.last_name,
            }
        return data


class ProjectMember(db.Model):
    __tablename__ = "project_members"
    __table_args__ = (
        db.UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
        COMMON_TABLE_ARGS,
    )
    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = db.Column(db.String(20), nullable=False, default=ProjectMemberRole.MEMBER.value,
                     server_default=ProjectMemberRole.MEMBER.value)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    project = db.relationship("Project", back_populates="members")
    user = db.relationship(
        "User", backref=db.backref("project_memberships", cascade="all, delete-orphan")
    )

    def to_dict(self, user_basic: bool = True):
        data = {
            "projectId": self.project_id,
            "userId": self.user_id,
            "role": self.role,
            "joinedAt": datetime_to_iso(self.joined_at),
        }
        if user_basic and self.user:
            data["user"] = self.user.to_brief()
        return data
