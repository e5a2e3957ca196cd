# -*- coding: utf-8 -*-
"""
task.py
--------------------------------------------------------------------
任务实体：
- 归属且仅归属一个 Project（级联删除）。
- assignee / reporter 仅为对 User 的引用，不耦合生命周期；
  assignee 被删除时置空。
- tags 以 JSON 数组存储，按集合语义维护（去重、保序）。
序列化：
- to_dict(detail=True) 附带反规范化字段 projectName / assignee / reporter。
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS
from constants.task import TaskStatus, TaskPriority
from utils.datetime_helpers import datetime_to_iso


class Task(TimestampMixin, db.Model):
    __tablename__ = "tasks"
    __table_args__ = (
        db.Index("ix_tasks_project_status", "project_id", "status"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=TaskStatus.TODO.value,
                       server_default=TaskStatus.TODO.value, index=True)
    priority = db.Column(db.String(20), nullable=False, default=TaskPriority.MEDIUM.value,
                         server_default=TaskPriority.MEDIUM.value)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assignee_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    reporter_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    due_date = db.Column(db.DateTime)
    estimated_hours = db.Column(db.Integer)
    actual_hours = db.Column(db.Integer)
    tags = db.Column(db.JSON, nullable=False, default=list)

    project = db.relationship("Project", back_populates="tasks")
    assignee = db.relationship("User", foreign_keys=[assignee_id])
    reporter = db.relationship("User", foreign_keys=[reporter_id])

    def __repr__(self):
        return f"<Task id={self.id} project={self.project_id} status={self.status}>"

    def to_dict(self, detail: bool = False):
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "projectId": self.project_id,
            "assigneeId": self.assignee_id,
            "reporterId": self.reporter_id,
            "dueDate": datetime_to_iso(self.due_date),
            "estimatedHours": self.estimated_hours,
            "actualHours": self.actual_hours,
            "tags": list(self.tags or []),
            "createdAt": datetime_to_iso(self.created_at),
            "updatedAt": datetime_to_iso(self.updated_at),
        }
        if detail:
            data["projectName"] = self.project.name if self.project else None
            data["assignee"] = self.assignee.to_brief() if self.assignee else None
            data["reporter"] = self.reporter.to_brief() if self.reporter else None
        return data
