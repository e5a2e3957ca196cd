from typing import Any, Dict, List, Optional
from datetime import datetime
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload
from extensions.database import db
from models.project import Project
from models.task import Task
from repositories.project_repository import accessible_project_clause


class TaskRepository:
    UPDATABLE_FIELDS = (
        "title", "description", "status", "priority", "assignee_id",
        "due_date", "estimated_hours", "actual_hours", "tags",
    )

    @staticmethod
    def _detail_options():
        return (
            selectinload(Task.project),
            selectinload(Task.assignee),
            selectinload(Task.reporter),
        )

    @staticmethod
    def create(title: str, project_id: int, reporter_id: int, status: str, priority: str,
               description: Optional[str] = None, assignee_id: Optional[int] = None,
               due_date: Optional[datetime] = None, estimated_hours: Optional[int] = None,
               tags: Optional[List[str]] = None) -> Task:
        task = Task(
            title=title,
            description=description,
            status=status,
            priority=priority,
            project_id=project_id,
            assignee_id=assignee_id,
            reporter_id=reporter_id,
            due_date=due_date,
            estimated_hours=estimated_hours,
            tags=list(tags or []),
        )
        db.session.add(task)
        db.session.flush()
        return task

    @staticmethod
    def get_by_id(task_id: int) -> Optional[Task]:
        stmt = (
            select(Task)
            .options(*TaskRepository._detail_options())
            .where(Task.id == task_id)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def list_accessible(
        user_id: int,
        project_id: Optional[int] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee_id: Optional[int] = None,
    ) -> List[Task]:
        stmt = (
            select(Task)
            .join(Project, Task.project_id == Project.id)
            .options(*TaskRepository._detail_options())
        )
        conditions = [accessible_project_clause(user_id)]
        if project_id is not None:
            conditions.append(Task.project_id == project_id)
        if status is not None:
            conditions.append(Task.status == status)
        if priority is not None:
            conditions.append(Task.priority == priority)
        if assignee_id is not None:
            conditions.append(Task.assignee_id == assignee_id)
        stmt = stmt.where(*conditions).order_by(desc(Task.created_at), desc(Task.id))
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def update(task: Task, changes: Dict[str, Any]) -> Task:
        """逐字段合并；显式提供的字段无条件赋值，并刷新 updated_at。"""
        for field in TaskRepository.UPDATABLE_FIELDS:
            if field in changes:
                value = changes[field]
                if field == "tags":
                    value = list(value)
                setattr(task, field, value)
        task.touch()
        db.session.flush()
        return task

    @staticmethod
    def delete(task: Task):
        db.session.delete(task)
        db.session.flush()

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
