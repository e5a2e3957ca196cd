from typing import Any, Dict, List, Optional
from datetime import date
from sqlalchemy import select, desc, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError
from extensions.database import db
from models.project import Project, ProjectMember


def accessible_project_clause(user_id: int):
    """owner 或成员可见的项目条件，项目列表与任务列表共用。"""
    member_exists = (
        select(ProjectMember.id)
        .where(
            ProjectMember.project_id == Project.id,
            ProjectMember.user_id == user_id,
        )
        .exists()
    )
    return or_(Project.owner_id == user_id, member_exists)


class ProjectRepository:
    # 部分更新允许写入的列
    UPDATABLE_FIELDS = ("name", "description", "status", "start_date", "end_date")

    @staticmethod
    def create(name: str, description: str, owner_id: int, status: str,
               start_date: Optional[date] = None, end_date: Optional[date] = None) -> Project:
        project = Project(
            name=name.strip(),
            description=description,
            status=status,
            start_date=start_date,
            end_date=end_date,
            owner_id=owner_id,
        )
        db.session.add(project)
        db.session.flush()
        return project

    @staticmethod
    def get_by_id(project_id: int) -> Optional[Project]:
        stmt = (
            select(Project)
            .options(selectinload(Project.owner))
            .where(Project.id == project_id)
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def list_accessible(user_id: int) -> List[Project]:
        stmt = (
            select(Project)
            .options(selectinload(Project.owner))
            .where(accessible_project_clause(user_id))
            .order_by(desc(Project.created_at), desc(Project.id))
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def update(project: Project, changes: Dict[str, Any]) -> Project:
        for field in ProjectRepository.UPDATABLE_FIELDS:
            if field in changes:
                setattr(project, field, changes[field])
        project.touch()
        db.session.flush()
        return project

    @staticmethod
    def delete(project: Project):
        db.session.delete(project)
        db.session.flush()

    @staticmethod
    def commit():
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def rollback():
        db.session.rollback()
