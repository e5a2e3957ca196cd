# repositories/project_member_repository.py
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from extensions.database import db
from models.project import ProjectMember


class ProjectMemberRepository:

    @staticmethod
    def get_by_project_user(project_id: int, user_id: int) -> Optional[ProjectMember]:
        stmt = select(ProjectMember).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id
        )
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def is_member(project_id: int, user_id: int) -> bool:
        if user_id is None:
            return False
        stmt = select(ProjectMember.id).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id
        ).limit(1)
        return db.session.execute(stmt).first() is not None

    @staticmethod
    def create(project_id: int, user_id: int, role: str) -> ProjectMember:
        m = ProjectMember(project_id=project_id, user_id=user_id, role=role)
        db.session.add(m)
        db.session.flush()
        return m

    @staticmethod
    def list_by_project(project_id: int) -> List[ProjectMember]:
        stmt = (
            select(ProjectMember)
            .options(selectinload(ProjectMember.user))
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at.asc(), ProjectMember.id.asc())
        )
        return db.session.execute(stmt).scalars().all()
