import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from constants.project import (
    ASSIGNABLE_MEMBER_ROLES,
    ProjectMemberRole,
    ProjectStatus,
    validate_project_name,
    validate_project_status,
)
from models.project import Project, ProjectMember
from repositories.project_member_repository import ProjectMemberRepository
from repositories.project_repository import ProjectRepository
from repositories.user_repository import UserRepository
from services.event_service import EventService
from utils.exceptions import ConflictError, NotFoundError, ValidationError
from utils.partial_update import ProjectUpdate
from utils.permissions import (
    assert_can_modify_project,
    assert_can_read_project,
)
from utils.validators import parse_date, parse_id, parse_optional_text

logger = logging.getLogger(__name__)


class ProjectService:

    @staticmethod
    def _check_date_range(start_date, end_date):
        if start_date and end_date and end_date < start_date:
            raise ValidationError("endDate must not be earlier than startDate")

    @staticmethod
    def create(
        user_id: int,
        name: str,
        description: Optional[str],
        status: Optional[str] = None,
        start_date=None,
        end_date=None,
    ) -> Project:
        validate_project_name(name)
        if not isinstance(description, str) or not description.strip():
            raise ValidationError("Project description is required")
        status = status or ProjectStatus.PLANNING.value
        validate_project_status(status)
        start = parse_date(start_date, "startDate")
        end = parse_date(end_date, "endDate")
        ProjectService._check_date_range(start, end)

        # 项目与 owner 成员记录在同一事务内写入
        try:
            project = ProjectRepository.create(
                name=name,
                description=description,
                owner_id=user_id,
                status=status,
                start_date=start,
                end_date=end,
            )
            ProjectMemberRepository.create(
                project_id=project.id,
                user_id=user_id,
                role=ProjectMemberRole.OWNER.value,
            )
            ProjectRepository.commit()
        except Exception:
            ProjectRepository.rollback()
            logger.exception("Failed to create project %r for user %s", name, user_id)
            raise

        logger.info("Project created: %s (id=%s) by user %s", project.name, project.id, user_id)
        return project

    @staticmethod
    def list(user_id: int) -> List[Project]:
        return ProjectRepository.list_accessible(user_id)

    @staticmethod
    def get(user_id: int, project_id: int) -> Project:
        project = ProjectRepository.get_by_id(project_id)
        return assert_can_read_project(project, user_id)

    @staticmethod
    def update(user_id: int, project_id: int, update: ProjectUpdate) -> Project:
        project = assert_can_modify_project(ProjectRepository.get_by_id(project_id), user_id)

        changes = update.changes()
        if not changes:
            raise ValidationError("No fields to update")

        if "name" in changes:
            validate_project_name(changes["name"])
            changes["name"] = changes["name"].strip()
        if "description" in changes:
            changes["description"] = parse_optional_text(changes["description"], "description")
        if "status" in changes:
            validate_project_status(changes["status"])
        if "start_date" in changes:
            changes["start_date"] = parse_date(changes["start_date"], "startDate")
        if "end_date" in changes:
            changes["end_date"] = parse_date(changes["end_date"], "endDate")
        ProjectService._check_date_range(
            changes.get("start_date", project.start_date),
            changes.get("end_date", project.end_date),
        )

        try:
            ProjectRepository.update(project, changes)
            ProjectRepository.commit()
        except Exception:
            ProjectRepository.rollback()
            logger.exception("Failed to update project %s", project_id)
            raise

        logger.info("Project updated: id=%s fields=%s by user %s", project.id, sorted(changes), user_id)
        EventService.project_updated(project, user_id)
        return project

    @staticmethod
    def delete(user_id: int, project_id: int):
        project = assert_can_modify_project(ProjectRepository.get_by_id(project_id), user_id)
        try:
            ProjectRepository.delete(project)
            ProjectRepository.commit()
        except Exception:
            ProjectRepository.rollback()
            logger.exception("Failed to delete project %s", project_id)
            raise
        logger.info("Project deleted: id=%s by user %s", project_id, user_id)
        EventService.project_deleted(project_id, user_id)

    # ---------------- 成员 ----------------

    @staticmethod
    def list_members(user_id: int, project_id: int) -> List[ProjectMember]:
        ProjectService.get(user_id, project_id)
        return ProjectMemberRepository.list_by_project(project_id)

    @staticmethod
    def add_member(user_id: int, project_id: int, member_user_id, role: Optional[str] = None) -> ProjectMember:
        """
        直接写入成员关系（非邀请流程），仅项目 owner 可操作。
        role 只能是 manager / member；owner 身份仅在创建项目时产生。
        """
        assert_can_modify_project(ProjectRepository.get_by_id(project_id), user_id)

        member_user_id = parse_id(member_user_id, "userId")
        role = role or ProjectMemberRole.MEMBER.value
        if role not in ASSIGNABLE_MEMBER_ROLES:
            raise ValidationError("Invalid member role")
        target = UserRepository.find_by_id(member_user_id)
        if not target or not target.is_active:
            raise NotFoundError("User not found")
        if ProjectMemberRepository.is_member(project_id, member_user_id):
            raise ConflictError("User is already a member of the project")

        try:
            member = ProjectMemberRepository.create(project_id=project_id, user_id=member_user_id, role=role)
            ProjectRepository.commit()
        except IntegrityError:
            ProjectRepository.rollback()
            raise ConflictError("User is already a member of the project")

        logger.info("Member added: user %s to project %s as %s by user %s",
                    member_user_id, project_id, role, user_id)
        EventService.member_added(project_id, member_user_id, user_id)
        return member
