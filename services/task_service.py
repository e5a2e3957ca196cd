# services/task_service.py
"""
任务服务：所有变更按 “权限校验 → 字段校验 → 写入” 的顺序执行。
- 更新采用 TaskUpdate 部分更新结构，未提供的字段保持不变；
  显式提供的字段无条件写入（值相同也会刷新 updated_at）。
- 指派人必须是项目 owner 或成员。
- 提交成功后发布实时事件，事件发布失败不影响结果。
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from constants.task import (
    MAX_TASK_TITLE_LENGTH,
    TaskPriority,
    TaskStatus,
    validate_priority,
    validate_status,
)
from models.task import Task
from repositories.project_repository import ProjectRepository
from repositories.task_repository import TaskRepository
from services.event_service import EventService
from utils.exceptions import ValidationError
from utils.partial_update import TaskUpdate
from utils.permissions import (
    assert_can_create_task,
    assert_can_delete_task,
    assert_can_read_task,
    assert_can_update_task,
    assert_valid_assignee,
)
from utils.validators import normalize_tags, parse_datetime, parse_hours, parse_id, parse_optional_text

logger = logging.getLogger(__name__)

FILTER_KEYS = ("project_id", "status", "priority", "assignee_id")


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Task title is required")
    title = title.strip()
    if len(title) > MAX_TASK_TITLE_LENGTH:
        raise ValidationError(f"Task title must be less than {MAX_TASK_TITLE_LENGTH} characters")
    return title


def _optional_id(value, field: str) -> Optional[int]:
    if value is None:
        return None
    return parse_id(value, field)


class TaskService:

    @staticmethod
    def create(
        user_id: int,
        title: str,
        project_id,
        description: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assignee_id=None,
        due_date=None,
        estimated_hours=None,
        tags: Optional[Iterable[str]] = None,
    ) -> Task:
        project_id = parse_id(project_id, "projectId")
        project = assert_can_create_task(ProjectRepository.get_by_id(project_id), user_id)

        title = _clean_title(title)
        description = parse_optional_text(description, "description")
        status = status or TaskStatus.TODO.value
        priority = priority or TaskPriority.MEDIUM.value
        validate_status(status)
        validate_priority(priority)
        assignee_id = _optional_id(assignee_id, "assigneeId")
        assert_valid_assignee(project, assignee_id)
        due = parse_datetime(due_date, "dueDate")
        hours = parse_hours(estimated_hours, "estimatedHours")
        tag_list = normalize_tags(tags)

        try:
            task = TaskRepository.create(
                title=title,
                project_id=project.id,
                reporter_id=user_id,
                status=status,
                priority=priority,
                description=description,
                assignee_id=assignee_id,
                due_date=due,
                estimated_hours=hours,
                tags=tag_list,
            )
            TaskRepository.commit()
        except Exception:
            TaskRepository.rollback()
            logger.exception("Failed to create task %r in project %s", title, project_id)
            raise

        logger.info("Task created: %s (id=%s) in project %s by user %s", task.title, task.id, project.id, user_id)
        EventService.task_updated(task, user_id)
        return task

    @staticmethod
    def list(user_id: int, filters: Optional[Dict[str, Any]] = None) -> List[Task]:
        """
        过滤条件之间为 AND 关系，均为精确匹配；
        结果只包含请求者作为 owner 或成员的项目中的任务，按创建时间倒序。
        """
        filters = {k: v for k, v in (filters or {}).items() if k in FILTER_KEYS and v is not None}
        if "status" in filters:
            validate_status(filters["status"])
        if "priority" in filters:
            validate_priority(filters["priority"])
        for key, field in (("project_id", "projectId"), ("assignee_id", "assigneeId")):
            if key in filters:
                filters[key] = parse_id(filters[key], field)
        return TaskRepository.list_accessible(user_id, **filters)

    @staticmethod
    def get(user_id: int, task_id: int) -> Task:
        return assert_can_read_task(TaskRepository.get_by_id(task_id), user_id)

    @staticmethod
    def update(user_id: int, task_id: int, update: TaskUpdate) -> Task:
        task = assert_can_update_task(TaskRepository.get_by_id(task_id), user_id)

        changes = update.changes()
        if not changes:
            raise ValidationError("No fields to update")

        if "title" in changes:
            changes["title"] = _clean_title(changes["title"])
        if "description" in changes:
            changes["description"] = parse_optional_text(changes["description"], "description")
        if "status" in changes:
            validate_status(changes["status"])
        if "priority" in changes:
            validate_priority(changes["priority"])
        if "assignee_id" in changes:
            # None 表示取消指派
            changes["assignee_id"] = _optional_id(changes["assignee_id"], "assigneeId")
            assert_valid_assignee(task.project, changes["assignee_id"])
        if "due_date" in changes:
            changes["due_date"] = parse_datetime(changes["due_date"], "dueDate")
        if "estimated_hours" in changes:
            changes["estimated_hours"] = parse_hours(changes["estimated_hours"], "estimatedHours")
        if "actual_hours" in changes:
            changes["actual_hours"] = parse_hours(changes["actual_hours"], "actualHours")
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])

        try:
            TaskRepository.update(task, changes)
            TaskRepository.commit()
        except Exception:
            TaskRepository.rollback()
            logger.exception("Failed to update task %s", task_id)
            raise

        logger.info("Task updated: id=%s fields=%s by user %s", task.id, sorted(changes), user_id)
        wire = task.to_dict()
        updates = {key: wire[key] for key, attr in TaskUpdate.payload_keys.items() if attr in changes}
        EventService.task_updated(task, user_id, updates=updates)
        return task

    # ---------------- 便捷操作：均委托给 update ----------------

    @staticmethod
    def move_to_status(user_id: int, task_id: int, status: str) -> Task:
        return TaskService.update(user_id, task_id, TaskUpdate(status=status))

    @staticmethod
    def set_priority(user_id: int, task_id: int, priority: str) -> Task:
        return TaskService.update(user_id, task_id, TaskUpdate(priority=priority))

    @staticmethod
    def assign(user_id: int, task_id: int, assignee_id) -> Task:
        return TaskService.update(user_id, task_id, TaskUpdate(assignee_id=assignee_id))

    @staticmethod
    def unassign(user_id: int, task_id: int) -> Task:
        return TaskService.update(user_id, task_id, TaskUpdate(assignee_id=None))

    @staticmethod
    def add_tags(user_id: int, task_id: int, tags: Iterable[str]) -> Task:
        task = assert_can_update_task(TaskRepository.get_by_id(task_id), user_id)
        merged = list(task.tags or []) + normalize_tags(list(tags))
        return TaskService.update(user_id, task_id, TaskUpdate(tags=merged))

    @staticmethod
    def remove_tags(user_id: int, task_id: int, tags: Iterable[str]) -> Task:
        task = assert_can_update_task(TaskRepository.get_by_id(task_id), user_id)
        drop = set(normalize_tags(list(tags)))
        remaining = [t for t in (task.tags or []) if t not in drop]
        return TaskService.update(user_id, task_id, TaskUpdate(tags=remaining))

    @staticmethod
    def delete(user_id: int, task_id: int):
        task = assert_can_delete_task(TaskRepository.get_by_id(task_id), user_id)
        project_id = task.project_id
        try:
            TaskRepository.delete(task)
            TaskRepository.commit()
        except Exception:
            TaskRepository.rollback()
            logger.exception("Failed to delete task %s", task_id)
            raise
        logger.info("Task deleted: id=%s from project %s by user %s", task_id, project_id, user_id)
        EventService.task_deleted(task_id, project_id, user_id)
