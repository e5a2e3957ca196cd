# services/event_service.py
"""
实时通知旁路：
- 业务变更成功提交后，向 Redis pub/sub 频道发布事件，由 socket 网关转发给
  project:<id> / user:<id> 房间。
- 事件只是通知，不是权威状态；发布失败只记日志，不影响请求结果。
"""
import json
import logging

from flask import current_app
from redis.exceptions import RedisError

from constants.events import RealtimeEvent, project_channel, user_channel
from extensions.redis_client import get_redis
from utils.datetime_helpers import datetime_to_iso, utcnow

logger = logging.getLogger(__name__)


class EventService:

    @staticmethod
    def _enabled() -> bool:
        return bool(current_app.config.get("EVENTS_ENABLED", True))

    @staticmethod
    def publish(channel: str, event: RealtimeEvent, payload: dict):
        if not EventService._enabled():
            return
        message = json.dumps({
            "type": event.value,
            "payload": payload,
            "timestamp": datetime_to_iso(utcnow()),
        }, ensure_ascii=False)
        try:
            get_redis().publish(channel, message)
        except RedisError:
            logger.exception("Failed to publish %s to %s", event.value, channel)

    @staticmethod
    def task_updated(task, updated_by: int, updates: dict | None = None):
        payload = {
            "taskId": task.id,
            "projectId": task.project_id,
            "updates": updates if updates is not None else task.to_dict(),
            "updatedBy": updated_by,
        }
        EventService.publish(project_channel(task.project_id), RealtimeEvent.TASK_UPDATED, payload)
        if task.assignee_id and task.assignee_id != updated_by:
            EventService.publish(user_channel(task.assignee_id), RealtimeEvent.NOTIFICATION, {
                "kind": "task_assigned" if updates and "assigneeId" in updates else "task_updated",
                "taskId": task.id,
                "title": task.title,
                "updatedBy": updated_by,
            })

    @staticmethod
    def task_deleted(task_id: int, project_id: int, deleted_by: int):
        EventService.publish(project_channel(project_id), RealtimeEvent.TASK_DELETED, {
            "taskId": task_id,
            "projectId": project_id,
            "deletedBy": deleted_by,
        })

    @staticmethod
    def project_updated(project, updated_by: int):
        EventService.publish(project_channel(project.id), RealtimeEvent.PROJECT_UPDATED, {
            "projectId": project.id,
            "updates": project.to_dict(include_owner=False),
            "updatedBy": updated_by,
        })

    @staticmethod
    def project_deleted(project_id: int, deleted_by: int):
        EventService.publish(project_channel(project_id), RealtimeEvent.PROJECT_DELETED, {
            "projectId": project_id,
            "deletedBy": deleted_by,
        })

    @staticmethod
    def member_added(project_id: int, user_id: int, added_by: int):
        EventService.publish(user_channel(user_id), RealtimeEvent.NOTIFICATION, {
            "kind": "project_member_added",
            "projectId": project_id,
            "addedBy": added_by,
        })
