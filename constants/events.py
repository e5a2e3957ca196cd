from enum import Enum


class RealtimeEvent(str, Enum):
    """实时通道事件名，与前端 socket 订阅保持一致。"""

    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"
    NOTIFICATION = "notification"


def project_channel(project_id: int) -> str:
    return f"project:{project_id}"


def user_channel(user_id: int) -> str:
    return f"user:{user_id}"
