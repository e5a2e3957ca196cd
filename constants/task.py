# constants/task.py
"""
任务相关的枚举与常量集合
统一管理：
  - 状态 Status: todo / in_progress / in_review / done（看板列顺序即定义顺序）
  - 优先级 Priority: low / medium / high / urgent
提供:
  - Enum 定义
  - values() 方法：返回所有 value 列表
  - 校验辅助函数
"""

from enum import Enum
from utils.exceptions import ValidationError

MAX_TASK_TITLE_LENGTH = 200


class TaskStatus(Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


# -------- 校验辅助函数 --------
def validate_status(status: str):
    if status not in TaskStatus.values():
        raise ValidationError("Invalid task status")


def validate_priority(priority: str):
    if priority not in TaskPriority.values():
        raise ValidationError("Invalid task priority")

