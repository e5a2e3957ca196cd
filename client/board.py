# client/board.py
"""看板视图模型：按工作流顺序把任务分到状态列，纯函数。"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from constants.task import TaskStatus

COLUMN_TITLES = {
    TaskStatus.TODO.value: "To Do",
    TaskStatus.IN_PROGRESS.value: "In Progress",
    TaskStatus.IN_REVIEW.value: "In Review",
    TaskStatus.DONE.value: "Done",
}


@dataclass(frozen=True)
class BoardColumn:
    status: str
    title: str
    tasks: Tuple[Dict[str, Any], ...]

    @property
    def count(self) -> int:
        return len(self.tasks)


def build_board(tasks: Iterable[Dict[str, Any]]) -> List[BoardColumn]:
    """
    列顺序固定为 todo → in_progress → in_review → done；
    列内保持传入顺序，未知状态的任务不展示。
    """
    grouped = {status: [] for status in TaskStatus.values()}
    for task in tasks:
        bucket = grouped.get(task.get("status"))
        if bucket is not None:
            bucket.append(task)
    return [
        BoardColumn(status=status, title=COLUMN_TITLES[status], tasks=tuple(grouped[status]))
        for status in TaskStatus.values()
    ]


def board_from_state(state) -> List[BoardColumn]:
    return build_board(state.tasks)
