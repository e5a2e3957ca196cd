# -*- coding: utf-8 -*-
"""
store.py
--------------------------------------------------------------------
客户端状态容器：
- 状态为不可变 dataclass，状态变化只通过纯函数 reducer 产生新对象；
- Store 显式注入 API 门面构造（无模块级单例），便于测试；
- 每个动作：置 loading、清空 error → 调用接口 →
  成功：按 id 整条替换 / 追加 / 移除；
  失败：记录可读错误信息，集合保持不变，并重新抛出异常。
- 动作是同步的，不做取消：晚到的响应仍会写入状态。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Tuple

from client.services import AuthApi, ProjectApi, TaskApi

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


# ---------------- 状态 ----------------

@dataclass(frozen=True)
class ProjectState:
    projects: Tuple[Record, ...] = ()
    current_project: Optional[Record] = None
    is_loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class TaskState:
    tasks: Tuple[Record, ...] = ()
    selected_task: Optional[Record] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    is_loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class AuthState:
    user: Optional[Record] = None
    tokens: Optional[Dict[str, str]] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.tokens)


# ---------------- reducers：纯函数 ----------------

def start_loading(state):
    return replace(state, is_loading=True, error=None)


def fail(state, error: Exception):
    return replace(state, is_loading=False, error=str(error) or error.__class__.__name__)


def replace_all(items: Tuple[Record, ...], records) -> Tuple[Record, ...]:
    return tuple(records or ())


def append(items: Tuple[Record, ...], record: Record) -> Tuple[Record, ...]:
    return items + (record,)


def upsert(items: Tuple[Record, ...], record: Record) -> Tuple[Record, ...]:
    """按 id 整条替换；不存在时保持原集合。"""
    return tuple(record if item.get("id") == record.get("id") else item for item in items)


def remove(items: Tuple[Record, ...], record_id) -> Tuple[Record, ...]:
    return tuple(item for item in items if item.get("id") != record_id)


def replace_if_same(current: Optional[Record], record: Record) -> Optional[Record]:
    if current is not None and current.get("id") == record.get("id"):
        return record
    return current


def clear_if_same(current: Optional[Record], record_id) -> Optional[Record]:
    if current is not None and current.get("id") == record_id:
        return None
    return current


# ---------------- Store ----------------

class _Store:
    """持有当前状态，并把每个动作包装为 loading → 调用 → 提交/失败。"""

    initial_state: Callable[[], Any]

    def __init__(self):
        self.state = self.initial_state()

    def _run(self, call: Callable[[], Any], on_success: Callable[[Any, Any], Any], track_loading: bool = True):
        if track_loading:
            self.state = start_loading(self.state)
        else:
            self.state = replace(self.state, error=None)
        try:
            result = call()
        except Exception as e:
            logger.info("Store action failed: %s", e)
            self.state = fail(self.state, e)
            raise
        self.state = replace(on_success(self.state, result), is_loading=False)
        return result

    def clear_error(self):
        self.state = replace(self.state, error=None)


class ProjectStore(_Store):
    initial_state = ProjectState

    def __init__(self, api: ProjectApi):
        self.api = api
        super().__init__()

    def fetch_projects(self):
        return self._run(self.api.list, lambda s, r: replace(s, projects=replace_all(s.projects, r)))

    def fetch_project(self, project_id: int):
        return self._run(lambda: self.api.get(project_id),
                         lambda s, r: replace(s, current_project=r))

    def create_project(self, data: Record):
        return self._run(lambda: self.api.create(data),
                         lambda s, r: replace(s, projects=append(s.projects, r)))

    def update_project(self, project_id: int, updates: Record):
        return self._run(
            lambda: self.api.update(project_id, updates),
            lambda s, r: replace(s, projects=upsert(s.projects, r),
                                 current_project=replace_if_same(s.current_project, r)),
        )

    def delete_project(self, project_id: int):
        return self._run(
            lambda: self.api.delete(project_id),
            lambda s, _r: replace(s, projects=remove(s.projects, project_id),
                                  current_project=clear_if_same(s.current_project, project_id)),
        )

    def set_current_project(self, project: Optional[Record]):
        self.state = replace(self.state, current_project=project)


class TaskStore(_Store):
    initial_state = TaskState

    def __init__(self, api: TaskApi):
        self.api = api
        super().__init__()

    def _apply_update(self, state: TaskState, record: Record) -> TaskState:
        return replace(state, tasks=upsert(state.tasks, record),
                       selected_task=replace_if_same(state.selected_task, record))

    def fetch_tasks(self, filters: Optional[Dict[str, Any]] = None):
        effective = filters if filters is not None else self.state.filters
        return self._run(lambda: self.api.list(effective),
                         lambda s, r: replace(s, tasks=replace_all(s.tasks, r)))

    def fetch_task(self, task_id: int):
        return self._run(lambda: self.api.get(task_id),
                         lambda s, r: replace(s, selected_task=r))

    def create_task(self, data: Record):
        return self._run(lambda: self.api.create(data),
                         lambda s, r: replace(s, tasks=append(s.tasks, r)))

    def update_task(self, task_id: int, updates: Record):
        return self._run(lambda: self.api.update(task_id, updates), self._apply_update)

    def delete_task(self, task_id: int):
        return self._run(
            lambda: self.api.delete(task_id),
            lambda s, _r: replace(s, tasks=remove(s.tasks, task_id),
                                  selected_task=clear_if_same(s.selected_task, task_id)),
        )

    # 便捷操作不切换 loading，只更新记录与错误
    def move_to_status(self, task_id: int, status: str):
        return self._run(lambda: self.api.move_to_status(task_id, status), self._apply_update, track_loading=False)

    def set_priority(self, task_id: int, priority: str):
        return self._run(lambda: self.api.set_priority(task_id, priority), self._apply_update, track_loading=False)

    def assign(self, task_id: int, assignee_id: int):
        return self._run(lambda: self.api.assign(task_id, assignee_id), self._apply_update, track_loading=False)

    def unassign(self, task_id: int):
        return self._run(lambda: self.api.unassign(task_id), self._apply_update, track_loading=False)

    def _current_tags(self, task_id: int):
        """本地没有该任务时先拉取服务端记录，避免整组覆盖掉已有标签。"""
        for task in self.state.tasks:
            if task.get("id") == task_id:
                return list(task.get("tags") or [])
        if self.state.selected_task and self.state.selected_task.get("id") == task_id:
            return list(self.state.selected_task.get("tags") or [])
        return list(self.api.get(task_id).get("tags") or [])

    def add_tags(self, task_id: int, tags):
        return self._run(lambda: self.api.add_tags(task_id, self._current_tags(task_id), tags),
                         self._apply_update, track_loading=False)

    def remove_tags(self, task_id: int, tags):
        return self._run(lambda: self.api.remove_tags(task_id, self._current_tags(task_id), tags),
                         self._apply_update, track_loading=False)

    def set_selected_task(self, task: Optional[Record]):
        self.state = replace(self.state, selected_task=task)

    def set_filters(self, filters: Dict[str, Any]):
        self.state = replace(self.state, filters=dict(filters))


class AuthStore(_Store):
    initial_state = AuthState

    def __init__(self, api: AuthApi):
        self.api = api
        super().__init__()
        api.client.on_tokens_refreshed = self._on_tokens_refreshed
        api.client.on_auth_lost = self._on_auth_lost

    def _on_tokens_refreshed(self, tokens: Dict[str, str]):
        self.state = replace(self.state, tokens=dict(tokens))

    def _on_auth_lost(self):
        logger.info("Session expired, clearing auth state")
        self.state = AuthState()

    def refresh_token(self):
        """用 refresh token 换新 token；失败时清空登录状态并重新抛出。"""
        if not self.state.tokens:
            return None
        try:
            result = self.api.refresh(self.state.tokens.get("refreshToken"))
        except Exception:
            self.api.client.clear_tokens()
            self.state = AuthState()
            raise
        tokens = (result or {}).get("tokens") or {}
        self.api.client.set_tokens(tokens.get("accessToken"), tokens.get("refreshToken"))
        self.state = replace(self.state, tokens=tokens)
        return tokens

    def _signed_in(self, state: AuthState, result: Record) -> AuthState:
        tokens = result.get("tokens") or {}
        self.api.client.set_tokens(tokens.get("accessToken"), tokens.get("refreshToken"))
        return replace(state, user=result.get("user"), tokens=tokens)

    def login(self, email: str, password: str):
        return self._run(lambda: self.api.login(email, password), self._signed_in)

    def register(self, email: str, password: str, username: str, first_name: str, last_name: str):
        return self._run(lambda: self.api.register(email, password, username, first_name, last_name),
                         self._signed_in)

    def logout(self):
        """本地状态总是清空；服务端注销失败只记录日志。"""
        refresh_token = (self.state.tokens or {}).get("refreshToken")
        if self.state.tokens:
            try:
                self.api.logout(refresh_token)
            except Exception as e:
                logger.warning("Logout request failed: %s", e)
        self.api.client.clear_tokens()
        self.state = AuthState()

    def update_user(self, updates: Record):
        if self.state.user is None:
            return
        self.state = replace(self.state, user={**self.state.user, **updates})
