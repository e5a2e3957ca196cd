# client/services.py
"""
REST 接口门面：每个方法对应一个端点，返回解包后的 data。
"""
from typing import Any, Dict, Iterable, List, Optional

from client.api_client import APIClient


def _drop_none(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v is not None}


class AuthApi:
    def __init__(self, client: APIClient):
        self.client = client

    def register(self, email: str, password: str, username: str, first_name: str, last_name: str) -> dict:
        return self.client.post("/api/auth/register", {
            "email": email,
            "password": password,
            "username": username,
            "firstName": first_name,
            "lastName": last_name,
        }, attach_token=False)

    def login(self, email: str, password: str) -> dict:
        return self.client.post("/api/auth/login", {"email": email, "password": password}, attach_token=False)

    def refresh(self, refresh_token: str) -> dict:
        return self.client.post("/api/auth/refresh", {"refreshToken": refresh_token}, attach_token=False)

    def logout(self, refresh_token: Optional[str] = None):
        return self.client.post("/api/auth/logout", _drop_none({"refreshToken": refresh_token}))

    def profile(self) -> dict:
        return self.client.get("/api/auth/profile")


class ProjectApi:
    def __init__(self, client: APIClient):
        self.client = client

    def list(self) -> List[dict]:
        return self.client.get("/api/projects")

    def get(self, project_id: int) -> dict:
        return self.client.get(f"/api/projects/{project_id}")

    def create(self, data: Dict[str, Any]) -> dict:
        return self.client.post("/api/projects", data)

    def update(self, project_id: int, updates: Dict[str, Any]) -> dict:
        return self.client.put(f"/api/projects/{project_id}", updates)

    def delete(self, project_id: int):
        return self.client.delete(f"/api/projects/{project_id}")

    def list_members(self, project_id: int) -> List[dict]:
        return self.client.get(f"/api/projects/{project_id}/members")

    def add_member(self, project_id: int, user_id: int, role: Optional[str] = None) -> dict:
        return self.client.post(f"/api/projects/{project_id}/members", _drop_none({"userId": user_id, "role": role}))


class TaskApi:
    def __init__(self, client: APIClient):
        self.client = client

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[dict]:
        return self.client.get("/api/tasks", params=_drop_none(filters))

    def get(self, task_id: int) -> dict:
        return self.client.get(f"/api/tasks/{task_id}")

    def create(self, data: Dict[str, Any]) -> dict:
        return self.client.post("/api/tasks", data)

    def update(self, task_id: int, updates: Dict[str, Any]) -> dict:
        return self.client.put(f"/api/tasks/{task_id}", updates)

    def delete(self, task_id: int):
        return self.client.delete(f"/api/tasks/{task_id}")

    # -------- 便捷操作 --------
    def move_to_status(self, task_id: int, status: str) -> dict:
        return self.update(task_id, {"status": status})

    def set_priority(self, task_id: int, priority: str) -> dict:
        return self.update(task_id, {"priority": priority})

    def assign(self, task_id: int, assignee_id: int) -> dict:
        return self.update(task_id, {"assigneeId": assignee_id})

    def unassign(self, task_id: int) -> dict:
        return self.update(task_id, {"assigneeId": None})

    def add_tags(self, task_id: int, current: Iterable[str], tags: Iterable[str]) -> dict:
        merged = list(current)
        for tag in tags:
            if tag not in merged:
                merged.append(tag)
        return self.update(task_id, {"tags": merged})

    def remove_tags(self, task_id: int, current: Iterable[str], tags: Iterable[str]) -> dict:
        drop = set(tags)
        return self.update(task_id, {"tags": [t for t in current if t not in drop]})
