# -*- coding: utf-8 -*-
"""
partial_update.py
--------------------------------------------------------------------
PUT 请求的“部分更新”结构：
- 每个字段默认 UNSET，表示调用方未提供；显式传 None 表示清空该字段。
- from_payload() 负责把 camelCase 请求体映射到 snake_case 字段。
- changes() 返回已提供字段的 {字段: 值}，由仓储层逐字段合并到实体。
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()


class PartialUpdate:
    # 请求体 key -> 字段名
    payload_keys: Dict[str, str] = {}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None):
        payload = payload or {}
        values = {}
        for key, attr in cls.payload_keys.items():
            if key in payload:
                values[attr] = payload[key]
        return cls(**values)

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass
class ProjectUpdate(PartialUpdate):
    name: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    start_date: Any = UNSET
    end_date: Any = UNSET

    payload_keys = {
        "name": "name",
        "description": "description",
        "status": "status",
        "startDate": "start_date",
        "endDate": "end_date",
    }


@dataclass
class TaskUpdate(PartialUpdate):
    title: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET
    assignee_id: Any = UNSET
    due_date: Any = UNSET
    estimated_hours: Any = UNSET
    actual_hours: Any = UNSET
    tags: Any = UNSET

    payload_keys = {
        "title": "title",
        "description": "description",
        "status": "status",
        "priority": "priority",
        "assigneeId": "assignee_id",
        "dueDate": "due_date",
        "estimatedHours": "estimated_hours",
        "actualHours": "actual_hours",
        "tags": "tags",
    }
