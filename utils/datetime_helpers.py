# -*- coding: utf-8 -*-
"""Datetime helpers.

数据库中存储的 ``datetime`` 一律视为 UTC（无时区信息）。接口层统一
输出带 ``+00:00`` 偏移的 ISO 8601 字符串，日期字段输出 ``YYYY-MM-DD``。
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def _ensure_utc(dt: datetime) -> datetime:
    """将给定 ``datetime`` 统一转换为带 UTC 时区的对象。"""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """转为 UTC 后去掉时区信息，便于与数据库中的值比较/存储。"""

    return _ensure_utc(dt).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def datetime_to_iso(dt: Optional[datetime]) -> Optional[str]:
    """将 ``datetime`` 格式化为 UTC ISO 字符串; ``None`` 时直接返回 ``None``。"""

    if dt is None:
        return None
    return _ensure_utc(dt).isoformat()


def date_to_iso(d: Optional[date]) -> Optional[str]:
    if d is None:
        return None
    return d.isoformat()
