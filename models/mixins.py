# models/mixins.py
from sqlalchemy import func, DateTime
from extensions.database import db
from utils.datetime_helpers import utcnow

COMMON_TABLE_ARGS = {
    "mysql_engine": "InnoDB",
    "mysql_charset": "utf8mb4",
    "mysql_collate": "utf8mb4_unicode_ci",
}


class TimestampMixin:
    # Python 侧默认值保留微秒，列表按创建时间倒序时更稳定
    created_at = db.Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)
    updated_at = db.Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)

    def touch(self):
        """刷新 updated_at；部分更新即使字段值未变也要刷新。"""
        self.updated_at = utcnow()
