# -*- coding: utf-8 -*-
"""
user.py
--------------------------------------------------------------------
用户实体。
说明：
- 注册时创建；不做物理删除，is_active 控制账号启用状态。
- role 字段为全局角色：admin / manager / member，与项目内成员角色无关。
- 通过 ProjectMember 与项目建立多对多关系。
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS
from constants.roles import UserRole
from utils.datetime_helpers import datetime_to_iso


class User(TimestampMixin, db.Model):
    __tablename__ = "users"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.MEMBER.value,
                     server_default=UserRole.MEMBER.value)
    avatar = db.Column(db.Text)
    is_active = db.Column(db.Boolean, nullable=False, default=True, server_default="1")

    def __repr__(self):
        return f"<User id={self.id} username={self.username} role={self.role}>"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "avatar": self.avatar,
            "isActive": self.is_active,
            "createdAt": datetime_to_iso(self.created_at),
            "updatedAt": datetime_to_iso(self.updated_at),
        }

    def to_brief(self):
        """任务详情中反规范化展示的用户摘要。"""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "username": self.username,
            "email": self.email,
        }
