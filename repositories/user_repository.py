# repositories/user_repository.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, or_

from models.user import User
from extensions.database import db


class UserRepository:
    """
    用户仓储（数据访问）层。
    说明：
    - 不做业务规则判断（如密码策略、唯一性提示），仅做纯粹的持久化读写。
    - 写操作不自动 commit，由上层显式调用 commit()。
    """

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def find_by_email(email: str) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == email)
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def exists_email_or_username(email: str, username: str) -> bool:
        stmt = select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
        return db.session.execute(stmt).first() is not None

    @staticmethod
    def create(email: str, username: str, password_hash: str, first_name: str, last_name: str, role: str) -> User:
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        db.session.add(user)
        db.session.flush()
        return user

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
