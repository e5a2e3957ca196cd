# services/user_service.py
import logging

from models.user import User
from repositories.user_repository import UserRepository
from services.rate_limit_service import LoginRateLimiter
from utils.password import hash_password, verify_password, validate_password_policy
from utils.exceptions import AuthenticationError, ConflictError, ServerError, ValidationError
from utils.validators import (
    PERSON_NAME_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    require_text,
    validate_email,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from constants.roles import UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class UserService:

    @staticmethod
    def _validate_registration(email, password, username, first_name, last_name) -> dict:
        """校验注册字段，返回清洗后的数据；错误汇总到 errors 一并返回。"""
        errors = []
        cleaned = {}

        if not isinstance(email, str) or not email.strip():
            errors.append("email is required")
        elif not validate_email(email.strip()):
            errors.append("email must be a valid email")
        else:
            cleaned["email"] = email.strip().lower()

        if not isinstance(password, str) or not password:
            errors.append("password is required")
        else:
            errors.extend(validate_password_policy(password))

        for field, value, min_len, max_len in (
            ("username", username, USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH),
            ("firstName", first_name, 1, PERSON_NAME_MAX_LENGTH),
            ("lastName", last_name, 1, PERSON_NAME_MAX_LENGTH),
        ):
            try:
                cleaned[field] = require_text(value, field, max_length=max_len, min_length=min_len)
            except ValidationError as e:
                errors.append(e.message)

        if errors:
            raise ValidationError(errors[0], errors=errors)
        return cleaned

    @staticmethod
    def register(email: str, password: str, username: str, first_name: str, last_name: str) -> User:
        # 1. 基础校验
        data = UserService._validate_registration(email, password, username, first_name, last_name)

        # 2. 唯一性
        if UserRepository.exists_email_or_username(data["email"], data["username"]):
            raise ConflictError("User already exists")

        # 3. 持久化
        try:
            user = UserRepository.create(
                email=data["email"],
                username=data["username"],
                password_hash=hash_password(password),
                first_name=data["firstName"],
                last_name=data["lastName"],
                role=UserRole.MEMBER.value,
            )
            UserRepository.commit()
        except IntegrityError:
            # 并发注册时唯一约束兜底
            UserRepository.rollback()
            raise ConflictError("User already exists")
        except SQLAlchemyError:
            UserRepository.rollback()
            logger.exception("Failed to register user %s", data["email"])
            raise ServerError("Failed to register user")

        logger.info("User registered: %s (id=%s)", user.username, user.id)
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> User:
        if not isinstance(email, str) or not email.strip() or not password:
            raise ValidationError("email and password are required")
        email = email.strip().lower()

        limiter = LoginRateLimiter.for_email(email)
        limiter.ensure_not_blocked()

        user = UserRepository.find_by_email(email)
        if not user:
            limiter.record_failure()
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        if not verify_password(user.password_hash, password):
            limiter.record_failure()
            raise AuthenticationError(INVALID_CREDENTIALS)

        limiter.clear()
        return user

    @staticmethod
    def get_active_user(user_id) -> User | None:
        user = UserRepository.find_by_id(user_id)
        if not user or not user.is_active:
            return None
        return user
