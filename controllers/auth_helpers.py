# controllers/auth_helpers.py
from __future__ import annotations

from functools import wraps

from flask import g, request

from extensions.jwt import ACCESS, TokenError, decode_token
from services.user_service import UserService
from utils.response import json_response


def extract_bearer(auth_header: str | None) -> str | None:
    if not auth_header:
        return None
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        return token or None
    return None


def _resolve_user_from_token(token: str):
    """
    解析 access token 并返回 user 对象。
    失败时抛出 ValueError(message)，由装饰器统一返回 401。
    """
    try:
        payload = decode_token(token, ACCESS)
    except TokenError:
        raise ValueError("Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None:
        raise ValueError("Invalid token payload")
    user = UserService.get_active_user(user_id)
    if not user:
        raise ValueError("User not found or deactivated")
    return user


def auth_required():
    """
    鉴权装饰器：
      - 验证 Authorization: Bearer <token>
      - 解析 token -> user，注入 g.current_user
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = None
            token = extract_bearer(request.headers.get("Authorization"))
            if not token:
                return json_response(code=401, message="Access token required")
            try:
                user = _resolve_user_from_token(token)
            except ValueError as ve:
                return json_response(code=401, message=str(ve))

            g.current_user = user
            g.current_user_id = user.id
            g.access_token = token
            return fn(*args, **kwargs)

        return wrapper

    return decorator
