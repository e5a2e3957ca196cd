# utils/exceptions.py
from typing import Any, List, Optional
from werkzeug.exceptions import HTTPException


class BizError(HTTPException):
    code: int  # HTTP 状态码
    message: str  # 业务提示
    data: Optional[Any]  # 附加数据
    errors: Optional[List[str]]  # 字段级错误明细

    default_message = "Request failed"
    default_code = 400

    def __init__(self, message: str = None, code: int = None, data: Any = None, errors: List[str] = None):
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.data = data
        self.errors = errors
        super().__init__(description=self.message)


class ValidationError(BizError):
    """缺失 / 非法 / 超出枚举范围的输入。"""
    default_message = "Validation error"
    default_code = 400


class AuthenticationError(BizError):
    """缺少、非法或过期的凭证。"""
    default_message = "Authentication required"
    default_code = 401


class AuthorizationError(BizError):
    """
    已登录但无权访问。
    默认以 404 “not found or access denied” 呈现，不暴露资源是否存在。
    """
    default_message = "Resource not found or access denied"
    default_code = 404


class NotFoundError(BizError):
    default_message = "Resource not found or access denied"
    default_code = 404


class ConflictError(BizError):
    default_message = "Resource already exists"
    default_code = 409


class RateLimitError(BizError):
    default_message = "Too many attempts, please retry later"
    default_code = 429


class ServerError(BizError):
    default_message = "Internal server error"
    default_code = 500
