# services/rate_limit_service.py
from flask import current_app

from repositories.rate_limit_repository import RateLimitRepository
from utils.exceptions import RateLimitError


class LoginRateLimiter:
    """按邮箱统计连续登录失败次数，达到上限后在窗口期内拒绝登录。"""

    def __init__(self, email: str, fail_limit: int, block_seconds: int):
        self.key = f"login:fail:{email.strip().lower()}"
        self.fail_limit = fail_limit
        self.block_seconds = block_seconds

    @classmethod
    def for_email(cls, email: str) -> "LoginRateLimiter":
        cfg = current_app.config
        return cls(email, cfg.get("LOGIN_FAIL_LIMIT", 5), cfg.get("LOGIN_BLOCK_SECONDS", 900))

    def ensure_not_blocked(self):
        count, ttl = RateLimitRepository.snapshot(self.key)
        if count >= self.fail_limit:
            raise RateLimitError(f"Too many failed login attempts, retry in {ttl} seconds")

    def record_failure(self) -> int:
        return RateLimitRepository.incr_fail(self.key, self.block_seconds)

    def clear(self):
        RateLimitRepository.clear(self.key)
