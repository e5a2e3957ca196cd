# repositories/rate_limit_repository.py
from typing import Tuple

from extensions.redis_client import get_redis


class RateLimitRepository:
    """失败计数器：key 首次计数时设置过期时间，窗口结束自动清零。"""

    @staticmethod
    def snapshot(key: str) -> Tuple[int, int]:
        """返回 (当前计数, 剩余秒数)；key 不存在时为 (0, 0)。"""
        r = get_redis()
        raw = r.get(key)
        if not raw:
            return 0, 0
        ttl = r.ttl(key)
        return int(raw), max(int(ttl or 0), 0)

    @staticmethod
    def incr_fail(key: str, window_seconds: int) -> int:
        r = get_redis()
        count = r.incr(key)
        if count == 1:
            r.expire(key, window_seconds)
        return count

    @staticmethod
    def clear(key: str):
        get_redis().delete(key)
