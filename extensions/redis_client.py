# extensions/redis_client.py
import os
import redis

_redis_client = None


def get_redis():
    global _redis_client
    if _redis_client is not None:
        return _redis_client
    url = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")
    _redis_client = redis.from_url(url, decode_responses=True)
    return _redis_client


def set_redis(client):
    """替换全局 Redis 连接（测试注入 fake，或应用启动时按配置创建）。"""
    global _redis_client
    _redis_client = client


def init_redis(app):
    if _redis_client is None:
        set_redis(redis.from_url(app.config["REDIS_URL"], decode_responses=True))
