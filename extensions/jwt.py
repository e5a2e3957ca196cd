# extensions/jwt.py
"""
HS256 签名的 access / refresh token：
- 两类 token 使用不同密钥与有效期，载荷中的 type 防止混用；
- jti 用于注销，黑名单存 Redis，过期时间与 token 剩余有效期一致。
"""
import time, json, base64, hmac, hashlib, uuid
from flask import current_app
from extensions.redis_client import get_redis

ACCESS = "access"
REFRESH = "refresh"

_TOKEN_SETTINGS = {
    # type: (密钥配置项, 有效期配置项)
    ACCESS: ("JWT_SECRET_KEY", "ACCESS_TOKEN_EXPIRES_SECONDS"),
    REFRESH: ("JWT_REFRESH_SECRET_KEY", "REFRESH_TOKEN_EXPIRES_SECONDS"),
}
_HEADER = {"alg": "HS256", "typ": "JWT"}
_BLACKLIST_PREFIX = "jwt:blk:"


class TokenError(ValueError):
    pass


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode_json(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded).decode())


def _settings(token_type: str):
    try:
        secret_key, expiry_key = _TOKEN_SETTINGS[token_type]
    except KeyError:
        raise TokenError(f"Unknown token type: {token_type}")
    cfg = current_app.config
    return cfg[secret_key].encode(), cfg[expiry_key]


def _signature(secret: bytes, signing_input: str) -> str:
    return _b64encode(hmac.new(secret, signing_input.encode(), hashlib.sha256).digest())


def create_token(user_id: int, token_type: str = ACCESS, expires_seconds: int | None = None) -> str:
    secret, default_ttl = _settings(token_type)
    issued_at = int(time.time())
    payload = {
        "sub": user_id,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + (default_ttl if expires_seconds is None else expires_seconds),
        "jti": uuid.uuid4().hex,
    }
    signing_input = ".".join(
        _b64encode(json.dumps(part, separators=(",", ":")).encode()) for part in (_HEADER, payload)
    )
    return f"{signing_input}.{_signature(secret, signing_input)}"


def decode_token(token: str, token_type: str = ACCESS, check_revoked: bool = True) -> dict:
    secret, _ = _settings(token_type)
    try:
        header_b64, payload_b64, sig = token.split(".")
        if not hmac.compare_digest(_signature(secret, f"{header_b64}.{payload_b64}"), sig):
            raise TokenError("Invalid token signature")
        payload = _b64decode_json(payload_b64)
    except TokenError:
        raise
    except Exception:
        raise TokenError("Invalid token")

    if payload.get("type") != token_type:
        raise TokenError("Invalid token type")
    if time.time() > payload.get("exp", 0):
        raise TokenError("Token expired")
    if check_revoked and is_token_revoked(payload.get("jti")):
        raise TokenError("Token revoked")
    return payload


def revoke_token(token: str, token_type: str = ACCESS):
    """
    注销 token：jti 写入黑名单直到原定过期时间。
    幂等：无法解析或已过期的 token 直接忽略。
    """
    try:
        payload = decode_token(token, token_type, check_revoked=False)
    except TokenError:
        return
    ttl = max(int(payload["exp"] - time.time()), 1)
    get_redis().setex(f"{_BLACKLIST_PREFIX}{payload['jti']}", ttl, "1")


def is_token_revoked(jti: str | None) -> bool:
    if not jti:
        return True
    return bool(get_redis().get(f"{_BLACKLIST_PREFIX}{jti}"))
