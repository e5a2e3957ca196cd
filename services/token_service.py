# services/token_service.py
from extensions.jwt import ACCESS, REFRESH, TokenError, create_token, decode_token, revoke_token
from services.user_service import UserService
from utils.exceptions import AuthenticationError

INVALID_REFRESH = "Invalid refresh token"


class TokenService:
    @staticmethod
    def issue(user_id: int) -> dict:
        """签发一对 token：短期 access（15 分钟）+ 长期 refresh（7 天）。"""
        return {
            "accessToken": create_token(user_id, ACCESS),
            "refreshToken": create_token(user_id, REFRESH),
        }

    @staticmethod
    def refresh(refresh_token: str) -> dict:
        try:
            payload = decode_token(refresh_token, REFRESH)
        except TokenError:
            raise AuthenticationError(INVALID_REFRESH)
        if not UserService.get_active_user(payload.get("sub")):
            raise AuthenticationError(INVALID_REFRESH)
        # 旧 refresh token 作废，避免重复使用
        revoke_token(refresh_token, REFRESH)
        return TokenService.issue(payload["sub"])

    @staticmethod
    def revoke(access_token: str | None, refresh_token: str | None = None):
        if access_token:
            revoke_token(access_token, ACCESS)
        if refresh_token:
            revoke_token(refresh_token, REFRESH)
