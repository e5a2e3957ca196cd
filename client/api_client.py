import logging
import requests
from typing import Optional, Dict, Any, Callable

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """接口返回非 2xx 或网络异常时抛出；str(e) 即可展示给用户的错误信息。"""

    def __init__(self, status: int, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []

    def __str__(self):
        return self.message


class APIClient:
    """统一的API客户端"""

    def __init__(self, base_url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.session = session or requests.Session()
        # token 刷新后回调，供 AuthStore 同步状态
        self.on_tokens_refreshed: Optional[Callable[[Dict[str, str]], None]] = None
        # refresh token 失效、本地 token 被清空时回调
        self.on_auth_lost: Optional[Callable[[], None]] = None

    def set_tokens(self, access_token: Optional[str], refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def clear_tokens(self):
        self.set_tokens(None, None)

    def _send(self, method: str, path: str, params=None, json_data=None, attach_token=True):
        headers = {"Content-Type": "application/json"}
        if attach_token and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            return self.session.request(
                method=method.upper(),
                url=f"{self.base_url}{path}",
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method.upper(), path, e)
            raise ApiError(0, f"Network error: {e}")

    @staticmethod
    def _unwrap(response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if 200 <= response.status_code < 300 and body.get("success", True):
            return body.get("data")
        message = body.get("message") or f"Request failed with status {response.status_code}"
        raise ApiError(response.status_code, message, body.get("errors"))

    def _try_refresh(self) -> bool:
        if not self.refresh_token:
            return False
        response = self._send("POST", "/api/auth/refresh",
                              json_data={"refreshToken": self.refresh_token}, attach_token=False)
        try:
            data = self._unwrap(response)
        except ApiError:
            self.clear_tokens()
            if self.on_auth_lost:
                self.on_auth_lost()
            return False
        tokens = (data or {}).get("tokens") or {}
        self.set_tokens(tokens.get("accessToken"), tokens.get("refreshToken"))
        if self.on_tokens_refreshed:
            self.on_tokens_refreshed(tokens)
        return bool(self.access_token)

    def request(self, method: str, path: str,
                params: Optional[Dict] = None,
                json_data: Optional[Dict] = None,
                attach_token: bool = True) -> Any:
        """
        发送请求并解包 {success, data, message} 信封，返回 data。
        access token 过期（401）且持有 refresh token 时，刷新一次后重试。
        """
        response = self._send(method, path, params, json_data, attach_token)
        if response.status_code == 401 and attach_token and self._try_refresh():
            response = self._send(method, path, params, json_data, attach_token)
        return self._unwrap(response)

    def get(self, path: str, params: Optional[Dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json_data: Optional[Dict] = None, attach_token: bool = True) -> Any:
        return self.request("POST", path, json_data=json_data, attach_token=attach_token)

    def put(self, path: str, json_data: Optional[Dict] = None) -> Any:
        return self.request("PUT", path, json_data=json_data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
