import logging
from typing import Any, Optional

import httpx

from frontend_service.config import API_BASE_URL, REQUEST_TIMEOUT, SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed call to the event service.

    ``status_code`` is None when no response arrived at all (network
    failure). ``message`` is whatever the server said, if anything.
    """

    def __init__(self, status_code: Optional[int] = None, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        super().__init__(message or f"request failed ({status_code or 'no response'})")


class Unauthorized(ApiError):
    """The admin session is missing or expired (HTTP 401)."""


def extract_message(res: httpx.Response) -> Optional[str]:
    try:
        body = res.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    detail = body.get("detail", body.get("error"))
    if isinstance(detail, str):
        return detail
    # FastAPI validation errors: [{"loc": [...], "msg": "...", ...}]
    if isinstance(detail, list) and detail and isinstance(detail[0], dict):
        msg = detail[0].get("msg")
        return msg if isinstance(msg, str) else None
    return None


def error_message(err: Exception, fallback: str) -> str:
    if isinstance(err, ApiError) and err.message:
        return err.message
    return fallback


class ApiClient:
    """Shared HTTP client for the event service REST API.

    The admin session cookie, when there is one, rides along on every
    request; nothing about authentication goes into request bodies.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = REQUEST_TIMEOUT
    ):
        cookies = {SESSION_COOKIE_NAME: token} if token else None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            cookies=cookies,
            transport=transport,
            timeout=timeout
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    @property
    def session_token(self) -> Optional[str]:
        token = None
        for cookie in self._client.cookies.jar:
            if cookie.name == SESSION_COOKIE_NAME:
                token = cookie.value
        return token

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            res = await self._client.request(method, path, json=json)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError() from e

        if res.status_code == 401:
            raise Unauthorized(401, extract_message(res))
        if res.is_error:
            raise ApiError(res.status_code, extract_message(res))

        if not res.content:
            return None
        try:
            return res.json()
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, path)
            return None

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
