import logging
from typing import Any

import httpx

from iotlock.core.config import Settings
from iotlock.core.exceptions import ApiError, NetworkError

logger = logging.getLogger(__name__)

FAILED_BODY_STATUSES = {"error", "failed", "failure"}


def is_success(response: httpx.Response, payload: Any) -> bool:
    """Single success predicate for every endpoint.

    2xx, and if the body is an object with a ``status`` field, that field must
    not report a failure.
    """
    if not response.is_success:
        return False
    if isinstance(payload, dict) and "status" in payload:
        return str(payload["status"]).lower() not in FAILED_BODY_STATUSES
    return True


def error_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
            if isinstance(value, list) and value:
                # FastAPI validation errors
                first = value[0]
                if isinstance(first, dict) and first.get("msg"):
                    return str(first["msg"])
    return default


class ApiClient:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self._client = httpx.AsyncClient(
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def url(self, path: str, upload: bool = False) -> str:
        base = self.settings.upload_base_url if upload else self.settings.api_base_url
        return f"{base}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        token: str | None = None,
        use_api_key: bool = False,
        files: Any = None,
        upload: bool = False,
    ) -> Any:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if use_api_key:
            headers["X-API-Key"] = self.settings.API_KEY

        url = self.url(path, upload=upload)
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                files=files,
            )
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, url, exc.__class__.__name__)
            raise NetworkError() from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not is_success(response, payload):
            message = error_message(payload, f"Request failed with status {response.status_code}")
            logger.error("%s %s -> %s: %s", method, url, response.status_code, message)
            raise ApiError(message, status_code=response.status_code, payload=payload)

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return payload

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()
