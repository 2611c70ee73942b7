"""Authenticated REST client for the tracker backend.

Attaches `Authorization: Bearer <id token>` and `X-User-ID` to every call,
decodes JSON, and turns non-2xx answers into `ApiError` subclasses after
logging the response body and URL.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from influbuddy.adapters.http_client import build_async_client, decode_body
from influbuddy.core.config import AppSettings
from influbuddy.core.errors import ApiError, NotFoundError, UnauthorizedError
from influbuddy.core.interfaces.auth import TokenProvider

logger = logging.getLogger(__name__)


def _error_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if isinstance(message, str):
            return message
    if isinstance(payload, str) and payload.strip():
        return payload.strip()[:300]
    return None


class BackendClient:
    """Thin async wrapper around `httpx.AsyncClient` bound to `api_base_url`."""

    def __init__(
        self,
        tokens: TokenProvider,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._tokens = tokens
        self._client = build_async_client(
            self._settings,
            base_url=self._settings.api_base_url,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def request(self, method: str, path: str, *, json: Any = None) -> Any:
        token, user_id = await self._tokens.get_credentials()
        headers = {
            "Authorization": f"Bearer {token}",
            "X-User-ID": user_id,
        }
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(
                f"Could not reach the backend: {exc}",
                method=method,
                path=path,
            ) from exc

        payload = decode_body(response)
        if response.is_success:
            logger.debug("%s %s -> %s", method, path, response.status_code)
            return payload

        logger.error(
            "%s %s -> HTTP %s (url=%s, body=%r)",
            method,
            path,
            response.status_code,
            response.request.url,
            payload,
        )
        error_cls = ApiError
        if response.status_code == 404:
            error_cls = NotFoundError
        elif response.status_code in (401, 403):
            error_cls = UnauthorizedError
        raise error_cls(
            _error_message(payload) or response.reason_phrase or "Request failed",
            status_code=response.status_code,
            method=method,
            path=path,
            payload=payload,
        )

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str, json: Any = None) -> Any:
        return await self.request("DELETE", path, json=json)


def expect_list(payload: Any, *, method: str, path: str) -> list[Any]:
    if not isinstance(payload, list):
        raise ApiError("Unexpected response: expected a JSON array", method=method, path=path, payload=payload)
    return payload


def expect_object(payload: Any, *, method: str, path: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ApiError("Unexpected response: expected a JSON object", method=method, path=path, payload=payload)
    return payload
