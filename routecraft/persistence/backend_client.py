"""Async REST client for the RouteCraft backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from routecraft.persistence.auth_context import AuthContext
from routecraft.persistence.errors import BackendUnreachableError, error_for_status

logger = logging.getLogger(__name__)

# A 401 carrying one of these in its message means the token itself is dead.
_DEAD_TOKEN_MARKERS = ("token", "expired")


class BackendClient:
    """JSON-over-HTTP access to the backend with typed error mapping.

    Non-2xx responses raise a ``PersistenceError`` subclass chosen by
    status; transport failures raise ``BackendUnreachableError``. A 204
    or empty body returns ``None``.
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthContext,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._client = http_client or httpx.AsyncClient(timeout=30.0)

    @property
    def auth(self) -> AuthContext:
        return self._auth

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, json=json, params=params)

    async def put(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, json=json, params=params)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def post_file(
        self, path: str, filename: str, content: bytes, content_type: str
    ) -> Any:
        """Multipart upload under the ``file`` form field."""
        files = {"file": (filename, content, content_type)}
        return await self.request("POST", path, files=files)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(
                method,
                url,
                json=json,
                params=params,
                files=files,
                headers=self._auth.headers(),
            )
        except httpx.TransportError as exc:
            raise BackendUnreachableError(
                f"Failed to connect to server: {exc}"
            ) from exc

        if resp.is_success:
            if resp.status_code == 204 or not resp.content.strip():
                return None
            try:
                return resp.json()
            except ValueError:
                logger.warning("Non-JSON success response from %s %s", method, path)
                return None

        raise self._error_from_response(resp, method, path)

    def _error_from_response(self, resp: httpx.Response, method: str, path: str):
        data: Any = None
        message = f"HTTP error! status: {resp.status_code}"
        field_errors: list[str] = []

        if resp.content:
            try:
                data = resp.json()
            except ValueError:
                message = resp.text.strip() or resp.reason_phrase or message

        if isinstance(data, dict):
            if isinstance(data.get("errors"), list):
                field_errors = [str(e) for e in data["errors"]]
                message = ", ".join(field_errors)
            elif data.get("message"):
                message = str(data["message"])
            elif data.get("error"):
                message = str(data["error"])
            if data.get("details"):
                message = f"{message}\n\nDetails: {data['details']}"
        elif resp.status_code == 401:
            message = "Unauthorized"
        elif resp.status_code == 404:
            message = "Not Found"

        if resp.status_code == 401 and self._auth.is_authenticated:
            lowered = message.lower()
            if any(marker in lowered for marker in _DEAD_TOKEN_MARKERS):
                logger.info("Backend rejected the access token, clearing it")
                self._auth.clear()

        logger.warning("%s %s failed with %d: %s", method, path, resp.status_code, message)
        return error_for_status(resp.status_code, message, data, field_errors)
