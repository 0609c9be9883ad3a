"""Explicit holder for the backend access token.

One ``AuthContext`` is threaded through each ``BackendClient``; there is
no module-level token storage.
"""

from __future__ import annotations


class AuthContext:
    """Bearer token for backend calls, with explicit get/set/clear."""

    def __init__(self, token: str | None = None):
        self._token = token or None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("Token must be a non-empty string")
        self._token = token

    def clear(self) -> None:
        self._token = None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def headers(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def __repr__(self) -> str:
        return f"AuthContext(authenticated={self.is_authenticated})"
