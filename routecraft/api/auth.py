"""Bearer token extraction for draft endpoints.

The token is not verified here: the backend verifies it on every call the
engine makes on the user's behalf.
"""

from __future__ import annotations

from fastapi import Header, HTTPException

from routecraft.persistence.auth_context import AuthContext


async def get_bearer_token(
    authorization: str | None = Header(None, description="Bearer <backend access token>"),
) -> str:
    """Extract the token from the Authorization header."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token


def auth_context_for(token: str) -> AuthContext:
    return AuthContext(token)
