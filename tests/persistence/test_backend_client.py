"""Tests for the backend REST client and its error mapping."""

from __future__ import annotations

import httpx
import pytest

from routecraft.persistence.auth_context import AuthContext
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.errors import (
    BackendUnreachableError,
    ForbiddenError,
    NotFoundError,
    RequestValidationError,
    ServerError,
    UnauthorizedError,
    describe_persistence_error,
)

BASE = "http://backend.test"


def _client(handler, token: str | None = "tok") -> BackendClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BackendClient(BASE, AuthContext(token), http_client=http)


class TestRequests:
    async def test_sends_bearer_and_json(self):
        seen: list[httpx.Request] = []

        def handler(req):
            seen.append(req)
            return httpx.Response(200, json={"ok": True})

        result = await _client(handler).post("/api/things", {"a": 1})

        assert result == {"ok": True}
        assert seen[0].headers["authorization"] == "Bearer tok"
        assert seen[0].url == httpx.URL(f"{BASE}/api/things")

    async def test_anonymous_has_no_header(self):
        seen: list[httpx.Request] = []

        def handler(req):
            seen.append(req)
            return httpx.Response(200, json=[])

        await _client(handler, token=None).get("/api/things")
        assert "authorization" not in seen[0].headers

    async def test_no_content(self):
        assert await _client(lambda req: httpx.Response(204)).delete("/api/things/1") is None

    async def test_empty_body(self):
        assert await _client(lambda req: httpx.Response(200, content=b"")).get("/x") is None

    async def test_transport_failure(self):
        def handler(req):
            raise httpx.ConnectError("refused", request=req)

        with pytest.raises(BackendUnreachableError):
            await _client(handler).get("/x")

    async def test_multipart_upload(self):
        seen: list[httpx.Request] = []

        def handler(req):
            seen.append(req)
            return httpx.Response(200, json={"imageUrl": "u"})

        await _client(handler).post_file("/upload", "a.png", b"data", "image/png")
        assert seen[0].headers["content-type"].startswith("multipart/form-data")
        assert b'name="file"; filename="a.png"' in seen[0].content


class TestErrorMapping:
    @pytest.mark.parametrize("status, error_type", [
        (400, RequestValidationError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, RequestValidationError),
        (500, ServerError),
        (503, ServerError),
    ])
    async def test_status_to_type(self, status, error_type):
        client = _client(lambda req: httpx.Response(status, json={"message": "nope"}))
        with pytest.raises(error_type) as exc_info:
            await client.get("/x")
        assert exc_info.value.status_code == status
        assert exc_info.value.message == "nope"

    async def test_errors_list_joined(self):
        body = {"errors": ["Title is required", "Type is invalid"]}
        client = _client(lambda req: httpx.Response(400, json=body))
        with pytest.raises(RequestValidationError) as exc_info:
            await client.post("/x", {})
        assert exc_info.value.message == "Title is required, Type is invalid"
        assert describe_persistence_error(exc_info.value) == "Title is required, Type is invalid"

    async def test_error_key_and_details(self):
        body = {"error": "Boom", "details": "stack"}
        client = _client(lambda req: httpx.Response(500, json=body))
        with pytest.raises(ServerError, match="Boom") as exc_info:
            await client.get("/x")
        assert "Details: stack" in exc_info.value.message

    async def test_plain_text_error(self):
        client = _client(lambda req: httpx.Response(502, text="Bad gateway"))
        with pytest.raises(ServerError, match="Bad gateway"):
            await client.get("/x")

    async def test_expired_token_clears_auth(self):
        auth = AuthContext("old")
        http = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda req: httpx.Response(401, json={"message": "Token expired"})
        ))
        with pytest.raises(UnauthorizedError):
            await BackendClient(BASE, auth, http_client=http).get("/x")
        assert auth.get() is None

    async def test_other_401_keeps_auth(self):
        auth = AuthContext("still-good")
        http = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda req: httpx.Response(401, json={"message": "Not your plan"})
        ))
        with pytest.raises(UnauthorizedError):
            await BackendClient(BASE, auth, http_client=http).get("/x")
        assert auth.get() == "still-good"


class TestAuthContext:
    def test_set_and_clear(self):
        auth = AuthContext()
        assert not auth.is_authenticated
        auth.set("t")
        assert auth.headers() == {"Authorization": "Bearer t"}
        auth.clear()
        assert auth.headers() == {}

    def test_rejects_empty_token(self):
        with pytest.raises(ValueError):
            AuthContext().set("")

    def test_repr_hides_token(self):
        assert "secret" not in repr(AuthContext("secret"))


def test_describe_messages():
    assert "log in" in describe_persistence_error(UnauthorizedError("x", 401))
    assert "permission" in describe_persistence_error(ForbiddenError("x", 403))
    assert "connect" in describe_persistence_error(BackendUnreachableError("x"))
    assert "try again" in describe_persistence_error(ServerError("x", 500))
