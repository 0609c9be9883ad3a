"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from routecraft.api.app import app
from routecraft.api.sessions import DraftSessionStore
from routecraft.config import Settings, get_settings
from tests.persistence.fake_backend import BASE_URL, FakeBackend
from tests.services.mapbox_fakes import TOKEN, FakeMapbox

API_TOKEN = "api-test-token"


@pytest.fixture
def backend():
    """In-memory backend fake, shared by every repository in a single test."""
    return FakeBackend()


@pytest.fixture
def mapbox():
    return FakeMapbox()


@pytest.fixture
def test_app(backend, mapbox):
    """FastAPI app with dependency overrides for testing."""
    backend_host = httpx.URL(BASE_URL).host

    def route(request: httpx.Request) -> httpx.Response:
        if request.url.host == backend_host:
            return backend.handle(request)
        return mapbox.handle(request)

    settings = Settings(mapbox_token=TOKEN, api_url=BASE_URL)
    app.dependency_overrides[get_settings] = lambda: settings

    # The lifespan does not run under ASGITransport; set its state by hand
    app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(route))
    app.state.draft_sessions = DraftSessionStore()
    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app, authenticated."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {API_TOKEN}"},
    ) as c:
        yield c
