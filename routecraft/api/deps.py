"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx
from fastapi import Depends, HTTPException, Request

from routecraft.api.auth import auth_context_for, get_bearer_token
from routecraft.api.sessions import DraftSession, DraftSessionStore
from routecraft.config import Settings, get_settings
from routecraft.contracts.enums import PlanType
from routecraft.persistence.auth_context import AuthContext
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.repositories.travel_plan_repo import TravelPlanRepository
from routecraft.services.draft import (
    DraftConfig,
    HIKING_DRAFT,
    TRIP_DRAFT,
    RouteDraftController,
    config_for_plan_type,
)
from routecraft.services.elevation import ElevationSampler, TerrainClient
from routecraft.services.place_search import PlaceSearchClient
from routecraft.services.routing import RoutingClient

DRAFT_KINDS: dict[str, DraftConfig] = {"trip": TRIP_DRAFT, "hike": HIKING_DRAFT}


# ------------------------------------------------------------------
# Shared resources (singletons from app.state)
# ------------------------------------------------------------------


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_session_store(request: Request) -> DraftSessionStore:
    return request.app.state.draft_sessions


# ------------------------------------------------------------------
# Per-request collaborators
# ------------------------------------------------------------------


def get_auth_context(token: str = Depends(get_bearer_token)) -> AuthContext:
    return auth_context_for(token)


def get_travel_plan_repo(
    auth: AuthContext = Depends(get_auth_context),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> TravelPlanRepository:
    return TravelPlanRepository(BackendClient(settings.api_url, auth, http_client))


def get_place_search(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> PlaceSearchClient:
    return PlaceSearchClient(
        settings.api_url, http_client, default_radius_m=settings.place_search_radius_m
    )


class DraftFactory:
    """Builds a draft controller whose backend calls use the given auth."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._http_client = http_client

    def repository(self, auth: AuthContext) -> TravelPlanRepository:
        return TravelPlanRepository(BackendClient(self._settings.api_url, auth, self._http_client))

    def controller(self, config: DraftConfig, auth: AuthContext) -> RouteDraftController:
        token = self._settings.mapbox_token
        routing = RoutingClient(token, self._http_client)
        elevation = ElevationSampler(
            TerrainClient(token, self._http_client),
            max_samples=self._settings.elevation_max_samples,
        )
        return RouteDraftController(config, routing, self.repository(auth), elevation)

    def controller_for_plan_type(
        self, plan_type: PlanType | int, auth: AuthContext
    ) -> RouteDraftController:
        return self.controller(config_for_plan_type(plan_type), auth)


def get_draft_factory(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> DraftFactory:
    if not settings.mapbox_token:
        raise HTTPException(status_code=503, detail="Routing is not configured (MAPBOX_TOKEN)")
    return DraftFactory(settings, http_client)


def get_draft_session(
    session_id: str,
    token: str = Depends(get_bearer_token),
    store: DraftSessionStore = Depends(get_session_store),
) -> DraftSession:
    """Look up a session opened with this request's token.

    Another token gets 403, so backend calls made for the session always
    carry its owner's identity. The owner token is re-armed in case a
    backend 401 cleared it.
    """
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Draft session {session_id} not found")
    if not session.owned_by(token):
        raise HTTPException(status_code=403, detail="Draft session belongs to another user")
    if not session.auth.is_authenticated:
        session.auth.set(token)
    return session
