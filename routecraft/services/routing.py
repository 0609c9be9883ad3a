"""Mapbox Directions client — route geometry resolver."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from routecraft.contracts.enums import TravelProfile
from routecraft.contracts.route import ResolvedRoute, RouteGeometry
from routecraft.services.errors import RouteUnavailableError
from routecraft.services.geojson import format_path

logger = logging.getLogger(__name__)

BASE_URL = "https://api.mapbox.com/directions/v5/mapbox"
MAX_COORDINATES = 25  # Directions API limit per request


class RoutingClient:
    """Async HTTP client for the Mapbox Directions API.

    Takes the **first** candidate route as authoritative. Every failure
    (transport, HTTP status, no candidates, malformed geometry) surfaces
    as ``RouteUnavailableError``.
    """

    def __init__(self, access_token: str, http_client: httpx.AsyncClient | None = None):
        if not access_token:
            raise ValueError("Mapbox access token not set (MAPBOX_TOKEN)")
        self._token = access_token
        self._client = http_client or httpx.AsyncClient(timeout=30.0)

    async def resolve(
        self,
        positions: Sequence[tuple[float, float]],
        profile: TravelProfile | str = TravelProfile.DRIVING,
    ) -> ResolvedRoute:
        """Resolve ordered ``(lon, lat)`` positions into a route.

        Raises ``ValueError`` for fewer than 2 positions; callers gate on
        the count first. More than ``MAX_COORDINATES`` positions cannot be
        routed and raise ``RouteUnavailableError``.
        """
        if len(positions) < 2:
            raise ValueError("At least two positions are required to compute a route.")
        if len(positions) > MAX_COORDINATES:
            raise RouteUnavailableError(
                f"Routes support at most {MAX_COORDINATES} points. Remove a point and try again."
            )

        profile = TravelProfile(profile)
        url = f"{BASE_URL}/{profile.value}/{format_path(positions)}"
        params = {
            "geometries": "geojson",
            "overview": "full",
            "steps": "false",
            "access_token": self._token,
        }
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Directions request failed (%s, %d positions): %s",
                           profile.value, len(positions), exc)
            raise RouteUnavailableError() from exc

        return _parse_first_route(data)


def _parse_first_route(data: dict) -> ResolvedRoute:
    """Take the first candidate of a Directions response."""
    if not isinstance(data, dict):
        logger.warning("Directions returned a non-object body: %r", type(data).__name__)
        raise RouteUnavailableError()
    routes = data.get("routes") or []
    if not routes:
        logger.warning("Directions returned no routes (code=%s)", data.get("code"))
        raise RouteUnavailableError()

    route = routes[0]
    try:
        return ResolvedRoute(
            geometry=RouteGeometry.from_geojson(route["geometry"]),
            distance_meters=route["distance"],
            duration_seconds=route["duration"],
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Directions returned a malformed route: %s", exc)
        raise RouteUnavailableError() from exc
