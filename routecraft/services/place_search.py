"""Place search through the backend's Google Places proxy.

Results feed new ``Stop`` entries of trip drafts; nothing else in the
engine depends on them.
"""

from __future__ import annotations

import logging
import math

import httpx

from routecraft.contracts.place import PlaceCandidate
from routecraft.contracts.waypoint import Stop
from routecraft.services.errors import PlaceSearchError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/config/search-places"
EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_M = 50000
MAX_RESULTS = 10
GENERIC_PLACE_TYPES = frozenset({"establishment", "point_of_interest", "location"})


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers."""
    la1, lo1 = math.radians(lat1), math.radians(lon1)
    la2, lo2 = math.radians(lat2), math.radians(lon2)
    dlat = la2 - la1
    dlon = lo2 - lo1
    a = math.sin(dlat / 2) ** 2 + math.cos(la1) * math.cos(la2) * math.sin(dlon / 2) ** 2
    return 2 * math.asin(math.sqrt(a)) * EARTH_RADIUS_KM


class PlaceSearchClient:
    """Async HTTP client for free-text place search."""

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        default_radius_m: int = DEFAULT_RADIUS_M,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=30.0)
        self._default_radius_m = default_radius_m

    async def search(
        self,
        query: str,
        origin: tuple[float, float] | None = None,
        radius_meters: int | None = None,
    ) -> list[PlaceCandidate]:
        """Search places by text, nearest first when ``origin`` (lat, lon) is given.

        Returns at most ``MAX_RESULTS`` candidates.
        """
        query = query.strip()
        if not query:
            return []

        params: dict[str, str | int | float] = {"query": query}
        if origin is not None:
            params["latitude"] = origin[0]
            params["longitude"] = origin[1]
            params["radius"] = radius_meters or self._default_radius_m

        try:
            resp = await self._client.get(f"{self._base_url}{SEARCH_PATH}", params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Place search failed for %r: %s", query, exc)
            raise PlaceSearchError("Place search is unavailable. Please try again.") from exc
        if not isinstance(data, dict):
            raise PlaceSearchError("Place search returned an unexpected response")

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status == "REQUEST_DENIED" or data.get("error_message"):
            raise PlaceSearchError(data.get("error_message") or "Place search request denied")

        candidates = []
        for raw in data.get("results") or []:
            candidate = _parse_place(raw)
            if candidate is None:
                continue
            if origin is not None:
                candidate.distance_km = haversine_km(
                    origin[0], origin[1], candidate.latitude, candidate.longitude
                )
            candidates.append(candidate)

        if origin is not None:
            candidates.sort(key=lambda c: c.distance_km)
        return candidates[:MAX_RESULTS]


def _parse_place(raw: dict) -> PlaceCandidate | None:
    """Map a Places API result; results without a location are skipped."""
    location = (raw.get("geometry") or {}).get("location") or {}
    if location.get("lat") is None or location.get("lng") is None or not raw.get("place_id"):
        logger.warning("Skipping place result without id or location: %s", raw.get("name"))
        return None
    return PlaceCandidate(
        place_id=raw["place_id"],
        name=raw.get("name") or raw.get("formatted_address") or "Unknown Place",
        address=raw.get("formatted_address") or "",
        latitude=location["lat"],
        longitude=location["lng"],
        types=raw.get("types") or [],
        rating=raw.get("rating"),
        user_ratings_total=raw.get("user_ratings_total"),
    )


def place_category(types: list[str]) -> str:
    """Human label from Places types, skipping the generic ones."""
    if not types:
        return "Location"
    specific = [t for t in types if t not in GENERIC_PLACE_TYPES]
    category = specific[0] if specific else types[0]
    return category.replace("_", " ").title()


def stop_from_place(candidate: PlaceCandidate) -> Stop:
    """Build a trip ``Stop`` from a search result."""
    return Stop(
        id=candidate.place_id,
        name=candidate.name,
        address=candidate.address or candidate.name,
        latitude=candidate.latitude,
        longitude=candidate.longitude,
        category=place_category(candidate.types),
        place_id=candidate.place_id,
    )
