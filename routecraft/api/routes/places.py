"""Place search endpoint used to pick trip stops."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from routecraft.api.auth import get_bearer_token
from routecraft.api.deps import get_place_search
from routecraft.services.place_search import PlaceSearchClient, stop_from_place

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/search")
async def search_places(
    query: str = Query(..., description="Free-text place query"),
    latitude: float | None = Query(None, ge=-90.0, le=90.0),
    longitude: float | None = Query(None, ge=-180.0, le=180.0),
    radius: int | None = Query(None, gt=0, description="Search radius in meters"),
    _token: str = Depends(get_bearer_token),
    client: PlaceSearchClient = Depends(get_place_search),
) -> list[dict]:
    """Candidates nearest first when a position is given, each with its ready-made stop."""
    origin = (latitude, longitude) if latitude is not None and longitude is not None else None
    candidates = await client.search(query, origin=origin, radius_meters=radius)
    return [
        {**c.to_payload(), "stop": stop_from_place(c).to_payload()}
        for c in candidates
    ]
