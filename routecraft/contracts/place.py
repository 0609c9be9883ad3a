"""PlaceCandidate — a ranked result from the place-search service."""

from pydantic import Field

from routecraft.contracts.common import ApiModel


class PlaceCandidate(ApiModel):
    place_id: str = Field(..., min_length=1)
    name: str
    address: str = ""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    types: list[str] = Field(default_factory=list)
    rating: float | None = None
    user_ratings_total: int | None = None
    distance_km: float | None = Field(
        default=None, ge=0, description="Distance from the search origin, when one was given"
    )
