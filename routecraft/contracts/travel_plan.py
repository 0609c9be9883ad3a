"""TravelPlan and its create/update request — the persisted route entity.

The backend owns the lifecycle of a ``TravelPlan`` (``/api/travelplans``).
The engine only produces internally consistent ``TravelPlanRequest``
instances from a draft and reads plans back to seed edit drafts.
"""

from datetime import datetime
from typing import Self

from pydantic import Field, field_validator, model_validator

from routecraft.contracts.common import ApiModel, Coordinate
from routecraft.contracts.enums import Difficulty, PlanType
from routecraft.contracts.waypoint import Stop

ALLOWED_COVER_IMAGE_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
MAX_COVER_IMAGE_BYTES = 5 * 1024 * 1024


class TravelPlan(ApiModel):
    """A persisted route as returned by the backend."""

    travel_plan_id: int = Field(..., alias="travelPlanID")
    title: str
    description: str = ""
    type: PlanType
    difficulty: Difficulty = Difficulty.EASY
    total_distance_in_meters: float | None = None
    total_elevation_gain_in_meters: float | None = None
    average_rating: float = 0.0
    total_ratings: int = 0
    creator_id: str | None = None
    creator_name: str | None = None
    creator_image_url: str | None = None
    route_path: list[Coordinate] | None = None
    stops: list[Stop] | None = None
    cover_image_url: str | None = None
    created_at: datetime | None = None

    @field_validator("description", mode="before")
    @classmethod
    def none_description(cls, v: str | None) -> str:
        return v or ""


class TravelPlanRequest(ApiModel):
    """Create/update payload for ``/api/travelplans``.

    ``route_path`` must be the geometry of the current resolution, and
    ``total_distance_in_meters`` its distance; the draft controller is
    the only producer.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    type: PlanType
    difficulty: Difficulty = Difficulty.EASY
    total_distance_in_meters: float | None = Field(default=None, ge=0)
    total_elevation_gain_in_meters: float | None = Field(default=None, ge=0)
    route_path: list[Coordinate] | None = None
    stops: list[Stop] | None = None
    cover_image_url: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_route_path(self) -> Self:
        if self.route_path is not None and len(self.route_path) < 2:
            raise ValueError(
                f"route_path must contain at least 2 positions, got {len(self.route_path)}"
            )
        return self


class CoverImageUpload(ApiModel):
    """Image file attached to a draft, uploaded after the plan is saved."""

    filename: str = Field(..., min_length=1)
    content_type: str
    content: bytes = Field(..., repr=False)

    @field_validator("content_type")
    @classmethod
    def allowed_type(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in ALLOWED_COVER_IMAGE_TYPES:
            raise ValueError(
                "Invalid file type. Please select a JPG, PNG, GIF, or WEBP image."
            )
        return v

    @field_validator("content")
    @classmethod
    def within_size_limit(cls, v: bytes) -> bytes:
        if len(v) > MAX_COVER_IMAGE_BYTES:
            raise ValueError("File size exceeds 5MB limit.")
        return v
