"""Waypoint and Stop — the ordered points of a route draft.

A ``Waypoint`` is an unnamed trail point (hiking routes, map clicks).
A ``Stop`` is a named place resolved through place search (trip routes).

Both are embedded in the persisted travel plan's ``stops`` array; neither
is stored on its own.
"""

import uuid

from pydantic import Field, field_validator

from routecraft.contracts.common import ApiModel


def new_point_id() -> str:
    """Client-generated point ID, stable for list operations."""
    return uuid.uuid4().hex


class Waypoint(ApiModel):
    """A bare geographic point within a single draft.

    ``id`` may be omitted on input; the ordered collection assigns a
    fresh one on insertion.
    """

    id: str | None = Field(default=None, min_length=1)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    @property
    def position(self) -> tuple[float, float]:
        """``(longitude, latitude)`` pair used for routing."""
        return (self.longitude, self.latitude)


class Stop(Waypoint):
    """A named, place-linked point of a trip route."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str = ""
    category: str | None = None
    place_id: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v
