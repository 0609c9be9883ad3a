"""Base classes and shared types for RouteCraft contracts.

Unit conventions (all contracts and API payloads):
- **Distances / elevations**: meters — suffix ``_meters``
- **Durations**: seconds — suffix ``_seconds``
- **Coordinates**: WGS84 decimal degrees
- **Positions**: ``(longitude, latitude)`` whenever a pair is written as a
  tuple or a GeoJSON position
- **Datetimes**: ISO 8601 in serialized form

Wire field names are camelCase (the backend's convention); Python attribute
names stay snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with backend-friendly serialization.

    - Attributes are exposed on the wire under camelCase aliases.
    - Enums serialize as their values.
    - ``to_payload()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_payload()`` hydrates from a backend response dict.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Dump to a backend-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ApiModel":
        """Create model instance from a backend response dict."""
        return cls.model_validate(data)


class Coordinate(ApiModel):
    """WGS84 position as the backend stores it in ``routePath``."""

    longitude: float
    latitude: float

    model_config = ConfigDict(frozen=True)

    def as_position(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)
