"""RouteGeometry, RouteMetrics, ResolvedRoute — derived route state.

All three are **calculated**: they are the output of the routing resolver
and elevation sampler for the current ordered points of a draft and are
never edited by hand. Only their flattened form (``routePath``,
``totalDistanceInMeters``) reaches the backend, via ``TravelPlanRequest``.
"""

from typing import Any

from pydantic import ConfigDict, Field

from routecraft.contracts.common import ApiModel, Coordinate
from routecraft.services.geojson import linestring_positions, to_linestring


class RouteGeometry(ApiModel):
    """Ordered ``(longitude, latitude)`` positions of a resolved route."""

    coordinates: list[tuple[float, float]] = Field(..., min_length=2)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_geojson(cls, geometry: dict[str, Any]) -> "RouteGeometry":
        """Build from a GeoJSON ``LineString`` geometry object."""
        return cls(coordinates=linestring_positions(geometry))

    @classmethod
    def from_route_path(cls, route_path: list[Coordinate]) -> "RouteGeometry":
        return cls(coordinates=[c.as_position() for c in route_path])

    def to_geojson(self) -> dict[str, Any]:
        return to_linestring(self.coordinates)

    def to_route_path(self) -> list[Coordinate]:
        return [Coordinate(longitude=lon, latitude=lat) for lon, lat in self.coordinates]


class RouteMetrics(ApiModel):
    """Derived totals, recomputed wholesale on every point change."""

    distance_meters: float = Field(..., ge=0)
    duration_seconds: float | None = Field(default=None, ge=0)
    elevation_gain_meters: float | None = Field(default=None, ge=0)


class ResolvedRoute(ApiModel):
    """First candidate returned by the routing service."""

    geometry: RouteGeometry
    distance_meters: float = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0)

    def metrics(self, elevation_gain_meters: float | None = None) -> RouteMetrics:
        return RouteMetrics(
            distance_meters=self.distance_meters,
            duration_seconds=self.duration_seconds,
            elevation_gain_meters=elevation_gain_meters,
        )
