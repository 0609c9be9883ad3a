"""Conversion between flat position lists and GeoJSON geometry objects.

Positions are ``(longitude, latitude)`` pairs, GeoJSON order. Pure
functions, no state.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

Position = tuple[float, float]


def to_linestring(positions: Iterable[Sequence[float]]) -> dict[str, Any]:
    """Build a GeoJSON ``LineString`` geometry from ordered positions."""
    coords = [[float(p[0]), float(p[1])] for p in positions]
    if len(coords) < 2:
        raise ValueError(f"A LineString needs at least 2 positions, got {len(coords)}")
    return {"type": "LineString", "coordinates": coords}


def linestring_positions(geometry: dict[str, Any]) -> list[Position]:
    """Extract ordered positions from a ``LineString`` geometry or Feature.

    Extra position members (altitude) are dropped.
    """
    if geometry.get("type") == "Feature":
        geometry = geometry.get("geometry") or {}
    if geometry.get("type") != "LineString":
        raise ValueError(f"Expected a LineString geometry, got {geometry.get('type')!r}")

    positions: list[Position] = []
    for i, coord in enumerate(geometry.get("coordinates") or []):
        if len(coord) < 2:
            raise ValueError(f"Position {i} must have at least 2 members, got {len(coord)}")
        positions.append((float(coord[0]), float(coord[1])))
    return positions


def to_feature(
    geometry: dict[str, Any], properties: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Wrap a geometry in a GeoJSON ``Feature`` (what map layers consume)."""
    return {"type": "Feature", "properties": properties or {}, "geometry": geometry}


def format_path(positions: Iterable[Position], precision: int = 6) -> str:
    """Encode positions as ``lon,lat;lon,lat`` (routing URL path segment)."""
    return ";".join(f"{lon:.{precision}f},{lat:.{precision}f}" for lon, lat in positions)
