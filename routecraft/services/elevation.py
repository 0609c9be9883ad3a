"""Elevation sampling along a resolved route.

Uses the Mapbox Terrain tilequery API (``mapbox.mapbox-terrain-v2``) to read
ground elevation one point at a time, then reduces the sampled profile to
a total elevation gain. Elevation is a best-effort enrichment: individual
lookup failures are dropped, and fewer than two readings yield a gain of 0.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import httpx

from routecraft.contracts.route import RouteGeometry

logger = logging.getLogger(__name__)

TILEQUERY_URL = "https://api.mapbox.com/v4/mapbox.mapbox-terrain-v2/tilequery/{lon},{lat}.json"
DEFAULT_MAX_SAMPLES = 50


class TerrainClient:
    """Async HTTP client for single-point elevation lookups."""

    def __init__(self, access_token: str, http_client: httpx.AsyncClient | None = None):
        if not access_token:
            raise ValueError("Mapbox access token not set (MAPBOX_TOKEN)")
        self._token = access_token
        self._client = http_client or httpx.AsyncClient(timeout=15.0)

    async def get_elevation(self, longitude: float, latitude: float) -> float | None:
        """Elevation in meters at a point, or None when the tile has no reading.

        HTTP and decoding failures propagate to the caller.
        """
        url = TILEQUERY_URL.format(lon=longitude, lat=latitude)
        resp = await self._client.get(url, params={"access_token": self._token})
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            return None

        features = data.get("features") or []
        if not features or not isinstance(features[0], dict):
            return None
        ele = (features[0].get("properties") or {}).get("ele")
        if isinstance(ele, bool) or not isinstance(ele, (int, float)):
            return None
        return float(ele)


def sample_positions(
    positions: Sequence[tuple[float, float]],
    max_samples: int = DEFAULT_MAX_SAMPLES,
) -> list[tuple[float, float]]:
    """Pick at most ``max_samples`` positions at a fixed stride.

    The stride starts at ``max(1, n // max_samples)`` and grows until the
    sample, which always ends with the final position, fits the budget.
    """
    n = len(positions)
    if n == 0:
        return []
    if max_samples < 2:
        raise ValueError("max_samples must be at least 2")

    stride = max(1, n // max_samples)
    while True:
        indices = list(range(0, n, stride))
        if indices[-1] != n - 1:
            indices.append(n - 1)
        if len(indices) <= max_samples:
            break
        stride += 1
    return [positions[i] for i in indices]


def elevation_gain(elevations: Sequence[float]) -> int:
    """Sum of positive deltas between consecutive readings, nearest meter.

    Descents do not subtract.
    """
    total = 0.0
    for previous, current in zip(elevations, elevations[1:]):
        if current > previous:
            total += current - previous
    return int(math.floor(total + 0.5))


class ElevationSampler:
    """Samples a geometry and queries terrain sequentially, one point per call."""

    def __init__(self, terrain: TerrainClient, max_samples: int = DEFAULT_MAX_SAMPLES):
        self._terrain = terrain
        self._max_samples = max_samples

    async def sample_gain(self, geometry: RouteGeometry) -> int:
        samples = sample_positions(geometry.coordinates, self._max_samples)

        elevations: list[float] = []
        for lon, lat in samples:
            try:
                ele = await self._terrain.get_elevation(lon, lat)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Elevation lookup failed at %.6f,%.6f: %s", lon, lat, exc)
                continue
            if ele is not None:
                elevations.append(ele)

        if len(elevations) < 2:
            logger.info(
                "Only %d elevation reading(s) for %d samples, gain defaults to 0",
                len(elevations), len(samples),
            )
            return 0
        return elevation_gain(elevations)
