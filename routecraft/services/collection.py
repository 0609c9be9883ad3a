"""Ordered collection of draft points (waypoints or stops).

Order is the traversal order of the route and the only input to route
computation. The first and last entries are the start and end purely by
position; nothing else marks them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from routecraft.contracts.enums import MoveDirection
from routecraft.contracts.waypoint import Waypoint, new_point_id

P = TypeVar("P", bound=Waypoint)


class OrderedPointCollection(Generic[P]):
    """In-memory ordered list of points with unique IDs.

    Every mutator returns ``True`` when the order or content changed and
    ``False`` for a no-op, so callers can skip recomputation.
    """

    def __init__(self, points: list[P] | None = None):
        self._points: list[P] = []
        for point in points or []:
            self.add(point)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[P]:
        return iter(list(self._points))

    def __contains__(self, point_id: object) -> bool:
        return self.index_of(point_id) is not None  # type: ignore[arg-type]

    @property
    def points(self) -> list[P]:
        return list(self._points)

    def ids(self) -> list[str]:
        return [p.id for p in self._points]  # type: ignore[misc]

    def positions(self) -> list[tuple[float, float]]:
        """Ordered ``(longitude, latitude)`` pairs for routing."""
        return [p.position for p in self._points]

    def index_of(self, point_id: str) -> int | None:
        for i, point in enumerate(self._points):
            if point.id == point_id:
                return i
        return None

    def labels(self) -> list[str]:
        """Display labels derived from position only."""
        n = len(self._points)
        labels = []
        for i in range(n):
            if i == 0:
                labels.append("Start")
            elif i == n - 1:
                labels.append("End")
            else:
                labels.append(f"Waypoint {i}")
        return labels

    # ------------------------------------------------------------------
    # Mutate
    # ------------------------------------------------------------------

    def add(self, point: P) -> P:
        """Append a point, assigning a fresh ID if it has none.

        Raises ``ValueError`` if the ID is already present.
        """
        if not point.id:
            point = point.model_copy(update={"id": new_point_id()})
        elif point.id in self:
            raise ValueError(f"Point {point.id} is already in the collection")
        self._points.append(point)
        return point

    def remove(self, point_id: str) -> bool:
        index = self.index_of(point_id)
        if index is None:
            return False
        del self._points[index]
        return True

    def move_adjacent(self, point_id: str, direction: MoveDirection | str) -> bool:
        """Swap with the neighbour above or below; no-op at the boundaries."""
        index = self.index_of(point_id)
        if index is None:
            return False
        step = -1 if MoveDirection(direction) == MoveDirection.UP else 1
        target = index + step
        if target < 0 or target >= len(self._points):
            return False
        self._points[index], self._points[target] = self._points[target], self._points[index]
        return True

    def reposition(self, point_id: str, new_index: int) -> bool:
        """Remove and reinsert at ``new_index`` (clamped to the list bounds)."""
        index = self.index_of(point_id)
        if index is None:
            return False
        new_index = max(0, min(new_index, len(self._points) - 1))
        if new_index == index:
            return False
        point = self._points.pop(index)
        self._points.insert(new_index, point)
        return True

    def clear(self) -> bool:
        if not self._points:
            return False
        self._points.clear()
        return True
