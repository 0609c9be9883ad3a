"""Repository for the current user's favorite travel plans."""

from __future__ import annotations

from routecraft.contracts.engagement import FavoriteCreate, FavoriteTrip
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.errors import NotFoundError, UnauthorizedError
from routecraft.persistence.repositories.base import BaseRepository


class FavoriteRepository(BaseRepository[FavoriteTrip]):
    def __init__(self, client: BackendClient):
        super().__init__(client, FavoriteTrip, "/api/favorites")

    async def is_favorite(self, plan_id: int) -> bool:
        """Anonymous users and unknown plans read as "not a favorite"."""
        try:
            data = await self._client.get(self._path(plan_id, "check"))
        except (NotFoundError, UnauthorizedError):
            return False
        return bool((data or {}).get("isFavorite"))

    async def add(self, plan_id: int) -> FavoriteTrip:
        return await self.create(FavoriteCreate(travel_plan_id=plan_id))

    async def remove(self, plan_id: int) -> None:
        await self.delete(plan_id)
