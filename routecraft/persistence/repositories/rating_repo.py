"""Repository for travel plan ratings."""

from __future__ import annotations

from routecraft.contracts.engagement import Rating, RatingCreate, RatingUpdate
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.errors import NotFoundError
from routecraft.persistence.repositories.base import BaseRepository


class RatingRepository(BaseRepository[Rating]):
    def __init__(self, client: BackendClient):
        super().__init__(client, Rating, "/api/ratings")

    async def list_for_plan(self, plan_id: int) -> list[Rating]:
        return self._parse_list(await self._client.get(self._path("travel-plan", plan_id)))

    async def get_user_rating(self, plan_id: int) -> Rating | None:
        """The current user's rating, or None if they have not rated yet."""
        try:
            data = await self._client.get(self._path("travel-plan", plan_id, "user"))
        except NotFoundError:
            return None
        return self._parse(data) if data else None

    async def create_rating(self, plan_id: int, stars: int) -> Rating:
        payload = RatingCreate(travel_plan_id=plan_id, stars=stars)
        return self._parse(await self._client.post(self._path("travel-plan"), payload.to_payload()))

    async def update_rating(self, rating_id: int, stars: int) -> Rating:
        return await self.update(rating_id, RatingUpdate(stars=stars))
