"""Repository for travel plans and their cover images."""

from __future__ import annotations

from routecraft.contracts.enums import PlanType
from routecraft.contracts.travel_plan import CoverImageUpload, TravelPlan
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.repositories.base import BaseRepository


class TravelPlanRepository(BaseRepository[TravelPlan]):
    def __init__(self, client: BackendClient):
        super().__init__(client, TravelPlan, "/api/travelplans")

    async def list_by_type(self, plan_type: PlanType, search: str | None = None) -> list[TravelPlan]:
        params: dict[str, str | int] = {"type": int(plan_type)}
        if search:
            params["search"] = search
        return await self.list_all(params)

    async def upload_cover_image(self, plan_id: int, upload: CoverImageUpload) -> str:
        """Upload a cover image; returns the stored image URL."""
        data = await self._client.post_file(
            self._path(plan_id, "cover-image"),
            upload.filename,
            upload.content,
            upload.content_type,
        )
        return (data or {}).get("imageUrl", "")
