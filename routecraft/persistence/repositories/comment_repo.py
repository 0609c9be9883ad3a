"""Repositories for travel plan comments and their moderation queue."""

from __future__ import annotations

from routecraft.contracts.engagement import Comment, CommentCreate, PendingComment
from routecraft.contracts.enums import CommentStatus, CommentType
from routecraft.persistence.backend_client import BackendClient
from routecraft.persistence.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    def __init__(self, client: BackendClient):
        super().__init__(client, Comment, "/api/comments")

    async def list_for_plan(self, plan_id: int) -> list[Comment]:
        return self._parse_list(await self._client.get(self._path("travel-plan", plan_id)))

    async def approved_comments(self, plan_id: int) -> list[Comment]:
        return [
            c for c in await self.list_for_plan(plan_id)
            if c.status == CommentStatus.APPROVED
        ]

    async def add_comment(self, plan_id: int, text: str) -> Comment:
        """Post a comment; it usually comes back pending moderation."""
        payload = CommentCreate(text=text, travel_plan_id=plan_id)
        return self._parse(await self._client.post(self._path("travel-plan"), payload.to_payload()))


class ModerationRepository(BaseRepository[PendingComment]):
    def __init__(self, client: BackendClient):
        super().__init__(client, PendingComment, "/api/admin/comments")

    async def list_pending(self) -> list[PendingComment]:
        return self._parse_list(await self._client.get(self._path("pending")))

    async def approve(self, comment_id: int, comment_type: CommentType | str) -> None:
        await self._client.put(
            self._path(comment_id, "approve"),
            params={"commentType": CommentType(comment_type).value},
        )

    async def reject(self, comment_id: int, comment_type: CommentType | str) -> None:
        await self._client.put(
            self._path(comment_id, "reject"),
            params={"commentType": CommentType(comment_type).value},
        )
