"""Optimistic mutation coordinators for favorites, ratings and moderation.

Each coordinator keeps a local view of already-persisted data and
follows the same two phases:

1. Apply the change to the local view immediately.
2. Issue the backend call. On success optionally re-read authoritative
   state; on failure restore the view captured before phase 1 and
   re-raise the ``PersistenceError``.

A per-coordinator in-flight set keyed by entity id makes repeated
requests for an id already being mutated a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from routecraft.contracts.engagement import PendingComment, Rating, RatingSummary
from routecraft.contracts.enums import CommentType
from routecraft.persistence.errors import PersistenceError
from routecraft.persistence.repositories.comment_repo import ModerationRepository
from routecraft.persistence.repositories.favorite_repo import FavoriteRepository
from routecraft.persistence.repositories.rating_repo import RatingRepository

logger = logging.getLogger(__name__)

DUPLICATE_RATING_MARKERS = ("duplicate", "already exists", "already rated")


def is_duplicate_rating_error(exc: PersistenceError) -> bool:
    """Whether a failed create looks like "this user already rated the plan".

    The backend does not type this conflict; only its message wording
    identifies it.
    """
    text = " ".join([exc.message, *getattr(exc, "field_errors", [])]).lower()
    return any(marker in text for marker in DUPLICATE_RATING_MARKERS)


class InFlightSet:
    """Entity ids with a mutation currently awaiting the backend."""

    def __init__(self):
        self._ids: set[object] = set()

    def __contains__(self, key: object) -> bool:
        return key in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def acquire(self, key: object) -> bool:
        """Mark ``key`` busy. Returns False if it already was."""
        if key in self._ids:
            return False
        self._ids.add(key)
        return True

    def release(self, key: object) -> None:
        self._ids.discard(key)


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


class FavoriteCoordinator:
    def __init__(self, repository: FavoriteRepository):
        self._repository = repository
        self._favorites: dict[int, bool] = {}
        self.in_flight = InFlightSet()

    def is_favorite(self, plan_id: int) -> bool:
        return self._favorites.get(plan_id, False)

    async def load(self, plan_id: int) -> bool:
        """Read the authoritative flag (unknown or anonymous reads as False)."""
        flag = await self._repository.is_favorite(plan_id)
        self._favorites[plan_id] = flag
        return flag

    async def toggle(self, plan_id: int) -> bool | None:
        """Flip the favorite flag. Returns the new flag, or None if ignored."""
        if not self.in_flight.acquire(plan_id):
            logger.debug("Favorite toggle for plan %s already in flight", plan_id)
            return None

        previous = self._favorites.get(plan_id)
        target = not bool(previous)
        self._favorites[plan_id] = target
        try:
            if target:
                await self._repository.add(plan_id)
            else:
                await self._repository.remove(plan_id)
        except PersistenceError:
            self._restore(plan_id, previous)
            raise
        finally:
            self.in_flight.release(plan_id)

        try:
            return await self.load(plan_id)
        except PersistenceError as exc:
            logger.warning("Could not re-read favorite status for plan %s: %s", plan_id, exc)
            return target

    def _restore(self, plan_id: int, previous: bool | None) -> None:
        if previous is None:
            self._favorites.pop(plan_id, None)
        else:
            self._favorites[plan_id] = previous


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------


@dataclass
class RatingView:
    """What a plan page shows about ratings."""

    user_rating: Rating | None = None
    user_stars: int | None = None
    summary: RatingSummary = field(default_factory=RatingSummary)

    def restore(self, other: "RatingView") -> None:
        """Copy another view's fields in place; holders of this view see them."""
        self.user_rating = other.user_rating
        self.user_stars = other.user_stars
        self.summary = other.summary


class RatingCoordinator:
    def __init__(self, repository: RatingRepository):
        self._repository = repository
        self._views: dict[int, RatingView] = {}
        self.in_flight = InFlightSet()

    def view(self, plan_id: int) -> RatingView:
        return self._views.setdefault(plan_id, RatingView())

    async def load(self, plan_id: int) -> RatingView:
        user_rating = await self._repository.get_user_rating(plan_id)
        ratings = await self._repository.list_for_plan(plan_id)
        view = self.view(plan_id)
        view.restore(RatingView(
            user_rating=user_rating,
            user_stars=user_rating.stars if user_rating else None,
            summary=RatingSummary.from_ratings(ratings),
        ))
        return view

    async def rate(self, plan_id: int, stars: int) -> RatingView | None:
        """Set the user's rating. Returns the updated view, or None if ignored."""
        if not 1 <= stars <= 5:
            raise ValueError("Rating must be between 1 and 5 stars")
        if not self.in_flight.acquire(plan_id):
            logger.debug("Rating for plan %s already in flight", plan_id)
            return None

        view = self.view(plan_id)
        before = replace(view)
        view.user_stars = stars
        try:
            if view.user_rating is not None:
                rating = await self._repository.update_rating(view.user_rating.rating_id, stars)
            else:
                rating = await self._create_or_update(plan_id, stars)
        except PersistenceError:
            view.restore(before)
            raise
        finally:
            self.in_flight.release(plan_id)

        view.user_rating = rating
        view.user_stars = rating.stars
        await self._refresh_summary(plan_id, view)
        return view

    async def remove(self, plan_id: int) -> bool:
        """Delete the user's rating. Returns False when there is none or it is busy."""
        view = self.view(plan_id)
        if view.user_rating is None or not self.in_flight.acquire(plan_id):
            return False

        before = replace(view)
        rating_id = view.user_rating.rating_id
        view.user_rating = None
        view.user_stars = None
        try:
            await self._repository.delete(rating_id)
        except PersistenceError:
            view.restore(before)
            raise
        finally:
            self.in_flight.release(plan_id)

        await self._refresh_summary(plan_id, view)
        return True

    async def _create_or_update(self, plan_id: int, stars: int) -> Rating:
        try:
            return await self._repository.create_rating(plan_id, stars)
        except PersistenceError as exc:
            if not is_duplicate_rating_error(exc):
                raise
            logger.info("Plan %s already rated by this user, updating instead", plan_id)
            existing = await self._repository.get_user_rating(plan_id)
            if existing is None:
                raise
            return await self._repository.update_rating(existing.rating_id, stars)

    async def _refresh_summary(self, plan_id: int, view: RatingView) -> None:
        try:
            ratings = await self._repository.list_for_plan(plan_id)
        except PersistenceError as exc:
            logger.warning("Could not refresh rating summary for plan %s: %s", plan_id, exc)
            return
        view.summary = RatingSummary.from_ratings(ratings)


# ---------------------------------------------------------------------------
# Comment moderation
# ---------------------------------------------------------------------------


class CommentModerationCoordinator:
    """Pending-comment queue with optimistic approve/reject."""

    def __init__(self, repository: ModerationRepository):
        self._repository = repository
        self._pending: list[PendingComment] = []
        self.in_flight = InFlightSet()

    @property
    def pending(self) -> list[PendingComment]:
        return list(self._pending)

    async def load_pending(self) -> list[PendingComment]:
        self._pending = await self._repository.list_pending()
        return self.pending

    async def approve(self, comment_id: int) -> bool:
        return await self._moderate(comment_id, approve=True)

    async def reject(self, comment_id: int) -> bool:
        return await self._moderate(comment_id, approve=False)

    async def _moderate(self, comment_id: int, approve: bool) -> bool:
        index = next(
            (i for i, c in enumerate(self._pending) if c.comment_id == comment_id), None
        )
        if index is None or not self.in_flight.acquire(comment_id):
            return False

        comment = self._pending.pop(index)
        action = self._repository.approve if approve else self._repository.reject
        try:
            await action(comment_id, CommentType(comment.comment_type))
        except PersistenceError:
            self._pending.insert(min(index, len(self._pending)), comment)
            raise
        finally:
            self.in_flight.release(comment_id)

        logger.info("Comment %s %s", comment_id, "approved" if approve else "rejected")
        return True
