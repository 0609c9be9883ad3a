"""Ratings, favorites and comments attached to persisted travel plans.

All persisted by the backend; the engagement coordinators keep a local,
optimistically-updated view of them.
"""

from datetime import datetime

from pydantic import Field

from routecraft.contracts.common import ApiModel
from routecraft.contracts.enums import CommentStatus, CommentType


class Rating(ApiModel):
    rating_id: int = Field(..., alias="ratingID")
    stars: int = Field(..., ge=1, le=5)
    timestamp: datetime | None = None
    user_id: str | None = Field(default=None, alias="userID")
    user_name: str | None = None
    travel_plan_id: int = Field(..., alias="travelPlanID")


class RatingCreate(ApiModel):
    travel_plan_id: int = Field(..., alias="travelPlanID")
    stars: int = Field(..., ge=1, le=5)


class RatingUpdate(ApiModel):
    stars: int = Field(..., ge=1, le=5)


class RatingSummary(ApiModel):
    """Authoritative average for a plan, recomputed from its ratings."""

    average_rating: float = Field(default=0.0, ge=0, le=5)
    total_ratings: int = Field(default=0, ge=0)

    @classmethod
    def from_ratings(cls, ratings: list[Rating]) -> "RatingSummary":
        if not ratings:
            return cls()
        average = sum(r.stars for r in ratings) / len(ratings)
        return cls(average_rating=round(average, 2), total_ratings=len(ratings))


class FavoriteTrip(ApiModel):
    user_id: str | None = Field(default=None, alias="userID")
    travel_plan_id: int = Field(..., alias="travelPlanID")
    favorited_at: datetime | None = None
    travel_plan_title: str | None = None


class FavoriteCreate(ApiModel):
    travel_plan_id: int = Field(..., alias="travelPlanID")


class Comment(ApiModel):
    comment_id: int = Field(..., alias="commentID")
    text: str
    timestamp: datetime | None = None
    status: CommentStatus = CommentStatus.PENDING
    toxicity_score: float | None = None
    author_id: str | None = Field(default=None, alias="authorID")
    author_name: str | None = None
    author_email: str | None = None
    author_image_url: str | None = None
    travel_plan_id: int = Field(..., alias="travelPlanID")


class CommentCreate(ApiModel):
    text: str = Field(..., min_length=1, max_length=2000)
    travel_plan_id: int = Field(..., alias="travelPlanID")


class PendingComment(ApiModel):
    """A comment awaiting moderation, as listed by the admin endpoints."""

    comment_id: int = Field(..., alias="commentID")
    text: str
    timestamp: datetime | None = None
    status: str = "Pending"
    toxicity_score: float | None = None
    author_id: str | None = Field(default=None, alias="authorID")
    author_name: str | None = None
    author_email: str | None = None
    comment_type: CommentType = CommentType.TRAVEL_PLAN
    related_entity_id: int | None = Field(default=None, alias="relatedEntityID")
    related_entity_title: str | None = None
