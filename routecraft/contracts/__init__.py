"""RouteCraft data contracts — Pydantic v2 models for route planning.

Data authority
--------------

**Backend REST API** (source of truth for persisted data):
- ``TravelPlan`` — ``/api/travelplans/{id}`` (embeds ``routePath`` and ``stops``)
- ``Rating`` — ``/api/ratings/...``
- ``FavoriteTrip`` — ``/api/favorites/...``
- ``Comment`` / ``PendingComment`` — ``/api/comments/...``, ``/api/admin/comments/...``

**Draft state** (in memory, one controller per editing session, never persisted):
- ``Waypoint`` / ``Stop`` — the ordered points being edited

Calculated (never persisted directly)
-------------------------------------
- ``RouteGeometry`` / ``ResolvedRoute`` — routing service output
- ``RouteMetrics`` — distance, duration, elevation gain
- ``TravelPlanRequest`` — assembled from a draft on submit
"""

from routecraft.contracts.enums import (
    CommentStatus,
    CommentType,
    Difficulty,
    DraftMode,
    MoveDirection,
    PlanType,
    StopKind,
    TravelProfile,
)
from routecraft.contracts.common import ApiModel, Coordinate
from routecraft.contracts.result import ServiceError, ServiceResult
from routecraft.contracts.waypoint import Stop, Waypoint, new_point_id
from routecraft.contracts.route import ResolvedRoute, RouteGeometry, RouteMetrics
from routecraft.contracts.travel_plan import (
    CoverImageUpload,
    TravelPlan,
    TravelPlanRequest,
)
from routecraft.contracts.engagement import (
    Comment,
    CommentCreate,
    FavoriteCreate,
    FavoriteTrip,
    PendingComment,
    Rating,
    RatingCreate,
    RatingSummary,
    RatingUpdate,
)
from routecraft.contracts.place import PlaceCandidate

__all__ = [
    # Enums
    "CommentStatus",
    "CommentType",
    "Difficulty",
    "DraftMode",
    "MoveDirection",
    "PlanType",
    "StopKind",
    "TravelProfile",
    # Common
    "ApiModel",
    "Coordinate",
    # Result
    "ServiceError",
    "ServiceResult",
    # Domain models
    "Stop",
    "Waypoint",
    "new_point_id",
    "ResolvedRoute",
    "RouteGeometry",
    "RouteMetrics",
    "CoverImageUpload",
    "TravelPlan",
    "TravelPlanRequest",
    "Comment",
    "CommentCreate",
    "FavoriteCreate",
    "FavoriteTrip",
    "PendingComment",
    "Rating",
    "RatingCreate",
    "RatingSummary",
    "RatingUpdate",
    "PlaceCandidate",
]
