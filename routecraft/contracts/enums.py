"""Enumerations shared across all RouteCraft contracts."""

from enum import Enum, IntEnum


class PlanType(IntEnum):
    """Kind of travel plan, as stored by the backend."""
    TRIP = 1
    HIKE = 2


class Difficulty(IntEnum):
    EASY = 1
    MEDIUM = 2
    HARD = 3


class TravelProfile(str, Enum):
    """Travel mode used to request route geometry."""
    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"


class StopKind(str, Enum):
    """What a draft's ordered points carry."""
    NAMED_PLACE = "named_place"  # Stop with name/address/place metadata
    BARE_WAYPOINT = "bare_waypoint"  # Waypoint: id + position only


class DraftMode(str, Enum):
    CREATING = "creating"
    EDITING = "editing"


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class CommentStatus(IntEnum):
    PENDING = 0
    APPROVED = 1
    REJECTED = 2


class CommentType(str, Enum):
    """Entity a moderated comment belongs to."""
    TRAVEL_PLAN = "TravelPlan"
    GROUP = "Group"
