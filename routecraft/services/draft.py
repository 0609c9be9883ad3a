"""Route draft controller — the working state of a route being created or edited.

One controller per editing session owns:

- the ordered points (``Stop`` for trips, ``Waypoint`` for hikes),
- the form fields (title, description, type, difficulty),
- the last accepted geometry and metrics.

Every change to the points (or the profile) recomputes geometry and
metrics wholesale through the routing resolver, then the elevation
sampler for the walking profile. Requests are generation-stamped: a
result is applied only if no newer request was issued meanwhile and the
draft has not been discarded since.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import Field, ValidationError

from routecraft.contracts.common import ApiModel, Coordinate
from routecraft.contracts.enums import (
    Difficulty,
    DraftMode,
    MoveDirection,
    PlanType,
    StopKind,
    TravelProfile,
)
from routecraft.contracts.result import ServiceError, ServiceResult
from routecraft.contracts.route import RouteGeometry, RouteMetrics
from routecraft.contracts.travel_plan import CoverImageUpload, TravelPlan, TravelPlanRequest
from routecraft.contracts.waypoint import Stop, Waypoint
from routecraft.persistence.errors import PersistenceError
from routecraft.persistence.repositories.travel_plan_repo import TravelPlanRepository
from routecraft.services.collection import OrderedPointCollection
from routecraft.services.elevation import ElevationSampler
from routecraft.services.errors import (
    DraftValidationError,
    RouteUnavailableError,
    SubmissionInProgressError,
)
from routecraft.services.geojson import to_feature
from routecraft.services.routing import RoutingClient

logger = logging.getLogger(__name__)

RefreshResult = ServiceResult[RouteMetrics]


@dataclass(frozen=True)
class DraftConfig:
    """What distinguishes the trip, hiking and edit flows."""

    profile: TravelProfile
    stop_kind: StopKind
    plan_type: PlanType


TRIP_DRAFT = DraftConfig(TravelProfile.DRIVING, StopKind.NAMED_PLACE, PlanType.TRIP)
HIKING_DRAFT = DraftConfig(TravelProfile.WALKING, StopKind.BARE_WAYPOINT, PlanType.HIKE)


def config_for_plan_type(plan_type: PlanType | int) -> DraftConfig:
    return HIKING_DRAFT if PlanType(plan_type) == PlanType.HIKE else TRIP_DRAFT


@dataclass
class DraftForm:
    title: str = ""
    description: str = ""
    plan_type: PlanType = PlanType.TRIP
    difficulty: Difficulty = Difficulty.EASY


@dataclass
class SubmitOutcome:
    plan: TravelPlan
    cover_image_failed: bool = False


class DraftSnapshot(ApiModel):
    """Read model for consumers (map view, HTTP responses)."""

    mode: DraftMode
    plan_id: int | None = None
    title: str
    description: str
    plan_type: PlanType
    difficulty: Difficulty
    profile: TravelProfile
    points: list[dict[str, Any]] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    route: dict[str, Any] | None = Field(default=None, description="GeoJSON Feature")
    metrics: RouteMetrics | None = None
    last_error: ServiceError | None = None
    center: Coordinate | None = None
    has_cover_image: bool = False
    is_calculating: bool = False
    can_submit: bool = False


class RouteDraftController:
    """Parameterized draft engine shared by trip creation, hike creation and editing."""

    def __init__(
        self,
        config: DraftConfig,
        routing: RoutingClient,
        repository: TravelPlanRepository,
        elevation: ElevationSampler | None = None,
    ):
        self._config = config
        self._routing = routing
        self._repository = repository
        self._elevation = elevation

        self._generation = 0
        self._applied_generation = 0
        self._epoch = 0
        self._submitting = False
        self.start_new()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_new(self, plan_type: PlanType | None = None) -> None:
        """Begin an empty draft (Creating mode)."""
        self._reset()
        self._mode = DraftMode.CREATING
        self._form = DraftForm(plan_type=PlanType(plan_type or self._config.plan_type))

    def start_edit(self, plan: TravelPlan) -> None:
        """Seed the draft from a persisted plan (Editing mode).

        The stored ``routePath`` and totals stand in as the current geometry
        and metrics until the first point change recomputes them; an edit
        that never touches the points saves them back unchanged.
        """
        self._reset()
        self._mode = DraftMode.EDITING
        self._plan_id = plan.travel_plan_id
        self._stored_plan = plan
        self._form = DraftForm(
            title=plan.title,
            description=plan.description,
            plan_type=PlanType(plan.type),
            difficulty=Difficulty(plan.difficulty),
        )
        for point in self._seed_points(plan):
            if point.id in self._points:
                point = point.model_copy(update={"id": None})
            self._points.add(point)

        if plan.route_path and len(plan.route_path) >= 2:
            self._geometry = RouteGeometry.from_route_path(plan.route_path)
            if plan.total_distance_in_meters is not None:
                self._metrics = RouteMetrics(
                    distance_meters=plan.total_distance_in_meters,
                    elevation_gain_meters=plan.total_elevation_gain_in_meters,
                )

    def discard(self) -> None:
        """Drop all working state; late service results will be ignored."""
        self.start_new()

    def _reset(self) -> None:
        self._epoch += 1
        self._points: OrderedPointCollection[Waypoint] = OrderedPointCollection()
        self._profile = self._config.profile
        self._plan_id: int | None = None
        self._cover_image: CoverImageUpload | None = None
        self._geometry: RouteGeometry | None = None
        self._metrics: RouteMetrics | None = None
        self._last_error: ServiceError | None = None
        self._stored_plan: TravelPlan | None = None
        self._applied_generation = self._generation

    def _seed_points(self, plan: TravelPlan) -> list[Waypoint]:
        if plan.stops:
            return [self._coerce_point(stop) for stop in plan.stops]
        if plan.route_path and len(plan.route_path) >= 2:
            ends = [plan.route_path[0], plan.route_path[-1]]
            return [
                self._coerce_point(Stop(
                    name=label,
                    address=f"{c.latitude:.6f}, {c.longitude:.6f}",
                    latitude=c.latitude,
                    longitude=c.longitude,
                ))
                for label, c in zip(("Start", "End"), ends)
            ]
        return []

    def _coerce_point(self, point: Waypoint) -> Waypoint:
        """Match a point to the configured stop kind."""
        if self._config.stop_kind == StopKind.BARE_WAYPOINT:
            if type(point) is Waypoint:
                return point
            return Waypoint(id=point.id, latitude=point.latitude, longitude=point.longitude)
        if not isinstance(point, Stop):
            raise ValueError("Trip stops need a name; use a place search result or a Stop")
        return point

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @property
    def config(self) -> DraftConfig:
        return self._config

    @property
    def mode(self) -> DraftMode:
        return self._mode

    @property
    def plan_id(self) -> int | None:
        return self._plan_id

    @property
    def form(self) -> DraftForm:
        return self._form

    @property
    def profile(self) -> TravelProfile:
        return self._profile

    @property
    def points(self) -> list[Waypoint]:
        return self._points.points

    def has_point(self, point_id: str) -> bool:
        return point_id in self._points

    @property
    def geometry(self) -> RouteGeometry | None:
        return self._geometry

    @property
    def metrics(self) -> RouteMetrics | None:
        return self._metrics

    @property
    def last_error(self) -> ServiceError | None:
        return self._last_error

    @property
    def is_calculating(self) -> bool:
        """A resolution has been issued whose result is not applied yet."""
        return self._applied_generation != self._generation

    def center(self) -> Coordinate | None:
        """Mean position of the points, for centering the map."""
        points = self._points.points
        if not points:
            return None
        return Coordinate(
            latitude=sum(p.latitude for p in points) / len(points),
            longitude=sum(p.longitude for p in points) / len(points),
        )

    def validation_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not self._form.title.strip():
            errors["title"] = "Title is required."
        if len(self._points) < 2:
            noun = "stops" if self._config.stop_kind == StopKind.NAMED_PLACE else "waypoints"
            errors["points"] = f"Please add at least 2 {noun} to create a route."
        return errors

    def _route_ready(self) -> bool:
        """The route to save matches the current points."""
        if self.is_calculating:
            return False
        if self._stored_plan is not None:
            return True
        return self._geometry is not None and self._metrics is not None

    def snapshot(self) -> DraftSnapshot:
        geometry = self._geometry
        return DraftSnapshot(
            mode=self._mode,
            plan_id=self._plan_id,
            title=self._form.title,
            description=self._form.description,
            plan_type=self._form.plan_type,
            difficulty=self._form.difficulty,
            profile=self._profile,
            points=[p.to_payload() for p in self._points],
            labels=self._points.labels(),
            route=to_feature(geometry.to_geojson()) if geometry else None,
            metrics=self._metrics,
            last_error=self._last_error,
            center=self.center(),
            has_cover_image=self._cover_image is not None,
            is_calculating=self.is_calculating,
            can_submit=not self.validation_errors() and self._route_ready(),
        )

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def update_form(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        plan_type: PlanType | int | None = None,
        difficulty: Difficulty | int | None = None,
    ) -> DraftForm:
        if title is not None:
            self._form.title = title
        if description is not None:
            self._form.description = description
        if plan_type is not None:
            self._form.plan_type = PlanType(plan_type)
        if difficulty is not None:
            self._form.difficulty = Difficulty(difficulty)
        return self._form

    def attach_cover_image(self, filename: str, content_type: str, content: bytes) -> None:
        try:
            self._cover_image = CoverImageUpload(
                filename=filename, content_type=content_type, content=content
            )
        except ValidationError as exc:
            message = exc.errors()[0]["msg"].removeprefix("Value error, ")
            raise DraftValidationError({"cover_image": message}) from exc

    def remove_cover_image(self) -> None:
        self._cover_image = None

    # ------------------------------------------------------------------
    # Point mutations
    # ------------------------------------------------------------------

    async def add_point(self, point: Waypoint) -> Waypoint:
        """Append a point (ID assigned if missing) and recompute."""
        added = self._points.add(self._coerce_point(point))
        await self.refresh()
        return added

    async def remove_point(self, point_id: str) -> bool:
        changed = self._points.remove(point_id)
        if changed:
            await self.refresh()
        return changed

    async def move_point(self, point_id: str, direction: MoveDirection | str) -> bool:
        changed = self._points.move_adjacent(point_id, direction)
        if changed:
            await self.refresh()
        return changed

    async def reposition_point(self, point_id: str, new_index: int) -> bool:
        changed = self._points.reposition(point_id, new_index)
        if changed:
            await self.refresh()
        return changed

    async def set_profile(self, profile: TravelProfile | str) -> bool:
        profile = TravelProfile(profile)
        if profile == self._profile:
            return False
        self._profile = profile
        await self.refresh()
        return True

    def clear(self) -> None:
        """Remove every point and invalidate geometry, metrics and in-flight results."""
        self._points.clear()
        self._generation += 1
        self._apply(self._generation, None, None, None)

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    async def refresh(self) -> RefreshResult:
        """Recompute geometry and metrics for the current points.

        Never raises for service failures: a failed resolution clears the
        geometry and records ``last_error``. Returns ``superseded`` when a
        newer request (or a discard) made this result obsolete.
        """
        self._generation += 1
        generation, epoch = self._generation, self._epoch

        positions = self._points.positions()
        if len(positions) < 2:
            self._apply(generation, None, None, None)
            return RefreshResult.fail(
                "insufficient_points", "Add at least 2 points to calculate a route."
            )

        profile = self._profile
        try:
            resolved = await self._routing.resolve(positions, profile)
        except RouteUnavailableError as exc:
            if not self._is_current(generation, epoch):
                return self._superseded(generation)
            error = ServiceError(code="route_unavailable", message=str(exc))
            self._apply(generation, None, None, error)
            return RefreshResult(success=False, error=error)

        gain = None
        if profile == TravelProfile.WALKING and self._elevation is not None:
            if not self._is_current(generation, epoch):
                return self._superseded(generation)
            gain = await self._elevation.sample_gain(resolved.geometry)

        if not self._is_current(generation, epoch):
            return self._superseded(generation)

        metrics = resolved.metrics(gain)
        self._apply(generation, resolved.geometry, metrics, None)
        return RefreshResult.ok(metrics)

    def _is_current(self, generation: int, epoch: int) -> bool:
        return generation == self._generation and epoch == self._epoch

    def _superseded(self, generation: int) -> RefreshResult:
        logger.debug("Dropping route result of generation %d (latest %d)",
                     generation, self._generation)
        return RefreshResult.fail("superseded", "A newer route calculation replaced this one.")

    def _apply(
        self,
        generation: int,
        geometry: RouteGeometry | None,
        metrics: RouteMetrics | None,
        error: ServiceError | None,
    ) -> None:
        self._geometry = geometry
        self._metrics = metrics
        self._last_error = error
        self._stored_plan = None
        self._applied_generation = generation

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def build_request(self) -> TravelPlanRequest:
        """Assemble the persistable payload from the current resolution.

        Raises ``DraftValidationError`` for local problems and
        ``RouteUnavailableError`` when the displayed route does not match
        the current points. No service is called.
        """
        errors = self.validation_errors()
        if errors:
            raise DraftValidationError(errors)
        if self.is_calculating:
            raise RouteUnavailableError("The route is still being calculated. Please wait.")
        if not self._route_ready():
            raise RouteUnavailableError()

        stored = self._stored_plan
        if stored is not None:
            distance = stored.total_distance_in_meters
            gain = stored.total_elevation_gain_in_meters
            route_path = stored.route_path
            if route_path is not None and len(route_path) < 2:
                route_path = None
        else:
            walking = self._profile == TravelProfile.WALKING
            distance = self._metrics.distance_meters
            gain = self._metrics.elevation_gain_meters if walking else None
            route_path = self._geometry.to_route_path()

        named = self._config.stop_kind == StopKind.NAMED_PLACE
        return TravelPlanRequest(
            title=self._form.title,
            description=self._form.description,
            type=self._form.plan_type,
            difficulty=self._form.difficulty,
            total_distance_in_meters=distance,
            total_elevation_gain_in_meters=gain,
            route_path=route_path,
            stops=list(self._points) if named else None,
        )

    async def submit(self) -> SubmitOutcome:
        """Create or update the plan, then discard the draft.

        Persistence errors propagate unchanged and leave the draft intact.
        A cover image upload failure after a successful save is reported
        in the outcome, not raised.
        """
        if self._submitting:
            raise SubmissionInProgressError("This route is already being saved.")
        request = self.build_request()
        editing = self._mode == DraftMode.EDITING

        self._submitting = True
        try:
            if editing:
                plan = await self._repository.update(self._plan_id, request)
            else:
                plan = await self._repository.create(request)
            cover_image = self._cover_image
            self.discard()
        finally:
            self._submitting = False

        logger.info("Travel plan %s %s", plan.travel_plan_id, "updated" if editing else "created")

        outcome = SubmitOutcome(plan=plan)
        if cover_image is not None:
            try:
                url = await self._repository.upload_cover_image(plan.travel_plan_id, cover_image)
            except PersistenceError as exc:
                logger.warning("Cover image upload failed for plan %s: %s",
                               plan.travel_plan_id, exc)
                outcome.cover_image_failed = True
            else:
                outcome.plan = plan.model_copy(update={"cover_image_url": url})
        return outcome
