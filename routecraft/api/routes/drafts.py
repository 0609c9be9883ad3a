"""Draft session endpoints: create or edit a route point by point, then submit."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile
from pydantic import Field

from routecraft.api.deps import (
    DRAFT_KINDS,
    DraftFactory,
    get_auth_context,
    get_draft_factory,
    get_draft_session,
    get_session_store,
)
from routecraft.api.sessions import DraftSession, DraftSessionStore
from routecraft.contracts.common import ApiModel
from routecraft.contracts.enums import Difficulty, MoveDirection, PlanType, TravelProfile
from routecraft.contracts.waypoint import Stop, Waypoint
from routecraft.persistence.auth_context import AuthContext

router = APIRouter(prefix="/drafts", tags=["drafts"])


class DraftCreateBody(ApiModel):
    kind: Literal["trip", "hike"] = "trip"
    plan_id: int | None = None


class FormBody(ApiModel):
    title: str | None = None
    description: str | None = None
    plan_type: PlanType | None = None
    difficulty: Difficulty | None = None


class PointBody(ApiModel):
    """A map click (latitude/longitude only) or a named stop."""

    id: str | None = None
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    name: str | None = None
    address: str = ""
    category: str | None = None
    place_id: str | None = None

    def to_point(self) -> Waypoint:
        if self.name:
            return Stop(**self.model_dump(exclude_none=True))
        return Waypoint(id=self.id, latitude=self.latitude, longitude=self.longitude)


class MoveBody(ApiModel):
    direction: MoveDirection


class PositionBody(ApiModel):
    index: int = Field(..., ge=0)


class ProfileBody(ApiModel):
    profile: TravelProfile


def _snapshot(session: DraftSession) -> dict:
    return {"sessionId": session.session_id, **session.controller.snapshot().to_payload()}


@router.post("", status_code=201)
async def create_draft(
    body: DraftCreateBody,
    auth: AuthContext = Depends(get_auth_context),
    factory: DraftFactory = Depends(get_draft_factory),
    store: DraftSessionStore = Depends(get_session_store),
) -> dict:
    if body.plan_id is None:
        controller = factory.controller(DRAFT_KINDS[body.kind], auth)
    else:
        plan = await factory.repository(auth).get(body.plan_id)
        controller = factory.controller_for_plan_type(plan.type, auth)
        controller.start_edit(plan)
    return _snapshot(store.open(controller, auth))


@router.get("/{session_id}")
async def get_draft(session: DraftSession = Depends(get_draft_session)) -> dict:
    return _snapshot(session)


@router.delete("/{session_id}", status_code=204)
async def cancel_draft(
    session: DraftSession = Depends(get_draft_session),
    store: DraftSessionStore = Depends(get_session_store),
) -> Response:
    store.close(session.session_id)
    return Response(status_code=204)


@router.patch("/{session_id}/form")
async def update_form(
    body: FormBody,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    session.controller.update_form(**body.model_dump(exclude_none=True))
    return _snapshot(session)


@router.put("/{session_id}/profile")
async def set_profile(
    body: ProfileBody,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    await session.controller.set_profile(body.profile)
    return _snapshot(session)


# ------------------------------------------------------------------
# Points
# ------------------------------------------------------------------


@router.post("/{session_id}/points", status_code=201)
async def add_point(
    body: PointBody,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    try:
        await session.controller.add_point(body.to_point())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _snapshot(session)


@router.delete("/{session_id}/points")
async def clear_points(session: DraftSession = Depends(get_draft_session)) -> dict:
    session.controller.clear()
    return _snapshot(session)


@router.delete("/{session_id}/points/{point_id}")
async def remove_point(
    point_id: str,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    if not await session.controller.remove_point(point_id):
        raise HTTPException(status_code=404, detail=f"Point {point_id} not found")
    return _snapshot(session)


@router.post("/{session_id}/points/{point_id}/move")
async def move_point(
    point_id: str,
    body: MoveBody,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    if not session.controller.has_point(point_id):
        raise HTTPException(status_code=404, detail=f"Point {point_id} not found")
    await session.controller.move_point(point_id, body.direction)
    return _snapshot(session)


@router.post("/{session_id}/points/{point_id}/position")
async def reposition_point(
    point_id: str,
    body: PositionBody,
    session: DraftSession = Depends(get_draft_session),
) -> dict:
    if not session.controller.has_point(point_id):
        raise HTTPException(status_code=404, detail=f"Point {point_id} not found")
    await session.controller.reposition_point(point_id, body.index)
    return _snapshot(session)


# ------------------------------------------------------------------
# Cover image + submit
# ------------------------------------------------------------------


@router.put("/{session_id}/cover-image", status_code=204)
async def attach_cover_image(
    file: UploadFile,
    session: DraftSession = Depends(get_draft_session),
) -> Response:
    content = await file.read()
    session.controller.attach_cover_image(
        file.filename or "cover", file.content_type or "", content
    )
    return Response(status_code=204)


@router.delete("/{session_id}/cover-image", status_code=204)
async def remove_cover_image(session: DraftSession = Depends(get_draft_session)) -> Response:
    session.controller.remove_cover_image()
    return Response(status_code=204)


@router.post("/{session_id}/submit")
async def submit_draft(
    session: DraftSession = Depends(get_draft_session),
    store: DraftSessionStore = Depends(get_session_store),
) -> dict:
    """Persist the draft. The session stays open if the backend rejects it."""
    outcome = await session.controller.submit()
    store.close(session.session_id)
    return {"plan": outcome.plan.to_payload(), "coverImageFailed": outcome.cover_image_failed}
