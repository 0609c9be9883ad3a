"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routecraft import __version__
from routecraft.api.routes import drafts, places
from routecraft.api.sessions import DraftSessionStore
from routecraft.config import configure_logging, get_settings
from routecraft.persistence.errors import PersistenceError, describe_persistence_error
from routecraft.services.errors import (
    DraftValidationError,
    PlaceSearchError,
    RouteUnavailableError,
    SubmissionInProgressError,
)

logger = logging.getLogger(__name__)

# Backend statuses passed through to the caller; anything else is a bad gateway.
_PASS_THROUGH_STATUSES = {400, 401, 403, 404, 409, 422}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and open the shared HTTP client."""
    settings = get_settings()
    configure_logging(settings)

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    app.state.draft_sessions = DraftSessionStore()
    logger.info("RouteCraft API started (backend %s)", settings.api_url)
    try:
        yield
    finally:
        await app.state.http_client.aclose()


app = FastAPI(
    title="RouteCraft API",
    description="Route planning drafts with live geometry and metrics",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(drafts.router, prefix="/api")
app.include_router(places.router, prefix="/api")


@app.exception_handler(DraftValidationError)
async def draft_validation_handler(request: Request, exc: DraftValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "fieldErrors": exc.field_errors},
    )


@app.exception_handler(RouteUnavailableError)
async def route_unavailable_handler(request: Request, exc: RouteUnavailableError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(SubmissionInProgressError)
async def submission_in_progress_handler(request: Request, exc: SubmissionInProgressError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(PlaceSearchError)
async def place_search_handler(request: Request, exc: PlaceSearchError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_handler(request: Request, exc: PersistenceError):
    status = exc.status_code if exc.status_code in _PASS_THROUGH_STATUSES else 502
    if status == 502:
        logger.warning("Backend failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": describe_persistence_error(exc)},
    )


@app.get("/api/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "version": __version__,
        "routing_configured": bool(settings.mapbox_token),
        "open_drafts": len(app.state.draft_sessions),
    }
