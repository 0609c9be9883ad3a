"""Persistence-specific exceptions, typed by backend response category."""

from __future__ import annotations

from typing import Any


class PersistenceError(Exception):
    """Base exception for all backend persistence errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class BackendUnreachableError(PersistenceError):
    """Raised when the backend cannot be reached at all."""


class UnauthorizedError(PersistenceError):
    """401 — missing, invalid or expired credentials."""


class ForbiddenError(PersistenceError):
    """403 — authenticated but not allowed."""


class NotFoundError(PersistenceError):
    """404 — the resource does not exist (or the user has none yet)."""


class RequestValidationError(PersistenceError):
    """400/422 — the backend rejected the payload.

    ``field_errors`` holds the server-provided messages, in order.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
        field_errors: list[str] | None = None,
    ):
        super().__init__(message, status_code, details)
        self.field_errors = field_errors or []


class ServerError(PersistenceError):
    """Any other non-success response."""


def error_for_status(
    status_code: int,
    message: str,
    details: Any = None,
    field_errors: list[str] | None = None,
) -> PersistenceError:
    """Build the typed error matching an HTTP status."""
    if status_code == 401:
        return UnauthorizedError(message, status_code, details)
    if status_code == 403:
        return ForbiddenError(message, status_code, details)
    if status_code == 404:
        return NotFoundError(message, status_code, details)
    if status_code in (400, 409, 422):
        return RequestValidationError(message, status_code, details, field_errors)
    return ServerError(message, status_code, details)


def describe_persistence_error(exc: PersistenceError) -> str:
    """User-facing message for a persistence failure."""
    if isinstance(exc, UnauthorizedError):
        return "Your session has expired. Please log in again."
    if isinstance(exc, ForbiddenError):
        return "You do not have permission to perform this action."
    if isinstance(exc, RequestValidationError):
        return ", ".join(exc.field_errors) if exc.field_errors else exc.message
    if isinstance(exc, BackendUnreachableError):
        return "Failed to connect to server. Please make sure the backend is running."
    return "An error occurred while saving. Please try again later."
