"""Engine-level exceptions (drafts, routing, place search)."""

ROUTE_UNAVAILABLE_MESSAGE = "Failed to calculate route. Please try again."


class DraftError(Exception):
    """Base exception for route draft errors."""


class DraftValidationError(DraftError):
    """Raised before any service call when a draft cannot be submitted.

    ``field_errors`` maps a draft field (``title``, ``points``,
    ``cover_image``) to a user-facing message.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("; ".join(self.field_errors.values()))


class RouteUnavailableError(DraftError):
    """Raised when no usable route geometry exists for the current points."""

    def __init__(self, message: str = ROUTE_UNAVAILABLE_MESSAGE):
        super().__init__(message)


class SubmissionInProgressError(DraftError):
    """Raised when ``submit()`` is called while a submission is in flight."""


class PlaceSearchError(Exception):
    """Raised when the place-search backend rejects a query or cannot be reached."""
