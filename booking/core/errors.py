"""Error kinds raised by the scheduling core.

Every error is recoverable and is mapped to an HTTP status by the routes.
"""


class BookingError(Exception):
    """Base class for scheduling failures surfaced to callers."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BookingError):
    """A referenced customer, business, service, appointment or hours record is absent."""

    status_code = 404


class BookingValidationError(BookingError):
    """Input was rejected before any write happened."""

    status_code = 422


class StateConflictError(BookingError):
    """The write would contradict state that already exists."""

    status_code = 409


class SlotConflictError(StateConflictError):
    """The requested interval overlaps a non-cancelled appointment."""


class TransitionNotAllowedError(StateConflictError):
    """The requested status change is not in the transition table."""
