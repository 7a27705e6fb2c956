"""Typed failures raised by the booking engine."""

from __future__ import annotations


class BookingError(Exception):
    """Base class for every failure the engine reports to its caller."""

    code = "booking_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidIntervalError(BookingError):
    """Raised when an interval does not satisfy start < end."""

    code = "invalid_interval"


class NotFoundError(BookingError):
    code = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found with id: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(BookingError):
    """The candidate interval overlaps one or more CONFIRMED bookings."""

    code = "conflict"

    def __init__(self, resource_id: str, conflicting_booking_ids: list[str]) -> None:
        super().__init__(
            f"Time slot is not available for resource {resource_id}: "
            f"overlaps {', '.join(conflicting_booking_ids)}"
        )
        self.resource_id = resource_id
        self.conflicting_booking_ids = list(conflicting_booking_ids)


class IllegalTransitionError(BookingError):
    """A status change the state machine does not allow."""

    code = "illegal_transition"

    def __init__(self, message: str, current: str, requested: str) -> None:
        super().__init__(message)
        self.current = current
        self.requested = requested


class InvalidTransitionError(IllegalTransitionError):
    """The transition is legal in principle but its input is incomplete.

    Cancelling without a reason is the only such case today.
    """

    code = "invalid_transition"
