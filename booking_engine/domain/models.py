"""Domain models for the booking engine."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from booking_engine.domain.errors import (
    IllegalTransitionError,
    InvalidIntervalError,
    InvalidTransitionError,
)


class BookingStatus(StrEnum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: BookingStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self]

    @classmethod
    def from_code(cls, code: str) -> BookingStatus:
        """Parse a status code case-insensitively ("no_show" -> NO_SHOW)."""
        for status in cls:
            if status.value == code.strip().upper():
                return status
        valid = ", ".join(s.value for s in cls)
        raise ValueError(f"Invalid booking status code: {code}. Valid values are: {valid}")


_DISPLAY_NAMES = {
    BookingStatus.CONFIRMED: "Confirmed",
    BookingStatus.CANCELLED: "Cancelled",
    BookingStatus.COMPLETED: "Completed",
    BookingStatus.NO_SHOW: "No Show",
}

# Only CONFIRMED has outgoing edges; every other status is terminal.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}


class TimelineEntryType(StrEnum):
    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    RESCHEDULED = "rescheduled"
    DELETED = "deleted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def resource_key(provider_id: str, service_id: str) -> str:
    """Canonical resource id for a provider offering a specific service."""
    return f"{provider_id}:{service_id}"


def provider_of(resource_id: str) -> str | None:
    """Provider part of a ``resource_key`` id, or None for other ids."""
    provider_id, sep, _ = resource_id.partition(":")
    return provider_id if sep else None


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Interval(BaseModel):
    """Half-open time range ``[start, end)``.

    Two intervals that merely touch (one ends exactly when the other starts)
    do not overlap. Naive datetimes are read as UTC.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _start_before_end(self) -> Interval:
        if self.start >= self.end:
            raise InvalidIntervalError(
                f"interval start ({self.start.isoformat()}) must be before "
                f"end ({self.end.isoformat()})"
            )
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: Interval) -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return self.start <= instant < self.end


class Booking(BaseModel):
    id: str = Field(default_factory=_new_id, frozen=True)
    resource_id: str = Field(frozen=True)
    client_id: str = Field(frozen=True)
    interval: Interval
    status: BookingStatus = BookingStatus.CONFIRMED
    cancellation_reason: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _reason_only_when_cancelled(self) -> Booking:
        cancelled = self.status == BookingStatus.CANCELLED
        if cancelled != (self.cancellation_reason is not None):
            raise ValueError("cancellation_reason is required for, and only for, CANCELLED")
        return self

    @property
    def occupies_resource(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    def transitioned(self, new_status: BookingStatus, reason: str | None = None) -> Booking:
        """Return a copy moved to *new_status*, or raise if the move is illegal."""
        if self.status.is_terminal:
            raise IllegalTransitionError(
                f"Booking {self.id} is already {self.status.value}",
                current=self.status.value,
                requested=new_status.value,
            )
        if not self.status.can_transition_to(new_status):
            raise IllegalTransitionError(
                f"Cannot move booking {self.id} from {self.status.value} to {new_status.value}",
                current=self.status.value,
                requested=new_status.value,
            )

        cancellation_reason = None
        if new_status == BookingStatus.CANCELLED:
            cancellation_reason = (reason or "").strip()
            if not cancellation_reason:
                raise InvalidTransitionError(
                    "A cancellation reason is required to cancel a booking",
                    current=self.status.value,
                    requested=new_status.value,
                )

        return self.model_copy(
            update={
                "status": new_status,
                "cancellation_reason": cancellation_reason,
                "updated_at": _utcnow(),
            }
        )

    def rescheduled(self, interval: Interval) -> Booking:
        """Return a copy occupying *interval*. Only CONFIRMED bookings can move."""
        if self.status != BookingStatus.CONFIRMED:
            raise IllegalTransitionError(
                f"Cannot reschedule booking {self.id}: it is {self.status.value}",
                current=self.status.value,
                requested=BookingStatus.CONFIRMED.value,
            )
        return self.model_copy(update={"interval": interval, "updated_at": _utcnow()})


class TimelineEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    booking_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: TimelineEntryType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateBookingRequest(BaseModel):
    client_id: str
    resource_id: str
    start_time: datetime
    end_time: datetime
    notes: str | None = None


class StatusChangeRequest(BaseModel):
    status: str
    cancellation_reason: str | None = None


class RescheduleRequest(BaseModel):
    start_time: datetime
    end_time: datetime
