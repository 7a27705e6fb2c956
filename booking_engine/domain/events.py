"""Domain events emitted during the booking lifecycle."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class BookingCreated(BaseModel):
    """Fired when a new CONFIRMED booking is persisted."""

    booking_id: str
    resource_id: str
    client_id: str
    start: datetime
    end: datetime


class BookingStatusChanged(BaseModel):
    booking_id: str
    resource_id: str
    previous_status: str
    new_status: str
    cancellation_reason: str | None = None


class BookingRescheduled(BaseModel):
    """Fired after a booking's interval has been moved."""

    booking_id: str
    resource_id: str
    previous_start: datetime
    previous_end: datetime
    start: datetime
    end: datetime


class BookingDeleted(BaseModel):
    """Fired when an administrator removes a booking outright."""

    booking_id: str
    resource_id: str
