"""Service for deciding whether a candidate interval may occupy a resource."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from booking_engine.domain.errors import ConflictError
from booking_engine.domain.models import Booking, BookingStatus, Interval
from booking_engine.domain.ports import BookingStore


def by_start(booking: Booking) -> tuple:
    return (booking.interval.start, booking.interval.end, booking.id)


def find_conflicts(candidate: Interval, existing_bookings: list[Booking]) -> list[Booking]:
    """Return existing bookings whose interval overlaps *candidate*.

    Overlap rule: conflict if candidate.start < existing.end AND existing.start < candidate.end.
    Exact boundary touches (end == start) are NOT considered conflicts.
    """
    return sorted(
        (b for b in existing_bookings if candidate.overlaps(b.interval)),
        key=by_start,
    )


class Admitted(BaseModel):
    outcome: Literal["admitted"] = "admitted"
    admitted: Literal[True] = True

    def raise_for_conflict(self) -> None:
        return None


class Rejected(BaseModel):
    outcome: Literal["rejected"] = "rejected"
    admitted: Literal[False] = False
    resource_id: str
    conflicting_booking_ids: list[str] = Field(min_length=1)

    def raise_for_conflict(self) -> None:
        raise ConflictError(self.resource_id, self.conflicting_booking_ids)


Decision = Admitted | Rejected


class ConflictResolver:
    """Checks a candidate interval against the CONFIRMED bookings of one resource.

    The check by itself is not atomic with any later write; callers that act
    on an ``Admitted`` decision must hold the resource's lock across both.
    """

    def __init__(self, store: BookingStore) -> None:
        self.store = store

    def check_admission(
        self,
        resource_id: str,
        candidate: Interval,
        excluding_booking_id: str | None = None,
    ) -> Decision:
        active = [
            b
            for b in self.store.list_for_resource(resource_id, status=BookingStatus.CONFIRMED)
            if b.occupies_resource and b.id != excluding_booking_id
        ]
        conflicts = find_conflicts(candidate, active)
        if not conflicts:
            return Admitted()
        return Rejected(
            resource_id=resource_id,
            conflicting_booking_ids=[b.id for b in conflicts],
        )
