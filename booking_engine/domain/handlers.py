"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from booking_engine.domain.bus import EventBus
from booking_engine.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingRescheduled,
    BookingStatusChanged,
)
from booking_engine.domain.models import TimelineEntry, TimelineEntryType
from booking_engine.repos.memory import TimelineRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Records every committed booking change on the timeline and in the log."""

    def __init__(self, bus: EventBus, timeline_repo: TimelineRepository) -> None:
        self.bus = bus
        self.timeline_repo = timeline_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingCreated, self.on_booking_created)
        self.bus.subscribe(BookingStatusChanged, self.on_status_changed)
        self.bus.subscribe(BookingRescheduled, self.on_booking_rescheduled)
        self.bus.subscribe(BookingDeleted, self.on_booking_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_created(self, event: BookingCreated) -> None:
        self.timeline_repo.add(
            TimelineEntry(
                booking_id=event.booking_id,
                type=TimelineEntryType.CREATED,
                payload={
                    "resource_id": event.resource_id,
                    "client_id": event.client_id,
                    "start": event.start.isoformat(),
                    "end": event.end.isoformat(),
                },
            )
        )
        logger.info(
            "Booking created",
            extra={"booking_id": event.booking_id, "resource_id": event.resource_id},
        )

    def on_status_changed(self, event: BookingStatusChanged) -> None:
        payload = {"from": event.previous_status, "to": event.new_status}
        if event.cancellation_reason is not None:
            payload["reason"] = event.cancellation_reason
        self.timeline_repo.add(
            TimelineEntry(
                booking_id=event.booking_id,
                type=TimelineEntryType.STATUS_CHANGED,
                payload=payload,
            )
        )
        logger.info(
            "Booking status changed",
            extra={
                "booking_id": event.booking_id,
                "resource_id": event.resource_id,
                "status": event.new_status,
            },
        )

    def on_booking_rescheduled(self, event: BookingRescheduled) -> None:
        self.timeline_repo.add(
            TimelineEntry(
                booking_id=event.booking_id,
                type=TimelineEntryType.RESCHEDULED,
                payload={
                    "previous_start": event.previous_start.isoformat(),
                    "previous_end": event.previous_end.isoformat(),
                    "start": event.start.isoformat(),
                    "end": event.end.isoformat(),
                },
            )
        )
        logger.info(
            "Booking rescheduled",
            extra={"booking_id": event.booking_id, "resource_id": event.resource_id},
        )

    def on_booking_deleted(self, event: BookingDeleted) -> None:
        self.timeline_repo.add(
            TimelineEntry(booking_id=event.booking_id, type=TimelineEntryType.DELETED)
        )
        # Deletion bypasses the booking protocol.
        logger.warning(
            "Booking deleted by administrative override",
            extra={"booking_id": event.booking_id, "resource_id": event.resource_id},
        )
