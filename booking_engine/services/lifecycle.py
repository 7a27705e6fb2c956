"""Lifecycle manager: admits new bookings and drives their status changes."""

from __future__ import annotations

from booking_engine.domain.bus import EventBus
from booking_engine.domain.errors import NotFoundError
from booking_engine.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingRescheduled,
    BookingStatusChanged,
)
from booking_engine.domain.models import Booking, BookingStatus, Interval
from booking_engine.domain.ports import BookingStore, ClientDirectory, ResourceDirectory
from booking_engine.services.conflicts import ConflictResolver
from booking_engine.services.locks import KeyedLocks


class LifecycleManager:
    """Owns every write to the booking store.

    Locking rules:

    * admission (create / reschedule) holds the resource lock from the
      conflict check until the write has been committed;
    * status changes hold the booking lock;
    * when both are needed the booking lock is taken first;
    * unknown booking ids are rejected before any lock is taken, and the
      booking is read again once the lock is held.

    Events are published only after the store write succeeded.
    """

    def __init__(
        self,
        store: BookingStore,
        resources: ResourceDirectory,
        clients: ClientDirectory,
        bus: EventBus | None = None,
        resolver: ConflictResolver | None = None,
    ) -> None:
        self.store = store
        self.resources = resources
        self.clients = clients
        self.bus = bus or EventBus()
        self.resolver = resolver or ConflictResolver(store)
        self.resource_locks = KeyedLocks()
        self.booking_locks = KeyedLocks()

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def create_booking(
        self,
        client_id: str,
        resource_id: str,
        interval: Interval,
        notes: str | None = None,
    ) -> Booking:
        if not self.resources.resource_exists(resource_id):
            raise NotFoundError("Resource", resource_id)
        if not self.clients.client_exists(client_id):
            raise NotFoundError("Client", client_id)

        with self.resource_locks.hold(resource_id):
            self.resolver.check_admission(resource_id, interval).raise_for_conflict()
            booking = Booking(
                resource_id=resource_id,
                client_id=client_id,
                interval=interval,
                notes=notes,
            )
            self.store.add(booking)

        self.bus.publish(
            BookingCreated(
                booking_id=booking.id,
                resource_id=resource_id,
                client_id=client_id,
                start=interval.start,
                end=interval.end,
            )
        )
        return booking

    def change_status(
        self,
        booking_id: str,
        new_status: BookingStatus,
        reason: str | None = None,
    ) -> Booking:
        self.get_booking(booking_id)
        with self.booking_locks.hold(booking_id):
            current = self.get_booking(booking_id)
            updated = current.transitioned(new_status, reason)
            self.store.update(updated)

        self.bus.publish(
            BookingStatusChanged(
                booking_id=booking_id,
                resource_id=updated.resource_id,
                previous_status=current.status.value,
                new_status=updated.status.value,
                cancellation_reason=updated.cancellation_reason,
            )
        )
        return updated

    def reschedule_booking(self, booking_id: str, new_interval: Interval) -> Booking:
        self.get_booking(booking_id)
        with self.booking_locks.hold(booking_id):
            current = self.get_booking(booking_id)
            with self.resource_locks.hold(current.resource_id):
                moved = current.rescheduled(new_interval)
                self.resolver.check_admission(
                    current.resource_id, new_interval, excluding_booking_id=booking_id
                ).raise_for_conflict()
                self.store.update(moved)

        self.bus.publish(
            BookingRescheduled(
                booking_id=booking_id,
                resource_id=moved.resource_id,
                previous_start=current.interval.start,
                previous_end=current.interval.end,
                start=new_interval.start,
                end=new_interval.end,
            )
        )
        return moved

    def delete_booking(self, booking_id: str) -> None:
        """Remove a booking outright. Administrative override; no state checks."""
        self.get_booking(booking_id)
        with self.booking_locks.hold(booking_id):
            booking = self.get_booking(booking_id)
            with self.resource_locks.hold(booking.resource_id):
                self.store.delete(booking_id)

        self.bus.publish(BookingDeleted(booking_id=booking_id, resource_id=booking.resource_id))
