"""In-memory repositories for bookings, timelines and the collaborator directories."""

from __future__ import annotations

import threading

from booking_engine.domain.models import (
    Booking,
    BookingStatus,
    TimelineEntry,
    resource_key,
)
from booking_engine.domain.ports import BookingStore, ClientDirectory, ResourceDirectory


class BookingRepository(BookingStore):
    """Dict-backed store for Booking instances, keyed by id.

    Records are copied on the way in and on the way out, so a caller holding
    a Booking never sees (or causes) uncommitted changes.
    """

    def __init__(self) -> None:
        self._store: dict[str, Booking] = {}
        self._lock = threading.Lock()

    def add(self, booking: Booking) -> None:
        with self._lock:
            if booking.id in self._store:
                raise KeyError(f"booking {booking.id} already exists")
            self._store[booking.id] = booking.model_copy(deep=True)

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            booking = self._store.get(booking_id)
            return booking.model_copy(deep=True) if booking is not None else None

    def update(self, booking: Booking) -> None:
        with self._lock:
            if booking.id not in self._store:
                raise KeyError(f"booking {booking.id} does not exist")
            self._store[booking.id] = booking.model_copy(deep=True)

    def delete(self, booking_id: str) -> bool:
        with self._lock:
            return self._store.pop(booking_id, None) is not None

    def list_for_resource(
        self, resource_id: str, status: BookingStatus | None = None
    ) -> list[Booking]:
        with self._lock:
            return [
                b.model_copy(deep=True)
                for b in self._store.values()
                if b.resource_id == resource_id and (status is None or b.status == status)
            ]

    def list_all(self) -> list[Booking]:
        with self._lock:
            return [b.model_copy(deep=True) for b in self._store.values()]

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class TimelineRepository:
    """List-backed store for TimelineEntry instances."""

    def __init__(self) -> None:
        self._entries: list[TimelineEntry] = []

    def add(self, entry: TimelineEntry) -> None:
        self._entries.append(entry)

    def list_for_booking(self, booking_id: str) -> list[TimelineEntry]:
        return sorted(
            [e for e in self._entries if e.booking_id == booking_id],
            key=lambda e: e.timestamp,
        )

    def clear(self) -> None:
        self._entries.clear()


class InMemoryResourceDirectory(ResourceDirectory):
    def __init__(self, resource_ids: list[str] | None = None) -> None:
        self._ids: set[str] = set(resource_ids or [])

    def register(self, resource_id: str) -> None:
        self._ids.add(resource_id)

    def resource_exists(self, resource_id: str) -> bool:
        return resource_id in self._ids


class InMemoryClientDirectory(ClientDirectory):
    def __init__(self, client_ids: list[str] | None = None) -> None:
        self._ids: set[str] = set(client_ids or [])

    def register(self, client_id: str) -> None:
        self._ids.add(client_id)

    def client_exists(self, client_id: str) -> bool:
        return client_id in self._ids


# ---------------------------------------------------------------------------
# Seed data – a demo provider/service and client for local runs
# ---------------------------------------------------------------------------

DEMO_RESOURCE_ID = resource_key("provider-1", "haircut")
DEMO_CLIENT_ID = "client-1"


def seed_demo_directories(
    resources: InMemoryResourceDirectory, clients: InMemoryClientDirectory
) -> None:
    resources.register(DEMO_RESOURCE_ID)
    resources.register(resource_key("provider-1", "colouring"))
    resources.register(resource_key("provider-2", "haircut"))
    clients.register(DEMO_CLIENT_ID)
    clients.register("client-2")
