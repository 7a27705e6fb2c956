"""Read-only listings over the booking store."""

from __future__ import annotations

from datetime import datetime

from booking_engine.domain.models import Booking, BookingStatus, Interval, provider_of
from booking_engine.domain.ports import BookingStore
from booking_engine.services.conflicts import by_start, find_conflicts


class RangeQueryService:
    """Answers "which bookings ..." questions, across every status.

    Results are always ordered by interval start ascending. Window queries
    go through ``find_conflicts`` so they match admission exactly.
    """

    def __init__(self, store: BookingStore) -> None:
        self.store = store

    def find_overlapping(self, window: Interval, resource_id: str | None = None) -> list[Booking]:
        if resource_id is not None:
            candidates = self.store.list_for_resource(resource_id)
        else:
            candidates = self.store.list_all()
        return find_conflicts(window, candidates)

    def query_by_window(self, start: datetime, end: datetime) -> list[Booking]:
        return self.find_overlapping(Interval(start=start, end=end))

    def query_by_resource(self, resource_id: str) -> list[Booking]:
        return sorted(self.store.list_for_resource(resource_id), key=by_start)

    def query_by_client(self, client_id: str) -> list[Booking]:
        return self.search(client_id=client_id)

    def query_by_provider(self, provider_id: str) -> list[Booking]:
        """Bookings on every service the provider offers."""
        return self.search(provider_id=provider_id)

    def query_by_status(self, status: BookingStatus) -> list[Booking]:
        return self.search(status=status)

    def list_all(self) -> list[Booking]:
        return sorted(self.store.list_all(), key=by_start)

    def search(
        self,
        window: Interval | None = None,
        resource_id: str | None = None,
        provider_id: str | None = None,
        client_id: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Combine the listings above; every given filter must match."""
        if window is not None:
            results = self.find_overlapping(window, resource_id)
        elif resource_id is not None:
            results = self.query_by_resource(resource_id)
        else:
            results = self.list_all()

        return [
            b
            for b in results
            if (provider_id is None or provider_of(b.resource_id) == provider_id)
            and (client_id is None or b.client_id == client_id)
            and (status is None or b.status == status)
        ]
