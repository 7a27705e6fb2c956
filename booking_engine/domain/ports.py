"""Interfaces the engine consumes from its collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.models import Booking, BookingStatus


class ResourceDirectory(ABC):
    @abstractmethod
    def resource_exists(self, resource_id: str) -> bool:
        raise NotImplementedError


class ClientDirectory(ABC):
    @abstractmethod
    def client_exists(self, client_id: str) -> bool:
        raise NotImplementedError


class BookingStore(ABC):
    """Persistence for Booking records.

    Writes are all-or-nothing: a failed ``add`` or ``update`` must leave the
    previously stored record untouched.
    """

    @abstractmethod
    def add(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def update(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_for_resource(
        self, resource_id: str, status: BookingStatus | None = None
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Booking]:
        raise NotImplementedError
