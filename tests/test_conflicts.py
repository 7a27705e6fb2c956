"""Tests for the conflict-detection service."""

from datetime import datetime, timezone

import pytest

from booking_engine.domain.errors import ConflictError
from booking_engine.domain.models import Booking, BookingStatus, Interval
from booking_engine.repos.memory import BookingRepository
from booking_engine.services.conflicts import (
    Admitted,
    ConflictResolver,
    Rejected,
    find_conflicts,
)

RESOURCE = "provider-1:haircut"


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 1, 1, hour, minute, tzinfo=timezone.utc)


def _slot(start_hour: int, end_hour: int) -> Interval:
    return Interval(start=_at(start_hour), end=_at(end_hour))


def _make_booking(
    start_hour: int,
    end_hour: int,
    resource_id: str = RESOURCE,
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    return Booking(
        resource_id=resource_id,
        client_id="client-1",
        interval=_slot(start_hour, end_hour),
        status=status,
        cancellation_reason="changed plans" if status == BookingStatus.CANCELLED else None,
    )


@pytest.fixture()
def repo() -> BookingRepository:
    return BookingRepository()


@pytest.fixture()
def resolver(repo: BookingRepository) -> ConflictResolver:
    return ConflictResolver(repo)


def test_no_overlap():
    """Bookings that don't overlap should not be returned as conflicts."""
    existing = [_make_booking(8, 9)]
    assert find_conflicts(_slot(10, 11), existing) == []


def test_partial_overlap():
    """A booking that partially overlaps should be returned as a conflict."""
    existing = [
        Booking(
            resource_id=RESOURCE,
            client_id="client-1",
            interval=Interval(start=_at(9), end=_at(10, 30)),
        )
    ]
    conflicts = find_conflicts(_slot(10, 11), existing)
    assert len(conflicts) == 1
    assert conflicts[0].interval.start == _at(9)


def test_exact_boundary_no_conflict():
    """When existing.end == candidate.start, there is no conflict (boundary touch)."""
    existing = [_make_booking(9, 10)]
    assert find_conflicts(_slot(10, 11), existing) == []


def test_conflicts_come_back_in_start_order():
    late = _make_booking(12, 13)
    early = _make_booking(9, 10)
    conflicts = find_conflicts(_slot(8, 14), [late, early])
    assert [c.id for c in conflicts] == [early.id, late.id]


def test_empty_resource_is_admitted(resolver):
    decision = resolver.check_admission(RESOURCE, _slot(10, 20))
    assert isinstance(decision, Admitted)
    assert decision.admitted is True
    decision.raise_for_conflict()


def test_identical_interval_is_rejected(repo, resolver):
    existing = _make_booking(10, 20)
    repo.add(existing)

    decision = resolver.check_admission(RESOURCE, _slot(10, 20))

    assert isinstance(decision, Rejected)
    assert decision.conflicting_booking_ids == [existing.id]


def test_rejection_lists_every_conflict(repo, resolver):
    first = _make_booking(9, 11)
    second = _make_booking(11, 13)
    repo.add(first)
    repo.add(second)

    decision = resolver.check_admission(RESOURCE, _slot(10, 12))

    assert decision.conflicting_booking_ids == [first.id, second.id]
    with pytest.raises(ConflictError) as exc_info:
        decision.raise_for_conflict()
    assert exc_info.value.conflicting_booking_ids == [first.id, second.id]
    assert exc_info.value.resource_id == RESOURCE


def test_non_confirmed_bookings_do_not_occupy(repo, resolver):
    repo.add(_make_booking(10, 20, status=BookingStatus.CANCELLED))
    repo.add(_make_booking(10, 20, status=BookingStatus.COMPLETED))
    repo.add(_make_booking(10, 20, status=BookingStatus.NO_SHOW))

    assert resolver.check_admission(RESOURCE, _slot(10, 20)).admitted is True


def test_other_resources_are_ignored(repo, resolver):
    repo.add(_make_booking(10, 20, resource_id="provider-2:haircut"))

    assert resolver.check_admission(RESOURCE, _slot(10, 20)).admitted is True


def test_excluding_booking_id_skips_that_booking(repo, resolver):
    own = _make_booking(10, 20)
    other = _make_booking(22, 23)
    repo.add(own)
    repo.add(other)

    assert resolver.check_admission(RESOURCE, _slot(12, 21), excluding_booking_id=own.id).admitted
    decision = resolver.check_admission(RESOURCE, _slot(12, 23), excluding_booking_id=own.id)
    assert decision.conflicting_booking_ids == [other.id]
