"""Tests for the Interval value type and the Booking status machine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from booking_engine.domain.errors import (
    IllegalTransitionError,
    InvalidIntervalError,
    InvalidTransitionError,
)
from booking_engine.domain.models import (
    Booking,
    BookingStatus,
    Interval,
    resource_key,
)

_T0 = datetime(2026, 6, 1, 10, 0, tzinfo=timezone.utc)


def _interval(start_min: int, end_min: int) -> Interval:
    return Interval(start=_T0 + timedelta(minutes=start_min), end=_T0 + timedelta(minutes=end_min))


def _booking(**overrides) -> Booking:
    defaults = dict(resource_id="r1", client_id="c1", interval=_interval(0, 30))
    defaults.update(overrides)
    return Booking(**defaults)


# ---------------------------------------------------------------------------
# Interval
# ---------------------------------------------------------------------------


def test_interval_requires_start_before_end():
    with pytest.raises(InvalidIntervalError):
        Interval(start=_T0, end=_T0)
    with pytest.raises(InvalidIntervalError):
        Interval(start=_T0, end=_T0 - timedelta(minutes=1))


def test_interval_is_immutable():
    interval = _interval(0, 30)
    with pytest.raises(ValidationError):
        interval.end = _T0 + timedelta(hours=2)


def test_overlap_is_half_open():
    assert _interval(10, 20).overlaps(_interval(15, 25))
    assert _interval(15, 25).overlaps(_interval(10, 20))
    assert _interval(10, 20).overlaps(_interval(10, 20))
    assert _interval(10, 20).overlaps(_interval(12, 18))
    assert not _interval(10, 20).overlaps(_interval(20, 30))
    assert not _interval(20, 30).overlaps(_interval(10, 20))


def test_contains_includes_start_excludes_end():
    interval = _interval(10, 20)
    assert interval.contains(_T0 + timedelta(minutes=10))
    assert interval.contains(_T0 + timedelta(minutes=19))
    assert not interval.contains(_T0 + timedelta(minutes=20))
    assert not interval.contains(_T0 + timedelta(minutes=9))


def test_naive_datetimes_are_read_as_utc():
    interval = Interval(start=datetime(2026, 6, 1, 10), end=datetime(2026, 6, 1, 11))
    assert interval.start == _T0
    assert interval.overlaps(_interval(30, 90))
    assert interval.duration == timedelta(hours=1)


def test_resource_key():
    assert resource_key("provider-7", "massage") == "provider-7:massage"


# ---------------------------------------------------------------------------
# BookingStatus
# ---------------------------------------------------------------------------


def test_status_from_code_is_case_insensitive():
    assert BookingStatus.from_code("no_show") is BookingStatus.NO_SHOW
    assert BookingStatus.from_code(" Cancelled ") is BookingStatus.CANCELLED


def test_status_from_code_rejects_unknown():
    with pytest.raises(ValueError, match="Valid values are"):
        BookingStatus.from_code("pending")


def test_only_confirmed_is_non_terminal():
    assert not BookingStatus.CONFIRMED.is_terminal
    for status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW):
        assert status.is_terminal
    assert BookingStatus.NO_SHOW.display_name == "No Show"


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


def test_identity_fields_are_frozen():
    booking = _booking()
    with pytest.raises(ValidationError):
        booking.resource_id = "r2"
    with pytest.raises(ValidationError):
        booking.client_id = "c2"
    with pytest.raises(ValidationError):
        booking.id = "other"


def test_cancellation_reason_only_with_cancelled():
    with pytest.raises(ValidationError):
        _booking(cancellation_reason="why not")
    with pytest.raises(ValidationError):
        _booking(status=BookingStatus.CANCELLED)


def test_transitioned_returns_copy():
    booking = _booking()
    done = booking.transitioned(BookingStatus.COMPLETED)
    assert done.status == BookingStatus.COMPLETED
    assert done.id == booking.id
    assert booking.status == BookingStatus.CONFIRMED


def test_cancel_strips_reason():
    cancelled = _booking().transitioned(BookingStatus.CANCELLED, "  client ill  ")
    assert cancelled.cancellation_reason == "client ill"


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_cancel_without_reason_is_invalid(reason):
    with pytest.raises(InvalidTransitionError):
        _booking().transitioned(BookingStatus.CANCELLED, reason)


def test_confirmed_to_confirmed_is_illegal():
    with pytest.raises(IllegalTransitionError):
        _booking().transitioned(BookingStatus.CONFIRMED)


@pytest.mark.parametrize(
    "terminal", [BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW]
)
@pytest.mark.parametrize("target", list(BookingStatus))
def test_terminal_states_have_no_exits(terminal, target):
    booking = _booking().transitioned(terminal, "reason")
    with pytest.raises(IllegalTransitionError) as exc_info:
        booking.transitioned(target, "reason")
    assert not isinstance(exc_info.value, InvalidTransitionError)
    assert exc_info.value.current == terminal.value


def test_reschedule_only_while_confirmed():
    booking = _booking()
    moved = booking.rescheduled(_interval(60, 90))
    assert moved.interval == _interval(60, 90)

    with pytest.raises(IllegalTransitionError):
        booking.transitioned(BookingStatus.NO_SHOW).rescheduled(_interval(60, 90))
