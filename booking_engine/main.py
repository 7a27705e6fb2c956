"""FastAPI application — entry point for the booking service."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from booking_engine.config import Settings, settings
from booking_engine.domain.bus import EventBus
from booking_engine.domain.errors import (
    BookingError,
    ConflictError,
    IllegalTransitionError,
    InvalidIntervalError,
    InvalidTransitionError,
    NotFoundError,
)
from booking_engine.domain.handlers import HandlerRegistry
from booking_engine.domain.models import (
    Booking,
    BookingStatus,
    CreateBookingRequest,
    Interval,
    RescheduleRequest,
    StatusChangeRequest,
    TimelineEntry,
)
from booking_engine.repos.memory import (
    BookingRepository,
    InMemoryClientDirectory,
    InMemoryResourceDirectory,
    TimelineRepository,
    seed_demo_directories,
)
from booking_engine.services.lifecycle import LifecycleManager
from booking_engine.services.queries import RangeQueryService


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "resource_id", "status"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_TITLE)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
booking_repo = BookingRepository()
timeline_repo = TimelineRepository()
resource_directory = InMemoryResourceDirectory()
client_directory = InMemoryClientDirectory()

handler_registry = HandlerRegistry(bus=event_bus, timeline_repo=timeline_repo)
lifecycle = LifecycleManager(
    store=booking_repo,
    resources=resource_directory,
    clients=client_directory,
    bus=event_bus,
)
queries = RangeQueryService(booking_repo)


def apply_seed(config: Settings = settings) -> bool:
    """Register the demo resources and clients when the config asks for them."""
    if not config.SEED_DEMO_DATA:
        return False
    seed_demo_directories(resource_directory, client_directory)
    logger.info("Seeded demo resources and clients")
    return True


apply_seed()


# ── Error mapping ─────────────────────────────────────────────────────

_STATUS_BY_ERROR: list[tuple[type[BookingError], int]] = [
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidTransitionError, 422),
    (IllegalTransitionError, 409),
    (InvalidIntervalError, 422),
]


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        400,
    )
    body: dict = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ConflictError):
        body["conflicting_booking_ids"] = exc.conflicting_booking_ids
    if isinstance(exc, IllegalTransitionError):
        body["current_status"] = exc.current
        body["requested_status"] = exc.requested
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=status_code, content=body)


def _parse_status(code: str) -> BookingStatus:
    try:
        return BookingStatus.from_code(code)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.put("/resources/{resource_id}", status_code=204)
def register_resource(resource_id: str) -> Response:
    resource_directory.register(resource_id)
    return Response(status_code=204)


@app.put("/clients/{client_id}", status_code=204)
def register_client(client_id: str) -> Response:
    client_directory.register(client_id)
    return Response(status_code=204)


@app.post("/bookings", response_model=Booking, status_code=201)
def create_booking(payload: CreateBookingRequest) -> Booking:
    """Admit a new booking if its slot is free on the resource."""
    interval = Interval(start=payload.start_time, end=payload.end_time)
    return lifecycle.create_booking(
        client_id=payload.client_id,
        resource_id=payload.resource_id,
        interval=interval,
        notes=payload.notes,
    )


@app.get("/bookings", response_model=list[Booking])
def list_bookings(
    start: datetime | None = None,
    end: datetime | None = None,
    resource_id: str | None = None,
    provider_id: str | None = None,
    client_id: str | None = None,
    status: str | None = None,
) -> list[Booking]:
    """List bookings ordered by start time.

    Pass both *start* and *end* to restrict to bookings overlapping that
    window. Every status is included unless *status* is given.
    """
    if (start is None) != (end is None):
        raise HTTPException(status_code=422, detail="start and end must be given together")

    return queries.search(
        window=Interval(start=start, end=end) if start is not None else None,
        resource_id=resource_id,
        provider_id=provider_id,
        client_id=client_id,
        status=_parse_status(status) if status is not None else None,
    )


@app.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: str) -> Booking:
    return lifecycle.get_booking(booking_id)


@app.patch("/bookings/{booking_id}/status", response_model=Booking)
def change_booking_status(booking_id: str, body: StatusChangeRequest) -> Booking:
    return lifecycle.change_status(
        booking_id, _parse_status(body.status), body.cancellation_reason
    )


@app.patch("/bookings/{booking_id}/schedule", response_model=Booking)
def reschedule_booking(booking_id: str, body: RescheduleRequest) -> Booking:
    interval = Interval(start=body.start_time, end=body.end_time)
    return lifecycle.reschedule_booking(booking_id, interval)


@app.delete("/bookings/{booking_id}", status_code=204)
def delete_booking(booking_id: str) -> Response:
    lifecycle.delete_booking(booking_id)
    return Response(status_code=204)


@app.get("/bookings/{booking_id}/timeline", response_model=list[TimelineEntry])
def get_timeline(booking_id: str) -> list[TimelineEntry]:
    """Return the recorded history of a booking, oldest first."""
    entries = timeline_repo.list_for_booking(booking_id)
    if not entries and booking_repo.get(booking_id) is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return entries
