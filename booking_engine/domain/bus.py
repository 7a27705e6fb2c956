"""Synchronous in-process bus for booking domain events."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """Publish/subscribe bus for booking events.

    Handlers run synchronously on the publishing thread, in registration
    order. Events describe changes that are already committed, so a failing
    handler is logged and the remaining handlers still run; the publisher
    never sees the failure.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[BaseModel], list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: type[BaseModel], handler: Handler) -> None:
        with self._lock:
            self._subscribers[event_type].append(handler)

    def publish(self, event: BaseModel) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(type(event), []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %r failed for %s", handler, type(event).__name__)
