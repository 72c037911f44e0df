"""
In-process publish/subscribe for pipeline events.

Delivery is fire-and-forget: publishers never wait on a transport and a
subscriber that raises is logged and skipped.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass(frozen=True)
class BookingCompleted:
    booking_id: Any
    train_id: Any
    delay_minutes: int
    is_eligible_for_claim: bool
    completed_at: datetime


@dataclass(frozen=True)
class ClaimCreated:
    claim: Any
    user_id: Any
    booking_id: Any
    form_data: Any


@dataclass(frozen=True)
class ClaimStatusChanged:
    claim_id: Any
    previous_status: str
    new_status: str
    user_id: Any


@dataclass(frozen=True)
class ClaimSubmitted:
    claim_id: Any
    user_id: Any
    booking_id: Any
    submitted_at: datetime


@dataclass
class EventBus:
    _handlers: dict[type, list[Handler]] = field(default_factory=lambda: defaultdict(list))

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Any) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler(event)
            except Exception as e:
                logger.exception("Event handler %r failed for %s: %r", handler, type(event).__name__, e)
