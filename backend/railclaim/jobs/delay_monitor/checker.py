from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from railclaim.jobs.delay_monitor.types import (
    COMPENSATION_THRESHOLD_MINUTES,
    JourneyCheckResult,
    JourneyStatus,
)
from railclaim.models.bookings import Booking
from railclaim.models.trains import Train
from railclaim.utils.time import ensure_utc, round_half_up, start_of_day_utc

# Grace period after scheduled arrival for unloading and feed lag.
COMPLETION_BUFFER = timedelta(hours=1)


def is_eligible_for_compensation(delay_minutes: int) -> bool:
    return delay_minutes >= COMPENSATION_THRESHOLD_MINUTES


def calculate_delay_minutes(train: Train) -> int:
    """
    Actual vs scheduled arrival when the actual is known, otherwise the feed's
    own delay_minutes, otherwise 0. Early arrivals count as 0.
    """
    if train.actual_arrival is not None and train.scheduled_arrival is not None:
        diff = ensure_utc(train.actual_arrival) - ensure_utc(train.scheduled_arrival)
        return max(0, round_half_up(diff.total_seconds() / 60.0))
    return train.delay_minutes if train.delay_minutes is not None else 0


def completion_threshold(train: Train) -> datetime:
    return ensure_utc(train.scheduled_arrival) + COMPLETION_BUFFER


def is_journey_complete(train: Train, now: datetime) -> bool:
    return ensure_utc(now) >= completion_threshold(train)


def check_journey_status(booking: Booking, train: Optional[Train], now: datetime) -> JourneyCheckResult:
    """
    Classify a booking's journey at `now`. Recomputed from inputs every call.

    Without a train record the only thing we can say is whether the journey
    day has started: before it -> PENDING, from then on -> UNKNOWN.
    """
    now = ensure_utc(now)

    if train is None:
        status = JourneyStatus.PENDING if now < start_of_day_utc(booking.journey_date) else JourneyStatus.UNKNOWN
        return JourneyCheckResult(booking_id=booking.id, status=status, delay_minutes=None, train=None, checked_at=now)

    delay_minutes = None
    if now < ensure_utc(train.scheduled_departure):
        status = JourneyStatus.PENDING
    elif now < completion_threshold(train):
        status = JourneyStatus.IN_PROGRESS
    else:
        status = JourneyStatus.COMPLETED
        delay_minutes = calculate_delay_minutes(train)

    return JourneyCheckResult(
        booking_id=booking.id,
        status=status,
        delay_minutes=delay_minutes,
        train=train,
        checked_at=now,
    )
