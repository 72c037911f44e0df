from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from railclaim.jobs.delay_monitor.types import MatchResult
from railclaim.models.bookings import Booking
from railclaim.models.trains import Train
from railclaim.utils.trip_key import build_trip_id, normalize_train_number


def match_booking_to_train(db: Session, booking: Booking) -> MatchResult:
    """
    Resolve a booking to its train record.

    1) exact trip_id
    2) normalized train_number + service_date
    3) unmatched ("not_found"): the feed has not produced the trip yet, retry later
    """
    trip_id = build_trip_id(booking.train_number, booking.journey_date)
    train = db.execute(select(Train).where(Train.trip_id == trip_id).limit(1)).scalars().first()
    if train is not None:
        return MatchResult(matched=True, train=train)

    train = db.execute(
        select(Train)
        .where(
            Train.train_number == normalize_train_number(booking.train_number),
            Train.service_date == booking.journey_date,
        )
        .limit(1)
    ).scalars().first()
    if train is not None:
        return MatchResult(matched=True, train=train)

    return MatchResult(matched=False, train=None, reason="not_found")


def match_bookings_to_trains(db: Session, bookings: Iterable[Booking]) -> dict:
    return {b.id: match_booking_to_train(db, b) for b in bookings}
