"""
Delay monitor: bookings -> matched trains -> final delay.

Each run:
  1) selects unresolved bookings (final_delay_minutes IS NULL) whose journey
     date is yesterday or today (UTC)
  2) matches each to a train record
  3) classifies the journey at `now`
  4) persists final_delay_minutes + train_id for COMPLETED journeys
  5) publishes a BookingCompleted event per finished booking

The 2-day window bounds the scan. A booking whose train never appears in the
feed within that window stays unresolved; nothing here reconciles it later.

Usage:
  DelayMonitorService(events=bus).process_bookings(db, now=datetime.now(pytz.utc))
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from railclaim.core.events import BookingCompleted, EventBus
from railclaim.jobs.delay_monitor.checker import check_journey_status, is_eligible_for_compensation
from railclaim.jobs.delay_monitor.matcher import match_booking_to_train
from railclaim.jobs.delay_monitor.types import (
    COMPENSATION_THRESHOLD_MINUTES,
    CompletedBooking,
    JourneyStatus,
    ProcessingResult,
)
from railclaim.models.bookings import Booking
from railclaim.utils.time import ensure_utc, utc_date

logger = logging.getLogger(__name__)

# Outcomes of a single booking check
_SKIPPED = "skipped"
_IN_PROGRESS = "in_progress"
_COMPLETED = "completed"
_ALREADY_FINAL = "already_final"


def check_window(now: datetime) -> tuple[date, date]:
    today = utc_date(now)
    return today - timedelta(days=1), today


class DelayMonitorService:
    def __init__(self, events: Optional[EventBus] = None):
        self.events = events

    def process_bookings(self, db: Session, now: datetime) -> ProcessingResult:
        now = ensure_utc(now)
        result = ProcessingResult()

        pending = self.get_pending_bookings(db, now)
        result.processed = len(pending)
        if not pending:
            return result

        for booking in pending:
            booking_id = booking.id
            try:
                outcome, completed = self._process_booking(db, booking, now)
            except Exception as e:
                db.rollback()
                logger.exception("Booking %s failed: %r", booking_id, e)
                result.errors.append({"booking_id": str(booking_id), "error": str(e) or repr(e)})
                continue

            if outcome == _COMPLETED:
                result.completed.append(completed)
            elif outcome == _SKIPPED:
                result.skipped += 1
            elif outcome == _IN_PROGRESS:
                result.in_progress += 1
            elif outcome == _ALREADY_FINAL:
                result.already_final += 1

        if result.errors:
            logger.warning("Delay monitor finished with %d booking errors (first: %s)", len(result.errors), result.errors[:3])

        return result

    def get_pending_bookings(self, db: Session, now: datetime) -> list[Booking]:
        yesterday, today = check_window(now)
        stmt = (
            select(Booking)
            .where(
                Booking.final_delay_minutes.is_(None),
                Booking.journey_date >= yesterday,
                Booking.journey_date <= today,
            )
            .order_by(Booking.journey_date.asc())
        )
        return list(db.execute(stmt).scalars().all())

    def _process_booking(
        self,
        db: Session,
        booking: Booking,
        now: datetime,
    ) -> tuple[str, Optional[CompletedBooking]]:
        match = match_booking_to_train(db, booking)
        if not match.matched or match.train is None:
            logger.debug("Booking %s: no train yet for %s on %s", booking.id, booking.train_number, booking.journey_date)
            return _SKIPPED, None

        check = check_journey_status(booking, match.train, now)
        if check.status != JourneyStatus.COMPLETED:
            return _IN_PROGRESS, None

        train = match.train
        delay_minutes = check.delay_minutes or 0

        # Only ever written once; a concurrent run that got here first wins.
        rowcount = db.execute(
            update(Booking)
            .where(Booking.id == booking.id, Booking.final_delay_minutes.is_(None))
            .values(final_delay_minutes=delay_minutes, train_id=train.id)
        ).rowcount
        db.commit()

        if rowcount == 0:
            logger.info("Booking %s already finalized by another run", booking.id)
            return _ALREADY_FINAL, None

        logger.info(
            "Booking %s completed train=%s trip_id=%s delay=%d min",
            booking.id,
            train.id,
            train.trip_id,
            delay_minutes,
        )

        if self.events is not None:
            self.events.publish(
                BookingCompleted(
                    booking_id=booking.id,
                    train_id=train.id,
                    delay_minutes=delay_minutes,
                    is_eligible_for_claim=is_eligible_for_compensation(delay_minutes),
                    completed_at=now,
                )
            )

        return _COMPLETED, CompletedBooking(booking=booking, train=train, delay_minutes=delay_minutes, completed_at=now)

    def get_stats(self, db: Session, now: datetime) -> dict:
        """Counts over the current check window, for dashboards."""
        yesterday, today = check_window(now)
        in_window = (Booking.journey_date >= yesterday, Booking.journey_date <= today)

        def count(*conds) -> int:
            return int(db.execute(select(func.count()).select_from(Booking).where(*in_window, *conds)).scalar_one())

        return {
            "pending_count": count(Booking.final_delay_minutes.is_(None)),
            "processed_count": count(Booking.final_delay_minutes.is_not(None)),
            "eligible_claims_count": count(Booking.final_delay_minutes >= COMPENSATION_THRESHOLD_MINUTES),
        }
