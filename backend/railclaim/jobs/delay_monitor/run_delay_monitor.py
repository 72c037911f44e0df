import argparse
import logging
import time
import uuid
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from railclaim.core.config import settings
from railclaim.core.db import SessionLocal
from railclaim.core.events import BookingCompleted, EventBus
from railclaim.core.log import configure_logging_if_needed
from railclaim.jobs.delay_monitor.service import DelayMonitorService
from railclaim.models.job_runs import JobRun

logger = logging.getLogger(__name__)

JOB_NAME = "delay_monitor"


def _start_job(db: Session, meta: dict) -> uuid.UUID:
    run_id = uuid.uuid4()
    db.add(JobRun(run_id=run_id, job_name=JOB_NAME, status="running", meta=meta))
    db.commit()
    return run_id


def _finish_job(db: Session, run_id: uuid.UUID, status: str, meta_updates: dict):
    jr = db.get(JobRun, run_id)
    jr.status = status
    jr.ended_at = datetime.now(pytz.utc)
    jr.meta = {**(jr.meta or {}), **meta_updates}
    db.commit()


def log_completed(event: BookingCompleted) -> None:
    if event.is_eligible_for_claim:
        logger.info(
            "Booking %s eligible for claim: delay=%d min train=%s",
            event.booking_id,
            event.delay_minutes,
            event.train_id,
        )


def run_once(service: DelayMonitorService, now: Optional[datetime] = None, session_factory=SessionLocal) -> dict:
    """One delay monitor run, recorded in job_runs."""
    now = now or datetime.now(pytz.utc)
    started = time.perf_counter()

    db: Session = session_factory()
    run_id = _start_job(db, {"now": now.isoformat()})
    try:
        result = service.process_bookings(db, now)
        summary = {**result.summary(), "duration_ms": int((time.perf_counter() - started) * 1000)}
        if result.errors:
            summary["booking_errors"] = result.errors[:20]

        _finish_job(db, run_id, "success", {"result": summary})
        logger.info("Delay monitor run_id=%s status=OK %s", run_id, summary)
        return summary

    except Exception as e:
        db.rollback()
        _finish_job(db, run_id, "fail", {"error": repr(e)})
        logger.error("Delay monitor run_id=%s status=ERROR error=%r", run_id, e)
        raise

    finally:
        db.close()


def run_forever(service: DelayMonitorService, interval_seconds: int) -> None:
    """
    Runs are executed back to back in this process, so a tick never starts
    while the previous run is still in flight.
    """
    logger.info("Delay monitor started interval=%ds", interval_seconds)
    while True:
        t0 = time.monotonic()
        try:
            run_once(service)
        except Exception:
            logger.warning("Delay monitor run failed; retrying in %ds", interval_seconds)
        elapsed = time.monotonic() - t0
        time.sleep(max(0.0, interval_seconds - elapsed))


def main():
    p = argparse.ArgumentParser(description="Detect completed journeys and record final delays on bookings")
    p.add_argument("--once", action="store_true", help="Run a single pass and exit")
    p.add_argument(
        "--interval-seconds",
        type=int,
        default=settings.delay_monitor_interval_seconds,
        help="Seconds between runs when looping (default: 300)",
    )
    p.add_argument("--now", help="ISO timestamp to evaluate at instead of the current time (single pass only)")
    args = p.parse_args()

    configure_logging_if_needed()

    events = EventBus()
    events.subscribe(BookingCompleted, log_completed)
    service = DelayMonitorService(events=events)

    if args.once or args.now:
        now = datetime.fromisoformat(args.now) if args.now else None
        print(run_once(service, now=now))
        return

    run_forever(service, args.interval_seconds)


if __name__ == "__main__":
    main()
