"""
Claim timing rules.

  - claims open 24h after the journey date (00:00 UTC)
  - claims close 3 calendar months after the journey date, at the end of that day

Every function takes `now` explicitly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from railclaim.eligibility.types import CLAIM_DEADLINE_MONTHS, CLAIM_WINDOW_HOURS
from railclaim.utils.time import UTC, ensure_utc, start_of_day_utc, utc_date

ONE_DAY = timedelta(days=1)
ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class ClaimTimingStatus:
    window_open: bool
    within_deadline: bool
    can_submit: bool
    deadline: datetime
    days_remaining: int
    hours_until_window_opens: int


def add_months(d: date, months: int) -> date:
    """
    Calendar month arithmetic that rolls overflowing days into the next month
    (Nov 30 + 3 months -> Mar 2, not Feb 28).
    """
    month_index = d.month - 1 + months
    first = date(d.year + month_index // 12, month_index % 12 + 1, 1)
    return first + timedelta(days=d.day - 1)


def get_claim_window_open_time(journey_date: date | datetime) -> datetime:
    """A plain date counts from 00:00 UTC; a datetime counts from that instant."""
    if isinstance(journey_date, datetime):
        return ensure_utc(journey_date) + timedelta(hours=CLAIM_WINDOW_HOURS)
    return start_of_day_utc(journey_date) + timedelta(hours=CLAIM_WINDOW_HOURS)


def is_claim_window_open(journey_date: date | datetime, now: datetime) -> bool:
    return ensure_utc(now) >= get_claim_window_open_time(journey_date)


def hours_until_claim_window_opens(journey_date: date | datetime, now: datetime) -> int:
    remaining = get_claim_window_open_time(journey_date) - ensure_utc(now)
    if remaining <= timedelta(0):
        return 0
    return math.ceil(remaining / ONE_HOUR)


def get_claim_deadline(journey_date: date | datetime) -> datetime:
    """Journey 2026-01-15 -> 2026-04-15 23:59:59.999 UTC."""
    deadline_day = add_months(utc_date(journey_date), CLAIM_DEADLINE_MONTHS)
    return UTC.localize(datetime.combine(deadline_day, time(23, 59, 59, 999000)))


def is_within_claim_window(journey_date: date | datetime, now: datetime) -> bool:
    return ensure_utc(now) <= get_claim_deadline(journey_date)


def has_deadline_passed(journey_date: date | datetime, now: datetime) -> bool:
    return not is_within_claim_window(journey_date, now)


def days_until_deadline(journey_date: date | datetime, now: datetime) -> int:
    """
    Whole days left before the deadline. Floors on both sides of zero, so one
    hour past the deadline is -1, not 0.
    """
    return math.floor((get_claim_deadline(journey_date) - ensure_utc(now)) / ONE_DAY)


def get_claim_timing_status(journey_date: date | datetime, now: datetime) -> ClaimTimingStatus:
    window_open = is_claim_window_open(journey_date, now)
    within_deadline = is_within_claim_window(journey_date, now)
    return ClaimTimingStatus(
        window_open=window_open,
        within_deadline=within_deadline,
        can_submit=window_open and within_deadline,
        deadline=get_claim_deadline(journey_date),
        days_remaining=days_until_deadline(journey_date, now),
        hours_until_window_opens=hours_until_claim_window_opens(journey_date, now),
    )


def format_time_until_deadline(journey_date: date | datetime, now: datetime) -> str:
    days = days_until_deadline(journey_date, now)

    if days < 0:
        return f"Expired {abs(days)} days ago"
    if days == 0:
        return "Expires today"
    if days == 1:
        return "Expires tomorrow"
    if days < 7:
        return f"{days} days remaining"

    weeks = days // 7
    if weeks < 4:
        return f"{weeks} week{'s' if weeks > 1 else ''} remaining"

    months = max(1, days // 30)
    return f"{months} month{'s' if months > 1 else ''} remaining"
