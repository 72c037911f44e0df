from datetime import date, datetime

import pytest

from conftest import utc
from railclaim.eligibility.deadline import (
    add_months,
    days_until_deadline,
    format_time_until_deadline,
    get_claim_deadline,
    get_claim_timing_status,
    get_claim_window_open_time,
    has_deadline_passed,
    hours_until_claim_window_opens,
    is_claim_window_open,
    is_within_claim_window,
)

JOURNEY = date(2026, 1, 5)


def test_window_opens_24h_after_journey_date():
    assert get_claim_window_open_time(JOURNEY) == utc(2026, 1, 6)
    assert not is_claim_window_open(JOURNEY, utc(2026, 1, 5, 14, 0))
    assert is_claim_window_open(JOURNEY, utc(2026, 1, 6, 1, 0))
    assert is_claim_window_open(JOURNEY, utc(2026, 1, 6, 0, 0))


def test_window_open_time_from_datetime_is_instant_plus_24h():
    departed = utc(2026, 1, 5, 18, 30)
    assert get_claim_window_open_time(departed) == utc(2026, 1, 6, 18, 30)
    assert not is_claim_window_open(departed, utc(2026, 1, 6, 12, 0))
    assert is_claim_window_open(departed, utc(2026, 1, 6, 18, 30))


def test_hours_until_window_opens_rounds_up():
    assert hours_until_claim_window_opens(JOURNEY, utc(2026, 1, 5, 14, 0)) == 10
    assert hours_until_claim_window_opens(JOURNEY, utc(2026, 1, 5, 14, 30)) == 10
    assert hours_until_claim_window_opens(JOURNEY, utc(2026, 1, 5, 13, 59)) == 11
    assert hours_until_claim_window_opens(JOURNEY, utc(2026, 1, 7)) == 0


def test_deadline_is_end_of_day_three_months_later():
    deadline = get_claim_deadline(date(2026, 1, 15))
    assert deadline == utc(2026, 4, 15, 23, 59, 59, 999000)


def test_deadline_month_overflow_rolls_forward():
    assert add_months(date(2025, 11, 30), 3) == date(2026, 3, 2)
    assert add_months(date(2026, 10, 31), 3) == date(2027, 1, 31)
    assert get_claim_deadline(date(2025, 11, 30)).date() == date(2026, 3, 2)


def test_within_deadline_is_inclusive_of_last_millisecond():
    deadline = get_claim_deadline(JOURNEY)
    assert is_within_claim_window(JOURNEY, deadline)
    assert not has_deadline_passed(JOURNEY, deadline)
    assert has_deadline_passed(JOURNEY, utc(2026, 4, 6, 0, 0))


def test_days_until_deadline_floors_on_both_sides():
    # deadline 2026-04-05 23:59:59.999
    assert days_until_deadline(JOURNEY, utc(2026, 4, 4, 0, 0)) == 1
    assert days_until_deadline(JOURNEY, utc(2026, 4, 5, 12, 0)) == 0
    # one hour past is -1, not 0
    assert days_until_deadline(JOURNEY, utc(2026, 4, 6, 1, 0)) == -1


def test_timing_status_combines_checks():
    status = get_claim_timing_status(JOURNEY, utc(2026, 1, 5, 14, 0))
    assert not status.window_open
    assert status.within_deadline
    assert not status.can_submit
    assert status.hours_until_window_opens == 10

    status = get_claim_timing_status(JOURNEY, utc(2026, 2, 1))
    assert status.can_submit
    assert status.deadline == utc(2026, 4, 5, 23, 59, 59, 999000)


def test_naive_now_is_treated_as_utc():
    assert is_claim_window_open(JOURNEY, datetime(2026, 1, 6, 0, 0))


@pytest.mark.parametrize(
    "now, text",
    [
        (utc(2026, 4, 5, 12, 0), "Expires today"),
        (utc(2026, 4, 4, 12, 0), "Expires tomorrow"),
        (utc(2026, 4, 1, 12, 0), "4 days remaining"),
        (utc(2026, 3, 29, 12, 0), "1 week remaining"),
        (utc(2026, 3, 15, 12, 0), "3 weeks remaining"),
        (utc(2026, 3, 5, 12, 0), "1 month remaining"),
        (utc(2026, 1, 6, 12, 0), "2 months remaining"),
        (utc(2026, 4, 8, 1, 0), "Expired 3 days ago"),
    ],
)
def test_format_time_until_deadline(now, text):
    assert format_time_until_deadline(JOURNEY, now) == text
