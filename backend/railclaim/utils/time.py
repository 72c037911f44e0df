from datetime import date, datetime, time
import math

import pytz

UTC = pytz.utc


def ensure_utc(dt: datetime) -> datetime:
    """
    Return dt as an aware UTC datetime.
    Naive values (e.g. read back from a store without tz support) are taken as UTC.
    """
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def utc_date(value: date | datetime) -> date:
    """UTC calendar date of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def start_of_day_utc(d: date | datetime) -> datetime:
    return UTC.localize(datetime.combine(utc_date(d), time.min))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))
