from datetime import date, datetime

from railclaim.utils.time import utc_date


def normalize_train_number(train_number: str) -> str:
    """
    UK-issued tickets print the letter O where EU-issued ones print the digit 0
    ("9O07" vs "9007"). Always fold to the digit form.
    """
    return train_number.replace("O", "0").replace("o", "0")


def format_date_for_trip_id(value: date | datetime) -> str:
    d = utc_date(value)
    return f"{d.month:02d}{d.day:02d}"


def build_trip_id(train_number: str, journey_date: date | datetime) -> str:
    """Trip id format: "{train_number}-{MMDD}", e.g. "9007-0105"."""
    return f"{normalize_train_number(train_number)}-{format_date_for_trip_id(journey_date)}"
