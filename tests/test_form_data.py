from datetime import date
from decimal import Decimal

import pytest

from railclaim.claims.form_data import (
    format_for_clipboard,
    format_journey_date,
    get_station_display_name,
    parse_passenger_name,
    validate_form_data,
)
from railclaim.claims.types import CLAIM_PORTAL_URL, ClaimFormData


def _form(**overrides):
    values = dict(
        pnr="ABC123",
        tcn="IV1234567890",
        first_name="John",
        last_name="Doe",
        email="john@example.com",
        train_number="9007",
        journey_date="15/01/2026",
        origin="London St Pancras",
        destination="Paris Gare du Nord",
        delay_minutes=90,
        eligible_cash_amount=Decimal("25"),
        eligible_voucher_amount=Decimal("60"),
    )
    values.update(overrides)
    return ClaimFormData(**values)


@pytest.mark.parametrize(
    "full_name, expected",
    [
        ("John Doe", ("John", "Doe")),
        ("JOHN DOE", ("John", "Doe")),
        ("john  michael   doe", ("John", "Michael Doe")),
        ("John", ("John", "")),
        ("   ", ("", "")),
    ],
)
def test_parse_passenger_name(full_name, expected):
    assert parse_passenger_name(full_name) == expected


def test_format_journey_date():
    assert format_journey_date(date(2026, 1, 5)) == "05/01/2026"


def test_station_names_fall_back_to_code():
    assert get_station_display_name("BEBMI") == "Brussels Midi"
    assert get_station_display_name("XXXXX") == "XXXXX"


def test_clipboard_text():
    text = format_for_clipboard(_form())
    lines = text.split("\n")

    assert lines[0] == "=== Eurostar Delay Compensation Claim ==="
    assert "Booking Reference (PNR): ABC123" in lines
    assert "Delay: 90 minutes" in lines
    assert "Cash: €25.00" in lines
    assert "Voucher: €60.00" in lines
    assert lines[-1] == CLAIM_PORTAL_URL


def test_validate_form_data():
    assert validate_form_data(_form()) == []
    assert validate_form_data(_form(pnr="", email="", delay_minutes=0)) == ["pnr", "email", "delay_minutes"]
