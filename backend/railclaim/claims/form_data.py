from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from railclaim.claims.types import CLAIM_PORTAL_URL, STATION_NAMES, ClaimFormData
from railclaim.models.bookings import Booking
from railclaim.models.claims import Claim
from railclaim.utils.time import utc_date


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower() if word else ""


def parse_passenger_name(full_name: str) -> tuple[str, str]:
    """
    "John Doe"          -> ("John", "Doe")
    "JOHN DOE"          -> ("John", "Doe")
    "John"              -> ("John", "")
    "John Michael Doe"  -> ("John", "Michael Doe")
    """
    parts = full_name.split()
    if not parts:
        return "", ""
    return _capitalize(parts[0]), " ".join(_capitalize(p) for p in parts[1:])


def format_journey_date(value: date | datetime) -> str:
    return utc_date(value).strftime("%d/%m/%Y")


def get_station_display_name(station_code: str) -> str:
    return STATION_NAMES.get(station_code, station_code)


def build_claim_form_data(booking: Booking, claim: Claim, email: str) -> ClaimFormData:
    first_name, last_name = parse_passenger_name(booking.passenger_name)
    return ClaimFormData(
        pnr=booking.pnr,
        tcn=booking.tcn,
        first_name=first_name,
        last_name=last_name,
        email=email,
        train_number=booking.train_number,
        journey_date=format_journey_date(booking.journey_date),
        origin=get_station_display_name(booking.origin),
        destination=get_station_display_name(booking.destination),
        delay_minutes=claim.delay_minutes,
        eligible_cash_amount=Decimal(claim.eligible_cash_amount or 0),
        eligible_voucher_amount=Decimal(claim.eligible_voucher_amount or 0),
    )


def generate_claim_portal_url() -> str:
    # the portal does not accept pre-fill parameters
    return CLAIM_PORTAL_URL


def format_for_clipboard(form: ClaimFormData) -> str:
    lines = [
        "=== Eurostar Delay Compensation Claim ===",
        "",
        f"Booking Reference (PNR): {form.pnr}",
        f"Ticket Control Number: {form.tcn}",
        "",
        "--- Passenger Details ---",
        f"First Name: {form.first_name}",
        f"Last Name: {form.last_name}",
        f"Email: {form.email}",
        "",
        "--- Journey Details ---",
        f"Train Number: {form.train_number}",
        f"Journey Date: {form.journey_date}",
        f"From: {form.origin}",
        f"To: {form.destination}",
        "",
        "--- Delay Information ---",
        f"Delay: {form.delay_minutes} minutes",
        "",
        "--- Compensation Eligible ---",
        f"Cash: €{form.eligible_cash_amount:.2f}",
        f"Voucher: €{form.eligible_voucher_amount:.2f}",
        "",
        "Submit your claim at:",
        CLAIM_PORTAL_URL,
    ]
    return "\n".join(lines)


def validate_form_data(form: ClaimFormData) -> list[str]:
    """Names of required fields that are empty; [] when the form is complete."""
    missing = [
        name
        for name in ("pnr", "tcn", "first_name", "email", "train_number", "journey_date", "origin", "destination")
        if not getattr(form, name)
    ]
    if form.delay_minutes <= 0:
        missing.append("delay_minutes")
    return missing
