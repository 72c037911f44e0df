from __future__ import annotations

from datetime import datetime
from typing import Optional

from railclaim.eligibility.calculator import Number, calculate_compensation_detailed
from railclaim.eligibility.deadline import (
    days_until_deadline,
    get_claim_deadline,
    is_claim_window_open,
    is_within_claim_window,
)
from railclaim.eligibility.tiers import is_delay_compensable
from railclaim.eligibility.types import (
    MINIMUM_DELAY_MINUTES,
    Currency,
    EligibilityReason,
    EligibilityStatus,
    default_currency,
)
from railclaim.models.bookings import Booking


class EligibilityService:
    """
    Combines every compensation check for a booking:
      - delay >= 60 minutes
      - claim window open (24h after the journey)
      - within the 3-month deadline
      - at least one of cash/voucher reaches the €4/£4 minimum payout

    All checks run, so `failed_checks` always lists every failure. The first
    one in the order above is the primary `reason`.
    """

    def check_eligibility(
        self,
        booking: Booking,
        delay_minutes: int,
        ticket_price: Number,
        now: datetime,
        currency: Optional[Currency] = None,
    ) -> EligibilityStatus:
        currency = Currency(currency) if currency else default_currency()
        failed: list[EligibilityReason] = []

        delay_sufficient = is_delay_compensable(delay_minutes)
        if not delay_sufficient:
            failed.append(EligibilityReason.INSUFFICIENT_DELAY)

        window_open = is_claim_window_open(booking.journey_date, now)
        if not window_open:
            failed.append(EligibilityReason.CLAIM_WINDOW_NOT_OPEN)

        if not is_within_claim_window(booking.journey_date, now):
            failed.append(EligibilityReason.DEADLINE_EXPIRED)

        compensation = calculate_compensation_detailed(delay_minutes, ticket_price, currency)
        # only meaningful once the delay qualifies for a tier
        if delay_sufficient and not compensation.eligible:
            failed.append(EligibilityReason.BELOW_MINIMUM_PAYOUT)

        eligible = not failed
        return EligibilityStatus(
            eligible=eligible,
            reason=EligibilityReason.ELIGIBLE if eligible else failed[0],
            failed_checks=failed,
            # amounts are not exposed for ineligible bookings
            compensation=compensation if eligible else None,
            deadline=get_claim_deadline(booking.journey_date),
            days_until_deadline=days_until_deadline(booking.journey_date, now),
            claim_window_open=window_open,
        )

    def check_eligibility_from_booking(
        self,
        booking: Booking,
        ticket_price: Number,
        now: datetime,
        currency: Optional[Currency] = None,
    ) -> Optional[EligibilityStatus]:
        """Uses the booking's recorded final delay; None until the journey has completed."""
        if booking.final_delay_minutes is None:
            return None
        return self.check_eligibility(booking, booking.final_delay_minutes, ticket_price, now, currency)

    def is_delay_eligible(self, delay_minutes: int) -> bool:
        return delay_minutes >= MINIMUM_DELAY_MINUTES

    def can_claim_now(self, booking: Booking, now: datetime) -> bool:
        """Timing only: window open and deadline not passed."""
        return is_claim_window_open(booking.journey_date, now) and is_within_claim_window(booking.journey_date, now)


def check_eligibility(
    booking: Booking,
    delay_minutes: int,
    ticket_price: Number,
    now: datetime,
    currency: Optional[Currency] = None,
) -> EligibilityStatus:
    return EligibilityService().check_eligibility(booking, delay_minutes, ticket_price, now, currency)
