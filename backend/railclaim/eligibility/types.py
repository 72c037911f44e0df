from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from railclaim.core.config import settings


class Currency(str, enum.Enum):
    EUR = "EUR"
    GBP = "GBP"


class EligibilityReason(str, enum.Enum):
    INSUFFICIENT_DELAY = "insufficient_delay"          # delay < 60 min
    CLAIM_WINDOW_NOT_OPEN = "claim_window_not_open"    # < 24h since journey
    DEADLINE_EXPIRED = "deadline_expired"              # past the 3-month deadline
    BELOW_MINIMUM_PAYOUT = "below_minimum_payout"      # both amounts under €4/£4
    ELIGIBLE = "eligible"


@dataclass(frozen=True)
class CompensationTier:
    name: str
    min_delay_minutes: int              # inclusive
    max_delay_minutes: Optional[int]    # exclusive; None = no upper bound
    cash_percentage: Decimal
    voucher_percentage: Decimal


@dataclass(frozen=True)
class CompensationResult:
    eligible: bool
    cash_amount: Decimal
    voucher_amount: Decimal
    tier: Optional[CompensationTier]
    currency: Currency
    ticket_price: Decimal
    delay_minutes: int


@dataclass(frozen=True)
class EligibilityStatus:
    eligible: bool
    reason: EligibilityReason
    failed_checks: list[EligibilityReason] = field(default_factory=list)
    # only populated when eligible
    compensation: Optional[CompensationResult] = None
    deadline: Optional[datetime] = None
    days_until_deadline: Optional[int] = None
    claim_window_open: bool = False


MINIMUM_PAYOUT: dict[Currency, Decimal] = {
    Currency.EUR: Decimal("4"),
    Currency.GBP: Decimal("4"),
}

DEFAULT_EUR_TO_GBP_RATE = Decimal(str(settings.eur_to_gbp_rate))


def default_currency() -> Currency:
    """Currency used when a caller does not pass one (DEFAULT_CURRENCY)."""
    try:
        return Currency(settings.default_currency)
    except ValueError:
        raise ValueError(f"DEFAULT_CURRENCY must be EUR or GBP, got {settings.default_currency!r}") from None


CLAIM_WINDOW_HOURS = 24
CLAIM_DEADLINE_MONTHS = 3
MINIMUM_DELAY_MINUTES = 60
