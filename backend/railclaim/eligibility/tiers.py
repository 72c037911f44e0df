"""
Compensation tiers (Eurostar customer charter on top of EU Regulation 2021/782).

EU minimum: 25% cash from 60 min, 50% from 120 min. Vouchers are more generous
than the regulation requires. Ordered from lowest to highest delay.
"""

from decimal import Decimal
from typing import Optional

from railclaim.eligibility.types import MINIMUM_DELAY_MINUTES, CompensationTier

COMPENSATION_TIERS: tuple[CompensationTier, ...] = (
    CompensationTier(
        name="Standard",
        min_delay_minutes=60,
        max_delay_minutes=120,
        cash_percentage=Decimal("0.25"),
        voucher_percentage=Decimal("0.60"),
    ),
    CompensationTier(
        name="Extended",
        min_delay_minutes=120,
        max_delay_minutes=180,
        cash_percentage=Decimal("0.50"),
        voucher_percentage=Decimal("0.60"),
    ),
    CompensationTier(
        name="Severe",
        min_delay_minutes=180,
        max_delay_minutes=None,
        cash_percentage=Decimal("0.50"),
        voucher_percentage=Decimal("0.75"),
    ),
)


def get_tier_for_delay(delay_minutes: int) -> Optional[CompensationTier]:
    """
    get_tier_for_delay(45)  -> None
    get_tier_for_delay(60)  -> Standard
    get_tier_for_delay(119) -> Standard
    get_tier_for_delay(120) -> Extended
    get_tier_for_delay(180) -> Severe
    """
    if delay_minutes < MINIMUM_DELAY_MINUTES:
        return None
    for tier in reversed(COMPENSATION_TIERS):
        if delay_minutes >= tier.min_delay_minutes:
            return tier
    return None


def get_tier_name(delay_minutes: int) -> Optional[str]:
    tier = get_tier_for_delay(delay_minutes)
    return tier.name if tier else None


def is_delay_compensable(delay_minutes: int) -> bool:
    return delay_minutes >= MINIMUM_DELAY_MINUTES


def get_tier_boundaries() -> list[int]:
    return [t.min_delay_minutes for t in COMPENSATION_TIERS]
