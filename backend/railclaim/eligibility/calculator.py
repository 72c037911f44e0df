from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from railclaim.eligibility.tiers import get_tier_for_delay
from railclaim.eligibility.types import (
    DEFAULT_EUR_TO_GBP_RATE,
    MINIMUM_PAYOUT,
    CompensationResult,
    Currency,
)

Number = Union[Decimal, int, float, str]

_CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 stays 0.1 rather than its binary expansion
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def calculate_compensation_detailed(
    delay_minutes: int,
    ticket_price: Number,
    currency: Currency = Currency.EUR,
) -> CompensationResult:
    """
    Always returns a result; `eligible` is False when no tier applies or when
    both amounts fall below the minimum payout.
    """
    currency = Currency(currency)
    price = to_decimal(ticket_price)
    tier = get_tier_for_delay(delay_minutes)

    if tier is None:
        return CompensationResult(
            eligible=False,
            cash_amount=Decimal("0.00"),
            voucher_amount=Decimal("0.00"),
            tier=None,
            currency=currency,
            ticket_price=price,
            delay_minutes=delay_minutes,
        )

    cash = round2(price * tier.cash_percentage)
    voucher = round2(price * tier.voucher_percentage)

    # either amount clearing the floor is enough
    minimum = MINIMUM_PAYOUT[currency]
    meets_minimum = cash >= minimum or voucher >= minimum

    return CompensationResult(
        eligible=meets_minimum,
        cash_amount=cash,
        voucher_amount=voucher,
        tier=tier,
        currency=currency,
        ticket_price=price,
        delay_minutes=delay_minutes,
    )


def calculate_compensation(
    delay_minutes: int,
    ticket_price: Number,
    currency: Currency = Currency.EUR,
) -> Optional[CompensationResult]:
    """
    Compensation for a delayed journey, or None when not eligible.

    calculate_compensation(90, 100)  -> cash 25.00, voucher 60.00 (Standard)
    calculate_compensation(45, 100)  -> None (below threshold)
    calculate_compensation(60, 5)    -> None (1.25 / 3.00, both under €4)

    Amounts stay in the ticket currency; no conversion happens here.
    """
    result = calculate_compensation_detailed(delay_minutes, ticket_price, currency)
    return result if result.eligible else None


def convert_eur_to_gbp(eur_amount: Number, exchange_rate: Number = DEFAULT_EUR_TO_GBP_RATE) -> Decimal:
    return round2(to_decimal(eur_amount) * to_decimal(exchange_rate))


def convert_gbp_to_eur(gbp_amount: Number, exchange_rate: Number = DEFAULT_EUR_TO_GBP_RATE) -> Decimal:
    return round2(to_decimal(gbp_amount) / to_decimal(exchange_rate))


def get_minimum_payout(currency: Currency) -> Decimal:
    return MINIMUM_PAYOUT[Currency(currency)]


def meets_minimum_payout(amount: Number, currency: Currency) -> bool:
    return to_decimal(amount) >= get_minimum_payout(currency)


def format_compensation_amount(amount: Number, currency: Currency) -> str:
    symbol = "€" if Currency(currency) == Currency.EUR else "£"
    return f"{symbol}{round2(amount):.2f}"
