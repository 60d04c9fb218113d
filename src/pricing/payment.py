"""Payment quote — turns a pricing result into processor amounts in cents."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from src.config import settings
from src.schemas.pricing import PricingResult


@dataclass(frozen=True)
class PaymentQuote:
    """Amounts for a destination charge: the platform keeps the fee."""

    amount: int  # charged to the dancer
    application_fee_amount: int  # kept by the platform
    stylist_payout_amount: int  # transferred to the stylist
    currency: str


def to_cents(value: float) -> int:
    return int(
        (Decimal(str(value)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )


def build_payment_quote(
    result: PricingResult,
    currency: Optional[str] = None,
) -> PaymentQuote:
    """Convert a PricingResult into cents.

    The stylist's share is derived from the other two amounts, so
    ``application_fee_amount + stylist_payout_amount == amount`` always holds.
    """
    amount = to_cents(result.final_price)
    fee = to_cents(result.platform_fee)
    return PaymentQuote(
        amount=amount,
        application_fee_amount=fee,
        stylist_payout_amount=amount - fee,
        currency=(currency or settings.currency).lower(),
    )
