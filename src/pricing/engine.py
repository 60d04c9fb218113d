"""Pricing Engine — applies a service's dynamic pricing rules to a booking."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Any, Optional, Sequence

import structlog

from src.config import settings
from src.pricing.context import PricingContext, build_context, parse_booking_window
from src.pricing.errors import NotFoundError, RuleEvaluationError, ValidationError
from src.pricing.predicates import rule_applies
from src.pricing.rules import RuleSnapshot, load_rules
from src.schemas.pricing import (
    AppliedRule,
    ModifierType,
    PricingContextSummary,
    PricingResult,
)

logger = structlog.get_logger()

CENT = Decimal("0.01")

# Running price plus the trail of rules applied so far
Accumulator = tuple[Decimal, tuple[AppliedRule, ...]]


def to_money(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def apply_modifier(price: Decimal, rule: RuleSnapshot) -> Decimal:
    """Apply a rule's modifier to the running price.

    Unknown modifier types leave the price unchanged.
    """
    modifier = rule.modifier
    if modifier is ModifierType.PERCENTAGE:
        return price * (1 + rule.modifier_value)
    if modifier is ModifierType.FIXED_AMOUNT:
        return price + rule.modifier_value

    logger.warning(
        "pricing_modifier_unknown",
        rule_id=rule.id,
        modifier_type=rule.modifier_type,
    )
    return price


class PricingEngine:
    """Evaluates priority-ordered pricing rules against a booking context.

    Rules compound: each matching rule modifies the price produced by the
    rules before it. The result is clamped to a floor relative to the base
    price, then split into platform fee and stylist payout.
    """

    def __init__(
        self,
        platform_fee_rate: Optional[float] = None,
        min_price_ratio: Optional[float] = None,
    ):
        if platform_fee_rate is None:
            platform_fee_rate = settings.pricing_platform_fee_rate
        if min_price_ratio is None:
            min_price_ratio = settings.pricing_min_price_ratio

        self.platform_fee_rate = Decimal(str(platform_fee_rate))
        self.min_price_ratio = Decimal(str(min_price_ratio))

        if not 0 <= self.platform_fee_rate <= 1:
            raise ValueError("platform_fee_rate must be between 0 and 1")
        if self.min_price_ratio < 0:
            raise ValueError("min_price_ratio must not be negative")

    async def calculate(
        self,
        repository: Any,
        service_id: str,
        event_id: str,
        date: str,
        start_time: str,
        end_time: str,
        advance_booking_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> PricingResult:
        """Calculate the price of a booking.

        Args:
            repository: Persistence collaborator (see PricingRepository)
            service_id: Service being booked
            event_id: Event the booking belongs to
            date: Booking date, YYYY-MM-DD
            start_time: Slot start, HH:MM
            end_time: Slot end, HH:MM
            advance_booking_days: Days ahead the booking is made; derived from
                ``now`` when omitted
            now: Reference time, defaults to the current UTC time

        Returns:
            PricingResult with the applied-rule trail

        Raises:
            ValidationError: malformed ids, date or time, or an empty slot
            NotFoundError: service or event missing or inactive
            UpstreamFetchError: the repository failed
        """
        missing = [
            {"field": field, "message": f"{label} is required"}
            for field, label, value in (
                ("serviceId", "Service ID", service_id),
                ("eventId", "Event ID", event_id),
            )
            if not value
        ]
        if missing:
            raise ValidationError("Validation failed", missing)

        window = parse_booking_window(date, start_time, end_time)

        service = await repository.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found or inactive")

        event = await repository.get_event(event_id)
        if event is None:
            raise NotFoundError("Event not found or inactive")

        rows = await repository.get_active_rules(service.id)
        rules = load_rules(rows)

        context = build_context(service, event, window, advance_booking_days, now)
        if context.advance_booking_days < 0:
            # Bookings for past dates price as same-day bookings
            context = replace(context, advance_booking_days=0)

        result = self.evaluate(context, rules)

        logger.info(
            "price_calculated",
            service_id=context.service_id,
            event_id=context.event_id,
            rules=len(rules),
            applied=len(result.applied_rules),
            base_price=result.base_price,
            final_price=result.final_price,
        )
        return result

    def evaluate(self, context: PricingContext, rules: Sequence[RuleSnapshot]) -> PricingResult:
        """Fold ``rules`` (already in priority order) over the base price."""
        base_price = context.base_price
        initial: Accumulator = (base_price, ())
        final_price, trail = reduce(
            lambda acc, rule: self._apply_rule(acc, rule, context), rules, initial
        )

        floor = base_price * self.min_price_ratio
        if final_price < floor:
            logger.info(
                "price_floor_applied",
                service_id=context.service_id,
                computed=str(to_money(final_price)),
                floor=str(to_money(floor)),
            )
            final_price = floor

        final = to_money(final_price)
        base = to_money(base_price)
        platform_fee = to_money(final_price * self.platform_fee_rate)
        stylist_payout = final - platform_fee

        if base_price:
            change_pct = ((final_price - base_price) / base_price * 100).quantize(
                CENT, rounding=ROUND_HALF_UP
            )
        else:
            change_pct = Decimal(0)

        return PricingResult(
            base_price=float(base),
            final_price=float(final),
            price_change=float(final - base),
            price_change_percentage=float(change_pct),
            platform_fee=float(platform_fee),
            stylist_payout=float(stylist_payout),
            applied_rules=list(trail),
            context=PricingContextSummary(
                service_name=context.service_name,
                stylist_name=context.stylist_name,
                event_name=context.event_name,
                duration=context.duration,
                advance_booking_days=context.advance_booking_days,
            ),
        )

    def _apply_rule(
        self, acc: Accumulator, rule: RuleSnapshot, context: PricingContext
    ) -> Accumulator:
        """One fold step. A rule that cannot be evaluated leaves ``acc`` as is."""
        price, trail = acc
        try:
            if not rule_applies(rule, context):
                return acc
            new_price = apply_modifier(price, rule)
            record = AppliedRule(
                id=rule.id,
                name=rule.name,
                rule_type=rule.rule_type,
                modifier_type=rule.modifier_type,
                modifier_value=float(rule.modifier_value),
                previous_price=float(to_money(price)),
                new_price=float(to_money(new_price)),
                price_change=float(to_money(new_price - price)),
            )
        except RuleEvaluationError as e:
            logger.warning("pricing_rule_skipped", rule_id=rule.id, reason=e.message)
            return acc
        except (ArithmeticError, AttributeError, TypeError, ValueError) as e:
            logger.warning(
                "pricing_rule_skipped",
                rule_id=rule.id,
                reason=f"{type(e).__name__}: {e}",
            )
            return acc

        return new_price, trail + (record,)
