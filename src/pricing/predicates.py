"""Rule predicates — decide whether a rule's conditions hold for a booking."""

from __future__ import annotations

from typing import Callable

from src.pricing.context import PricingContext
from src.pricing.errors import RuleEvaluationError
from src.pricing.rules import RuleSnapshot
from src.schemas.pricing import (
    CONDITION_MODELS,
    AdvanceBookingConditions,
    Conditions,
    EventBasedConditions,
    GroupSizeConditions,
    RuleType,
    SeasonalConditions,
    TimeBasedConditions,
)


def check_time_based(conditions: TimeBasedConditions, context: PricingContext) -> bool:
    if conditions.days_of_week and context.day_of_week not in conditions.days_of_week:
        return False

    time_range = conditions.time_range
    if time_range is not None:
        hour = context.start_hour
        if hour < time_range.start_hour or hour >= time_range.end_hour:
            return False

    return True


def check_advance_booking(
    conditions: AdvanceBookingConditions, context: PricingContext
) -> bool:
    days = context.advance_booking_days
    if conditions.min_days is not None and days < conditions.min_days:
        return False
    if conditions.max_days is not None and days > conditions.max_days:
        return False
    return True


def check_event_based(conditions: EventBasedConditions, context: PricingContext) -> bool:
    # Events carry no type yet, so event_types cannot be checked.
    return True


def check_seasonal(conditions: SeasonalConditions, context: PricingContext) -> bool:
    if conditions.months:
        return context.date.month in conditions.months
    return True


def check_group_size(conditions: GroupSizeConditions, context: PricingContext) -> bool:
    """Duration-based despite the name: bounds are minutes, inclusive."""
    duration = context.duration
    if conditions.min_duration is not None and duration < conditions.min_duration:
        return False
    if conditions.max_duration is not None and duration > conditions.max_duration:
        return False
    return True


def check_demand_based(conditions: Conditions, context: PricingContext) -> bool:
    # Placeholder until a demand signal exists.
    return True


PREDICATES: dict[RuleType, Callable[[Conditions, PricingContext], bool]] = {
    RuleType.TIME_BASED: check_time_based,
    RuleType.ADVANCE_BOOKING: check_advance_booking,
    RuleType.EVENT_BASED: check_event_based,
    RuleType.SEASONAL: check_seasonal,
    RuleType.GROUP_SIZE: check_group_size,
    RuleType.DEMAND_BASED: check_demand_based,
}


def rule_applies(rule: RuleSnapshot, context: PricingContext) -> bool:
    """Evaluate ``rule`` against ``context``.

    Raises:
        RuleEvaluationError: the rule failed to load or has an unknown type.
            Callers treat this as "does not match".
    """
    if rule.error:
        raise RuleEvaluationError(rule.id, rule.error)

    kind = rule.kind
    predicate = PREDICATES.get(kind) if kind is not None else None
    if predicate is None:
        raise RuleEvaluationError(rule.id, f"unknown rule type: {rule.rule_type}")

    conditions = rule.conditions
    if conditions is None:
        conditions = CONDITION_MODELS[kind]()
    return predicate(conditions, context)
