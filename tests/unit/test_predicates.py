"""Tests for rule predicates."""

from datetime import date, time
from decimal import Decimal

import pytest

from src.pricing.errors import RuleEvaluationError
from src.pricing.predicates import (
    check_advance_booking,
    check_event_based,
    check_group_size,
    check_seasonal,
    check_time_based,
    rule_applies,
)
from src.pricing.rules import RuleSnapshot, load_rule
from src.schemas.pricing import (
    AdvanceBookingConditions,
    EventBasedConditions,
    GroupSizeConditions,
    SeasonalConditions,
    TimeBasedConditions,
)

SATURDAY = date(2026, 6, 13)
MONDAY = date(2026, 6, 15)


class TestTimeBased:

    def test_no_conditions_matches(self, make_context):
        assert check_time_based(TimeBasedConditions(), make_context())

    def test_weekend_day_matches(self, make_context):
        conditions = TimeBasedConditions.model_validate({"daysOfWeek": [0, 6]})
        assert check_time_based(conditions, make_context(booking_date=SATURDAY))

    def test_weekday_excluded(self, make_context):
        conditions = TimeBasedConditions.model_validate({"daysOfWeek": [0, 6]})
        assert not check_time_based(conditions, make_context(booking_date=MONDAY))

    def test_sunday_is_zero(self, make_context):
        conditions = TimeBasedConditions.model_validate({"daysOfWeek": [0]})
        assert check_time_based(conditions, make_context(booking_date=date(2026, 6, 14)))

    def test_empty_days_is_unconstrained(self, make_context):
        conditions = TimeBasedConditions.model_validate({"daysOfWeek": []})
        assert check_time_based(conditions, make_context(booking_date=MONDAY))

    def test_time_range_start_inclusive(self, make_context):
        conditions = TimeBasedConditions.model_validate(
            {"timeRange": {"start": "09", "end": "17"}}
        )
        assert check_time_based(conditions, make_context(start=time(9, 0), end=time(10, 0)))

    def test_time_range_end_exclusive(self, make_context):
        conditions = TimeBasedConditions.model_validate(
            {"timeRange": {"start": "09:00", "end": "17:00"}}
        )
        assert not check_time_based(
            conditions, make_context(start=time(17, 0), end=time(18, 0))
        )

    def test_time_range_uses_start_hour_only(self, make_context):
        conditions = TimeBasedConditions.model_validate(
            {"timeRange": {"start": "06", "end": "08"}}
        )
        assert check_time_based(conditions, make_context(start=time(7, 45), end=time(9, 30)))

    def test_day_and_time_both_required(self, make_context):
        conditions = TimeBasedConditions.model_validate(
            {"daysOfWeek": [6], "timeRange": {"start": "04", "end": "07"}}
        )
        ctx = make_context(booking_date=SATURDAY, start=time(10, 0), end=time(11, 0))
        assert not check_time_based(conditions, ctx)


class TestAdvanceBooking:

    @pytest.mark.parametrize(
        "payload, days, expected",
        [
            ({}, 0, True),
            ({"minDays": 30}, 45, True),
            ({"minDays": 30}, 30, True),
            ({"minDays": 30}, 29, False),
            ({"maxDays": 2}, 2, True),
            ({"maxDays": 2}, 3, False),
            ({"minDays": 7, "maxDays": 14}, 10, True),
            ({"minDays": 7, "maxDays": 14}, 15, False),
            ({"minDays": None}, 0, True),
        ],
    )
    def test_bounds(self, make_context, payload, days, expected):
        conditions = AdvanceBookingConditions.model_validate(payload)
        ctx = make_context(advance_booking_days=days)
        assert check_advance_booking(conditions, ctx) is expected


class TestEventBased:

    def test_always_matches_even_with_event_types(self, make_context):
        conditions = EventBasedConditions.model_validate({"eventTypes": ["regional"]})
        assert check_event_based(conditions, make_context())


class TestSeasonal:

    def test_month_in_list(self, make_context):
        conditions = SeasonalConditions.model_validate({"months": [6, 7]})
        assert check_seasonal(conditions, make_context(booking_date=SATURDAY))

    def test_december_only_does_not_match_june(self, make_context):
        conditions = SeasonalConditions.model_validate({"months": [12]})
        assert not check_seasonal(conditions, make_context(booking_date=SATURDAY))

    def test_no_months_matches(self, make_context):
        assert check_seasonal(SeasonalConditions(), make_context())


class TestGroupSize:

    def test_duration_within_bounds(self, make_context):
        conditions = GroupSizeConditions.model_validate({"minDuration": 60, "maxDuration": 120})
        assert check_group_size(conditions, make_context(start=time(10, 0), end=time(12, 0)))

    def test_duration_too_short(self, make_context):
        conditions = GroupSizeConditions.model_validate({"minDuration": 90})
        assert not check_group_size(conditions, make_context(start=time(10, 0), end=time(11, 0)))

    def test_duration_too_long(self, make_context):
        conditions = GroupSizeConditions.model_validate({"maxDuration": 45})
        assert not check_group_size(conditions, make_context(start=time(10, 0), end=time(11, 0)))


class TestRuleApplies:

    def test_dispatches_on_rule_type(self, make_rule, make_context):
        rule = load_rule(make_rule("SEASONAL", conditions={"months": [12]}))
        assert not rule_applies(rule, make_context(booking_date=SATURDAY))

    def test_demand_based_always_matches(self, make_rule, make_context):
        rule = load_rule(make_rule("DEMAND_BASED", conditions={"anything": 1}))
        assert rule_applies(rule, make_context())

    def test_unknown_type_raises_evaluation_error(self, make_rule, make_context):
        rule = load_rule(make_rule("UNKNOWN_TYPE"))
        with pytest.raises(RuleEvaluationError):
            rule_applies(rule, make_context())

    def test_invalid_rule_raises_evaluation_error(self, make_rule, make_context):
        rule = load_rule(make_rule("TIME_BASED", conditions={"daysOfWeek": "weekends"}))
        with pytest.raises(RuleEvaluationError):
            rule_applies(rule, make_context())

    def test_snapshot_without_conditions_is_unconstrained(self, make_context):
        rule = RuleSnapshot(
            id="r1",
            name="bare",
            rule_type="ADVANCE_BOOKING",
            modifier_type="PERCENTAGE",
            modifier_value=Decimal("0.1"),
        )
        assert rule_applies(rule, make_context(advance_booking_days=0))
