"""Test fixtures and configuration."""

import uuid
from datetime import date, time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pricing.context import PricingContext
from src.pricing.engine import PricingEngine

# 2026-06-13 is a Saturday
SATURDAY = date(2026, 6, 13)


@pytest.fixture
def make_rule():
    """Factory for mock PricingRule rows."""

    def _make(
        rule_type="DEMAND_BASED",
        modifier_type="PERCENTAGE",
        modifier_value=0.1,
        priority=0,
        conditions=None,
        name=None,
    ):
        rule = MagicMock()
        rule.id = uuid.uuid4()
        rule.name = name or f"{rule_type.lower()} rule"
        rule.rule_type = rule_type
        rule.modifier_type = modifier_type
        rule.modifier_value = Decimal(str(modifier_value))
        rule.priority = priority
        rule.conditions = conditions if conditions is not None else {}
        rule.is_active = True
        return rule

    return _make


@pytest.fixture
def make_context():
    """Factory for PricingContext with sensible defaults."""

    def _make(
        base_price="100.00",
        booking_date=SATURDAY,
        start=time(10, 0),
        end=time(11, 0),
        advance_booking_days=14,
    ):
        duration = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
        return PricingContext(
            service_id=str(uuid.uuid4()),
            event_id=str(uuid.uuid4()),
            date=booking_date,
            start_time=start,
            end_time=end,
            duration=duration,
            advance_booking_days=advance_booking_days,
            base_price=Decimal(base_price),
            service_name="Competition hair & makeup",
            stylist_name="Ava Martinez",
            event_name="StarPower Nationals",
        )

    return _make


@pytest.fixture
def service():
    """Mock active Service row with its stylist."""
    svc = MagicMock()
    svc.id = uuid.uuid4()
    svc.name = "Competition hair & makeup"
    svc.price = Decimal("100.00")
    svc.is_active = True
    svc.stylist.display_name = "Ava Martinez"
    return svc


@pytest.fixture
def event():
    """Mock active Event row."""
    ev = MagicMock()
    ev.id = uuid.uuid4()
    ev.name = "StarPower Nationals"
    ev.is_active = True
    return ev


@pytest.fixture
def repository(service, event):
    """Mock PricingRepository with no rules."""
    repo = AsyncMock()
    repo.get_service = AsyncMock(return_value=service)
    repo.get_event = AsyncMock(return_value=event)
    repo.get_active_rules = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def engine():
    """PricingEngine with the standard 15% fee and 20% floor."""
    return PricingEngine(platform_fee_rate=0.15, min_price_ratio=0.2)
