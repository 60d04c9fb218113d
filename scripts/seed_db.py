"""Seed database with a demo stylist, service, event and pricing rules."""

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from src.config import settings
from src.models import Base, Event, PricingRule, Service, Stylist
from src.pricing.rules import parse_conditions
from src.schemas.pricing import RuleType


PRICING_RULES = [
    {
        "name": "Weekend competition surcharge",
        "rule_type": "TIME_BASED",
        "modifier_type": "PERCENTAGE",
        "modifier_value": Decimal("0.15"),
        "priority": 50,
        "conditions": {"daysOfWeek": [0, 6]},
    },
    {
        "name": "Early bird discount",
        "rule_type": "ADVANCE_BOOKING",
        "modifier_type": "PERCENTAGE",
        "modifier_value": Decimal("-0.10"),
        "priority": 40,
        "conditions": {"minDays": 30},
    },
    {
        "name": "Dawn call time",
        "rule_type": "TIME_BASED",
        "modifier_type": "FIXED_AMOUNT",
        "modifier_value": Decimal("20"),
        "priority": 30,
        "conditions": {"timeRange": {"start": "04", "end": "07"}},
    },
    {
        "name": "Nationals season",
        "rule_type": "SEASONAL",
        "modifier_type": "PERCENTAGE",
        "modifier_value": Decimal("0.10"),
        "priority": 20,
        "conditions": {"months": [6, 7]},
    },
    {
        "name": "Full glam session",
        "rule_type": "GROUP_SIZE",
        "modifier_type": "FIXED_AMOUNT",
        "modifier_value": Decimal("25"),
        "priority": 10,
        "conditions": {"minDuration": 90},
    },
]


async def seed():
    """Seed the database with demo data."""
    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession)

    async with session_factory() as session:
        stylist = Stylist(display_name="Ava Martinez")
        session.add(stylist)
        await session.flush()
        print(f"  + Stylist: {stylist.display_name}")

        service = Service(
            stylist_id=stylist.id,
            name="Competition hair & makeup",
            price=Decimal("80.00"),
            duration_minutes=60,
        )
        session.add(service)

        event = Event(
            slug="starpower-nationals",
            name="StarPower Nationals",
            venue="Convention Center",
            start_date=date(2026, 7, 10),
            end_date=date(2026, 7, 13),
        )
        session.add(event)
        await session.flush()
        print(f"  + Service: {service.name} ({service.id})")
        print(f"  + Event: {event.name} ({event.id})")

        for rule_data in PRICING_RULES:
            # Fail loudly on a bad demo payload
            parse_conditions(RuleType(rule_data["rule_type"]), rule_data["conditions"])
            session.add(PricingRule(service_id=service.id, **rule_data))
            print(f"  + Rule: {rule_data['name']}")

        await session.commit()

    await engine.dispose()
    print("\nSeed completed!")


if __name__ == "__main__":
    asyncio.run(seed())
