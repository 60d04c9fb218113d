"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.event import Event
from src.models.pricing import PricingRule
from src.models.stylist import Service, Stylist

__all__ = [
    "Base",
    "Stylist",
    "Service",
    "Event",
    "PricingRule",
]
