"""Stylists and the services they sell."""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin, UUIDMixin


class Stylist(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "stylists"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Payouts (Stripe Connect)
    stripe_account_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    services = relationship("Service", back_populates="stylist")


class Service(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "services"

    stylist_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stylists.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    stylist = relationship("Stylist", back_populates="services")
    pricing_rules = relationship("PricingRule", back_populates="service")
