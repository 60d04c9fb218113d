"""Pricing rules — per-service dynamic price modifiers with priority ordering."""

import uuid
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin, UUIDMixin


class PricingRule(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "pricing_rules"

    service_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Plain strings, not DB enums: a bad value must load and be skipped
    rule_type: Mapped[str] = mapped_column(String(30), nullable=False)
    modifier_type: Mapped[str] = mapped_column(String(20), nullable=False)
    modifier_value: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)

    # Shape depends on rule_type, see src.schemas.pricing
    conditions: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict)

    priority: Mapped[int] = mapped_column(Integer, default=0)  # 0-100, higher first
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    service = relationship("Service", back_populates="pricing_rules")
