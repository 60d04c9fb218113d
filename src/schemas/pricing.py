"""Pricing schemas — rule conditions, calculation request and result."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class RuleType(str, Enum):
    """Kinds of pricing rule. GROUP_SIZE is matched on booking duration."""

    TIME_BASED = "TIME_BASED"
    ADVANCE_BOOKING = "ADVANCE_BOOKING"
    EVENT_BASED = "EVENT_BASED"
    SEASONAL = "SEASONAL"
    GROUP_SIZE = "GROUP_SIZE"
    DEMAND_BASED = "DEMAND_BASED"


class ModifierType(str, Enum):
    PERCENTAGE = "PERCENTAGE"  # 0.15 = +15%
    FIXED_AMOUNT = "FIXED_AMOUNT"  # currency delta


# --- Rule conditions -------------------------------------------------------
# Every sub-field is optional: an absent (or empty) constraint matches anything.


class Conditions(BaseModel):
    model_config = {**CAMEL_CONFIG, "extra": "ignore", "frozen": True}


class TimeRange(Conditions):
    start: str  # "HH" or "HH:MM", only the hour is used
    end: str

    @field_validator("start", "end", mode="before")
    @classmethod
    def _check_hour(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = f"{value:02d}"
        if not isinstance(value, str):
            raise ValueError("must be an 'HH' or 'HH:MM' string")
        hour = value.split(":")[0].strip()
        if not hour.isdigit() or not 0 <= int(hour) <= 24:
            raise ValueError("hour must be between 0 and 24")
        return value

    @property
    def start_hour(self) -> int:
        return int(self.start.split(":")[0])

    @property
    def end_hour(self) -> int:
        return int(self.end.split(":")[0])


class TimeBasedConditions(Conditions):
    days_of_week: Optional[list[int]] = None  # 0 = Sunday
    time_range: Optional[TimeRange] = None


class AdvanceBookingConditions(Conditions):
    min_days: Optional[int] = None
    max_days: Optional[int] = None


class EventBasedConditions(Conditions):
    event_types: Optional[list[str]] = None


class SeasonalConditions(Conditions):
    months: Optional[list[int]] = None  # 1-12


class GroupSizeConditions(Conditions):
    min_duration: Optional[float] = None  # minutes
    max_duration: Optional[float] = None


class DemandBasedConditions(Conditions):
    pass


CONDITION_MODELS: dict[RuleType, type[Conditions]] = {
    RuleType.TIME_BASED: TimeBasedConditions,
    RuleType.ADVANCE_BOOKING: AdvanceBookingConditions,
    RuleType.EVENT_BASED: EventBasedConditions,
    RuleType.SEASONAL: SeasonalConditions,
    RuleType.GROUP_SIZE: GroupSizeConditions,
    RuleType.DEMAND_BASED: DemandBasedConditions,
}


# --- Calculation API -------------------------------------------------------


class PricingRequest(BaseModel):
    """Body of a price calculation request."""

    model_config = CAMEL_CONFIG

    service_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    advance_booking_days: Optional[int] = Field(None, ge=0)


class AppliedRule(BaseModel):
    """One matched rule in the order it was applied."""

    model_config = CAMEL_CONFIG

    id: str
    name: str
    rule_type: str
    modifier_type: str
    modifier_value: float
    previous_price: float
    new_price: float
    price_change: float


class PricingContextSummary(BaseModel):
    model_config = CAMEL_CONFIG

    service_name: str
    stylist_name: Optional[str] = None
    event_name: str
    duration: int  # minutes
    advance_booking_days: int


class PricingResult(BaseModel):
    """Result from the pricing engine. Money values are rounded to cents."""

    model_config = CAMEL_CONFIG

    base_price: float
    final_price: float
    price_change: float
    price_change_percentage: float
    platform_fee: float
    stylist_payout: float
    applied_rules: list[AppliedRule] = []
    context: PricingContextSummary


class PaymentQuoteResponse(BaseModel):
    """Amounts handed to the payment processor, in minor units."""

    model_config = CAMEL_CONFIG

    amount: int
    application_fee_amount: int
    stylist_payout_amount: int
    currency: str
    pricing: PricingResult


class ErrorResponse(BaseModel):
    error: str
    details: Optional[list] = None
