"""Pricing context — the booking facts a rule is evaluated against."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional

from src.pricing.errors import ValidationError

SECONDS_PER_DAY = 24 * 60 * 60
DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class BookingWindow:
    """Validated date and wall-clock slot of a booking."""

    date: date
    start_time: time
    end_time: time

    @property
    def duration(self) -> int:
        """Length of the slot in minutes."""
        start = datetime.combine(self.date, self.start_time)
        end = datetime.combine(self.date, self.end_time)
        return int((end - start).total_seconds() // 60)


@dataclass(frozen=True)
class PricingContext:
    service_id: str
    event_id: str
    date: date
    start_time: time
    end_time: time
    duration: int
    advance_booking_days: int
    base_price: Decimal
    service_name: str = ""
    stylist_name: Optional[str] = None
    event_name: str = ""

    @property
    def day_of_week(self) -> int:
        """Weekday with 0 = Sunday, 6 = Saturday."""
        return (self.date.weekday() + 1) % 7

    @property
    def start_hour(self) -> int:
        return self.start_time.hour


def parse_booking_window(booking_date: str, start_time: str, end_time: str) -> BookingWindow:
    """Parse ``YYYY-MM-DD`` and ``HH:MM`` strings into a booking window.

    Raises:
        ValidationError: with one detail entry per bad field, or when the
            slot does not end after it starts.
    """
    details: list[dict[str, str]] = []

    parsed_date = None
    try:
        # fromisoformat alone also takes basic and week dates (20260613, 2026-W24-6)
        if not DATE_FORMAT.match(booking_date):
            raise ValueError(booking_date)
        parsed_date = date.fromisoformat(booking_date)
    except (TypeError, ValueError):
        details.append({"field": "date", "message": "Date must be in YYYY-MM-DD format"})

    parsed_start = _parse_clock(start_time, "startTime", "Start time", details)
    parsed_end = _parse_clock(end_time, "endTime", "End time", details)

    if details:
        raise ValidationError("Validation failed", details)

    window = BookingWindow(date=parsed_date, start_time=parsed_start, end_time=parsed_end)
    if window.duration <= 0:
        raise ValidationError(
            "Validation failed",
            [{"field": "endTime", "message": "End time must be after start time"}],
        )
    return window


def _parse_clock(value: Any, field: str, label: str, details: list) -> Optional[time]:
    try:
        hours, minutes = str(value).split(":")
        if len(hours) != 2 or len(minutes) != 2:
            raise ValueError(value)
        return time(int(hours), int(minutes))
    except (TypeError, ValueError):
        details.append({"field": field, "message": f"{label} must be in HH:MM format"})
        return None


def days_until(booking_date: date, now: Optional[datetime] = None) -> int:
    """Whole days from ``now`` to the start of ``booking_date`` (UTC), floored.

    Negative for dates in the past; clamping is left to the caller.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    start_of_day = datetime.combine(booking_date, time.min, tzinfo=timezone.utc)
    return math.floor((start_of_day - now).total_seconds() / SECONDS_PER_DAY)


def build_context(
    service: Any,
    event: Any,
    window: BookingWindow,
    advance_booking_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PricingContext:
    """Assemble a PricingContext from a validated window and loaded entities.

    Args:
        service: Active service row (``id``, ``name``, ``price``, ``stylist``)
        event: Active event row (``id``, ``name``)
        window: Parsed booking date and slot
        advance_booking_days: Caller-supplied value; computed from ``now`` if None
        now: Reference time for the advance-booking computation

    Returns:
        PricingContext ready for rule evaluation
    """
    if advance_booking_days is None:
        advance_booking_days = days_until(window.date, now)

    stylist = getattr(service, "stylist", None)

    return PricingContext(
        service_id=str(service.id),
        event_id=str(event.id),
        date=window.date,
        start_time=window.start_time,
        end_time=window.end_time,
        duration=window.duration,
        advance_booking_days=advance_booking_days,
        base_price=Decimal(str(service.price)),
        service_name=service.name,
        stylist_name=getattr(stylist, "display_name", None),
        event_name=event.name,
    )
