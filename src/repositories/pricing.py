"""Pricing repository — read-only access to services, events and rules."""

from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.models.event import Event
from src.models.pricing import PricingRule
from src.models.stylist import Service
from src.pricing.errors import UpstreamFetchError

logger = structlog.get_logger()


class PricingRepository:
    """Loads everything a price calculation needs, in one fetch phase."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_service(self, service_id: str) -> Optional[Service]:
        """Active service with its stylist, or None."""
        key = _as_uuid(service_id)
        if key is None:
            return None

        stmt = (
            select(Service)
            .options(selectinload(Service.stylist))
            .where(Service.id == key, Service.is_active == True)  # noqa: E712
        )
        result = await self._execute(stmt, "service")
        return result.scalar_one_or_none()

    async def get_event(self, event_id: str) -> Optional[Event]:
        """Active event, or None."""
        key = _as_uuid(event_id)
        if key is None:
            return None

        stmt = select(Event).where(Event.id == key, Event.is_active == True)  # noqa: E712
        result = await self._execute(stmt, "event")
        return result.scalar_one_or_none()

    async def get_active_rules(self, service_id: Any) -> Sequence[PricingRule]:
        """Active rules for a service, highest priority first.

        Ties fall back to creation order, then id, so evaluation order is
        the same on every call.
        """
        key = service_id if isinstance(service_id, uuid.UUID) else _as_uuid(service_id)
        if key is None:
            return []

        stmt = (
            select(PricingRule)
            .where(
                PricingRule.service_id == key,
                PricingRule.is_active == True,  # noqa: E712
            )
            .order_by(
                PricingRule.priority.desc(),
                PricingRule.created_at.asc(),
                PricingRule.id.asc(),
            )
        )
        result = await self._execute(stmt, "pricing_rules")
        return result.scalars().all()

    async def _execute(self, stmt, entity: str):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("pricing_fetch_failed", entity=entity, error=str(e))
            raise UpstreamFetchError(f"Failed to load {entity}") from e


def _as_uuid(value: Any) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None
