"""Pricing API — dynamic price calculation for a booking."""

from __future__ import annotations

from typing import Union

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.pricing.engine import PricingEngine
from src.pricing.errors import (
    NotFoundError,
    PricingError,
    UpstreamFetchError,
    ValidationError,
)
from src.pricing.payment import build_payment_quote
from src.repositories.pricing import PricingRepository
from src.schemas.pricing import (
    ErrorResponse,
    PaymentQuoteResponse,
    PricingRequest,
    PricingResult,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/pricing", tags=["pricing"])

ERROR_STATUS: dict[type[PricingError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    UpstreamFetchError: 503,
}


async def get_pricing_repository(
    db: AsyncSession = Depends(get_db),
) -> PricingRepository:
    return PricingRepository(db)


def get_pricing_engine() -> PricingEngine:
    return PricingEngine()


def _error(status_code: int, error: str, details: list | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def _calculate(
    request: Request,
    repository: PricingRepository,
    engine: PricingEngine,
) -> Union[PricingResult, JSONResponse]:
    try:
        payload = await request.json()
    except ValueError:
        return _error(
            400,
            "Validation failed",
            [{"field": "body", "message": "Request body must be valid JSON"}],
        )

    try:
        data = PricingRequest.model_validate(payload)
    except SchemaValidationError as e:
        return _error(
            400,
            "Validation failed",
            e.errors(include_url=False, include_context=False, include_input=False),
        )

    try:
        return await engine.calculate(
            repository,
            service_id=data.service_id,
            event_id=data.event_id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            advance_booking_days=data.advance_booking_days,
        )
    except PricingError as e:
        status_code = ERROR_STATUS.get(type(e), 500)
        logger.warning(
            "pricing_request_failed",
            status=status_code,
            error=e.message,
            service_id=data.service_id,
        )
        return _error(status_code, e.message, e.details)
    except Exception as e:
        logger.error("pricing_calculation_error", error=str(e), service_id=data.service_id)
        return _error(500, "Internal server error")


@router.post("/calculate")
async def calculate_pricing(
    request: Request,
    repository: PricingRepository = Depends(get_pricing_repository),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    """Calculate the dynamic price of a booking.

    Args:
        request: JSON body {serviceId, eventId, date, startTime, endTime, advanceBookingDays?}
        repository: Pricing data access
        engine: Pricing engine

    Returns:
        Pricing result (camelCase), or {"error", "details"?} with 400/404/503/500
    """
    result = await _calculate(request, repository, engine)
    if isinstance(result, JSONResponse):
        return result
    return result.model_dump(by_alias=True)


@router.post("/quote")
async def quote_payment(
    request: Request,
    repository: PricingRepository = Depends(get_pricing_repository),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    """Price a booking and return the amounts to charge, in cents."""
    result = await _calculate(request, repository, engine)
    if isinstance(result, JSONResponse):
        return result

    quote = build_payment_quote(result)
    response = PaymentQuoteResponse(
        amount=quote.amount,
        application_fee_amount=quote.application_fee_amount,
        stylist_payout_amount=quote.stylist_payout_amount,
        currency=quote.currency,
        pricing=result,
    )
    return response.model_dump(by_alias=True)
