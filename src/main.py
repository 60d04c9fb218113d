"""FastAPI application entry point."""

import logging
import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI

from src.api.v1.pricing import router as pricing_router
from src.config import settings
from src.database import dispose_engine

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        platform_fee_rate=settings.pricing_platform_fee_rate,
        min_price_ratio=settings.pricing_min_price_ratio,
    )
    yield
    await dispose_engine()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Stylist Pricing API",
    description="Dynamic pricing for stylist bookings at dance competitions",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(pricing_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Stylist Pricing API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}
