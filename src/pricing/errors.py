"""Pricing error taxonomy."""

from __future__ import annotations

from typing import Any, Optional


class PricingError(Exception):
    """Base class for errors raised by the pricing engine."""

    def __init__(self, message: str, details: Optional[list[Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(PricingError):
    """Malformed request: bad date/time, end before start, missing ids."""


class NotFoundError(PricingError):
    """Service or event does not exist or is inactive."""


class RuleEvaluationError(PricingError):
    """A single rule could not be evaluated. Never leaves the calculator."""

    def __init__(self, rule_id: str, message: str):
        super().__init__(message)
        self.rule_id = rule_id


class UpstreamFetchError(PricingError):
    """The persistence layer failed while loading pricing inputs."""
