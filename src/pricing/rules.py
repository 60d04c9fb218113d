"""Rule loading — turns stored pricing rules into immutable snapshots.

Conditions are validated here, once per load, into the model that matches
the rule's type. Problems are recorded on the snapshot instead of raised so
that one corrupt rule cannot break pricing for the whole service.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog
from pydantic import ValidationError as SchemaValidationError

from src.schemas.pricing import CONDITION_MODELS, Conditions, ModifierType, RuleType

logger = structlog.get_logger()


@dataclass(frozen=True)
class RuleSnapshot:
    """Read-only view of a pricing rule for a single calculation."""

    id: str
    name: str
    rule_type: str
    modifier_type: str
    modifier_value: Decimal
    priority: int = 0
    conditions: Optional[Conditions] = None
    error: Optional[str] = None  # set when the stored rule could not be parsed

    @property
    def kind(self) -> Optional[RuleType]:
        try:
            return RuleType(self.rule_type)
        except ValueError:
            return None

    @property
    def modifier(self) -> Optional[ModifierType]:
        try:
            return ModifierType(self.modifier_type)
        except ValueError:
            return None


def load_rule(row: Any) -> RuleSnapshot:
    """Build a snapshot from a PricingRule row (or any object shaped like one)."""
    rule_id = str(row.id)
    error = None

    modifier_value = Decimal(0)
    try:
        modifier_value = Decimal(str(row.modifier_value))
        if not modifier_value.is_finite():
            raise InvalidOperation(row.modifier_value)
    except (InvalidOperation, TypeError, ValueError):
        error = f"invalid modifier value: {row.modifier_value!r}"

    conditions = None
    rule_type = _enum_value(row.rule_type)
    try:
        kind = RuleType(rule_type)
    except ValueError:
        kind = None

    if kind is not None and error is None:
        try:
            conditions = parse_conditions(kind, row.conditions)
        except (SchemaValidationError, ValueError) as e:
            error = f"invalid conditions: {e}"

    if error:
        logger.warning("pricing_rule_invalid", rule_id=rule_id, error=error)

    return RuleSnapshot(
        id=rule_id,
        name=row.name,
        rule_type=rule_type,
        modifier_type=_enum_value(row.modifier_type),
        modifier_value=modifier_value,
        priority=row.priority or 0,
        conditions=conditions,
        error=error,
    )


def load_rules(rows: list[Any]) -> list[RuleSnapshot]:
    return [load_rule(row) for row in rows]


def parse_conditions(kind: RuleType, raw: Any) -> Conditions:
    """Validate a raw conditions payload (dict or JSON text) for ``kind``.

    ``None`` or an empty string means "no conditions".
    A wrong-typed sub-field fails the whole payload; it is not dropped as absent.
    """
    model = CONDITION_MODELS[kind]
    if raw is None or raw == "":
        return model()
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"conditions are not valid JSON: {e}") from e
        if raw is None:
            return model()
    return model.model_validate(raw)


def _enum_value(value: Any) -> str:
    return value.value if isinstance(value, (RuleType, ModifierType)) else str(value)
