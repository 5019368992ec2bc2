"""Entity Normalizer — backend rows → canonical snapshots.

Rows reach us in several shapes: the live table columns (annual_volume,
total_value_usd, updated_at), older column names seen across schema
revisions (deal_value, value_usd, company_name, location), and the bundled
fixture records. Each canonical field has a fixed precedence list of source
names; the first non-null value wins, then a defined default fills whatever
is still missing. Application code only ever sees the canonical shape.

Business Rules:
- Only `id` is mandatory; a row without one is dropped and logged, the rest
  of the batch still normalizes
- Missing optional fields never raise; they take their default
- Negative or unparseable numerics become None
- Deal totals are re-derived from quantity × unit price when both are known
- Deal stages go through the stage normalizer; unknown stored stages are
  logged and left as None (unstaged), never coerced
- to_row() is the reverse mapping used by every write

Called by: services/entity_book.py, scripts/audit_deal_integrity.py
Depends on: schemas/entities.py, services/stage_normalizer.py, utils/normalization.py
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from loguru import logger

from app.schemas.entities import (
    ENTITY_MODELS,
    DataOrigin,
    Entity,
    EntityType,
)
from app.services.stage_normalizer import InvalidStageError, normalize_stage
from app.utils.normalization import (
    fold,
    normalize_amount,
    normalize_count,
    normalize_text,
    normalize_timestamp,
)


def _optional_text(raw: Any) -> str | None:
    return normalize_text(raw) or None


# Coercers: raw value → canonical value (None means "still missing")
_TEXT: Callable[[Any], Any] = _optional_text
_LOWER: Callable[[Any], Any] = lambda raw: fold(raw) or None  # noqa: E731
_AMOUNT = normalize_amount
_COUNT = normalize_count
_TIMESTAMP = normalize_timestamp


# ── Alias precedence tables ───────────────────────────────────────────
# field: (source names in precedence order, default, coercer)

_FIELDS: dict[EntityType, dict[str, tuple[tuple[str, ...], Any, Callable]]] = {
    EntityType.CLIENT: {
        "name": (("name", "company_name"), "Client", _TEXT),
        "country": (("country",), "", _TEXT),
        "segment": (("segment", "industry"), "", _TEXT),
        "contact_name": (("contact_name", "contact_person"), "", _TEXT),
        "contact_email": (("contact_email", "email"), "", _TEXT),
        "contact_phone": (("contact_phone", "phone"), "", _TEXT),
        "status": (("status",), "active", _LOWER),
        "notes": (("notes",), "", _TEXT),
        "created_at": (("created_at",), None, _TIMESTAMP),
    },
    EntityType.REQUIREMENT: {
        "client_id": (("client_id",), None, _TEXT),
        "product_name": (("product_name",), "", _TEXT),
        "api_name": (("api_name",), "", _TEXT),
        "dosage_form": (("dosage_form",), "", _TEXT),
        "strength": (("strength",), "", _TEXT),
        "quantity": (("quantity", "annual_volume"), None, _AMOUNT),
        "unit": (("unit",), "", _TEXT),
        "budget_usd": (("budget_usd", "budget"), None, _AMOUNT),
        "deadline": (("deadline",), None, _TEXT),
        "priority": (("priority",), "", _LOWER),
        "status": (("status",), "open", _LOWER),
        "notes": (("notes",), "", _TEXT),
        "created_at": (("created_at",), None, _TIMESTAMP),
    },
    EntityType.SUPPLIER: {
        "name": (("name", "company_name"), "Supplier", _TEXT),
        "country": (("country", "location"), "", _TEXT),
        "status": (("status",), "active", _LOWER),
        "contact_name": (("contact_name", "contact_person"), "", _TEXT),
        "contact_email": (("contact_email", "email"), "", _TEXT),
        "contact_phone": (("contact_phone", "phone"), "", _TEXT),
        "website": (("website",), "", _TEXT),
        "notes": (("notes",), "", _TEXT),
        "created_at": (("created_at",), None, _TIMESTAMP),
    },
    EntityType.PRODUCT: {
        "supplier_id": (("supplier_id",), None, _TEXT),
        "api_name": (("api_name",), "", _TEXT),
        "dosage_form": (("dosage_form",), "", _TEXT),
        "strength": (("strength",), "", _TEXT),
        "pack_size": (("pack_size",), "", _TEXT),
        "unit_price_usd": (("unit_price_usd", "unit_price"), None, _AMOUNT),
        "moq": (("moq",), None, _COUNT),
        "lead_time_days": (("lead_time_days",), None, _COUNT),
        "description": (("description",), "", _TEXT),
        "created_at": (("created_at",), None, _TIMESTAMP),
    },
    EntityType.DEAL: {
        "title": (("title",), "", _TEXT),
        "client_id": (("client_id",), None, _TEXT),
        "supplier_id": (("supplier_id",), None, _TEXT),
        "product_id": (("product_id",), None, _TEXT),
        "requirement_id": (("requirement_id",), None, _TEXT),
        "client_name": (("client_name",), "Client", _TEXT),
        "client_contact": (("client_contact",), "", _TEXT),
        "supplier_name": (("supplier_name",), "Supplier", _TEXT),
        "supplier_contact": (("supplier_contact",), "", _TEXT),
        "product_name": (("product_name", "title"), "Product", _TEXT),
        "dosage_form": (("dosage_form",), "", _TEXT),
        "strength": (("strength",), "", _TEXT),
        "pack_size": (("pack_size",), "", _TEXT),
        "quantity": (("quantity",), None, _AMOUNT),
        "unit_price_usd": (("unit_price_usd", "unit_price"), None, _AMOUNT),
        "total_value_usd": (("total_value_usd", "deal_value", "value_usd"), None, _AMOUNT),
        "currency": (("currency",), "USD", _TEXT),
        "commission_rate": (("commission_rate",), None, _AMOUNT),
        "priority": (("priority",), "medium", _LOWER),
        "probability": (("probability",), None, _COUNT),
        "expected_close_date": (("expected_close_date",), None, _TEXT),
        "next_action": (("next_action",), "", _TEXT),
        "notes": (("notes",), "", _TEXT),
        "source": (("source",), "manual", _LOWER),
        "similarity_score": (("similarity_score",), None, _COUNT),
        "created_at": (("created_at",), None, _TIMESTAMP),
        "last_activity": (("last_activity", "updated_at", "created_at"), None, _TIMESTAMP),
    },
}

# Canonical → storage column, where they differ
_ROW_NAMES: dict[EntityType, dict[str, str]] = {
    EntityType.REQUIREMENT: {"quantity": "annual_volume"},
    EntityType.DEAL: {"last_activity": "updated_at"},
}

# Canonical fields that are derived on read and never written
_DERIVED = {
    EntityType.DEAL: {"commission_usd"},
}

# Bookkeeping fields owned by the store, never sent by callers
_NOT_WRITABLE = {"id", "origin", "created_at"}


# ── Helpers ──────────────────────────────────────────────────────────


def _first_present(raw: dict, names: Iterable[str], coerce: Callable) -> Any:
    for name in names:
        if name in raw and raw[name] is not None:
            value = coerce(raw[name])
            if value is not None:
                return value
    return None


def compute_total(quantity: float | None, unit_price: float | None) -> float | None:
    """quantity × unit price, or None when either operand is unknown."""
    if quantity is None or unit_price is None:
        return None
    return quantity * unit_price


def compute_commission(total: float | None, rate: float | None) -> float | None:
    if total is None or rate is None:
        return None
    return total * rate


def _finish_deal(values: dict, row_id: str) -> dict:
    computed = compute_total(values.get("quantity"), values.get("unit_price_usd"))
    if computed is not None:
        stored = values.get("total_value_usd")
        if stored is not None and abs(stored - computed) > 0.005:
            logger.debug(
                "Deal {} stored total {} != quantity × unit price {}; using computed",
                row_id, stored, computed,
            )
        values["total_value_usd"] = computed
    values["commission_usd"] = compute_commission(
        values.get("total_value_usd"), values.get("commission_rate")
    )
    return values


def _deal_stage(raw: dict, row_id: str) -> str | None:
    stored = raw.get("stage")
    if stored is None or (isinstance(stored, str) and not stored.strip()):
        return "lead"
    try:
        return normalize_stage(stored)
    except InvalidStageError:
        logger.warning(
            "Deal {} has unknown stage {!r}; leaving it unstaged",
            row_id, stored, entity="deal", reason="unknown_stage",
        )
        return None


# ── Public API ───────────────────────────────────────────────────────


def normalize(
    entity_type: EntityType,
    raw: dict,
    origin: DataOrigin = DataOrigin.LIVE,
) -> Entity | None:
    """Map one raw row onto its canonical snapshot. Returns None if unusable."""
    row_id = _optional_text(raw.get("id")) if isinstance(raw, dict) else None
    if not row_id:
        logger.warning(
            "Dropping {} record without id", entity_type.value,
            entity=entity_type.value, reason="missing_id",
        )
        return None

    values: dict[str, Any] = {"id": row_id, "origin": origin}
    for field, (names, default, coerce) in _FIELDS[entity_type].items():
        value = _first_present(raw, names, coerce)
        values[field] = default if value is None else value

    if entity_type in (EntityType.REQUIREMENT, EntityType.PRODUCT):
        parent = "client_id" if entity_type is EntityType.REQUIREMENT else "supplier_id"
        if not values[parent]:
            logger.warning(
                "Dropping {} {} without {}", entity_type.value, row_id, parent,
                entity=entity_type.value, reason=f"missing_{parent}",
            )
            return None

    if entity_type is EntityType.DEAL:
        values["stage"] = _deal_stage(raw, row_id)
        values = _finish_deal(values, row_id)

    return ENTITY_MODELS[entity_type](**values)


def normalize_many(
    entity_type: EntityType,
    rows: Iterable[dict],
    origin: DataOrigin = DataOrigin.LIVE,
) -> list[Entity]:
    """Normalize a batch, skipping unusable rows. Input order is preserved."""
    result = []
    dropped = 0
    for raw in rows or []:
        entity = normalize(entity_type, raw, origin)
        if entity is None:
            dropped += 1
            continue
        result.append(entity)
    if dropped:
        logger.info(
            "Normalized {} {} rows, dropped {}", len(result), entity_type.value, dropped
        )
    return result


def to_row(entity_type: EntityType, values: dict) -> dict:
    """Canonical field values → storage columns for insert/update payloads."""
    renames = _ROW_NAMES.get(entity_type, {})
    derived = _DERIVED.get(entity_type, set())
    known = set(_FIELDS[entity_type]) | {"stage"}
    row = {}
    for field, value in values.items():
        if field in _NOT_WRITABLE or field in derived or field not in known:
            continue
        row[renames.get(field, field)] = value
    return row
