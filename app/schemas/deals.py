"""
schemas/deals.py — Pydantic models for deal pipeline endpoints

Validates deal create/update payloads, stage changes, and list filters.

Business Rules:
- Title is required and non-empty
- Stage goes through the stage normalizer: lower-cased, trimmed, and must be
  one of lead, negotiation, contract, closed
- Quantity, unit price and total are non-negative
- Probability is 0-100, commission rate 0-1
- Priority is low, medium or high (case-insensitive)

Called by: routers/deals.py, routers/matching.py, services/deal_synthesizer.py
Depends on: pydantic, services/stage_normalizer.py
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator

from app.services.stage_normalizer import normalize_stage

DEAL_PRIORITIES = ("low", "medium", "high")
DEAL_SOURCES = ("manual", "intelligent_matching")


def _check_priority(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if v not in DEAL_PRIORITIES:
        raise ValueError(f"Priority must be one of: {', '.join(DEAL_PRIORITIES)}")
    return v


def _check_non_negative(v: float | None, label: str) -> float | None:
    if v is not None and v < 0:
        raise ValueError(f"{label} cannot be negative")
    return v


# ── Create / Update ──────────────────────────────────────────────────


class DealCreate(BaseModel):
    title: str
    client_id: str | None = None
    supplier_id: str | None = None
    product_id: str | None = None
    requirement_id: str | None = None

    client_name: str = ""
    client_contact: str = ""
    supplier_name: str = ""
    supplier_contact: str = ""
    product_name: str = ""
    dosage_form: str = ""
    strength: str = ""
    pack_size: str = ""

    quantity: float | None = None
    unit_price_usd: float | None = None
    total_value_usd: float | None = None
    currency: str = "USD"
    commission_rate: float | None = Field(default=None, ge=0, le=1)

    stage: str = "lead"
    priority: str = "medium"
    probability: int | None = None
    expected_close_date: date | None = None
    next_action: str = ""
    notes: str = ""
    source: str = "manual"
    similarity_score: int | None = Field(default=None, ge=0, le=100)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("stage")
    @classmethod
    def stage_in_vocabulary(cls, v: str) -> str:
        return normalize_stage(v)

    @field_validator("priority")
    @classmethod
    def priority_valid(cls, v: str) -> str:
        return _check_priority(v)

    @field_validator("quantity")
    @classmethod
    def quantity_non_negative(cls, v: float | None) -> float | None:
        return _check_non_negative(v, "Quantity")

    @field_validator("unit_price_usd")
    @classmethod
    def price_non_negative(cls, v: float | None) -> float | None:
        return _check_non_negative(v, "Unit price")

    @field_validator("total_value_usd")
    @classmethod
    def total_non_negative(cls, v: float | None) -> float | None:
        return _check_non_negative(v, "Deal value")

    @field_validator("probability")
    @classmethod
    def probability_in_range(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= 100:
            raise ValueError("Probability must be between 0 and 100")
        return v

    @field_validator("source")
    @classmethod
    def source_valid(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in DEAL_SOURCES:
            raise ValueError(f"Source must be one of: {', '.join(DEAL_SOURCES)}")
        return v


class DealUpdate(BaseModel):
    title: str | None = None
    client_name: str | None = None
    client_contact: str | None = None
    supplier_name: str | None = None
    supplier_contact: str | None = None
    product_name: str | None = None
    dosage_form: str | None = None
    strength: str | None = None
    pack_size: str | None = None
    quantity: float | None = None
    unit_price_usd: float | None = None
    total_value_usd: float | None = None
    currency: str | None = None
    commission_rate: float | None = Field(default=None, ge=0, le=1)
    stage: str | None = None
    priority: str | None = None
    probability: int | None = Field(default=None, ge=0, le=100)
    expected_close_date: date | None = None
    next_action: str | None = None
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Title cannot be blank")
        return v

    @field_validator("stage")
    @classmethod
    def stage_in_vocabulary(cls, v: str | None) -> str:
        # only runs for an explicit value; null would violate the NOT NULL column
        return normalize_stage(v)

    @field_validator("priority")
    @classmethod
    def priority_valid(cls, v: str | None) -> str | None:
        return _check_priority(v)

    @field_validator("quantity", "unit_price_usd", "total_value_usd")
    @classmethod
    def amounts_non_negative(cls, v: float | None) -> float | None:
        return _check_non_negative(v, "Amount")


class StageChange(BaseModel):
    stage: str

    @field_validator("stage")
    @classmethod
    def stage_in_vocabulary(cls, v: str) -> str:
        return normalize_stage(v)


# ── Filters ──────────────────────────────────────────────────────────


class DealFilters(BaseModel):
    search: str = ""
    stage: str | None = None
    priority: str | None = None
    min_value: float | None = None
    max_value: float | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("stage")
    @classmethod
    def stage_in_vocabulary(cls, v: str | None) -> str | None:
        return normalize_stage(v) if v else None

    @field_validator("priority")
    @classmethod
    def priority_valid(cls, v: str | None) -> str | None:
        return _check_priority(v) if v else None
