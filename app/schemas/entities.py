"""
schemas/entities.py — Canonical in-memory entity shapes

One immutable snapshot type per entity, produced by
services/entity_normalizer.py from whatever row shape the backend (or the
bundled fixtures) delivered. Every snapshot carries its DataOrigin so the
write path can tell fixture rows from live rows without looking at ids.

Business Rules:
- Snapshots are frozen; edits produce new snapshots via model_copy(update=...)
- Quantities, prices, MOQ and lead times are non-negative or None
- Deal.stage is one of the four pipeline stages, or None for legacy rows

Called by: services/*, routers/*
Depends on: pydantic
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class DataOrigin(str, Enum):
    LIVE = "live"
    FIXTURE = "fixture"


class EntityType(str, Enum):
    CLIENT = "client"
    REQUIREMENT = "requirement"
    SUPPLIER = "supplier"
    PRODUCT = "product"
    DEAL = "deal"

    @property
    def table(self) -> str:
        return ENTITY_TABLES[self]


ENTITY_TABLES = {
    EntityType.CLIENT: "clients",
    EntityType.REQUIREMENT: "client_requirements",
    EntityType.SUPPLIER: "suppliers",
    EntityType.PRODUCT: "supplier_products",
    EntityType.DEAL: "deals",
}


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    origin: DataOrigin = DataOrigin.LIVE
    created_at: datetime | None = None

    @property
    def is_fixture(self) -> bool:
        return self.origin is DataOrigin.FIXTURE


class Client(Entity):
    name: str = "Client"
    country: str = ""
    segment: str = ""
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    status: str = "active"
    notes: str = ""


class Requirement(Entity):
    client_id: str
    product_name: str = ""
    api_name: str = ""
    dosage_form: str = ""
    strength: str = ""
    quantity: float | None = None
    unit: str = ""
    budget_usd: float | None = None
    deadline: str | None = None
    priority: str = ""
    status: str = "open"
    notes: str = ""


class Supplier(Entity):
    name: str = "Supplier"
    country: str = ""
    status: str = "active"
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    website: str = ""
    notes: str = ""


class Product(Entity):
    supplier_id: str
    api_name: str = ""
    dosage_form: str = ""
    strength: str = ""
    pack_size: str = ""
    unit_price_usd: float | None = None
    moq: int | None = None
    lead_time_days: int | None = None
    description: str = ""


class Deal(Entity):
    title: str = ""
    client_id: str | None = None
    supplier_id: str | None = None
    product_id: str | None = None
    requirement_id: str | None = None

    client_name: str = "Client"
    client_contact: str = ""
    supplier_name: str = "Supplier"
    supplier_contact: str = ""
    product_name: str = "Product"
    dosage_form: str = ""
    strength: str = ""
    pack_size: str = ""

    quantity: float | None = None
    unit_price_usd: float | None = None
    total_value_usd: float | None = None
    currency: str = "USD"
    commission_rate: float | None = None
    commission_usd: float | None = None

    stage: str | None = "lead"
    priority: str = "medium"
    probability: int | None = None
    expected_close_date: str | None = None
    next_action: str = ""
    notes: str = ""
    source: str = "manual"
    similarity_score: int | None = None
    last_activity: datetime | None = None


ENTITY_MODELS: dict[EntityType, type[Entity]] = {
    EntityType.CLIENT: Client,
    EntityType.REQUIREMENT: Requirement,
    EntityType.SUPPLIER: Supplier,
    EntityType.PRODUCT: Product,
    EntityType.DEAL: Deal,
}
