"""
schemas/suppliers.py — Pydantic models for supplier and product endpoints

Business Rules:
- Supplier: company name, contact person, email, phone and country are
  required; email must look like an address
- Supplier status must be one of: active, inactive, pending, blocked
- Product: API name, dosage form, strength and pack size are required
- Unit price is required and >= 0; MOQ and lead time, if given, >= 0
- Bulk actions: update_status (needs a valid status) or delete

Called by: routers/suppliers.py
Depends on: pydantic, schemas/crm.py (email check)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .crm import check_email

SUPPLIER_STATUSES = ("active", "inactive", "pending", "blocked")


def _required(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    return v


def _status(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if v not in SUPPLIER_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(SUPPLIER_STATUSES)}")
    return v


# ── Suppliers ────────────────────────────────────────────────────────


class SupplierCreate(BaseModel):
    name: str
    contact_name: str
    contact_email: str
    contact_phone: str
    country: str
    status: str = "active"
    website: str = ""
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _required(v, "Company name")

    @field_validator("contact_name")
    @classmethod
    def contact_not_blank(cls, v: str) -> str:
        return _required(v, "Contact person")

    @field_validator("contact_email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return check_email(v, required=True)

    @field_validator("contact_phone")
    @classmethod
    def phone_not_blank(cls, v: str) -> str:
        return _required(v, "Phone number")

    @field_validator("country")
    @classmethod
    def country_not_blank(cls, v: str) -> str:
        return _required(v, "Location")

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str) -> str:
        return _status(v)


class SupplierUpdate(BaseModel):
    name: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    country: str | None = None
    status: str | None = None
    website: str | None = None
    notes: str | None = None

    @field_validator("name", "contact_name", "contact_phone", "country")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Cannot be blank")
        return v

    @field_validator("contact_email")
    @classmethod
    def email_valid(cls, v: str | None) -> str | None:
        return check_email(v, required=True) if v is not None else v

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str | None) -> str | None:
        return _status(v)


class SupplierBulkAction(BaseModel):
    supplier_ids: list[str] = Field(min_length=1)
    action: Literal["update_status", "delete"]
    status: str | None = None

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str | None) -> str | None:
        return _status(v)


# ── Products ─────────────────────────────────────────────────────────


class ProductCreate(BaseModel):
    api_name: str
    dosage_form: str
    strength: str
    pack_size: str
    unit_price_usd: float = Field(ge=0)
    moq: int | None = Field(default=None, ge=0)
    lead_time_days: int | None = Field(default=None, ge=0)
    description: str = ""

    @field_validator("api_name")
    @classmethod
    def api_not_blank(cls, v: str) -> str:
        return _required(v, "API name")

    @field_validator("dosage_form")
    @classmethod
    def form_not_blank(cls, v: str) -> str:
        return _required(v, "Dosage form")

    @field_validator("strength")
    @classmethod
    def strength_not_blank(cls, v: str) -> str:
        return _required(v, "Strength")

    @field_validator("pack_size")
    @classmethod
    def pack_not_blank(cls, v: str) -> str:
        return _required(v, "Pack size")


class ProductUpdate(BaseModel):
    api_name: str | None = None
    dosage_form: str | None = None
    strength: str | None = None
    pack_size: str | None = None
    unit_price_usd: float | None = Field(default=None, ge=0)
    moq: int | None = Field(default=None, ge=0)
    lead_time_days: int | None = Field(default=None, ge=0)
    description: str | None = None

    @field_validator("api_name", "dosage_form", "strength", "pack_size")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Cannot be blank")
        return v
