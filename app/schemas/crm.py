"""
schemas/crm.py — Pydantic models for client and requirement endpoints

Validates Clients and their procurement Requirements.

Business Rules:
- Client name is required and non-empty
- Client status must be one of: active, inactive, pending
- A requirement needs a product name or an API name
- Quantity and budget, when given, are non-negative
- Priority must be low, medium or high; status open, in_progress, closed
  or fulfilled

Called by: routers/clients.py
Depends on: pydantic
"""

from __future__ import annotations

import re

from pydantic import BaseModel, field_validator, model_validator

CLIENT_STATUSES = ("active", "inactive", "pending")
REQUIREMENT_PRIORITIES = ("low", "medium", "high")
REQUIREMENT_STATUSES = ("open", "in_progress", "closed", "fulfilled")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def check_email(v: str | None, required: bool = False) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        if required:
            raise ValueError("Email is required")
        return v
    if not EMAIL_RE.match(v):
        raise ValueError("Please enter a valid email address")
    return v


def _one_of(v: str | None, allowed: tuple[str, ...], label: str) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if v not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return v


# ── Clients ──────────────────────────────────────────────────────────


class ClientCreate(BaseModel):
    name: str
    country: str = ""
    segment: str = ""
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    status: str = "active"
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name is required")
        return v

    @field_validator("contact_email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return check_email(v)

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str) -> str:
        return _one_of(v, CLIENT_STATUSES, "Status")


class ClientUpdate(BaseModel):
    name: str | None = None
    country: str | None = None
    segment: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    status: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Company name cannot be blank")
        return v

    @field_validator("contact_email")
    @classmethod
    def email_valid(cls, v: str | None) -> str | None:
        return check_email(v)

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str | None) -> str | None:
        return _one_of(v, CLIENT_STATUSES, "Status")


# ── Requirements ─────────────────────────────────────────────────────


class RequirementCreate(BaseModel):
    product_name: str = ""
    api_name: str = ""
    dosage_form: str = ""
    strength: str = ""
    quantity: float | None = None
    unit: str = ""
    budget_usd: float | None = None
    deadline: str | None = None
    priority: str = "medium"
    status: str = "open"
    notes: str = ""

    @field_validator("quantity", "budget_usd")
    @classmethod
    def non_negative(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("Must be zero or greater")
        return v

    @field_validator("priority")
    @classmethod
    def priority_valid(cls, v: str) -> str:
        return _one_of(v, REQUIREMENT_PRIORITIES, "Priority")

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str) -> str:
        return _one_of(v, REQUIREMENT_STATUSES, "Status")

    @model_validator(mode="after")
    def names_product(self) -> RequirementCreate:
        if not (self.product_name.strip() or self.api_name.strip()):
            raise ValueError("Product name or API name is required")
        return self


class RequirementUpdate(BaseModel):
    product_name: str | None = None
    api_name: str | None = None
    dosage_form: str | None = None
    strength: str | None = None
    quantity: float | None = None
    unit: str | None = None
    budget_usd: float | None = None
    deadline: str | None = None
    priority: str | None = None
    status: str | None = None
    notes: str | None = None

    @field_validator("quantity", "budget_usd")
    @classmethod
    def non_negative(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("Must be zero or greater")
        return v

    @field_validator("priority")
    @classmethod
    def priority_valid(cls, v: str | None) -> str | None:
        return _one_of(v, REQUIREMENT_PRIORITIES, "Priority")

    @field_validator("status")
    @classmethod
    def status_valid(cls, v: str | None) -> str | None:
        return _one_of(v, REQUIREMENT_STATUSES, "Status")
