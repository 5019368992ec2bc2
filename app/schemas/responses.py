"""
schemas/responses.py — Shared response models for OpenAPI documentation

Base wrappers for list and write endpoints. List responses say where the
rows came from (live backend or bundled sample data, and why); write
responses say whether the change reached the backend.

Called by: routers/*.py
Depends on: pydantic
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.entities import DataOrigin
from app.services.entity_book import WriteResult
from app.services.fallback_policy import LoadResult


# ── Base Wrappers ───────────────────────────────────────────────────────


class OkResponse(BaseModel):
    ok: bool = True


class ListResponse(BaseModel):
    items: list[Any] = Field(default_factory=list)
    total: int = 0
    origin: DataOrigin = DataOrigin.LIVE
    source_reason: str = "live"

    @classmethod
    def build(cls, items: list, loaded: LoadResult) -> ListResponse:
        return cls(
            items=items, total=len(items), origin=loaded.origin, source_reason=loaded.reason
        )


class WriteResponse(BaseModel):
    ok: bool = True
    persisted: bool = True
    notice: str = ""
    affected: int = 1
    item: Any | None = None

    @classmethod
    def from_result(cls, result: WriteResult) -> WriteResponse:
        return cls(
            persisted=result.persisted,
            notice=result.notice,
            affected=result.affected,
            item=result.entity,
        )


# ── Deals ───────────────────────────────────────────────────────────────


class StageStats(BaseModel):
    stage: str
    count: int = 0
    value_usd: float = 0.0


class DealStatsResponse(BaseModel):
    count: int = 0
    pipeline_value_usd: float = 0.0
    expected_commission_usd: float = 0.0
    by_stage: list[StageStats] = Field(default_factory=list)


class KanbanResponse(BaseModel):
    columns: dict[str, list[Any]] = Field(default_factory=dict)
    origin: DataOrigin = DataOrigin.LIVE


# ── Suppliers ───────────────────────────────────────────────────────────


class SupplierListItem(BaseModel, extra="allow"):
    id: str
    name: str
    status: str = ""
    product_count: int = 0
