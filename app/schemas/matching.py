"""
schemas/matching.py — Pydantic models for the matching screen

Called by: routers/matching.py
Depends on: pydantic, services/match_ranker.py
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from app.schemas.entities import Product, Supplier
from app.services.match_ranker import Match


class MatchOut(BaseModel):
    requirement_id: str
    supplier: Supplier
    product: Product
    score: int
    breakdown: dict = Field(default_factory=dict)
    differentiators: list[str] = Field(default_factory=list)

    @classmethod
    def from_match(cls, match: Match) -> MatchOut:
        return cls(
            requirement_id=match.requirement_id,
            supplier=match.supplier,
            product=match.product,
            score=match.score,
            breakdown=match.breakdown.to_dict(),
            differentiators=list(match.differentiators),
        )


class MatchListResponse(BaseModel):
    requirement_id: str
    client_id: str
    matches: list[MatchOut] = Field(default_factory=list)
    total: int = 0


class DraftEdits(BaseModel):
    """Form fields a user may change before submitting a synthesized deal."""

    title: str | None = None
    quantity: float | None = None
    unit_price_usd: float | None = None
    stage: str | None = None
    priority: str | None = None
    probability: int | None = None
    expected_close_date: date | None = None
    commission_rate: float | None = None
    next_action: str | None = None
    notes: str | None = None


class DraftRequest(BaseModel):
    product_id: str
    edits: DraftEdits = Field(default_factory=DraftEdits)
