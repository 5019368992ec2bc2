"""Match Ranker — every eligible supplier product scored against one requirement.

Only products whose supplier exists and is active are considered. Results are
sorted by score descending; equal scores keep the input product order so the
same catalog always ranks the same way. Matches are recomputed on every call
and never stored.

Called by: routers/matching.py
Depends on: services/match_scorer.py
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from app.schemas.entities import Client, Product, Requirement, Supplier
from app.services.match_scorer import MatchBreakdown, score_breakdown

ACTIVE = "active"


@dataclass(frozen=True)
class Match:
    requirement_id: str
    supplier: Supplier
    product: Product
    score: int
    breakdown: MatchBreakdown

    @property
    def differentiators(self) -> list[str]:
        return self.breakdown.differentiators


def requirements_for_client(
    requirements: Iterable[Requirement], client_id: Optional[str]
) -> list[Requirement]:
    if not client_id:
        return []
    return [r for r in requirements if r.client_id == client_id]


def rank(
    requirement: Optional[Requirement],
    client: Optional[Client],
    suppliers: Iterable[Supplier],
    products: Iterable[Product],
) -> list[Match]:
    if requirement is None or client is None:
        return []

    active = {s.id: s for s in suppliers if s.status == ACTIVE}
    matches = []
    skipped = 0
    for product in products:
        supplier = active.get(product.supplier_id)
        if supplier is None:
            skipped += 1
            continue
        breakdown = score_breakdown(requirement, product, supplier, client)
        matches.append(Match(
            requirement_id=requirement.id,
            supplier=supplier,
            product=product,
            score=breakdown.total,
            breakdown=breakdown,
        ))

    # list.sort is stable, so ties keep catalog order
    matches.sort(key=lambda m: m.score, reverse=True)
    logger.debug(
        "Ranked {} products for requirement {} ({} skipped: supplier missing or inactive)",
        len(matches), requirement.id, skipped,
    )
    return matches
