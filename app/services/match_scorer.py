"""
Match Scorer — compatibility of one supplier product with one client requirement.

Score = API name (50 exact / 30 contains) + Dosage form (20 exact / 10 contains)
        + Strength (15 exact) + Geography (10) + Budget fit (5), capped at 100.

Pure and deterministic. A missing field on either side scores 0 for that
factor; nothing here raises. Weights are fixed: stored similarity scores on
existing deals were produced with exactly these numbers.

Called by: services/match_ranker.py
Depends on: schemas/entities.py, utils/normalization.py
"""

from dataclasses import dataclass, field
from typing import Optional

from app.schemas.entities import Client, Product, Requirement, Supplier
from app.utils.normalization import fold

# --- Weights ---

API_EXACT = 50
API_PARTIAL = 30
FORM_EXACT = 20
FORM_PARTIAL = 10
STRENGTH_EXACT = 15
SAME_COUNTRY = 10
WITHIN_BUDGET = 5
MAX_SCORE = 100


# --- Score breakdown (returned with every match) ---

@dataclass
class MatchBreakdown:
    api_name: int = 0
    dosage_form: int = 0
    strength: int = 0
    geography: int = 0
    budget: int = 0
    max_unit_price: Optional[float] = None
    differentiators: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        raw = self.api_name + self.dosage_form + self.strength + self.geography + self.budget
        return min(raw, MAX_SCORE)

    def to_dict(self) -> dict:
        return {
            "components": {
                "api_name": self.api_name,
                "dosage_form": self.dosage_form,
                "strength": self.strength,
                "geography": self.geography,
                "budget": self.budget,
            },
            "max_unit_price": (
                round(self.max_unit_price, 4) if self.max_unit_price is not None else None
            ),
            "differentiators": self.differentiators,
            "score": self.total,
        }


# --- Individual factors ---

def score_api_name(wanted: str, offered: str) -> int:
    """Amoxicillin vs Amoxicillin Trihydrate → 30 (product contains requirement)."""
    w, o = fold(wanted), fold(offered)
    if not w or not o:
        return 0
    if w == o:
        return API_EXACT
    if w in o:
        return API_PARTIAL
    return 0


def score_dosage_form(wanted: str, offered: str) -> int:
    w, o = fold(wanted), fold(offered)
    if not w or not o:
        return 0
    if w == o:
        return FORM_EXACT
    if w in o:
        return FORM_PARTIAL
    return 0


def score_strength(wanted: str, offered: str) -> int:
    """No partial credit: 250mg and 500mg are different products."""
    w, o = fold(wanted), fold(offered)
    if w and w == o:
        return STRENGTH_EXACT
    return 0


def score_geography(client_country: str, supplier_country: str) -> int:
    # compared as stored: "USA" and "usa" are different countries here
    if client_country and client_country == supplier_country:
        return SAME_COUNTRY
    return 0


def max_unit_price(budget: Optional[float], quantity: Optional[float]) -> Optional[float]:
    if budget is None or not quantity or quantity <= 0:
        return None
    return budget / quantity


def score_budget(unit_price: Optional[float], ceiling: Optional[float]) -> int:
    if unit_price is None or ceiling is None:
        return 0
    return WITHIN_BUDGET if unit_price <= ceiling else 0


# --- Public API ---

def score_breakdown(
    requirement: Requirement,
    product: Product,
    supplier: Optional[Supplier],
    client: Optional[Client],
) -> MatchBreakdown:
    b = MatchBreakdown()
    b.api_name = score_api_name(requirement.api_name, product.api_name)
    b.dosage_form = score_dosage_form(requirement.dosage_form, product.dosage_form)
    b.strength = score_strength(requirement.strength, product.strength)
    b.geography = score_geography(
        client.country if client else "",
        supplier.country if supplier else "",
    )
    b.max_unit_price = max_unit_price(requirement.budget_usd, requirement.quantity)
    b.budget = score_budget(product.unit_price_usd, b.max_unit_price)

    if b.api_name == API_EXACT:
        b.differentiators.append("Exact API match")
    elif b.api_name:
        b.differentiators.append("Related API")
    if b.dosage_form == FORM_EXACT:
        b.differentiators.append("Same dosage form")
    if b.strength:
        b.differentiators.append("Same strength")
    if b.geography:
        b.differentiators.append("Same country")
    if b.budget:
        b.differentiators.append("Within budget")
    return b


def score(
    requirement: Requirement,
    product: Product,
    supplier: Optional[Supplier],
    client: Optional[Client],
) -> int:
    """0-100 compatibility score for one requirement × product pair."""
    return score_breakdown(requirement, product, supplier, client).total
