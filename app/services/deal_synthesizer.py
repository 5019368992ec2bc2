"""Deal Synthesizer — seeds an unsaved deal from an accepted match.

Business Rules:
- Title is "{product} - {supplier}" (product_name → api_name → 'Product')
- Quantity and unit price are seeded from the requirement and product (0 when
  absent); the total is quantity × unit price of the source values, None when
  either source value is missing
- Totals are always re-derived from quantity × unit price; a caller-supplied
  total is ignored whenever either operand is known
- Stage starts at negotiation, source is intelligent_matching
- Display fields are snapshotted from the source entities at synthesis time
- References to fixture rows are left empty; the snapshot keeps the deal
  readable and the backend never sees ids it does not own
- Nothing is persisted here; validate_draft() only checks the payload and
  submits an unknown total with its seeded zero operands as None

Called by: routers/matching.py
Depends on: services/match_ranker.py, schemas/deals.py, config.py
"""

from __future__ import annotations

from datetime import date

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from app.config import Settings
from app.schemas.deals import DealCreate
from app.schemas.entities import Client, Entity, Requirement
from app.services.entity_normalizer import compute_commission, compute_total
from app.services.match_ranker import Match

NOTES_TEMPLATE = (
    "Deal created from intelligent matching.\n"
    "Similarity Score: {score}%\n"
    "Key advantages: {advantages}"
)

_OPERANDS = ("quantity", "unit_price_usd")
_DERIVED = ("total_value_usd", "commission_usd")


class DealValidationError(ValueError):
    """A deal draft failed local validation; nothing was sent to the backend."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        summary = "; ".join(f"{k}: {v}" for k, v in errors.items())
        super().__init__(f"Deal is not valid: {summary}")


class DealDraft(BaseModel):
    """Initial form state for a deal created from a match. Edit via with_changes()."""

    model_config = ConfigDict(frozen=True)

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

    quantity: float = 0
    unit_price_usd: float = 0
    total_value_usd: float | None = None
    currency: str = "USD"
    commission_rate: float | None = None
    commission_usd: float | None = None

    stage: str = "negotiation"
    priority: str = "medium"
    probability: int | None = None
    expected_close_date: date | None = None
    next_action: str = ""
    notes: str = ""
    source: str = "intelligent_matching"
    similarity_score: int | None = None

    def with_changes(self, **edits) -> DealDraft:
        """Apply form edits. Totals follow quantity × unit price, never the caller."""
        for name in _DERIVED:
            edits.pop(name, None)
        draft = self.model_copy(update=edits)
        if any(name in edits for name in _OPERANDS):
            total = compute_total(draft.quantity, draft.unit_price_usd)
        else:
            total = draft.total_value_usd
        return draft.model_copy(update={
            "total_value_usd": total,
            "commission_usd": compute_commission(total, draft.commission_rate),
        })


def _ref(entity: Entity | None) -> str | None:
    if entity is None or entity.is_fixture:
        return None
    return entity.id


def _contact(entity) -> str:
    if entity is None:
        return ""
    return entity.contact_email or entity.contact_name


def notes_for(match: Match) -> str:
    return NOTES_TEMPLATE.format(
        score=match.score,
        advantages=", ".join(match.differentiators) or "N/A",
    )


def synthesize(
    match: Match,
    requirement: Requirement,
    client: Client | None,
    *,
    settings: Settings,
) -> DealDraft:
    """Build the unsaved deal for one accepted match."""
    product, supplier = match.product, match.supplier

    product_label = requirement.product_name or requirement.api_name or "Product"
    supplier_label = supplier.name or "Supplier"
    total = compute_total(requirement.quantity, product.unit_price_usd)

    draft = DealDraft(
        title=f"{product_label} - {supplier_label}",
        client_id=_ref(client),
        supplier_id=_ref(supplier),
        product_id=_ref(product),
        requirement_id=_ref(requirement),
        client_name=client.name if client else "Client",
        client_contact=_contact(client),
        supplier_name=supplier_label,
        supplier_contact=_contact(supplier),
        product_name=requirement.product_name or product.api_name or "Product",
        dosage_form=product.dosage_form or requirement.dosage_form,
        strength=product.strength or requirement.strength,
        pack_size=product.pack_size,
        quantity=requirement.quantity or 0,
        unit_price_usd=product.unit_price_usd or 0,
        total_value_usd=total,
        currency=settings.default_currency,
        commission_rate=settings.default_commission_rate,
        commission_usd=compute_commission(total, settings.default_commission_rate),
        stage="negotiation",
        priority=requirement.priority or "medium",
        probability=settings.default_probability,
        next_action=settings.default_next_action,
        notes=notes_for(match),
        source="intelligent_matching",
        similarity_score=match.score,
    )
    logger.info(
        "Synthesized deal draft {!r} from requirement {} × product {} (score {})",
        draft.title, requirement.id, product.id, match.score,
    )
    return draft


def validate_draft(draft: DealDraft) -> DealCreate:
    """Check a (possibly edited) draft before submission.

    Raises DealValidationError with one message per offending field.
    """
    payload = draft.model_dump(exclude={"commission_usd"})
    if draft.total_value_usd is None:
        # no operand edited since synthesis: a seeded 0 is an unknown source value
        for name in _OPERANDS:
            if not payload[name]:
                payload[name] = None
    try:
        return DealCreate.model_validate(payload)
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"]) or "__root__"
            errors[field] = err["msg"].removeprefix("Value error, ")
        raise DealValidationError(errors) from exc
