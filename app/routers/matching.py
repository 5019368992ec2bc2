"""
routers/matching.py — Intelligent Matching Routes

Pick a client, pick one of its requirements, see every eligible supplier
product ranked against it, then turn one match into a deal.

Business Rules:
- Only products of active suppliers are ranked; ties keep catalog order
- Matches are recomputed on every request and never stored
- A draft is only the initial form state; nothing is saved until the
  draft is submitted to POST /api/matching/deals
- Submitted drafts are validated locally (title, stage, non-negative
  amounts, probability 0-100) before anything reaches the backend

Called by: main.py (router mount)
Depends on: dependencies, services/match_ranker, services/deal_synthesizer
"""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ..config import settings
from ..dependencies import UserContext, get_store, get_workspace, load_or_404, require_editor
from ..schemas.entities import Requirement
from ..schemas.matching import DraftRequest, MatchListResponse, MatchOut
from ..schemas.responses import ListResponse, WriteResponse
from ..services.deal_synthesizer import DealDraft, synthesize, validate_draft
from ..services.entity_book import Workspace
from ..services.match_ranker import Match, rank, requirements_for_client
from ..table_store import TableStore

router = APIRouter(tags=["matching"])


async def _ranked(ws: Workspace, store: TableStore, requirement: Requirement) -> tuple:
    client = await ws.clients.get(store, requirement.client_id)
    suppliers = await ws.suppliers.list(store)
    products = await ws.products.list(store)
    return client, rank(requirement, client, suppliers, products)


@router.get("/api/matching/clients/{client_id}/requirements")
async def matching_requirements(
    client_id: str,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    await load_or_404(ws.clients, store, client_id, "Client")
    loaded = await ws.requirements.load(store)
    return ListResponse.build(requirements_for_client(loaded.items, client_id), loaded)


@router.get("/api/matching/requirements/{requirement_id}/matches", response_model=MatchListResponse)
async def requirement_matches(
    requirement_id: str,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    requirement = await load_or_404(ws.requirements, store, requirement_id, "Requirement")
    _, matches = await _ranked(ws, store, requirement)
    return MatchListResponse(
        requirement_id=requirement.id,
        client_id=requirement.client_id,
        matches=[MatchOut.from_match(m) for m in matches],
        total=len(matches),
    )


@router.post("/api/matching/requirements/{requirement_id}/draft", response_model=DealDraft)
async def draft_deal(
    requirement_id: str,
    payload: DraftRequest,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    requirement = await load_or_404(ws.requirements, store, requirement_id, "Requirement")
    client, matches = await _ranked(ws, store, requirement)
    match: Match | None = next(
        (m for m in matches if m.product.id == payload.product_id), None
    )
    if match is None:
        raise HTTPException(404, "Product is not an eligible match for this requirement")

    draft = synthesize(match, requirement, client, settings=settings)
    edits = payload.edits.model_dump(exclude_unset=True)
    return draft.with_changes(**edits) if edits else draft


@router.post("/api/matching/deals")
async def submit_draft(
    draft: DealDraft,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    deal = validate_draft(draft)
    result = await ws.deals.create(store, deal.model_dump(mode="json"))
    logger.info(
        "Deal {!r} submitted from matching (persisted={})", deal.title, result.persisted
    )
    return WriteResponse.from_result(result)
