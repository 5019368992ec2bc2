"""
routers/deals.py — Deal Pipeline Routes

List/filter, stats, kanban board, CRUD and stage moves for deals.

Business Rules:
- Filters: search (client/supplier/product), stage, priority, min/max value,
  created date range
- Stage values are normalized (lower-case, trimmed) and must be one of
  lead, negotiation, contract, closed; anything else is a 422
- Totals are derived from quantity × unit price whenever both are known
- Every change stamps last_activity
- Every mutating route requires the editor role

Called by: main.py (router mount)
Depends on: dependencies, services/deal_service, services/entity_book, schemas/deals
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import UserContext, get_store, get_workspace, load_or_404, require_editor
from ..schemas.deals import DealCreate, DealFilters, DealUpdate, StageChange
from ..schemas.responses import DealStatsResponse, KanbanResponse, ListResponse, WriteResponse
from ..services import deal_service
from ..services.entity_book import Workspace
from ..table_store import TableStore

router = APIRouter(tags=["deals"])


@router.get("/api/deals")
async def list_deals(
    filters: Annotated[DealFilters, Query()],
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    loaded = await ws.deals.load(store)
    return ListResponse.build(deal_service.filter_deals(loaded.items, filters), loaded)


@router.get("/api/deals/stats", response_model=DealStatsResponse)
async def deal_stats(
    filters: Annotated[DealFilters, Query()],
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    deals = deal_service.filter_deals(await ws.deals.list(store), filters)
    return deal_service.pipeline_stats(deals)


@router.get("/api/deals/kanban")
async def deal_kanban(
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    loaded = await ws.deals.load(store)
    return KanbanResponse(columns=deal_service.kanban(loaded.items), origin=loaded.origin)


@router.post("/api/deals")
async def create_deal(
    payload: DealCreate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    return WriteResponse.from_result(
        await ws.deals.create(store, payload.model_dump(mode="json"))
    )


@router.put("/api/deals/{deal_id}")
async def update_deal(
    deal_id: str,
    payload: DealUpdate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.deals, store, deal_id, "Deal")
    result = await ws.deals.update(
        store, current, payload.model_dump(mode="json", exclude_unset=True)
    )
    if result.affected == 0:
        raise HTTPException(404, "Deal not found")
    return WriteResponse.from_result(result)


@router.patch("/api/deals/{deal_id}/stage")
async def change_deal_stage(
    deal_id: str,
    payload: StageChange,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.deals, store, deal_id, "Deal")
    result = await deal_service.change_stage(ws.deals, store, current, payload.stage)
    if result.affected == 0:
        raise HTTPException(404, "Deal not found")
    return WriteResponse.from_result(result)


@router.delete("/api/deals/{deal_id}")
async def delete_deal(
    deal_id: str,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.deals, store, deal_id, "Deal")
    return WriteResponse.from_result(await ws.deals.delete(store, current))
