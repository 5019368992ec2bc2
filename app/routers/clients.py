"""
routers/clients.py — Client & Requirement Routes

Client directory with each client's procurement requirements.

Business Rules:
- Lists come from the clients/client_requirements tables, or the bundled
  sample data when the backend errors or is empty (see services/fallback_policy)
- Requirements added to a sample client stay with the sample data
- Deleting a sample client also drops its sample requirements; live
  requirements go with their client through the table's cascade
- Every mutating route requires the editor role

Called by: main.py (router mount)
Depends on: dependencies, services/entity_book, services/match_ranker, schemas/crm
"""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import (
    UserContext,
    get_store,
    get_user_context,
    get_workspace,
    load_or_404,
    require_editor,
)
from ..schemas.crm import ClientCreate, ClientUpdate, RequirementCreate, RequirementUpdate
from ..schemas.responses import ListResponse, WriteResponse
from ..services.entity_book import Workspace
from ..services.match_ranker import requirements_for_client
from ..table_store import TableStore

router = APIRouter(tags=["clients"])


# ── Clients ──────────────────────────────────────────────────────────────


@router.get("/api/clients")
async def list_clients(
    status: str | None = None,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
    ctx: UserContext = Depends(get_user_context),
):
    loaded = await ws.clients.load(store)
    requirements = await ws.requirements.list(store)
    counts: dict[str, int] = {}
    for r in requirements:
        counts[r.client_id] = counts.get(r.client_id, 0) + 1

    items = []
    for c in loaded.items:
        if status and status != "all" and c.status != status.lower():
            continue
        items.append({**c.model_dump(mode="json"), "requirement_count": counts.get(c.id, 0)})
    return {**ListResponse.build(items, loaded).model_dump(mode="json"), "can_edit": ctx.can_edit}


@router.post("/api/clients")
async def create_client(
    payload: ClientCreate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    result = await ws.clients.create(store, payload.model_dump(mode="json"))
    return WriteResponse.from_result(result)


@router.put("/api/clients/{client_id}")
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.clients, store, client_id, "Client")
    result = await ws.clients.update(store, current, payload.model_dump(mode="json", exclude_unset=True))
    if result.affected == 0:
        raise HTTPException(404, "Client not found")
    return WriteResponse.from_result(result)


@router.delete("/api/clients/{client_id}")
async def delete_client(
    client_id: str,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.clients, store, client_id, "Client")
    result = await ws.clients.delete(store, current)
    if current.is_fixture:
        orphans = requirements_for_client(ws.requirements.fixtures, current.id)
        if orphans:
            await ws.requirements.bulk_delete(store, orphans)
    return WriteResponse.from_result(result)


# ── Requirements ─────────────────────────────────────────────────────────


@router.get("/api/clients/{client_id}/requirements")
async def list_client_requirements(
    client_id: str,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    await load_or_404(ws.clients, store, client_id, "Client")
    loaded = await ws.requirements.load(store)
    items = requirements_for_client(loaded.items, client_id)
    return ListResponse.build(items, loaded)


@router.post("/api/clients/{client_id}/requirements")
async def create_requirement(
    client_id: str,
    payload: RequirementCreate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    client = await load_or_404(ws.clients, store, client_id, "Client")
    values = {**payload.model_dump(mode="json"), "client_id": client.id}
    result = await ws.requirements.create(store, values, local=client.is_fixture)
    return WriteResponse.from_result(result)


@router.put("/api/requirements/{requirement_id}")
async def update_requirement(
    requirement_id: str,
    payload: RequirementUpdate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.requirements, store, requirement_id, "Requirement")
    result = await ws.requirements.update(
        store, current, payload.model_dump(mode="json", exclude_unset=True)
    )
    if result.affected == 0:
        raise HTTPException(404, "Requirement not found")
    return WriteResponse.from_result(result)


@router.delete("/api/requirements/{requirement_id}")
async def delete_requirement(
    requirement_id: str,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.requirements, store, requirement_id, "Requirement")
    return WriteResponse.from_result(await ws.requirements.delete(store, current))
