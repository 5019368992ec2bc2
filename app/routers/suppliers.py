"""
routers/suppliers.py — Supplier & Product Catalog Routes

Supplier directory (search, status filter, bulk status/delete) and each
supplier's product catalog.

Business Rules:
- Search matches name, contact person or country; status "all" disables the filter
- Each supplier row carries its product count
- Bulk actions: update_status or delete; CSV export is not offered here
- Products added to a sample supplier stay with the sample data
- Deleting a sample supplier (single or bulk) drops its sample products
- Every mutating route requires the editor role

Called by: main.py (router mount)
Depends on: dependencies, services/entity_book, services/supplier_service, schemas/suppliers
"""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import UserContext, get_store, get_workspace, load_or_404, require_editor
from ..schemas.responses import ListResponse, WriteResponse
from ..schemas.suppliers import (
    ProductCreate,
    ProductUpdate,
    SupplierBulkAction,
    SupplierCreate,
    SupplierUpdate,
)
from ..services import supplier_service
from ..services.entity_book import Workspace
from ..table_store import TableStore

router = APIRouter(tags=["suppliers"])


async def _drop_sample_products(ws: Workspace, store: TableStore, supplier_ids: list[str]) -> None:
    """Deleted sample suppliers take their sample products with them."""
    if not supplier_ids:
        return
    wanted = set(supplier_ids)
    orphans = [p for p in ws.products.fixtures if p.supplier_id in wanted]
    if orphans:
        await ws.products.bulk_delete(store, orphans)


# ── Suppliers ────────────────────────────────────────────────────────────


@router.get("/api/suppliers")
async def list_suppliers(
    search: str = "",
    status: str = "all",
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    loaded = await ws.suppliers.load(store)
    counts = supplier_service.product_counts(await ws.products.list(store))
    suppliers = supplier_service.filter_suppliers(loaded.items, search, status)
    items = [
        {**s.model_dump(mode="json"), "product_count": counts.get(s.id, 0)} for s in suppliers
    ]
    return ListResponse.build(items, loaded)


@router.post("/api/suppliers")
async def create_supplier(
    payload: SupplierCreate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    return WriteResponse.from_result(
        await ws.suppliers.create(store, payload.model_dump(mode="json"))
    )


@router.post("/api/suppliers/bulk")
async def bulk_suppliers(
    payload: SupplierBulkAction,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    wanted = set(payload.supplier_ids)
    selected = [s for s in await ws.suppliers.list(store) if s.id in wanted]
    if not selected:
        raise HTTPException(404, "None of the selected suppliers were found")
    try:
        result = await supplier_service.bulk_action(
            ws.suppliers, store, selected, payload.action, payload.status
        )
    except supplier_service.BulkActionError as e:
        raise HTTPException(422, str(e))
    if payload.action == "delete":
        await _drop_sample_products(ws, store, [s.id for s in selected if s.is_fixture])
    return WriteResponse.from_result(result)


@router.put("/api/suppliers/{supplier_id}")
async def update_supplier(
    supplier_id: str,
    payload: SupplierUpdate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.suppliers, store, supplier_id, "Supplier")
    result = await ws.suppliers.update(
        store, current, payload.model_dump(mode="json", exclude_unset=True)
    )
    if result.affected == 0:
        raise HTTPException(404, "Supplier not found")
    return WriteResponse.from_result(result)


@router.delete("/api/suppliers/{supplier_id}")
async def delete_supplier(
    supplier_id: str,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.suppliers, store, supplier_id, "Supplier")
    result = await ws.suppliers.delete(store, current)
    if current.is_fixture:
        await _drop_sample_products(ws, store, [current.id])
    return WriteResponse.from_result(result)


# ── Products ─────────────────────────────────────────────────────────────


@router.get("/api/suppliers/{supplier_id}/products")
async def list_supplier_products(
    supplier_id: str,
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    await load_or_404(ws.suppliers, store, supplier_id, "Supplier")
    loaded = await ws.products.load(store)
    items = [p for p in loaded.items if p.supplier_id == supplier_id]
    return ListResponse.build(items, loaded)


@router.post("/api/suppliers/{supplier_id}/products")
async def create_product(
    supplier_id: str,
    payload: ProductCreate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    supplier = await load_or_404(ws.suppliers, store, supplier_id, "Supplier")
    values = {**payload.model_dump(mode="json"), "supplier_id": supplier.id}
    result = await ws.products.create(store, values, local=supplier.is_fixture)
    return WriteResponse.from_result(result)


@router.put("/api/products/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.products, store, product_id, "Product")
    result = await ws.products.update(
        store, current, payload.model_dump(mode="json", exclude_unset=True)
    )
    if result.affected == 0:
        raise HTTPException(404, "Product not found")
    return WriteResponse.from_result(result)


@router.delete("/api/products/{product_id}")
async def delete_product(
    product_id: str,
    _: UserContext = Depends(require_editor),
    ws: Workspace = Depends(get_workspace),
    store: TableStore = Depends(get_store),
):
    current = await load_or_404(ws.products, store, product_id, "Product")
    return WriteResponse.from_result(await ws.products.delete(store, current))
