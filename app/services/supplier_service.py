"""services/supplier_service.py -- Supplier directory: search, counts, bulk actions.

Business Rules:
- Search matches name, contact name or country (case-insensitive substring)
- Status filter "all" (or empty) keeps every supplier
- Bulk update_status only accepts a supplier status; bulk delete removes the
  selection. Fixture and live suppliers in one selection are each routed to
  their own side by the entity book.

Called by: routers/suppliers.py
Depends on: services/entity_book.py
"""

from collections import Counter
from typing import Iterable

from app.schemas.entities import Product, Supplier
from app.services.entity_book import EntityBook, WriteResult
from app.table_store import TableStore

SUPPLIER_STATUSES = ("active", "inactive", "pending", "blocked")
BULK_ACTIONS = ("update_status", "delete")


class BulkActionError(ValueError):
    pass


def filter_suppliers(
    suppliers: Iterable[Supplier], search: str = "", status: str | None = None
) -> list[Supplier]:
    term = (search or "").strip().lower()
    status = (status or "").strip().lower()
    result = []
    for s in suppliers:
        if term and not any(
            term in (v or "").lower() for v in (s.name, s.contact_name, s.country)
        ):
            continue
        if status and status != "all" and s.status != status:
            continue
        result.append(s)
    return result


def product_counts(products: Iterable[Product]) -> Counter:
    return Counter(p.supplier_id for p in products)


async def bulk_action(
    book: EntityBook,
    store: TableStore,
    selected: list[Supplier],
    action: str,
    status: str | None = None,
) -> WriteResult:
    if action == "update_status":
        status = (status or "").strip().lower()
        if status not in SUPPLIER_STATUSES:
            raise BulkActionError(
                f"Status must be one of: {', '.join(SUPPLIER_STATUSES)}"
            )
        return await book.bulk_update(store, selected, {"status": status})
    if action == "delete":
        return await book.bulk_delete(store, selected)
    raise BulkActionError(f"Unsupported bulk action {action!r}")
