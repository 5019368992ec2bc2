"""
test_entity_book.py — Tests for services/entity_book.py

Fallback loads, origin-based write routing, optimistic results when the
backend write fails, and bulk splits across fixture/live selections.

Called by: pytest
Depends on: app/services/entity_book.py, tests/conftest.py (store, workspace)
"""

from unittest.mock import AsyncMock

import pytest

from app.schemas.entities import DataOrigin, EntityType
from app.services.entity_book import (
    LOCAL_ONLY_NOTICE,
    WRITE_FAILED_NOTICE,
    EntityBook,
    Workspace,
)
from app.table_store import StoreError


class FailingStore:
    """Every operation fails the way a dead backend does."""

    async def select_all(self, table):
        raise StoreError(table, "select", "ConnectError")

    async def insert(self, table, row):
        raise StoreError(table, "insert", "ConnectError")

    async def update(self, table, row_id, changes):
        raise StoreError(table, "update", "ConnectError")

    async def delete(self, table, row_id):
        raise StoreError(table, "delete", "ConnectError")

    async def update_in(self, table, ids, changes):
        raise StoreError(table, "update_in", "ConnectError")

    async def delete_in(self, table, ids):
        raise StoreError(table, "delete_in", "ConnectError")


def _deal_book():
    return EntityBook(EntityType.DEAL, [
        {"id": "f1", "title": "Sample", "quantity": 10, "unit_price_usd": 2, "stage": "Lead"},
    ])


# ── Loads ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_empty_table_serves_fixtures(store, workspace):
    loaded = await workspace.clients.load(store)
    assert loaded.origin is DataOrigin.FIXTURE
    assert loaded.reason == "backend_empty"
    assert len(loaded.items) == 5
    assert all(c.is_fixture for c in loaded.items)


@pytest.mark.asyncio
async def test_live_rows_replace_fixtures(store, workspace, test_client_row):
    loaded = await workspace.clients.load(store)
    assert loaded.origin is DataOrigin.LIVE
    assert [c.id for c in loaded.items] == [test_client_row.id]
    assert loaded.items[0].name == "Rhein Apotheken GmbH"


@pytest.mark.asyncio
async def test_backend_error_serves_fixtures(workspace):
    loaded = await workspace.suppliers.load(FailingStore())
    assert loaded.reason == "backend_error"
    assert {s.id for s in loaded.items} == {"sup-001", "sup-002", "sup-003", "sup-004", "sup-005"}


@pytest.mark.asyncio
async def test_get(store, workspace):
    assert (await workspace.requirements.get(store, "req-003")).quantity == 200000
    assert await workspace.requirements.get(store, "nope") is None


def test_workspace_without_fixtures_is_empty():
    ws = Workspace({})
    assert all(book.fixtures == [] for book in ws.books.values())


# ── Creates ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_persists_live(store, workspace):
    result = await workspace.clients.create(store, {"name": "Nordic Pharma", "country": "Sweden"})
    assert result.persisted
    assert result.notice == ""
    assert result.entity.origin is DataOrigin.LIVE
    assert result.entity.name == "Nordic Pharma"
    loaded = await workspace.clients.load(store)
    assert [c.name for c in loaded.items] == ["Nordic Pharma"]


@pytest.mark.asyncio
async def test_create_deal_derives_total_and_activity(store, workspace):
    result = await workspace.deals.create(store, {
        "title": "T", "quantity": 100, "unit_price_usd": 1.5, "total_value_usd": 1, "stage": "lead",
    })
    assert result.entity.total_value_usd == 150
    assert result.entity.last_activity is not None


@pytest.mark.asyncio
async def test_create_failure_is_optimistic(workspace, log_records):
    result = await workspace.clients.create(FailingStore(), {"name": "Nordic Pharma"})
    assert not result.persisted
    assert result.notice == WRITE_FAILED_NOTICE
    assert result.entity.name == "Nordic Pharma"
    assert result.entity.id
    assert log_records[-1]["extra"]["reason"] == "write_failed"


@pytest.mark.asyncio
async def test_local_create_joins_fixtures(store, workspace):
    result = await workspace.requirements.create(
        store, {"client_id": "client-001", "api_name": "Zinc"}, local=True
    )
    assert not result.persisted
    assert result.notice == LOCAL_ONLY_NOTICE
    assert result.entity.is_fixture
    assert workspace.requirements.fixtures[0].api_name == "Zinc"
    assert len(workspace.requirements.fixtures) == 6


# ── Updates / deletes ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fixture_update_never_touches_the_store():
    book = _deal_book()
    store = AsyncMock()
    current = book.fixtures[0]
    result = await book.update(store, current, {"quantity": 20})
    store.update.assert_not_called()
    assert result.notice == LOCAL_ONLY_NOTICE
    assert result.entity.total_value_usd == 40
    assert result.entity.last_activity is not None
    assert book.fixtures[0].quantity == 20


@pytest.mark.asyncio
async def test_live_update_goes_to_store(store, workspace, test_deal_row):
    current = await workspace.deals.get(store, test_deal_row.id)
    result = await workspace.deals.update(store, current, {"quantity": 20000})
    assert result.persisted
    assert result.entity.total_value_usd == 10000
    assert result.entity.stage == "lead"


@pytest.mark.asyncio
async def test_clearing_quantity_clears_total(store, workspace, test_deal_row, db_session):
    current = await workspace.deals.get(store, test_deal_row.id)
    result = await workspace.deals.update(store, current, {"quantity": None})
    assert result.persisted
    assert result.entity.quantity is None
    assert result.entity.total_value_usd is None
    db_session.expire_all()
    assert db_session.get(type(test_deal_row), test_deal_row.id).total_value_usd is None


@pytest.mark.asyncio
async def test_clearing_price_clears_total_on_fixture_deal():
    book = _deal_book()
    result = await book.update(AsyncMock(), book.fixtures[0], {"unit_price_usd": None})
    assert result.entity.total_value_usd is None
    assert book.fixtures[0].total_value_usd is None


@pytest.mark.asyncio
async def test_clearing_quantity_clears_total_when_write_fails(store, workspace, test_deal_row):
    current = await workspace.deals.get(store, test_deal_row.id)
    result = await workspace.deals.update(FailingStore(), current, {"quantity": None})
    assert not result.persisted
    assert result.entity.total_value_usd is None


@pytest.mark.asyncio
async def test_live_update_failure_keeps_edit(store, workspace, test_deal_row):
    current = await workspace.deals.get(store, test_deal_row.id)
    result = await workspace.deals.update(FailingStore(), current, {"priority": "low"})
    assert not result.persisted
    assert result.notice == WRITE_FAILED_NOTICE
    assert result.entity.priority == "low"
    assert result.entity.id == test_deal_row.id


@pytest.mark.asyncio
async def test_update_of_vanished_row_affects_nothing(store, workspace, test_deal_row, db_session):
    current = await workspace.deals.get(store, test_deal_row.id)
    db_session.delete(test_deal_row)
    db_session.commit()
    result = await workspace.deals.update(store, current, {"priority": "low"})
    assert result.affected == 0
    assert result.entity is None


@pytest.mark.asyncio
async def test_unstaged_deal_stays_unstaged_on_unrelated_edit():
    book = EntityBook(EntityType.DEAL, [{"id": "f1", "stage": "qualified"}])
    current = book.fixtures[0]
    assert current.stage is None
    result = await book.update(AsyncMock(), current, {"notes": "call back"})
    assert result.entity.stage is None


@pytest.mark.asyncio
async def test_fixture_delete():
    book = _deal_book()
    result = await book.delete(AsyncMock(), book.fixtures[0])
    assert result.notice == LOCAL_ONLY_NOTICE
    assert book.fixtures == []


@pytest.mark.asyncio
async def test_live_delete(store, workspace, test_client_row):
    current = await workspace.clients.get(store, test_client_row.id)
    result = await workspace.clients.delete(store, current)
    assert result.persisted
    assert (await workspace.clients.load(store)).is_fallback


@pytest.mark.asyncio
async def test_live_delete_failure(store, workspace, test_client_row):
    current = await workspace.clients.get(store, test_client_row.id)
    result = await workspace.clients.delete(FailingStore(), current)
    assert not result.persisted
    assert result.notice == WRITE_FAILED_NOTICE


# ── Bulk ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_bulk_update_splits_by_origin(store, workspace, test_supplier_row):
    live = await workspace.suppliers.get(store, test_supplier_row.id)
    sample = workspace.suppliers.fixtures[0]
    result = await workspace.suppliers.bulk_update(store, [live, sample], {"status": "blocked"})
    assert result.affected == 2
    assert result.persisted
    assert workspace.suppliers.fixtures[0].status == "blocked"
    assert (await workspace.suppliers.get(store, live.id)).status == "blocked"


@pytest.mark.asyncio
async def test_bulk_update_fixtures_only():
    store = AsyncMock()
    ws = Workspace()
    result = await ws.suppliers.bulk_update(store, ws.suppliers.fixtures[:2], {"status": "inactive"})
    store.update_in.assert_not_called()
    assert not result.persisted
    assert result.notice == LOCAL_ONLY_NOTICE
    assert [s.status for s in ws.suppliers.fixtures[:2]] == ["inactive", "inactive"]


@pytest.mark.asyncio
async def test_bulk_delete_failure_still_removes_fixtures(store, workspace, test_supplier_row):
    live = await workspace.suppliers.get(store, test_supplier_row.id)
    sample = workspace.suppliers.fixtures[0]
    result = await workspace.suppliers.bulk_delete(FailingStore(), [live, sample])
    assert not result.persisted
    assert result.notice == WRITE_FAILED_NOTICE
    assert sample.id not in {s.id for s in workspace.suppliers.fixtures}
