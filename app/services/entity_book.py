"""Entity books — one per entity type, owning the list a screen works on.

A book loads its table through the fallback policy and hands back canonical
entities. It also owns the fixture rows: they are normalized once, tagged
DataOrigin.FIXTURE, and kept in memory keyed by id. Writes are routed by that
tag, never by the shape of an id:

  - fixture entity → mutate the in-memory fixture list only
  - live entity    → table store; if the store fails, the caller still gets
                     the optimistic result plus a notice that the backend
                     write did not happen

Business Rules:
- Bulk updates/deletes split the selection by origin and handle each half
- Deal updates stamp last_activity and keep total = quantity × unit price
- StoreError never escapes a write; it becomes WriteResult(persisted=False)
- Every list call re-fetches; books do not cache live rows

Called by: routers/*, services/deal_service.py, services/supplier_service.py
Depends on: services/fallback_policy.py, services/entity_normalizer.py, table_store.py
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from loguru import logger

from app.fixtures import FIXTURES
from app.schemas.entities import DataOrigin, Entity, EntityType
from app.services import fallback_policy
from app.services.entity_normalizer import compute_total, normalize, normalize_many, to_row
from app.table_store import StoreError, TableStore

WRITE_FAILED_NOTICE = (
    "The change is shown here but could not be saved to the backend. "
    "It will be lost on reload; please try again."
)
LOCAL_ONLY_NOTICE = "Sample data: the change is kept in memory and not saved to the backend."


@dataclass
class WriteResult:
    entity: Entity | None = None
    persisted: bool = True
    notice: str = ""
    affected: int = 1


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EntityBook:
    def __init__(self, entity_type: EntityType, fixture_rows: Iterable[dict] = ()):
        self.entity_type = entity_type
        self.table = entity_type.table
        self._fixtures: dict[str, Entity] = {
            e.id: e for e in normalize_many(entity_type, fixture_rows, DataOrigin.FIXTURE)
        }

    # ── Reads ────────────────────────────────────────────────────────

    @property
    def fixtures(self) -> list[Entity]:
        return list(self._fixtures.values())

    async def load(self, store: TableStore) -> fallback_policy.LoadResult:
        async def fetch():
            return normalize_many(
                self.entity_type, await store.select_all(self.table), DataOrigin.LIVE
            )

        return await fallback_policy.load(fetch, self.fixtures, entity=self.entity_type.value)

    async def list(self, store: TableStore) -> list[Entity]:
        return (await self.load(store)).items

    async def get(self, store: TableStore, entity_id: str) -> Entity | None:
        for entity in await self.list(store):
            if entity.id == entity_id:
                return entity
        return None

    # ── Helpers ──────────────────────────────────────────────────────

    def _derive(self, merged: dict, changes: dict) -> dict:
        """Deal writes: stamp activity, re-derive the total from its operands."""
        if self.entity_type is not EntityType.DEAL:
            return changes
        changes = {**changes, "last_activity": _now()}
        total = compute_total(merged.get("quantity"), merged.get("unit_price_usd"))
        # a cleared operand clears the total too
        if total is not None or "quantity" in changes or "unit_price_usd" in changes:
            changes["total_value_usd"] = total
        return changes

    def _rebuild(self, base: dict, origin: DataOrigin) -> Entity | None:
        entity = normalize(self.entity_type, base, origin)
        if entity is not None and self.entity_type is EntityType.DEAL:
            # an unstaged legacy deal stays unstaged until a stage is chosen
            if base.get("stage") is None:
                entity = entity.model_copy(update={"stage": None})
        return entity

    def _optimistic(self, base: dict) -> Entity | None:
        return self._rebuild(base, DataOrigin.LIVE)

    def _write_failed(self, operation: str, e: StoreError, **extra) -> None:
        logger.warning(
            "{} {} not persisted: {}", operation, self.entity_type.value, e,
            entity=self.entity_type.value, reason="write_failed", **extra,
        )

    # ── Writes ───────────────────────────────────────────────────────

    async def create(
        self, store: TableStore, values: dict, *, local: bool = False
    ) -> WriteResult:
        """Insert one entity. local=True keeps it with the fixture data."""
        values = self._derive(values, dict(values))
        draft = {**values, "id": str(uuid.uuid4()), "created_at": _now()}

        if local:
            entity = self._rebuild(draft, DataOrigin.FIXTURE)
            self._fixtures = {entity.id: entity, **self._fixtures}
            return WriteResult(entity, persisted=False, notice=LOCAL_ONLY_NOTICE)

        try:
            row = await store.insert(self.table, to_row(self.entity_type, values))
        except StoreError as e:
            self._write_failed("Create", e)
            return WriteResult(self._optimistic(draft), persisted=False, notice=WRITE_FAILED_NOTICE)
        logger.info("Created {} {}", self.entity_type.value, row.get("id"))
        return WriteResult(normalize(self.entity_type, row, DataOrigin.LIVE))

    async def update(self, store: TableStore, current: Entity, changes: dict) -> WriteResult:
        merged = {**current.model_dump(), **changes}
        changes = self._derive(merged, changes)
        merged.update(changes)

        if current.is_fixture:
            entity = self._rebuild(merged, DataOrigin.FIXTURE)
            self._fixtures[current.id] = entity
            return WriteResult(entity, persisted=False, notice=LOCAL_ONLY_NOTICE)

        try:
            row = await store.update(self.table, current.id, to_row(self.entity_type, changes))
        except StoreError as e:
            self._write_failed("Update", e, id=current.id)
            return WriteResult(self._optimistic(merged), persisted=False, notice=WRITE_FAILED_NOTICE)
        if row is None:
            return WriteResult(None, persisted=False, affected=0)
        return WriteResult(normalize(self.entity_type, row, DataOrigin.LIVE))

    async def delete(self, store: TableStore, current: Entity) -> WriteResult:
        if current.is_fixture:
            self._fixtures.pop(current.id, None)
            return WriteResult(current, persisted=False, notice=LOCAL_ONLY_NOTICE)

        try:
            await store.delete(self.table, current.id)
        except StoreError as e:
            self._write_failed("Delete", e, id=current.id)
            return WriteResult(current, persisted=False, notice=WRITE_FAILED_NOTICE)
        logger.info("Deleted {} {}", self.entity_type.value, current.id)
        return WriteResult(current)

    async def bulk_update(
        self, store: TableStore, selected: Iterable[Entity], changes: dict
    ) -> WriteResult:
        fixtures, live = _split(selected)
        for entity in fixtures:
            self._fixtures[entity.id] = self._rebuild(
                {**entity.model_dump(), **changes}, DataOrigin.FIXTURE
            )

        notice = LOCAL_ONLY_NOTICE if fixtures and not live else ""
        persisted = bool(live)
        if live:
            try:
                await store.update_in(
                    self.table, [e.id for e in live], to_row(self.entity_type, changes)
                )
            except StoreError as e:
                self._write_failed("Bulk update", e, count=len(live))
                persisted, notice = False, WRITE_FAILED_NOTICE
        return WriteResult(None, persisted, notice, affected=len(fixtures) + len(live))

    async def bulk_delete(self, store: TableStore, selected: Iterable[Entity]) -> WriteResult:
        fixtures, live = _split(selected)
        for entity in fixtures:
            self._fixtures.pop(entity.id, None)

        notice = LOCAL_ONLY_NOTICE if fixtures and not live else ""
        persisted = bool(live)
        if live:
            try:
                await store.delete_in(self.table, [e.id for e in live])
            except StoreError as e:
                self._write_failed("Bulk delete", e, count=len(live))
                persisted, notice = False, WRITE_FAILED_NOTICE
        return WriteResult(None, persisted, notice, affected=len(fixtures) + len(live))


def _split(selected: Iterable[Entity]) -> tuple[list[Entity], list[Entity]]:
    fixtures, live = [], []
    for entity in selected:
        (fixtures if entity.is_fixture else live).append(entity)
    return fixtures, live


class Workspace:
    """The five entity books the app works with. Lives on app.state."""

    def __init__(self, fixture_rows: dict[EntityType, list[dict]] | None = None):
        rows = FIXTURES if fixture_rows is None else fixture_rows
        self.books = {t: EntityBook(t, rows.get(t, [])) for t in EntityType}

    def book(self, entity_type: EntityType) -> EntityBook:
        return self.books[entity_type]

    @property
    def clients(self) -> EntityBook:
        return self.books[EntityType.CLIENT]

    @property
    def requirements(self) -> EntityBook:
        return self.books[EntityType.REQUIREMENT]

    @property
    def suppliers(self) -> EntityBook:
        return self.books[EntityType.SUPPLIER]

    @property
    def products(self) -> EntityBook:
        return self.books[EntityType.PRODUCT]

    @property
    def deals(self) -> EntityBook:
        return self.books[EntityType.DEAL]
