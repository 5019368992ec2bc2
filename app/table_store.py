"""Table store — the generic persistence collaborator.

Every entity screen talks to its table through the same six operations:
select-all (newest first), insert-one, update-by-id, delete-by-id, and the
bulk update/delete over a set of ids. Two implementations share this
interface: SqlTableStore (SQLAlchemy session, the default) and
connectors/rest_store.RestTableStore (hosted PostgREST-style backend).

Rows go in and come out as plain dicts keyed by storage column name; mapping
to canonical entities is services/entity_normalizer.py's job.

Business Rules:
- Any backend failure surfaces as StoreError; callers never see driver errors
- update/delete of an id the table doesn't hold return None/False
- Unknown keys in a write payload are ignored, not sent

Called by: services/entity_book.py, dependencies.py, scripts/audit_deal_integrity.py
Depends on: models/, database.py
"""

from typing import Iterable, Protocol

from loguru import logger
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Client, ClientRequirement, Deal, Supplier, SupplierProduct


class StoreError(Exception):
    """The table backend could not complete an operation."""

    def __init__(self, table: str, operation: str, reason: str):
        self.table = table
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} on {table} failed: {reason}")


class TableStore(Protocol):
    async def select_all(self, table: str) -> list[dict]: ...

    async def insert(self, table: str, row: dict) -> dict: ...

    async def update(self, table: str, row_id: str, changes: dict) -> dict | None: ...

    async def delete(self, table: str, row_id: str) -> bool: ...

    async def update_in(self, table: str, ids: Iterable[str], changes: dict) -> int: ...

    async def delete_in(self, table: str, ids: Iterable[str]) -> int: ...


TABLE_MODELS = {
    "clients": Client,
    "client_requirements": ClientRequirement,
    "suppliers": Supplier,
    "supplier_products": SupplierProduct,
    "deals": Deal,
}


def row_to_dict(obj) -> dict:
    return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(obj).mapper.column_attrs}


class SqlTableStore:
    """TableStore over the app's own SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        try:
            return TABLE_MODELS[table]
        except KeyError:
            raise StoreError(table, "lookup", "unknown table") from None

    def _columns(self, model, values: dict) -> dict:
        cols = {attr.key for attr in sa_inspect(model).column_attrs}
        return {k: v for k, v in values.items() if k in cols and k != "id"}

    def _fail(self, table: str, operation: str, exc: Exception) -> StoreError:
        self.db.rollback()
        logger.warning("Store {} on {} failed: {}", operation, table, exc)
        return StoreError(table, operation, str(exc.__class__.__name__))

    async def select_all(self, table: str) -> list[dict]:
        model = self._model(table)
        try:
            rows = self.db.query(model).order_by(model.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise self._fail(table, "select", e) from e
        return [row_to_dict(r) for r in rows]

    async def insert(self, table: str, row: dict) -> dict:
        model = self._model(table)
        obj = model(**self._columns(model, row))
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail(table, "insert", e) from e
        return row_to_dict(obj)

    async def update(self, table: str, row_id: str, changes: dict) -> dict | None:
        model = self._model(table)
        try:
            obj = self.db.get(model, row_id)
            if obj is None:
                return None
            for key, value in self._columns(model, changes).items():
                setattr(obj, key, value)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail(table, "update", e) from e
        return row_to_dict(obj)

    async def delete(self, table: str, row_id: str) -> bool:
        model = self._model(table)
        try:
            obj = self.db.get(model, row_id)
            if obj is None:
                return False
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail(table, "delete", e) from e
        return True

    async def update_in(self, table: str, ids: Iterable[str], changes: dict) -> int:
        model = self._model(table)
        ids = list(ids)
        if not ids:
            return 0
        try:
            objs = self.db.query(model).filter(model.id.in_(ids)).all()
            values = self._columns(model, changes)
            for obj in objs:
                for key, value in values.items():
                    setattr(obj, key, value)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail(table, "update_in", e) from e
        return len(objs)

    async def delete_in(self, table: str, ids: Iterable[str]) -> int:
        model = self._model(table)
        ids = list(ids)
        if not ids:
            return 0
        try:
            objs = self.db.query(model).filter(model.id.in_(ids)).all()
            for obj in objs:
                self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail(table, "delete_in", e) from e
        return len(objs)
