"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for the caller's capability context, the
table store, and the entity books. All routers import from here instead of
building their own.

Business Rules:
- get_user_context reads the X-User-Role header; absent → settings.default_role
- Roles are "editor" and "viewer"; anything else is rejected with 400
- require_editor raises 403 for viewers (every mutating route depends on it)
- get_store returns the REST store when store_backend == "rest", otherwise a
  SqlTableStore over the request's DB session
- get_workspace returns the process-wide Workspace held on app.state
- load_or_404 resolves an id through an entity book (live or sample data)

Called by: all routers
Depends on: config, database, table_store, connectors/rest_store, services/entity_book
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import settings
from .connectors.rest_store import RestTableStore
from .database import get_db
from .services.entity_book import EntityBook, Workspace
from .table_store import SqlTableStore, TableStore

ROLES = ("editor", "viewer")


# ── Capability context ────────────────────────────────────────────────


@dataclass(frozen=True)
class UserContext:
    role: str = "editor"

    @property
    def can_edit(self) -> bool:
        return self.role == "editor"


def get_user_context(request: Request) -> UserContext:
    role = (request.headers.get("x-user-role") or settings.default_role).strip().lower()
    if role not in ROLES:
        raise HTTPException(400, f"Unknown role {role!r}; expected one of: {', '.join(ROLES)}")
    return UserContext(role=role)


def require_editor(ctx: UserContext = Depends(get_user_context)) -> UserContext:
    """Dependency: raises 403 unless the caller may change data."""
    if not ctx.can_edit:
        raise HTTPException(403, "Read-only access: editing requires the editor role")
    return ctx


# ── Store & workspace ─────────────────────────────────────────────────


def get_store(db: Session = Depends(get_db)) -> TableStore:
    if settings.store_backend == "rest":
        return RestTableStore(
            settings.rest_url, settings.rest_api_key, timeout=settings.rest_timeout_seconds
        )
    return SqlTableStore(db)


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace


async def load_or_404(book: EntityBook, store: TableStore, entity_id: str, label: str):
    """Fetch one entity through its book, or raise 404."""
    entity = await book.get(store, entity_id)
    if entity is None:
        raise HTTPException(404, f"{label} not found")
    return entity
