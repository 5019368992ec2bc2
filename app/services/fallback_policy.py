"""Fallback Policy — live rows when the backend has them, fixtures otherwise.

One decision per list load:
  - fetch raises          → fixtures, reason "backend_error"
  - fetch returns nothing → fixtures, reason "backend_empty"
  - fetch returns rows    → live rows, reason "live"

Both fallback paths log a WARNING that names which one happened. load()
never raises; a failed read must not take a screen down.

Called by: services/entity_book.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Sequence

from loguru import logger

from app.schemas.entities import DataOrigin

LIVE = "live"
BACKEND_ERROR = "backend_error"
BACKEND_EMPTY = "backend_empty"


@dataclass
class LoadResult:
    items: list = field(default_factory=list)
    origin: DataOrigin = DataOrigin.LIVE
    reason: str = LIVE

    @property
    def is_fallback(self) -> bool:
        return self.origin is DataOrigin.FIXTURE


async def load(
    fetch: Callable[[], Awaitable[Sequence]],
    fixtures: Sequence,
    *,
    entity: str = "",
) -> LoadResult:
    try:
        rows = await fetch()
    except Exception as e:
        logger.warning(
            "Loading {} failed (backend error), using fixture data: {}", entity, e,
            entity=entity, reason=BACKEND_ERROR,
        )
        return LoadResult(list(fixtures), DataOrigin.FIXTURE, BACKEND_ERROR)

    if not rows:
        logger.warning(
            "No {} rows returned (backend empty), using fixture data", entity,
            entity=entity, reason=BACKEND_EMPTY,
        )
        return LoadResult(list(fixtures), DataOrigin.FIXTURE, BACKEND_EMPTY)

    return LoadResult(list(rows), DataOrigin.LIVE, LIVE)
