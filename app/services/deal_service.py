"""services/deal_service.py -- Deal pipeline: filters, stats, kanban, stage moves.

Business Rules:
- Search matches client, supplier or product name (case-insensitive substring)
- Value filters compare against total_value_usd; deals with no total never
  pass a min/max filter
- Date filters compare the created_at calendar date, inclusive on both ends
- Stats and kanban columns follow pipeline order; legacy rows whose stored
  stage is not in the vocabulary are counted under "unstaged"
- Stage moves go through the stage normalizer before any write

Called by: routers/deals.py
Depends on: services/entity_book.py, services/stage_normalizer.py
"""

from typing import Iterable

from app.schemas.deals import DealFilters
from app.schemas.entities import Deal
from app.services.entity_book import EntityBook, WriteResult
from app.services.stage_normalizer import STAGES, normalize_stage
from app.table_store import TableStore

UNSTAGED = "unstaged"


def filter_deals(deals: Iterable[Deal], filters: DealFilters) -> list[Deal]:
    term = filters.search.strip().lower()
    result = []
    for deal in deals:
        if term and not any(
            term in (name or "").lower()
            for name in (deal.client_name, deal.supplier_name, deal.product_name)
        ):
            continue
        if filters.stage and deal.stage != filters.stage:
            continue
        if filters.priority and deal.priority != filters.priority:
            continue
        if filters.min_value is not None and (
            deal.total_value_usd is None or deal.total_value_usd < filters.min_value
        ):
            continue
        if filters.max_value is not None and (
            deal.total_value_usd is None or deal.total_value_usd > filters.max_value
        ):
            continue
        if filters.start_date or filters.end_date:
            if deal.created_at is None:
                continue
            created = deal.created_at.date()
            if filters.start_date and created < filters.start_date:
                continue
            if filters.end_date and created > filters.end_date:
                continue
        result.append(deal)
    return result


def _bucket(deal: Deal) -> str:
    return deal.stage if deal.stage in STAGES else UNSTAGED


def pipeline_stats(deals: Iterable[Deal]) -> dict:
    """Count, pipeline value and expected commission, overall and per stage."""
    by_stage = {stage: {"count": 0, "value_usd": 0.0} for stage in (*STAGES, UNSTAGED)}
    count = 0
    total_value = 0.0
    commission = 0.0
    for deal in deals:
        count += 1
        value = deal.total_value_usd or 0.0
        total_value += value
        commission += deal.commission_usd or 0.0
        bucket = by_stage[_bucket(deal)]
        bucket["count"] += 1
        bucket["value_usd"] += value
    return {
        "count": count,
        "pipeline_value_usd": round(total_value, 2),
        "expected_commission_usd": round(commission, 2),
        "by_stage": [
            {"stage": stage, "count": b["count"], "value_usd": round(b["value_usd"], 2)}
            for stage, b in by_stage.items()
        ],
    }


def kanban(deals: Iterable[Deal]) -> dict[str, list[Deal]]:
    columns: dict[str, list[Deal]] = {stage: [] for stage in (*STAGES, UNSTAGED)}
    for deal in deals:
        columns[_bucket(deal)].append(deal)
    return columns


async def change_stage(
    book: EntityBook, store: TableStore, deal: Deal, raw_stage: str
) -> WriteResult:
    """Move a deal to another pipeline stage. Raises InvalidStageError."""
    stage = normalize_stage(raw_stage)
    return await book.update(store, deal, {"stage": stage})
