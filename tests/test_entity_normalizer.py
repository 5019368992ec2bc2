"""
test_entity_normalizer.py — Tests for services/entity_normalizer.py

Alias precedence, defaults, dropped rows, deal totals and stages, and the
reverse mapping used by writes.

Called by: pytest
Depends on: app/services/entity_normalizer.py, app/fixtures.py
"""

from datetime import datetime, timezone

from app.fixtures import FIXTURES
from app.schemas.entities import DataOrigin, EntityType
from app.services.entity_normalizer import (
    compute_commission,
    compute_total,
    normalize,
    normalize_many,
    to_row,
)


# ── Clients / suppliers ──────────────────────────────────────────────


def test_client_legacy_aliases():
    c = normalize(EntityType.CLIENT, {
        "id": "c1",
        "company_name": "Acme Pharma",
        "contact_person": "Jo Bloggs",
        "email": "jo@acme.test",
        "phone": "+1-555",
        "industry": "distribution",
    })
    assert c.name == "Acme Pharma"
    assert c.contact_name == "Jo Bloggs"
    assert c.contact_email == "jo@acme.test"
    assert c.contact_phone == "+1-555"
    assert c.segment == "distribution"
    assert c.origin is DataOrigin.LIVE


def test_canonical_name_wins_over_alias():
    c = normalize(EntityType.CLIENT, {"id": "c1", "name": "New", "company_name": "Old"})
    assert c.name == "New"


def test_null_canonical_falls_through_to_alias():
    c = normalize(EntityType.CLIENT, {"id": "c1", "name": None, "company_name": "Old"})
    assert c.name == "Old"


def test_missing_optional_fields_take_defaults():
    c = normalize(EntityType.CLIENT, {"id": "c1"})
    assert c.name == "Client"
    assert c.status == "active"
    assert c.country == ""
    assert c.created_at is None


def test_supplier_location_alias():
    s = normalize(EntityType.SUPPLIER, {"id": "s1", "location": "London, UK", "status": " Active "})
    assert s.country == "London, UK"
    assert s.status == "active"
    assert s.name == "Supplier"


# ── Requirements / products ──────────────────────────────────────────


def test_requirement_annual_volume_alias():
    r = normalize(EntityType.REQUIREMENT, {"id": "r1", "client_id": "c1", "annual_volume": "10,000"})
    assert r.quantity == 10000.0


def test_requirement_without_client_is_dropped(log_records):
    assert normalize(EntityType.REQUIREMENT, {"id": "r1"}) is None
    assert log_records[-1]["extra"]["reason"] == "missing_client_id"


def test_negative_amount_becomes_none():
    r = normalize(EntityType.REQUIREMENT, {"id": "r1", "client_id": "c1", "budget_usd": -5})
    assert r.budget_usd is None


def test_zero_quantity_is_kept():
    r = normalize(EntityType.REQUIREMENT, {"id": "r1", "client_id": "c1", "quantity": 0})
    assert r.quantity == 0


def test_product_counts_truncate():
    p = normalize(EntityType.PRODUCT, {
        "id": "p1", "supplier_id": "s1", "unit_price": "$0.45", "moq": "10,000", "lead_time_days": 12.7,
    })
    assert p.unit_price_usd == 0.45
    assert p.moq == 10000
    assert p.lead_time_days == 12


# ── Missing ids ──────────────────────────────────────────────────────


def test_row_without_id_is_dropped_and_logged(log_records):
    assert normalize(EntityType.SUPPLIER, {"name": "Ghost"}) is None
    rec = log_records[-1]
    assert rec["level"].name == "WARNING"
    assert rec["extra"]["entity"] == "supplier"
    assert rec["extra"]["reason"] == "missing_id"


def test_blank_id_is_dropped():
    assert normalize(EntityType.CLIENT, {"id": "   "}) is None


def test_normalize_many_keeps_good_rows_in_order():
    rows = [{"id": "b"}, {"name": "no id"}, {"id": "a"}]
    result = normalize_many(EntityType.CLIENT, rows)
    assert [c.id for c in result] == ["b", "a"]


def test_normalize_many_handles_none():
    assert normalize_many(EntityType.CLIENT, None) == []


def test_numeric_ids_become_strings():
    d = normalize(EntityType.DEAL, {"id": 7})
    assert d.id == "7"


# ── Deals ────────────────────────────────────────────────────────────


def test_deal_value_alias_when_no_operands():
    d = normalize(EntityType.DEAL, {"id": "d1", "deal_value": 125000, "commission_rate": 0.05})
    assert d.total_value_usd == 125000
    assert d.commission_usd == 6250


def test_deal_total_is_derived_from_operands():
    d = normalize(EntityType.DEAL, {
        "id": "d1", "quantity": 100, "unit_price_usd": 2.5, "total_value_usd": 999,
    })
    assert d.total_value_usd == 250


def test_deal_total_unknown_without_operands_or_stored_value():
    d = normalize(EntityType.DEAL, {"id": "d1", "quantity": 100})
    assert d.total_value_usd is None
    assert d.commission_usd is None


def test_deal_zero_quantity_gives_zero_total():
    d = normalize(EntityType.DEAL, {"id": "d1", "quantity": 0, "unit_price_usd": 3})
    assert d.total_value_usd == 0


def test_deal_stage_is_canonicalized():
    d = normalize(EntityType.DEAL, {"id": "d1", "stage": "  Negotiation "})
    assert d.stage == "negotiation"


def test_deal_missing_stage_defaults_to_lead():
    assert normalize(EntityType.DEAL, {"id": "d1"}).stage == "lead"
    assert normalize(EntityType.DEAL, {"id": "d2", "stage": ""}).stage == "lead"


def test_deal_unknown_stage_is_left_unstaged(log_records):
    d = normalize(EntityType.DEAL, {"id": "d1", "stage": "closed_won"})
    assert d is not None
    assert d.stage is None
    assert log_records[-1]["extra"]["reason"] == "unknown_stage"


def test_deal_last_activity_falls_back_to_updated_at():
    d = normalize(EntityType.DEAL, {
        "id": "d1", "updated_at": "2025-01-02T03:04:05Z", "created_at": "2024-01-01T00:00:00Z",
    })
    assert d.last_activity == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_deal_title_feeds_product_name_fallback():
    d = normalize(EntityType.DEAL, {"id": "d1", "title": "Metformin - Global Meds"})
    assert d.product_name == "Metformin - Global Meds"
    assert normalize(EntityType.DEAL, {"id": "d2"}).product_name == "Product"


def test_fixture_origin_is_tagged():
    deals = normalize_many(EntityType.DEAL, FIXTURES[EntityType.DEAL], DataOrigin.FIXTURE)
    assert [d.stage for d in deals] == ["negotiation", "contract", "closed"]
    assert all(d.is_fixture for d in deals)
    assert deals[0].priority == "high"


def test_all_fixtures_normalize():
    for entity_type, rows in FIXTURES.items():
        assert len(normalize_many(entity_type, rows, DataOrigin.FIXTURE)) == len(rows)


# ── Helpers / reverse mapping ────────────────────────────────────────


def test_compute_total():
    assert compute_total(None, 2) is None
    assert compute_total(3, None) is None
    assert compute_total(0, 2) == 0
    assert compute_total(4, 2.5) == 10


def test_compute_commission():
    assert compute_commission(None, 0.05) is None
    assert compute_commission(1000, None) is None
    assert compute_commission(1000, 0.05) == 50


def test_to_row_renames_and_drops():
    row = to_row(EntityType.DEAL, {
        "id": "x",
        "origin": "fixture",
        "created_at": "2025-01-01",
        "title": "T",
        "stage": "lead",
        "commission_usd": 5,
        "last_activity": "2025-01-02",
        "bogus": 1,
    })
    assert row == {"title": "T", "stage": "lead", "updated_at": "2025-01-02"}


def test_to_row_requirement_quantity():
    assert to_row(EntityType.REQUIREMENT, {"quantity": 5, "client_id": "c1"}) == {
        "annual_volume": 5,
        "client_id": "c1",
    }
