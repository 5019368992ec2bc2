"""
test_match_scorer.py — Tests for services/match_scorer.py

Called by: pytest
Depends on: app/services/match_scorer.py
"""

import pytest

from app.schemas.entities import Client, Product, Requirement, Supplier
from app.services import match_scorer
from app.services.match_scorer import score, score_breakdown


def _req(**kw):
    base = dict(
        id="r1", client_id="c1", api_name="Amoxicillin Trihydrate", dosage_form="capsule",
        strength="250mg", quantity=200000, budget_usd=25000,
    )
    return Requirement(**{**base, **kw})


def _prod(**kw):
    base = dict(
        id="p1", supplier_id="s1", api_name="Amoxicillin Trihydrate", dosage_form="capsule",
        strength="250mg", unit_price_usd=0.10,
    )
    return Product(**{**base, **kw})


CLIENT = Client(id="c1", name="Buyer", country="Germany")
SUPPLIER = Supplier(id="s1", name="Seller", country="Germany")


# ── Scenarios ────────────────────────────────────────────────────────


def test_perfect_match_scores_100():
    b = score_breakdown(_req(), _prod(), SUPPLIER, CLIENT)
    assert b.total == 100
    assert b.max_unit_price == pytest.approx(0.125)
    assert b.differentiators == [
        "Exact API match", "Same dosage form", "Same strength", "Same country", "Within budget",
    ]


def test_dosage_mismatch_scores_80():
    assert score(_req(), _prod(dosage_form="tablet"), SUPPLIER, CLIENT) == 80


def test_nothing_in_common_scores_0():
    assert score(
        _req(budget_usd=None),
        _prod(api_name="Ibuprofen", dosage_form="tablet", strength="400mg"),
        Supplier(id="s1", country="India"),
        CLIENT,
    ) == 0


# ── Individual factors ───────────────────────────────────────────────


def test_api_name_is_case_and_space_insensitive():
    assert match_scorer.score_api_name("  amoxicillin TRIHYDRATE ", "Amoxicillin Trihydrate") == 50


def test_api_name_partial_requires_product_to_contain_requirement():
    assert match_scorer.score_api_name("Amoxicillin", "Amoxicillin Trihydrate") == 30
    assert match_scorer.score_api_name("Amoxicillin Trihydrate", "Amoxicillin") == 0


def test_dosage_form_partial():
    assert match_scorer.score_dosage_form("tablet", "film-coated tablet") == 10
    assert match_scorer.score_dosage_form("Capsule", "capsule") == 20


def test_missing_fields_score_zero():
    assert match_scorer.score_api_name("", "Amoxicillin") == 0
    assert match_scorer.score_dosage_form("capsule", "") == 0
    assert match_scorer.score_strength("", "") == 0
    assert match_scorer.score_geography("", "") == 0


def test_strength_has_no_partial_credit():
    assert match_scorer.score_strength("250mg", "250 mg") == 0
    assert match_scorer.score_strength("250MG", "250mg") == 15


def test_geography_compares_as_stored():
    assert match_scorer.score_geography("Germany", "Germany") == 10
    assert match_scorer.score_geography("Germany", "germany") == 0


def test_budget_needs_positive_quantity():
    assert match_scorer.max_unit_price(25000, 0) is None
    assert match_scorer.max_unit_price(25000, None) is None
    assert match_scorer.max_unit_price(None, 100) is None
    b = score_breakdown(_req(quantity=0), _prod(), SUPPLIER, CLIENT)
    assert b.budget == 0
    assert b.max_unit_price is None


def test_price_above_ceiling_gets_no_budget_points():
    assert match_scorer.score_budget(0.2, 0.125) == 0
    assert match_scorer.score_budget(0.125, 0.125) == 5
    assert match_scorer.score_budget(None, 0.125) == 0


def test_missing_supplier_or_client_scores_no_geography():
    assert score_breakdown(_req(), _prod(), None, CLIENT).geography == 0
    assert score_breakdown(_req(), _prod(), SUPPLIER, None).geography == 0


def test_related_api_differentiator():
    b = score_breakdown(_req(api_name="Amoxicillin"), _prod(), SUPPLIER, CLIENT)
    assert b.api_name == 30
    assert b.differentiators[0] == "Related API"


# ── Properties ───────────────────────────────────────────────────────


def test_score_is_bounded():
    for product in (_prod(), _prod(api_name="x"), _prod(unit_price_usd=None)):
        assert 0 <= score(_req(), product, SUPPLIER, CLIENT) <= 100


def test_improving_a_factor_never_lowers_the_score():
    worse = score(_req(), _prod(strength="500mg"), SUPPLIER, CLIENT)
    better = score(_req(), _prod(), SUPPLIER, CLIENT)
    assert better >= worse


def test_scoring_is_deterministic():
    assert score(_req(), _prod(), SUPPLIER, CLIENT) == score(_req(), _prod(), SUPPLIER, CLIENT)


def test_to_dict_shape():
    d = score_breakdown(_req(), _prod(), SUPPLIER, CLIENT).to_dict()
    assert d["score"] == 100
    assert d["components"] == {
        "api_name": 50, "dosage_form": 20, "strength": 15, "geography": 10, "budget": 5,
    }
    assert d["max_unit_price"] == 0.125
