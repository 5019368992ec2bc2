"""
test_stage_normalizer.py — Tests for services/stage_normalizer.py

Called by: pytest
Depends on: app/services/stage_normalizer.py
"""

import pytest

from app.models.deals import DEAL_STAGES
from app.services.stage_normalizer import (
    STAGES,
    InvalidStageError,
    is_valid_stage,
    normalize_stage,
)


def test_vocabulary_matches_table_constraint():
    assert STAGES == ("lead", "negotiation", "contract", "closed")
    assert STAGES == DEAL_STAGES


@pytest.mark.parametrize("raw,expected", [
    ("lead", "lead"),
    ("Negotiation", "negotiation"),
    ("  CONTRACT ", "contract"),
    ("closed\n", "closed"),
])
def test_case_and_whitespace_are_normalized(raw, expected):
    assert normalize_stage(raw) == expected


@pytest.mark.parametrize("raw", ["qualified", "closed_won", "closed_lost", "won", "", "  ", None, 3])
def test_anything_else_is_rejected(raw):
    with pytest.raises(InvalidStageError):
        normalize_stage(raw)
    assert not is_valid_stage(raw)


def test_error_names_the_value_and_the_vocabulary():
    with pytest.raises(InvalidStageError) as exc:
        normalize_stage("Closed Won")
    assert exc.value.raw == "Closed Won"
    assert "'Closed Won'" in str(exc.value)
    assert "lead, negotiation, contract, closed" in str(exc.value)


def test_error_is_a_value_error():
    assert issubclass(InvalidStageError, ValueError)
