"""Deal stage canonicalization.

The deals table only accepts lead | negotiation | contract | closed (CHECK
constraint ck_deals_stage). Input is lower-cased and trimmed; anything else
is rejected, never mapped to a default, so a bad value can't overwrite a
real pipeline position. The retired six-stage set (qualified, closed_won,
closed_lost) is rejected like any other unknown value.

Called by: services/entity_normalizer.py, services/deal_synthesizer.py,
           services/deal_service.py, scripts/audit_deal_integrity.py
Depends on: models/deals.py (DEAL_STAGES)
"""

from typing import Any

from app.models.deals import DEAL_STAGES

STAGES = DEAL_STAGES

LEGACY_STAGES = frozenset({"qualified", "closed_won", "closed_lost"})


class InvalidStageError(ValueError):
    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(
            f"Invalid deal stage {raw!r}; expected one of: {', '.join(STAGES)}"
        )


def normalize_stage(raw: Any) -> str:
    if not isinstance(raw, str):
        raise InvalidStageError(raw)
    stage = raw.strip().lower()
    if stage not in STAGES:
        raise InvalidStageError(raw)
    return stage


def is_valid_stage(raw: Any) -> bool:
    try:
        normalize_stage(raw)
    except InvalidStageError:
        return False
    return True
