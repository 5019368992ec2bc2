"""Deterministic value normalization — pure Python.

Cleans raw column values coming from the table backend or fixture data
before they land in canonical entity snapshots:
  - Text: None → "", surrounding whitespace stripped
  - Amounts: "$1,234.56" → 1234.56, "25000" → 25000.0
  - Counts: "10,000" → 10000, 12.0 → 12
  - Timestamps: "2024-01-15T08:30:00Z" → aware datetime

Design: Prefer less data if it means better data. Return None for ambiguous
or negative numerics; zero is a real value and is kept.
"""

import re
from datetime import datetime, timezone
from typing import Any

from . import safe_float

_AMOUNT_NOISE = re.compile(r"[\s,$]|\bUSD\b", flags=re.IGNORECASE)


def normalize_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def fold(raw: Any) -> str:
    """Comparison key: trimmed and lower-cased ("  Capsule " → "capsule")."""
    return normalize_text(raw).lower()


def normalize_amount(raw: Any) -> float | None:
    """Parse a money/quantity amount. Negative or unparseable → None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        val = float(raw)
    else:
        s = _AMOUNT_NOISE.sub("", str(raw))
        if not s:
            return None
        val = safe_float(s)
        if val is None:
            return None
    if val != val or val < 0:  # NaN or negative
        return None
    return val


def normalize_count(raw: Any) -> int | None:
    """Whole-unit count (MOQ, lead time days). Fractions are truncated."""
    val = normalize_amount(raw)
    if val is None or val == float("inf"):
        return None
    return int(val)


def normalize_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        try:
            dt = datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
