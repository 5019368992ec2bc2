#!/usr/bin/env python3
"""Audit & fix deal pipeline integrity in the PharmaBroker database.

Run read-only (default):
    PYTHONPATH=. python scripts/audit_deal_integrity.py

Run with fixes:
    PYTHONPATH=. python scripts/audit_deal_integrity.py --fix

Checks:
  - deals.stage outside lead/negotiation/contract/closed, split into
    mis-cased (fixable), retired six-stage values, and unknown
  - deals.total_value_usd != quantity × unit_price_usd
  - negative amounts on deals, requirements and products

--fix only lower-cases mis-cased stages and re-derives totals. Retired and
unknown stages are reported, never rewritten: picking a stage for them is a
business decision.
"""

import argparse
import json
import sys
from datetime import datetime, timezone

from sqlalchemy import create_engine, text

from app.config import settings
from app.services.stage_normalizer import LEGACY_STAGES, STAGES, InvalidStageError, normalize_stage

TOTAL_TOLERANCE = 0.005

NEGATIVE_CHECKS = [
    ("deal_negative_amount", "deals", ("quantity", "unit_price_usd", "total_value_usd")),
    ("req_negative_amount", "client_requirements", ("annual_volume", "budget_usd")),
    ("product_negative_amount", "supplier_products", ("unit_price_usd", "moq", "lead_time_days")),
]


def get_engine():
    url = settings.database_url
    if not url:
        print("ERROR: DATABASE_URL not configured")
        sys.exit(1)
    return create_engine(url)


def classify_stage(raw) -> str:
    """ok | miscased | legacy | unknown"""
    if isinstance(raw, str) and raw in STAGES:
        return "ok"
    try:
        normalize_stage(raw)
        return "miscased"
    except InvalidStageError:
        pass
    if isinstance(raw, str) and raw.strip().lower() in LEGACY_STAGES:
        return "legacy"
    return "unknown"


def audit(engine, fix: bool = False) -> dict:
    """Run all checks and optionally fix issues. Returns a report dict."""
    report = {"timestamp": datetime.now(timezone.utc).isoformat(), "checks": [], "fixed": 0}

    with engine.connect() as conn:
        # ── 1. Deals: stage outside the vocabulary ──
        rows = conn.execute(text("SELECT id, stage FROM deals")).fetchall()
        by_kind = {"miscased": [], "legacy": [], "unknown": []}
        for r in rows:
            kind = classify_stage(r[1])
            if kind != "ok":
                by_kind[kind].append(r)
        for kind, bad in by_kind.items():
            report["checks"].append({"name": f"deal_stage_{kind}", "count": len(bad)})
            if kind == "legacy" and bad:
                print(f"  {len(bad)} deals still on retired stages: "
                      f"{sorted({r[1] for r in bad})}")
        if fix and by_kind["miscased"]:
            for r in by_kind["miscased"]:
                conn.execute(
                    text("UPDATE deals SET stage = :v WHERE id = :id"),
                    {"v": normalize_stage(r[1]), "id": r[0]},
                )
            conn.commit()
            report["fixed"] += len(by_kind["miscased"])
            print(f"  Fixed {len(by_kind['miscased'])} mis-cased deal stages")

        # ── 2. Deals: total != quantity × unit price ──
        rows = conn.execute(text(
            "SELECT id, quantity, unit_price_usd, total_value_usd FROM deals "
            "WHERE quantity IS NOT NULL AND unit_price_usd IS NOT NULL"
        )).fetchall()
        bad = [
            r for r in rows
            if r[3] is None or abs(r[3] - r[1] * r[2]) > TOTAL_TOLERANCE
        ]
        report["checks"].append({"name": "deal_total_mismatch", "count": len(bad)})
        if fix and bad:
            for r in bad:
                conn.execute(
                    text("UPDATE deals SET total_value_usd = :v WHERE id = :id"),
                    {"v": r[1] * r[2], "id": r[0]},
                )
            conn.commit()
            report["fixed"] += len(bad)
            print(f"  Fixed {len(bad)} deal totals (set to quantity × unit price)")

        # ── 3. Negative amounts (report only) ──
        for name, table, columns in NEGATIVE_CHECKS:
            where = " OR ".join(f"{c} < 0" for c in columns)
            rows = conn.execute(text(f"SELECT id FROM {table} WHERE {where}")).fetchall()
            report["checks"].append({"name": name, "count": len(rows)})

    return report


def main():
    parser = argparse.ArgumentParser(description="Audit & fix PharmaBroker deal integrity")
    parser.add_argument("--fix", action="store_true", help="Apply fixes to non-conforming data")
    parser.add_argument("--json", action="store_true", help="Output report as JSON")
    args = parser.parse_args()

    engine = get_engine()
    print(f"{'AUDIT + FIX' if args.fix else 'AUDIT (read-only)'} — {datetime.now(timezone.utc).isoformat()}\n")

    report = audit(engine, fix=args.fix)

    print("\n── Summary ──")
    total_issues = 0
    for check in report["checks"]:
        status = "OK" if check["count"] == 0 else f"{check['count']} issues"
        print(f"  {check['name']:30s} {status}")
        total_issues += check["count"]

    print(f"\n  Total issues found: {total_issues}")
    if args.fix:
        print(f"  Total rows fixed:   {report['fixed']}")

    if args.json:
        print("\n" + json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
