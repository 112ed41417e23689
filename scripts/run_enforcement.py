#!/usr/bin/env python3
"""
Run one membership enforcement sweep by hand.

Dry-run by default: computes and logs what would change without writing.
Pass --execute to apply status changes, unfeature expired promotions and
downgrade expired PREMIUM accounts.

Run from project root with DATABASE_URL set:
  python scripts/run_enforcement.py
  python scripts/run_enforcement.py --execute
  python scripts/run_enforcement.py --now 2026-01-01T00:00:00
  ADMIN_EMAILS='admin@example.com' DATABASE_URL='postgresql://...' python scripts/run_enforcement.py --execute
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
load_dotenv(project_root / ".env")
load_dotenv(project_root / ".env.local")


def _parse_now(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def main() -> None:
    parser = argparse.ArgumentParser(description="Reconcile studio status with membership state.")
    parser.add_argument("--execute", action="store_true", help="Apply changes (default is a dry run)")
    parser.add_argument("--now", type=_parse_now, default=None, help="Evaluate as of this ISO timestamp (UTC)")
    args = parser.parse_args()

    if not os.getenv("DATABASE_URL"):
        print("ERROR: DATABASE_URL not set. Add it to .env or export it.")
        sys.exit(1)

    # Imported after .env is loaded so settings pick it up
    from app.core.logging import configure_logging
    from app.core.membership_policy import load_policy_from_env
    from app.db.session import SessionLocal
    from app.services.enforcement_sweep import run_enforcement_sweep

    configure_logging()
    policy = load_policy_from_env()
    if not policy.admin_emails:
        print("WARNING: ADMIN_EMAILS is empty; no studio gets the admin override.")

    mode = "EXECUTE" if args.execute else "DRY-RUN"
    print(f"Membership enforcement ({mode})")

    sess = SessionLocal()
    try:
        summary = run_enforcement_sweep(sess, policy, now=args.now, dry_run=not args.execute)
    except Exception as e:
        sess.rollback()
        print(f"ERROR: {e}")
        raise
    finally:
        sess.close()

    print(f"  status updates:     {summary.status_updates}")
    print(f"  unfeatured updates: {summary.unfeatured_updates}")
    print(f"  downgrades:         {summary.downgrades}")
    print(f"  failed downgrades:  {summary.failed_downgrades}")
    if not args.execute:
        print("Dry run only. Re-run with --execute to apply.")


if __name__ == "__main__":
    main()
