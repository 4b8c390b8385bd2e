#!/usr/bin/env python3
"""
Run one notification reconciliation pass outside the web process.

Useful from cron when the in-app scheduler is disabled
(SCHEDULER_ENABLED=false), or to backfill reminders after an import.

Usage:
  python scripts/reconcile_notifications.py [--user-id UUID] [--today YYYY-MM-DD]
"""

import asyncio
import sys
from datetime import date
from pathlib import Path
from uuid import UUID

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.application.reproduction.constants import ReproductionConstants
from src.config.settings import get_settings
from src.infrastructure.db.session import create_engine, create_session_factory
from src.infrastructure.scheduler.reproduction_tasks import reconcile_all_users, reconcile_user


async def run(user_id: UUID | None, today: date | None) -> int:
    settings = get_settings()
    constants = ReproductionConstants.from_settings(settings)
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)

    try:
        if user_id:
            reports = [
                await reconcile_user(
                    session_factory,
                    user_id,
                    constants=constants,
                    lookahead_days=settings.notification_lookahead_days,
                    today=today,
                )
            ]
        else:
            reports = await reconcile_all_users(
                session_factory,
                constants=constants,
                lookahead_days=settings.notification_lookahead_days,
                today=today,
            )
    finally:
        await engine.dispose()

    for report in reports:
        print(
            f"user {report.user_id}: {len(report.upserts)} upserts, "
            f"{report.written} written, {len(report.flagged_records)} flagged"
        )
        for issue in report.issues:
            print(f"   ! {issue.code} {issue.subject_id}: {issue.message}")
    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Reconcile breeding reminders")
    parser.add_argument("--user-id", help="Only reconcile this user (default: every user)")
    parser.add_argument("--today", help="Reference date, ISO format (default: today)")
    args = parser.parse_args()

    user_uuid = None
    if args.user_id:
        try:
            user_uuid = UUID(args.user_id)
        except ValueError:
            print(f"Error: '{args.user_id}' is not a valid UUID")
            sys.exit(1)

    ref_day = None
    if args.today:
        try:
            ref_day = date.fromisoformat(args.today)
        except ValueError:
            print(f"Error: '{args.today}' is not an ISO date")
            sys.exit(1)

    sys.exit(asyncio.run(run(user_uuid, ref_day)))
