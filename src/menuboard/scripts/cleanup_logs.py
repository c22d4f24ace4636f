# src/menuboard/scripts/cleanup_logs.py
"""
Cron job removing time-boxed weather logs.

Run daily. Logs dated before yesterday are deleted in store-sized batches;
a run that reports failed groups is safe to repeat.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date

from menuboard.core.settings import settings
from menuboard.db.session import SessionLocal, create_tables, engine
from menuboard.services import LogRetentionService, SqlDocumentStore

logger = logging.getLogger(__name__)


async def run_cleanup(today: date, subscription_id: str | None = None) -> int:
    """Run one cleanup pass and return the number of failed batch groups."""
    await create_tables()
    store = SqlDocumentStore(
        SessionLocal,
        max_batch_size=settings.store_batch_write_limit,
        max_in_filter=settings.store_in_filter_limit,
    )
    service = LogRetentionService(store, concurrency=settings.batch_commit_concurrency)
    try:
        if subscription_id:
            summary = await service.delete_weather_logs_for_subscription(subscription_id)
        else:
            summary = await service.cleanup_stale_weather_logs(today)
    finally:
        await engine.dispose()

    print(
        f"Deleted {summary.committed_documents}/{summary.documents} weather logs "
        f"in {summary.total} batches ({summary.failed} failed)"
    )
    return summary.failed


def main() -> None:
    parser = argparse.ArgumentParser(description="Delete stale weather log documents")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=date.today(),
        help="Reference date (YYYY-MM-DD); logs before the previous day are removed",
    )
    parser.add_argument(
        "--subscription",
        default=None,
        help="Delete every log of this subscription instead of stale logs",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    failed = asyncio.run(run_cleanup(args.today, args.subscription))
    raise SystemExit(1 if failed else 0)


if __name__ == "__main__":
    main()
