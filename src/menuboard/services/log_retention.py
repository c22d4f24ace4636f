"""Periodic cleanup of time-boxed weather logs.

Weather logs only matter for comparing today with yesterday, so anything
older is removed. Deletions go through the batch planner so a backlog larger
than one batch is still committed in bounded groups.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from menuboard.services.batch_executor import (
    DEFAULT_CONCURRENCY,
    BatchExecutor,
    ExecutionSummary,
    Mutation,
)
from menuboard.services.batch_planner import plan_batches
from menuboard.services.document_store import DocumentStore, FieldFilter
from menuboard.services.reference_set import build_reference_set
from menuboard.services.relationships import Collections

logger = logging.getLogger(__name__)


class LogRetentionService:
    """Delete stale weather log documents."""

    def __init__(self, store: DocumentStore, *, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self.store = store
        self.executor = BatchExecutor(store, concurrency=concurrency)

    async def _delete_matching(self, *filters: FieldFilter) -> ExecutionSummary:
        snapshots = await self.store.query(Collections.WEATHER_LOGS, *filters)
        refs = build_reference_set([[snapshot.ref for snapshot in snapshots]])
        groups = plan_batches(refs, self.store.max_batch_size)
        return await self.executor.execute(groups, Mutation.delete())

    async def cleanup_stale_weather_logs(self, today: date) -> ExecutionSummary:
        """Delete logs dated before yesterday relative to ``today``."""
        yesterday = (today - timedelta(days=1)).isoformat()
        summary = await self._delete_matching(FieldFilter.lt("date", yesterday))
        logger.info(
            "Weather log cleanup before %s: %d/%d documents deleted",
            yesterday,
            summary.committed_documents,
            summary.documents,
        )
        return summary

    async def delete_weather_logs_for_subscription(self, subscription_id: str) -> ExecutionSummary:
        """Delete every log recorded for a subscription."""
        return await self._delete_matching(FieldFilter.eq("subscriptionId", subscription_id))
