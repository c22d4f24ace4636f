"""Conditional retention guard for shareable resources.

Digests are referenced *by* subscriptions instead of owning them, so the
usual cascade direction is inverted: live subscribers block deletion. A
digest with active subscriptions is only deactivated; an unused digest is
deleted outright.
"""

from __future__ import annotations

import logging
from enum import Enum

from menuboard.db.time import utcnow_iso
from menuboard.services.batch_executor import BatchExecutor, Mutation
from menuboard.services.batch_planner import plan_batches
from menuboard.services.document_store import DocumentRef, DocumentStore, FieldFilter
from menuboard.services.errors import NotFoundError, PartialCommitError
from menuboard.services.reference_set import build_reference_set
from menuboard.services.relationships import Collections

logger = logging.getLogger(__name__)


class RetentionOutcome(str, Enum):
    """What the guard did with the resource."""

    DELETED = "deleted"
    DEACTIVATED = "deactivated"


class ConditionalRetentionGuard:
    """Delete a digest unless active subscriptions still reference it."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.executor = BatchExecutor(store, concurrency=1)

    async def active_subscribers(self, digest_id: str) -> int:
        return await self.store.count(
            Collections.DIGEST_SUBSCRIPTIONS,
            FieldFilter.eq("digestId", digest_id),
            FieldFilter.eq("isActive", True),
        )

    async def delete_or_deactivate(self, digest_id: str) -> RetentionOutcome:
        """Apply the retention policy to ``digest_id``.

        Raises:
            NotFoundError: The digest does not exist.
            PartialCommitError: The delete batch failed to commit.
        """
        ref = DocumentRef(Collections.DIGESTS, digest_id)
        snapshot = await self.store.get(ref)
        if not snapshot.exists:
            raise NotFoundError(f"Digest {digest_id} not found")

        subscribers = await self.active_subscribers(digest_id)
        if subscribers > 0:
            await self.store.update(ref, {"isActive": False, "updatedAt": utcnow_iso()})
            logger.info(
                "Deactivated digest %s instead of deleting it (%d active subscriptions)",
                digest_id,
                subscribers,
            )
            return RetentionOutcome.DEACTIVATED

        groups = plan_batches(build_reference_set([], root=ref), self.store.max_batch_size)
        summary = await self.executor.execute(groups, Mutation.delete(), root=ref)
        if not summary.complete:
            raise PartialCommitError(summary)
        logger.info("Deleted digest %s", digest_id)
        return RetentionOutcome.DELETED
