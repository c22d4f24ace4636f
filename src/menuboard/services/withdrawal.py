"""Account withdrawal (anonymization) and reactivation.

Withdrawal keeps every document. It overwrites the denormalized name and
avatar fields on the user's own projects, comments and whispers, then flags
the user document as withdrawn. Likes and reactions are left alone; removing
them belongs to the hard-delete flow.

The user document is flagged last, and only once every anonymizing group has
committed. A failed run therefore leaves the account un-flagged and the same
request can simply be repeated.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from menuboard.core.settings import settings
from menuboard.db.time import as_utc, parse_iso, utcnow, utcnow_iso
from menuboard.services.batch_executor import (
    DEFAULT_CONCURRENCY,
    BatchExecutor,
    ExecutionSummary,
    Mutation,
)
from menuboard.services.batch_planner import plan_batches
from menuboard.services.document_store import DocumentRef, DocumentSnapshot, DocumentStore
from menuboard.services.errors import (
    AlreadyWithdrawnError,
    AuthorizationError,
    NotFoundError,
    NotWithdrawnError,
    PartialCommitError,
    ReactivationWindowExpiredError,
    WithdrawalValidationError,
)
from menuboard.services.locator import DependentRecordLocator
from menuboard.services.reference_set import build_reference_set
from menuboard.services.relationships import WITHDRAWAL_SCOPE, Collections, anonymized_fields

logger = logging.getLogger(__name__)


class WithdrawalService:
    """Soft-delete user accounts by anonymizing their authored records."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        reason_max_length: int | None = None,
        feedback_max_length: int | None = None,
        reactivation_window: timedelta | None = None,
        user_name: str | None = None,
        author_name: str | None = None,
    ) -> None:
        self.store = store
        self.locator = DependentRecordLocator(store)
        self.executor = BatchExecutor(store, concurrency=concurrency)
        self.reason_max_length = reason_max_length or settings.withdrawal_reason_max_length
        self.feedback_max_length = feedback_max_length or settings.withdrawal_feedback_max_length
        self.reactivation_window = reactivation_window or timedelta(
            days=settings.reactivation_window_days
        )
        self.user_name = user_name or settings.withdrawn_user_name
        self.author_name = author_name or settings.withdrawn_author_name

    async def _load_user(self, user_id: str) -> DocumentSnapshot:
        snapshot = await self.store.get(DocumentRef(Collections.USERS, user_id))
        if not snapshot.exists:
            raise NotFoundError(f"User {user_id} not found")
        return snapshot

    def _template(self, now: str) -> dict[str, dict[str, Any]]:
        template = anonymized_fields(self.user_name, self.author_name)
        template[Collections.PROJECTS] = {**template[Collections.PROJECTS], "updatedAt": now}
        return template

    async def withdraw(
        self,
        user_id: str,
        actor_id: str,
        reason: str | None,
        feedback: str | None = None,
    ) -> ExecutionSummary:
        """Anonymize the user's authored records and mark the account withdrawn.

        Raises:
            AuthorizationError: The caller is not the user.
            WithdrawalValidationError: No reason was given.
            NotFoundError: The user document does not exist.
            AlreadyWithdrawnError: The account is already withdrawn.
            PartialLocateError: A dependent query failed; nothing was written.
            PartialCommitError: Some groups failed; the account stays active.
        """
        if actor_id != user_id:
            raise AuthorizationError("Users can only withdraw their own account")
        if not reason or not reason.strip():
            raise WithdrawalValidationError("A withdrawal reason is required")

        snapshot = await self._load_user(user_id)
        if snapshot.get("isWithdrawn"):
            raise AlreadyWithdrawnError(f"User {user_id} is already withdrawn")

        located = await self.locator.locate(user_id, WITHDRAWAL_SCOPE)
        refs = build_reference_set(located)
        groups = plan_batches(refs, self.store.max_batch_size)

        now = utcnow_iso()
        summary = await self.executor.execute(groups, Mutation.update(self._template(now)))
        if not summary.complete:
            raise PartialCommitError(summary)

        await self.store.update(
            snapshot.ref,
            {
                "isWithdrawn": True,
                "withdrawnAt": now,
                "withdrawalReason": reason[: self.reason_max_length],
                "withdrawalFeedback": (feedback or "")[: self.feedback_max_length],
                "name": self.user_name,
                "avatarUrl": "",
                "isProfileComplete": False,
                "updatedAt": now,
            },
        )
        logger.info("Withdrew user %s, anonymized %d documents", user_id, len(refs))
        return summary

    async def reactivate(
        self,
        user_id: str,
        actor_id: str,
        now: datetime | None = None,
    ) -> None:
        """Restore a withdrawn account inside the reactivation window.

        Anonymized names on projects, comments and whispers are not restored;
        the user sets up a profile again.

        Raises:
            AuthorizationError: The caller is not the user.
            NotFoundError: The user document does not exist.
            NotWithdrawnError: The account is not withdrawn.
            ReactivationWindowExpiredError: The window has passed.
        """
        if actor_id != user_id:
            raise AuthorizationError("Users can only restore their own account")

        snapshot = await self._load_user(user_id)
        if not snapshot.get("isWithdrawn"):
            raise NotWithdrawnError(f"User {user_id} is not withdrawn")

        current = as_utc(now) if now is not None else utcnow()
        withdrawn_at = snapshot.get("withdrawnAt")
        elapsed = current - parse_iso(withdrawn_at) if withdrawn_at else None
        if elapsed is None or elapsed > self.reactivation_window:
            raise ReactivationWindowExpiredError(elapsed.days if elapsed else 0)

        await self.store.update(
            snapshot.ref,
            {
                "isWithdrawn": False,
                "withdrawnAt": None,
                "withdrawalReason": None,
                "withdrawalFeedback": None,
                "isProfileComplete": False,
                "updatedAt": current.isoformat(),
            },
        )
        logger.info("Reactivated user %s after %d days", user_id, elapsed.days)
