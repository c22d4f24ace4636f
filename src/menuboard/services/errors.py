"""Exceptions raised by the cascade deletion and withdrawal services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from menuboard.services.batch_executor import ExecutionSummary
    from menuboard.services.relationships import Relationship


class CascadeError(RuntimeError):
    """Base exception for cascade engine failures."""


class AuthorizationError(CascadeError):
    """Raised when the caller does not own the target entity."""


class NotFoundError(CascadeError):
    """Raised when the root document does not exist."""


class PartialLocateError(CascadeError):
    """Raised when one or more dependent queries failed.

    No writes are attempted after this error: planning from an incomplete
    dependent set would silently under-delete.
    """

    def __init__(self, failed: list[Relationship], errors: list[BaseException]) -> None:
        self.failed = failed
        self.errors = errors
        names = ", ".join(str(rel) for rel in failed)
        super().__init__(f"Failed to locate dependents in: {names}")


class PartialCommitError(CascadeError):
    """Raised when some batch groups failed after others were committed."""

    def __init__(self, summary: ExecutionSummary) -> None:
        self.summary = summary
        super().__init__(
            f"{summary.failed} of {summary.total} batch groups failed "
            f"(groups {summary.failed_groups})"
        )


class AlreadyWithdrawnError(CascadeError):
    """Raised when withdrawal is requested for a withdrawn account."""


class WithdrawalValidationError(CascadeError):
    """Raised when withdrawal input violates a constraint."""


class NotWithdrawnError(CascadeError):
    """Raised when reactivation is requested for an active account."""


class ReactivationWindowExpiredError(CascadeError):
    """Raised when the reactivation window after withdrawal has passed."""

    def __init__(self, days_elapsed: int) -> None:
        self.days_elapsed = days_elapsed
        super().__init__(f"Reactivation window expired {days_elapsed} days after withdrawal")


class RootCommitWithheldError(CascadeError):
    """Reported for a final-phase group that was not committed.

    The root and parent documents in it are kept so that re-running the same
    operation can find them and locate the remaining dependents.
    """
