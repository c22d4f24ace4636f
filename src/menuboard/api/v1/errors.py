"""Translate cascade service errors into HTTP responses."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status

from menuboard.core import messages
from menuboard.services.errors import (
    AlreadyWithdrawnError,
    AuthorizationError,
    CascadeError,
    NotFoundError,
    NotWithdrawnError,
    PartialCommitError,
    PartialLocateError,
    ReactivationWindowExpiredError,
    WithdrawalValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationMessages:
    """User-facing messages for one API operation."""

    forbidden: str
    not_found: str
    failed: str


def to_http_exception(exc: CascadeError, operation: OperationMessages, context: str) -> HTTPException:
    """Map a service error onto a status code and a user-facing message.

    Validation-class errors carry the specific violated constraint; everything
    else gets the operation's generic message and the detail is only logged.
    """
    if isinstance(exc, AuthorizationError):
        return HTTPException(status.HTTP_403_FORBIDDEN, detail=operation.forbidden)
    if isinstance(exc, NotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail=operation.not_found)
    if isinstance(exc, WithdrawalValidationError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail=messages.WITHDRAWAL_REASON_REQUIRED)
    if isinstance(exc, AlreadyWithdrawnError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail=messages.USER_ALREADY_WITHDRAWN)
    if isinstance(exc, NotWithdrawnError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail=messages.USER_NOT_WITHDRAWN)
    if isinstance(exc, ReactivationWindowExpiredError):
        return HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=messages.USER_REACTIVATION_EXPIRED.format(days=exc.days_elapsed),
        )
    if isinstance(exc, PartialLocateError):
        logger.warning("%s aborted before writing: %s", context, exc)
        return HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail=operation.failed)
    if isinstance(exc, PartialCommitError):
        logger.warning("%s partially committed: %s", context, exc)
        summary = exc.summary
        return HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": messages.PARTIAL_DELETE,
                "total": summary.total,
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "failed_groups": summary.failed_groups,
            },
        )

    logger.error("%s failed: %s", context, exc, exc_info=exc)
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=operation.failed)


def unexpected_error(exc: Exception, operation: OperationMessages, context: str) -> HTTPException:
    """Log an unexpected failure and hide its detail from the client."""
    logger.exception("%s failed unexpectedly", context, exc_info=exc)
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=operation.failed)
