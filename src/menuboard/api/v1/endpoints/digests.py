"""Digest administration endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from menuboard.api.v1.dependencies import AdminIdDep, RetentionGuardDep
from menuboard.api.v1.errors import OperationMessages, to_http_exception, unexpected_error
from menuboard.core import messages
from menuboard.schemas import DigestDeletionResponse
from menuboard.services.errors import CascadeError
from menuboard.services.retention import RetentionOutcome

router = APIRouter(prefix="/digests", tags=["digests"])

DELETE_MESSAGES = OperationMessages(
    forbidden=messages.ADMIN_REQUIRED,
    not_found=messages.DIGEST_NOT_FOUND,
    failed=messages.DIGEST_DELETE_FAILED,
)


@router.delete("/{digest_id}", response_model=DigestDeletionResponse)
async def delete_digest(
    digest_id: str,
    admin_id: AdminIdDep,
    guard: RetentionGuardDep,
) -> DigestDeletionResponse:
    """Delete a digest, or deactivate it while it still has active subscribers."""
    context = f"DELETE /digests/{digest_id} by {admin_id}"
    try:
        outcome = await guard.delete_or_deactivate(digest_id)
    except CascadeError as exc:
        raise to_http_exception(exc, DELETE_MESSAGES, context) from exc
    except Exception as exc:
        raise unexpected_error(exc, DELETE_MESSAGES, context) from exc

    message = (
        messages.DIGEST_DEACTIVATED
        if outcome is RetentionOutcome.DEACTIVATED
        else messages.DIGEST_DELETED
    )
    return DigestDeletionResponse(outcome=outcome, message=message)
