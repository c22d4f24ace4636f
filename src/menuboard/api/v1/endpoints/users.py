"""Account deletion, withdrawal and reactivation endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from menuboard.api.v1.dependencies import (
    CascadeServiceDep,
    CurrentUserIdDep,
    WithdrawalServiceDep,
)
from menuboard.api.v1.errors import OperationMessages, to_http_exception, unexpected_error
from menuboard.core import messages
from menuboard.schemas import (
    ExecutionSummaryResponse,
    ReactivateResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from menuboard.services.errors import CascadeError

router = APIRouter(prefix="/users", tags=["users"])

DELETE_MESSAGES = OperationMessages(
    forbidden=messages.USER_DELETE_FORBIDDEN,
    not_found=messages.USER_NOT_FOUND,
    failed=messages.USER_DELETE_FAILED,
)
WITHDRAW_MESSAGES = OperationMessages(
    forbidden=messages.USER_WITHDRAW_FORBIDDEN,
    not_found=messages.USER_NOT_FOUND,
    failed=messages.USER_WITHDRAWAL_FAILED,
)
REACTIVATE_MESSAGES = OperationMessages(
    forbidden=messages.USER_REACTIVATE_FORBIDDEN,
    not_found=messages.USER_NOT_FOUND,
    failed=messages.USER_REACTIVATION_FAILED,
)


@router.delete("/{user_id}", response_model=ExecutionSummaryResponse)
async def delete_user(
    user_id: str,
    current_user_id: CurrentUserIdDep,
    service: CascadeServiceDep,
) -> ExecutionSummaryResponse:
    """Hard-delete the caller's account with every project, comment, like and reaction.

    Args:
        user_id: Target account; must be the caller
        current_user_id: Authenticated caller
        service: Cascade deletion service

    Returns:
        Batch execution summary

    Raises:
        HTTPException: On authorization, lookup or partial failure
    """
    context = f"DELETE /users/{user_id}"
    try:
        summary = await service.delete_user(user_id, current_user_id)
    except CascadeError as exc:
        raise to_http_exception(exc, DELETE_MESSAGES, context) from exc
    except Exception as exc:
        raise unexpected_error(exc, DELETE_MESSAGES, context) from exc
    return ExecutionSummaryResponse.from_summary(summary)


@router.post("/{user_id}/withdraw", response_model=WithdrawResponse)
async def withdraw_user(
    user_id: str,
    payload: WithdrawRequest,
    current_user_id: CurrentUserIdDep,
    service: WithdrawalServiceDep,
) -> WithdrawResponse:
    """Withdraw the caller's account, anonymizing what they authored."""
    context = f"POST /users/{user_id}/withdraw"
    try:
        summary = await service.withdraw(
            user_id,
            current_user_id,
            reason=payload.reason,
            feedback=payload.feedback,
        )
    except CascadeError as exc:
        raise to_http_exception(exc, WITHDRAW_MESSAGES, context) from exc
    except Exception as exc:
        raise unexpected_error(exc, WITHDRAW_MESSAGES, context) from exc

    base = ExecutionSummaryResponse.from_summary(summary)
    return WithdrawResponse(**base.model_dump(), message=messages.USER_WITHDRAWN)


@router.post("/{user_id}/reactivate", response_model=ReactivateResponse)
async def reactivate_user(
    user_id: str,
    current_user_id: CurrentUserIdDep,
    service: WithdrawalServiceDep,
) -> ReactivateResponse:
    """Restore a withdrawn account within the reactivation window."""
    context = f"POST /users/{user_id}/reactivate"
    try:
        await service.reactivate(user_id, current_user_id)
    except CascadeError as exc:
        raise to_http_exception(exc, REACTIVATE_MESSAGES, context) from exc
    except Exception as exc:
        raise unexpected_error(exc, REACTIVATE_MESSAGES, context) from exc
    return ReactivateResponse(message=messages.USER_REACTIVATED)
