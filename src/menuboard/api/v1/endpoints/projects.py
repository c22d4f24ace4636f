"""Project deletion endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from menuboard.api.v1.dependencies import CascadeServiceDep, CurrentUserIdDep
from menuboard.api.v1.errors import OperationMessages, to_http_exception, unexpected_error
from menuboard.core import messages
from menuboard.schemas import ExecutionSummaryResponse
from menuboard.services.errors import CascadeError

router = APIRouter(prefix="/projects", tags=["projects"])

DELETE_MESSAGES = OperationMessages(
    forbidden=messages.PROJECT_DELETE_FORBIDDEN,
    not_found=messages.PROJECT_NOT_FOUND,
    failed=messages.PROJECT_DELETE_FAILED,
)


@router.delete("/{project_id}", response_model=ExecutionSummaryResponse)
async def delete_project(
    project_id: str,
    current_user_id: CurrentUserIdDep,
    service: CascadeServiceDep,
) -> ExecutionSummaryResponse:
    """Delete a project and its comments, likes, whispers, reactions and updates.

    Only the project's author may delete it.
    """
    context = f"DELETE /projects/{project_id}"
    try:
        summary = await service.delete_project(project_id, current_user_id)
    except CascadeError as exc:
        raise to_http_exception(exc, DELETE_MESSAGES, context) from exc
    except Exception as exc:
        raise unexpected_error(exc, DELETE_MESSAGES, context) from exc
    return ExecutionSummaryResponse.from_summary(summary)
