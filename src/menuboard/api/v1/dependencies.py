"""Shared API dependencies for authentication and service wiring."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from menuboard.core import messages
from menuboard.core.security import InvalidTokenError, decode_subject
from menuboard.core.settings import settings
from menuboard.db.session import SessionLocal
from menuboard.services import (
    CascadeDeletionService,
    ConditionalRetentionGuard,
    DocumentRef,
    DocumentStore,
    SqlDocumentStore,
    WithdrawalService,
)
from menuboard.services.relationships import Collections

# HTTP Bearer scheme for JWT authentication; missing credentials become a 401 below.
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_document_store() -> DocumentStore:
    """Return the process-wide document store client."""
    return SqlDocumentStore(
        SessionLocal,
        max_batch_size=settings.store_batch_write_limit,
        max_in_filter=settings.store_in_filter_limit,
    )


# Type alias for document store dependency
StoreDep = Annotated[DocumentStore, Depends(get_document_store)]


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the authenticated user id from the bearer token.

    Raises:
        HTTPException: If the token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=messages.UNAUTHORIZED,
        )
    try:
        return decode_subject(credentials.credentials)
    except InvalidTokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=messages.UNAUTHORIZED,
        ) from err


# Type alias for current user dependency
CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]


async def require_admin(user_id: CurrentUserIdDep, store: StoreDep) -> str:
    """Return the caller id when their user document carries the admin role."""
    snapshot = await store.get(DocumentRef(Collections.USERS, user_id))
    if snapshot.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=messages.ADMIN_REQUIRED,
        )
    return user_id


AdminIdDep = Annotated[str, Depends(require_admin)]


def get_cascade_service(store: StoreDep) -> CascadeDeletionService:
    return CascadeDeletionService(store, concurrency=settings.batch_commit_concurrency)


def get_withdrawal_service(store: StoreDep) -> WithdrawalService:
    return WithdrawalService(store, concurrency=settings.batch_commit_concurrency)


def get_retention_guard(store: StoreDep) -> ConditionalRetentionGuard:
    return ConditionalRetentionGuard(store)


CascadeServiceDep = Annotated[CascadeDeletionService, Depends(get_cascade_service)]
WithdrawalServiceDep = Annotated[WithdrawalService, Depends(get_withdrawal_service)]
RetentionGuardDep = Annotated[ConditionalRetentionGuard, Depends(get_retention_guard)]
