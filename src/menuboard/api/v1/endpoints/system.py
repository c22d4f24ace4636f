"""System endpoints exposing the engine's public configuration."""

from __future__ import annotations

from fastapi import APIRouter

from menuboard.api.v1.dependencies import StoreDep
from menuboard.core.settings import settings
from menuboard.services.relationships import (
    PROJECT_SCOPED,
    RELATIONSHIP_SCHEMA_VERSION,
    USER_OWNED,
    WITHDRAWAL_SCOPE,
)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
async def get_public_config(store: StoreDep) -> dict[str, object]:
    """Return store limits and the relationship schema the engine follows.

    Excludes secrets and connection strings.
    """
    return {
        "app": {"name": settings.app_name, "version": settings.app_version},
        "store": {
            "max_batch_size": store.max_batch_size,
            "max_in_filter": store.max_in_filter,
            "batch_commit_concurrency": settings.batch_commit_concurrency,
        },
        "relationships": {
            "version": RELATIONSHIP_SCHEMA_VERSION,
            "user_owned": [str(rel) for rel in USER_OWNED],
            "project_scoped": [str(rel) for rel in PROJECT_SCOPED],
            "withdrawal_scope": [str(rel) for rel in WITHDRAWAL_SCOPE],
        },
    }
