# src/menuboard/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    digests_router,
    projects_router,
    system_router,
    users_router,
)

__all__ = [
    "digests_router",
    "projects_router",
    "system_router",
    "users_router",
]
