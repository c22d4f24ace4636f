# src/menuboard/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .digests import router as digests_router
from .projects import router as projects_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "digests_router",
    "projects_router",
    "system_router",
    "users_router",
]
