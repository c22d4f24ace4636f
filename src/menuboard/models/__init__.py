# src/menuboard/models/__init__.py
"""SQLAlchemy models for the Menuboard document store."""

from .document import Document

__all__ = ["Document"]
