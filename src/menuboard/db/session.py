"""Database session configuration."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from menuboard.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import menuboard.models  # noqa: E402,F401

engine: AsyncEngine = create_async_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all database tables."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine | None = None) -> None:
    """Drop all database tables."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
