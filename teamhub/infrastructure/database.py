"""Database configuration and session management."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from teamhub.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


SessionFactory = async_sessionmaker[AsyncSession]


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``."""

    url = settings.database_url
    options: dict[str, object] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # SQLite serialises writers; a longer busy timeout avoids spurious
        # "database is locked" errors when event handlers write concurrently.
        options["connect_args"] = {"timeout": 30}
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Return a session factory whose sessions keep loaded state after commit."""

    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def initialize_database(engine: AsyncEngine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from teamhub.infrastructure import models  # noqa: F401  # ensure models are imported

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Notification tables ready on %s", engine.url.render_as_string(hide_password=True))


__all__ = [
    "Base",
    "SessionFactory",
    "create_engine_from_settings",
    "create_session_factory",
    "initialize_database",
]
