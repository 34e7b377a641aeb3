"""Persistence model for staged event pages."""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from logtrawl.common.time import utcnow

from .errors import StagingError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine

STAGING_DB_NAME = "staging.sqlite3"


class Base(DeclarativeBase):
    """Base declarative class for staging models."""


class StagedPage(Base):
    """Raw event page keyed by ``(tag, sequence)``.

    ``sequence`` is the 1-based fetch order of the page within its tag's
    stream. ``payload`` is the page as returned by Loggly.
    """

    __tablename__ = "staged_pages"

    tag: Mapped[str] = mapped_column(String(255), primary_key=True)
    sequence: Mapped[int] = mapped_column(Integer, primary_key=True)
    payload: Mapped[dict[str, typ.Any]] = mapped_column(JSON)
    event_count: Mapped[int] = mapped_column(Integer, default=0)
    staged_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


def staging_database_url(work_dir: Path) -> str:
    """Return the aiosqlite URL of the staging database in ``work_dir``."""
    return f"sqlite+aiosqlite:///{work_dir / STAGING_DB_NAME}"


async def init_staging_storage(engine: AsyncEngine) -> None:
    """Create the staging tables if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def reset_staging_storage(engine: AsyncEngine) -> None:
    """Drop and recreate the staging tables; nothing survives between runs."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as exc:
        raise StagingError.reset_failed(str(exc)) from exc
