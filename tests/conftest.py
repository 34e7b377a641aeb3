"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from logtrawl.common.time import TimeWindow
from logtrawl.staging import StagingStore, init_staging_storage, staging_database_url

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a session factory over a fresh SQLite staging database."""
    engine = create_async_engine(staging_database_url(tmp_path))
    try:
        await init_staging_storage(engine)
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
def staging_store(session_factory: async_sessionmaker[AsyncSession]) -> StagingStore:
    """Return a staging store bound to the test database."""
    return StagingStore(session_factory)


@pytest.fixture
def window() -> TimeWindow:
    """Return the eight-hour window used across scenarios."""
    return TimeWindow(
        since=dt.datetime(2018, 1, 30, 1, 0, tzinfo=dt.UTC),
        until=dt.datetime(2018, 1, 30, 9, 0, tzinfo=dt.UTC),
    )
