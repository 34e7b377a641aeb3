"""Staging store: the ``(tag, sequence) -> EventPage`` key space.

The harvester writes each fetched page here before anything interprets it;
the reducer reads a tag's pages back in sequence order. Writes are
last-write-wins per key, so re-harvesting a tag overwrites rather than
appends.
"""

from __future__ import annotations

import typing as typ

import msgspec
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from logtrawl.common.time import utcnow
from logtrawl.loggly.models import EventPage

from .errors import StagedTagNotFoundError, StagingError
from .storage import StagedPage

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class StagingStore:
    """Persist raw event pages per tag in the staging database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for staging operations."""
        self._session_factory = session_factory

    async def put(self, tag: str, sequence: int, page: EventPage) -> None:
        """Stage ``page`` under ``(tag, sequence)``, replacing any earlier page."""
        if sequence < 1:
            msg = f"sequence must be >= 1, got {sequence}"
            raise ValueError(msg)

        record = StagedPage(
            tag=tag,
            sequence=sequence,
            payload=msgspec.to_builtins(page),
            event_count=len(page.events),
            staged_at=utcnow(),
        )
        try:
            async with self._session_factory() as session, session.begin():
                await session.merge(record)
        except SQLAlchemyError as exc:
            raise StagingError.write_failed(tag, sequence, str(exc)) from exc

    async def get_all(self, tag: str) -> list[EventPage]:
        """Return every staged page of ``tag`` in ascending sequence order.

        Raises
        ------
        StagedTagNotFoundError
            If nothing has been staged for ``tag``.

        """
        rows = await self._load(tag)
        if not rows:
            raise StagedTagNotFoundError(tag)

        pages: list[EventPage] = []
        for sequence, payload in rows:
            try:
                pages.append(msgspec.convert(payload, type=EventPage))
            except msgspec.ValidationError as exc:
                raise StagingError.corrupt_page(tag, sequence, str(exc)) from exc
        return pages

    async def sequences(self, tag: str) -> list[int]:
        """Return the staged sequence numbers of ``tag`` in ascending order."""
        return [sequence for sequence, _ in await self._load(tag)]

    async def _load(self, tag: str) -> list[tuple[int, dict[str, typ.Any]]]:
        stmt = (
            select(StagedPage.sequence, StagedPage.payload)
            .where(StagedPage.tag == tag)
            .order_by(StagedPage.sequence)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [(row.sequence, row.payload) for row in result]
        except SQLAlchemyError as exc:
            raise StagingError.read_failed(tag, str(exc)) from exc
