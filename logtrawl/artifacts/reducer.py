"""Reduce a tag's staged pages into its artifact and the manifest.

Pages are read back in sequence order and flattened without re-sorting, so
lines follow page order, then in-page order. The first event of the tag
supplies its single manifest line. Events are not deduplicated: an event
Loggly returns twice is written twice.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from logtrawl.logging import get_logger, log_warning

from .sink import EventLine, ManifestRow

if typ.TYPE_CHECKING:
    from logtrawl.staging.store import StagingStore

    from .sink import ArtifactSink

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ReductionResult:
    """Summary of one tag's reduction."""

    tag: str
    pages: int
    lines: int
    manifest_written: bool
    skipped: bool = False


class ArtifactReducer:
    """Turn staged pages into artifact lines, at most once per tag per run."""

    def __init__(self, staging: StagingStore, sink: ArtifactSink) -> None:
        """Bind the reducer to the staging store it reads and the sink it fills."""
        self._staging = staging
        self._sink = sink
        self._reduced: set[str] = set()

    async def reduce(self, tag: str) -> ReductionResult:
        """Write ``tag``'s staged events to its artifact and the manifest.

        Raises
        ------
        StagedTagNotFoundError
            If ``tag`` has no staged pages; nothing is written.
        ArtifactWriteError
            If ``tag`` cannot name an artifact, checked before the manifest
            row is written, or if an artifact cannot be appended.

        """
        pages = await self._staging.get_all(tag)

        if tag in self._reduced:
            log_warning(logger, "tag %s already reduced in this run; skipping", tag)
            return ReductionResult(
                tag=tag,
                pages=len(pages),
                lines=0,
                manifest_written=False,
                skipped=True,
            )

        self._sink.validate_tag(tag)
        manifest_written = False
        lines = 0
        for page in pages:
            if not page.events:
                continue
            if not manifest_written:
                await self._sink.append_manifest(
                    ManifestRow.from_event(tag, page.events[0])
                )
                manifest_written = True
            batch = [EventLine.from_event(event) for event in page.events]
            await self._sink.append_events(tag, batch)
            lines += len(batch)

        self._reduced.add(tag)
        return ReductionResult(
            tag=tag,
            pages=len(pages),
            lines=lines,
            manifest_written=manifest_written,
        )
