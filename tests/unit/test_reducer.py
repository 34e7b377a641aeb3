"""Unit tests for reducing staged pages into artifacts."""

from __future__ import annotations

import typing as typ

import msgspec
import pytest

from logtrawl.artifacts import (
    ArtifactReducer,
    ArtifactWriteError,
    FilesystemArtifactSink,
)
from logtrawl.loggly import EventPage
from logtrawl.staging import StagedTagNotFoundError
from tests.helpers.loggly_stub import make_event

if typ.TYPE_CHECKING:
    from pathlib import Path

    from logtrawl.staging import StagingStore

_HEADER = "UUID\tAppVersion\tOsType\tOsVersion\tModel"


def _page(events: list[dict[str, typ.Any]], *, last: bool = False) -> EventPage:
    return msgspec.convert(
        {"events": events, "next": "" if last else "cursor"},
        type=EventPage,
    )


async def _stage(store: StagingStore, tag: str, pages: list[EventPage]) -> None:
    for sequence, page in enumerate(pages, start=1):
        await store.put(tag, sequence, page)


def _lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def sink(tmp_path: Path) -> FilesystemArtifactSink:
    """Return a sink writing into a dedicated output directory."""
    out = tmp_path / "out"
    out.mkdir()
    return FilesystemArtifactSink(out)


@pytest.mark.asyncio
async def test_one_manifest_row_and_every_line_in_order(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """Three pages of 3, 2 and 2 events give 7 lines and one manifest row."""
    counter = iter(range(1, 8))
    pages = [
        _page([make_event(f"m{next(counter)}", app_version="1.2.3") for _ in range(3)]),
        _page([make_event(f"m{next(counter)}", app_version="9.9.9") for _ in range(2)]),
        _page([make_event(f"m{next(counter)}") for _ in range(2)], last=True),
    ]
    await _stage(staging_store, "abc", pages)
    await sink.begin_run()

    result = await ArtifactReducer(staging_store, sink).reduce("abc")

    assert (result.pages, result.lines, result.manifest_written) == (3, 7, True)
    assert _lines(sink.manifest_path) == [
        _HEADER,
        "abc\t1.2.3\tios\t11.2\tiPhone9,1",
    ]
    messages = [line.split("\t")[1] for line in _lines(sink.tag_path("abc"))]
    assert messages == [f"m{n}" for n in range(1, 8)]


@pytest.mark.asyncio
async def test_lines_keep_source_order_and_timestamps(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """Non-monotonic timestamps are written verbatim without re-sorting."""
    await _stage(
        staging_store,
        "abc",
        [
            _page([make_event("ready", timestamp="200")]),
            _page(
                [
                    make_event("boot", timestamp="100"),
                    make_event("late", timestamp="2018-01-30T01:00:00.5+09:00"),
                ],
                last=True,
            ),
        ],
    )

    await ArtifactReducer(staging_store, sink).reduce("abc")

    assert _lines(sink.tag_path("abc")) == [
        "200\tready",
        "100\tboot",
        "2018-01-30T01:00:00.5+09:00\tlate",
    ]


@pytest.mark.asyncio
async def test_manifest_uses_first_event_after_empty_pages(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """Leading empty pages are skipped when picking the manifest event."""
    await _stage(
        staging_store,
        "abc",
        [
            _page([]),
            _page([make_event("first", model="Pixel 2")]),
            _page([make_event("second", model="Pixel 3")], last=True),
        ],
    )
    await sink.begin_run()

    await ArtifactReducer(staging_store, sink).reduce("abc")

    assert _lines(sink.manifest_path)[1].endswith("\tPixel 2")


@pytest.mark.asyncio
async def test_tag_without_events_writes_nothing(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """A tag whose stream was empty gets no artifact and no manifest row."""
    await _stage(staging_store, "quiet", [_page([], last=True)])
    await sink.begin_run()

    result = await ArtifactReducer(staging_store, sink).reduce("quiet")

    assert (result.lines, result.manifest_written) == (0, False)
    assert _lines(sink.manifest_path) == [_HEADER]
    assert not sink.tag_path("quiet").exists()


@pytest.mark.asyncio
async def test_missing_tag_raises_and_writes_nothing(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """Reducing a tag that was never staged fails before any write."""
    await sink.begin_run()

    with pytest.raises(StagedTagNotFoundError):
        await ArtifactReducer(staging_store, sink).reduce("ghost")

    assert _lines(sink.manifest_path) == [_HEADER]
    assert not sink.tag_path("ghost").exists()


@pytest.mark.asyncio
async def test_second_reduce_of_same_tag_is_skipped(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """A tag is written at most once per reducer."""
    await _stage(staging_store, "abc", [_page([make_event("boot")], last=True)])
    await sink.begin_run()
    reducer = ArtifactReducer(staging_store, sink)

    await reducer.reduce("abc")
    again = await reducer.reduce("abc")

    assert again.skipped is True
    assert again.lines == 0
    assert len(_lines(sink.tag_path("abc"))) == 1
    assert len(_lines(sink.manifest_path)) == 2


@pytest.mark.asyncio
async def test_duplicate_events_are_not_collapsed(
    staging_store: StagingStore, sink: FilesystemArtifactSink
) -> None:
    """An event served twice is written twice."""
    event = make_event("boot", timestamp="100", event_id="same")
    await _stage(
        staging_store, "abc", [_page([event]), _page([event], last=True)]
    )

    result = await ArtifactReducer(staging_store, sink).reduce("abc")

    assert result.lines == 2
    assert _lines(sink.tag_path("abc")) == ["100\tboot", "100\tboot"]


@pytest.mark.asyncio
@pytest.mark.parametrize("tag", ["a/b", "info", ".."])
async def test_unusable_tag_leaves_manifest_untouched(
    staging_store: StagingStore, sink: FilesystemArtifactSink, tag: str
) -> None:
    """A tag that cannot name a file fails before its manifest row is written."""
    await _stage(staging_store, tag, [_page([make_event("boot")], last=True)])
    await sink.begin_run()

    with pytest.raises(ArtifactWriteError, match="artifact file name"):
        await ArtifactReducer(staging_store, sink).reduce(tag)

    assert _lines(sink.manifest_path) == [_HEADER]
