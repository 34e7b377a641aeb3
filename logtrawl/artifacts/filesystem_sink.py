r"""Filesystem adapter for the ArtifactSink protocol.

Writes artifacts as flat UTF-8 text files in the working directory::

    {work_dir}/info.txt      manifest, one line per tag after the header
    {work_dir}/{tag}.txt     one ``timestamp\tmessage`` line per event

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> from logtrawl.artifacts import EventLine, FilesystemArtifactSink
>>>
>>> sink = FilesystemArtifactSink(Path("tmp"))
>>> asyncio.run(sink.begin_run())
>>> asyncio.run(sink.append_events("abc", [EventLine("100", "boot")]))

"""

from __future__ import annotations

import asyncio
import shutil
import typing as typ

from .errors import ArtifactWriteError
from .sink import MANIFEST_COLUMNS, join_fields

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .sink import EventLine, ManifestRow

MANIFEST_NAME = "info.txt"
ARTIFACT_SUFFIX = ".txt"


def _append_lines(path: Path, lines: typ.Sequence[str]) -> None:
    with path.open("a", encoding="utf-8", newline="\n") as handle:
        handle.writelines(f"{line}\n" for line in lines)


def _write_lines(path: Path, lines: typ.Sequence[str]) -> None:
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.writelines(f"{line}\n" for line in lines)


def reset_directory(path: Path) -> None:
    """Remove ``path`` with everything in it and recreate it empty.

    Raises
    ------
    ArtifactWriteError
        If the directory cannot be removed or created.

    """
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise ArtifactWriteError.reset_failed(path, exc) from exc
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArtifactWriteError.reset_failed(path, exc) from exc


class FilesystemArtifactSink:
    """Append artifacts to text files under a working directory.

    Parameters
    ----------
    base_path
        Directory holding the manifest and per-tag files. It must exist.

    """

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with its working directory."""
        self._base_path = base_path

    @property
    def manifest_path(self) -> Path:
        """Return the manifest file path."""
        return self._base_path / MANIFEST_NAME

    def tag_path(self, tag: str) -> Path:
        """Return the artifact path for ``tag``.

        Raises
        ------
        ArtifactWriteError
            If ``tag`` is empty, a relative path component, contains a path
            separator, or collides with the manifest.

        """
        name = f"{tag}{ARTIFACT_SUFFIX}"
        if (
            not tag
            or tag in {".", ".."}
            or "/" in tag
            or "\\" in tag
            or "\x00" in tag
            or name == MANIFEST_NAME
        ):
            raise ArtifactWriteError.invalid_tag(tag)
        return self._base_path / name

    def validate_tag(self, tag: str) -> None:
        """Reject ``tag`` before anything is written for it."""
        self.tag_path(tag)

    async def begin_run(self) -> None:
        """Truncate the manifest and write its column header."""
        await self._write(
            self.manifest_path, [join_fields(MANIFEST_COLUMNS)], append=False
        )

    async def append_manifest(self, row: ManifestRow) -> None:
        """Append one manifest line."""
        await self._write(self.manifest_path, [row.to_line()], append=True)

    async def append_events(self, tag: str, lines: typ.Sequence[EventLine]) -> None:
        """Append event lines to ``tag``'s file; nothing is created when empty."""
        if not lines:
            return
        path = self.tag_path(tag)
        await self._write(path, [line.to_line() for line in lines], append=True)

    @staticmethod
    async def _write(path: Path, lines: list[str], *, append: bool) -> None:
        writer = _append_lines if append else _write_lines
        try:
            await asyncio.to_thread(writer, path, lines)
        except OSError as exc:
            raise ArtifactWriteError.append_failed(path, exc) from exc
