"""ArtifactSink protocol and the records written through it.

The reducer produces two kinds of records: one :class:`EventLine` per event,
appended to that tag's artifact, and at most one :class:`ManifestRow` per
tag, appended to the shared manifest. Adapters decide where the lines land.

Usage
-----
Render records as they appear on disk:

>>> EventLine(timestamp="100", message="boot").to_line()
'100\\tboot'
>>> ManifestRow(tag="abc", app_version="1.2", os_type="ios",
...             os_version="11.2", model="iPhone9,1").to_line()
'abc\\t1.2\\tios\\t11.2\\tiPhone9,1'

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from logtrawl.loggly.models import Event

MANIFEST_COLUMNS: tuple[str, ...] = (
    "UUID",
    "AppVersion",
    "OsType",
    "OsVersion",
    "Model",
)

_FIELD_ESCAPES = str.maketrans({"\t": "\\t", "\n": "\\n", "\r": "\\r"})


def escape_field(value: str) -> str:
    """Escape separators so a field cannot split its record."""
    return value.translate(_FIELD_ESCAPES)


def join_fields(fields: typ.Iterable[str]) -> str:
    """Join escaped fields into one tab-separated record."""
    return "\t".join(escape_field(field) for field in fields)


@dc.dataclass(frozen=True, slots=True)
class EventLine:
    """One ``timestamp<TAB>message`` record of a tag artifact."""

    timestamp: str
    message: str

    @classmethod
    def from_event(cls, event: Event) -> EventLine:
        """Build the record for ``event``."""
        return cls(timestamp=event.display_timestamp, message=event.message)

    def to_line(self) -> str:
        """Render the record without its trailing newline."""
        return join_fields((self.timestamp, self.message))


@dc.dataclass(frozen=True, slots=True)
class ManifestRow:
    """Descriptive manifest record for one tag."""

    tag: str
    app_version: str
    os_type: str
    os_version: str
    model: str

    @classmethod
    def from_event(cls, tag: str, event: Event) -> ManifestRow:
        """Build the manifest record for ``tag`` from its first event."""
        return cls(
            tag=tag,
            app_version=event.app_version,
            os_type=event.os_type,
            os_version=event.os_version,
            model=event.model,
        )

    def to_line(self) -> str:
        """Render the record without its trailing newline."""
        return join_fields(
            (self.tag, self.app_version, self.os_type, self.os_version, self.model)
        )


@typ.runtime_checkable
class ArtifactSink(typ.Protocol):
    """Protocol for append-only artifact storage."""

    def validate_tag(self, tag: str) -> None:
        """Raise ``ArtifactWriteError`` when ``tag`` cannot name an artifact."""
        ...

    async def begin_run(self) -> None:
        """Start a fresh manifest containing only the column header."""
        ...

    async def append_manifest(self, row: ManifestRow) -> None:
        """Append one manifest record."""
        ...

    async def append_events(self, tag: str, lines: typ.Sequence[EventLine]) -> None:
        """Append event records to ``tag``'s artifact, in order."""
        ...
