"""Artifact assembly: per-tag event files and the shared manifest."""

from __future__ import annotations

from .errors import ArtifactWriteError
from .filesystem_sink import (
    ARTIFACT_SUFFIX,
    MANIFEST_NAME,
    FilesystemArtifactSink,
    reset_directory,
)
from .reducer import ArtifactReducer, ReductionResult
from .sink import MANIFEST_COLUMNS, ArtifactSink, EventLine, ManifestRow

__all__ = [
    "ARTIFACT_SUFFIX",
    "MANIFEST_COLUMNS",
    "MANIFEST_NAME",
    "ArtifactReducer",
    "ArtifactSink",
    "ArtifactWriteError",
    "EventLine",
    "FilesystemArtifactSink",
    "ManifestRow",
    "ReductionResult",
    "reset_directory",
]
