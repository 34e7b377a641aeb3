"""Artifact output error types."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ArtifactWriteError(RuntimeError):
    """Raised when an output artifact cannot be written."""

    @classmethod
    def append_failed(cls, path: Path, exc: OSError) -> ArtifactWriteError:
        """Return an error for a failed append to ``path``."""
        return cls(f"could not append to {path}: {exc}")

    @classmethod
    def reset_failed(cls, path: Path, exc: OSError) -> ArtifactWriteError:
        """Return an error for a failed reset of the working directory."""
        return cls(f"could not reset working directory {path}: {exc}")

    @classmethod
    def invalid_tag(cls, tag: str) -> ArtifactWriteError:
        """Return an error for a tag that cannot name a file."""
        return cls(f"tag {tag!r} cannot be used as an artifact file name")
