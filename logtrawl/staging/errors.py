"""Staging store error types."""

from __future__ import annotations


class StagingError(RuntimeError):
    """Raised when the staging database cannot be read or written."""

    @classmethod
    def write_failed(cls, tag: str, sequence: int, detail: str) -> StagingError:
        """Return an error for a failed page write."""
        return cls(f"could not stage page {sequence} of tag {tag!r}: {detail}")

    @classmethod
    def read_failed(cls, tag: str, detail: str) -> StagingError:
        """Return an error for a failed read of a tag's pages."""
        return cls(f"could not read staged pages of tag {tag!r}: {detail}")

    @classmethod
    def corrupt_page(cls, tag: str, sequence: int, detail: str) -> StagingError:
        """Return an error for a staged payload that no longer decodes."""
        return cls(f"staged page {sequence} of tag {tag!r} is corrupt: {detail}")

    @classmethod
    def reset_failed(cls, detail: str) -> StagingError:
        """Return an error for a failed schema reset."""
        return cls(f"could not reset staging storage: {detail}")


class StagedTagNotFoundError(StagingError, LookupError):
    """Raised when a tag has no staged pages."""

    def __init__(self, tag: str) -> None:
        """Record the missing tag."""
        self.tag = tag
        super().__init__(f"no staged pages for tag {tag!r}")
