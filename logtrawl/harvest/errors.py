"""Harvest error types."""

from __future__ import annotations


class HarvestPageLimitError(RuntimeError):
    """Raised when a tag's stream exceeds the configured page bound."""

    def __init__(self, tag: str, limit: int) -> None:
        """Record the tag and the bound it exceeded."""
        self.tag = tag
        self.limit = limit
        super().__init__(
            f"tag {tag!r} still had a next page after {limit} pages; "
            "aborting (raise --max-pages or leave it unset)"
        )
