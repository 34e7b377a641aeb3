"""Transient staging of raw event pages between harvest and reduction."""

from __future__ import annotations

from .errors import StagedTagNotFoundError, StagingError
from .storage import (
    STAGING_DB_NAME,
    StagedPage,
    init_staging_storage,
    reset_staging_storage,
    staging_database_url,
)
from .store import StagingStore

__all__ = [
    "STAGING_DB_NAME",
    "StagedPage",
    "StagedTagNotFoundError",
    "StagingError",
    "StagingStore",
    "init_staging_storage",
    "reset_staging_storage",
    "staging_database_url",
]
