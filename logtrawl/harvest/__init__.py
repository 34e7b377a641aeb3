"""Tag harvesting: paginate Loggly event streams into staging."""

from __future__ import annotations

from .errors import HarvestPageLimitError
from .harvester import HarvestConfig, HarvestResult, TagHarvester

__all__ = ["HarvestConfig", "HarvestPageLimitError", "HarvestResult", "TagHarvester"]
