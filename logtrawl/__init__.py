"""Harvest Loggly events per tag into flat text artifacts."""

from __future__ import annotations

__version__ = "0.1.0"
