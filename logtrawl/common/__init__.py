"""Shared helpers used across logtrawl packages."""
