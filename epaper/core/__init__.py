"""Consistency-maintenance core for editions, pages and hotspots."""

from epaper.core.exceptions import EpaperError, NotFoundError, ValidationError

__all__ = ["EpaperError", "NotFoundError", "ValidationError"]
