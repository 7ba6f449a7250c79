"""SQLAlchemy database models."""

from epaper.models.category import Category
from epaper.models.edition import Edition, EditionStatus
from epaper.models.page import Page
from epaper.models.page_hotspot import PageHotspot, RelationKind

__all__ = [
    "Edition",
    "EditionStatus",
    "Category",
    "Page",
    "PageHotspot",
    "RelationKind",
]
