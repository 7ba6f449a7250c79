"""Pydantic schemas for API request/response models."""

from epaper.schemas.edition import Edition, EditionCreate, EditionUpdate, MessageResponse
from epaper.schemas.hotspot import Hotspot, HotspotBulkDelete, HotspotCreate, HotspotInput
from epaper.schemas.page import Page, PageCreate, PageReorder, PageUpdate

__all__ = [
    "Edition",
    "EditionCreate",
    "EditionUpdate",
    "MessageResponse",
    "Hotspot",
    "HotspotBulkDelete",
    "HotspotCreate",
    "HotspotInput",
    "Page",
    "PageCreate",
    "PageReorder",
    "PageUpdate",
]
