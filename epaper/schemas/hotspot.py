"""Hotspot schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from epaper.models.page_hotspot import RelationKind


class HotspotInput(BaseModel):
    """Editable hotspot fields; range and cross-reference checks happen in the service."""

    relation_kind: RelationKind
    x: float = Field(..., description="Left edge, normalized to image width")
    y: float = Field(..., description="Top edge, normalized to image height")
    w: float = Field(..., description="Width, normalized to image width")
    h: float = Field(..., description="Height, normalized to image height")
    target_page_no: int | None = None
    target_hotspot_id: int | None = None
    label: str | None = None


class HotspotCreate(HotspotInput):
    """Hotspot creation schema."""

    page_id: int


class HotspotBulkDelete(BaseModel):
    """Bulk deletion request for hotspots on one page."""

    page_id: int
    hotspot_ids: list[int] = Field(..., min_length=1)


class Hotspot(BaseModel):
    """Hotspot response schema."""

    id: int
    page_id: int
    relation_kind: str
    target_page_no: int | None = None
    target_hotspot_id: int | None = None
    linked_hotspot_id: int | None = None
    x: float
    y: float
    w: float
    h: float
    label: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
