"""Page schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from epaper.schemas.hotspot import Hotspot


class PageBase(BaseModel):
    """Base page schema."""

    page_no: int


class PageCreate(BaseModel):
    """Registers a page whose image files were already stored by the uploader."""

    edition_id: int
    image_original_path: str
    page_no: int | None = Field(None, description="Defaults to the next free number")
    category_id: int | None = None
    image_large_path: str | None = None
    image_thumb_path: str | None = None
    width: int | None = None
    height: int | None = None


class PageUpdate(PageBase):
    """Page renumber / recategorize schema."""

    category_id: int | None = None


class PageReorder(BaseModel):
    """Full new ordering of an edition's pages."""

    edition_id: int
    ordered_page_ids: list[int] = Field(..., min_length=1)


class Page(PageBase):
    """Page response schema."""

    id: int
    edition_id: int
    category_id: int | None = None
    image_original_path: str
    image_large_path: str | None = None
    image_thumb_path: str | None = None
    width: int | None = None
    height: int | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PageWithHotspots(Page):
    """Page response with its hotspots."""

    hotspots: list[Hotspot] = []
