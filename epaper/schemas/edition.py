"""Edition schemas."""

from datetime import date, datetime

from pydantic import BaseModel

from epaper.schemas.page import PageWithHotspots


class EditionBase(BaseModel):
    """Base edition schema."""

    edition_date: date
    name: str | None = None


class EditionCreate(EditionBase):
    """Edition creation schema."""


class EditionUpdate(BaseModel):
    """Edition rename schema; an empty name clears it."""

    name: str | None = None


class Edition(EditionBase):
    """Edition response schema."""

    id: int
    status: str
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EditionSummary(Edition):
    """Edition listed for a date, with its page count."""

    pages_count: int = 0


class EditionWithPages(Edition):
    """Edition with its pages in page order."""

    pages: list[PageWithHotspots] = []


class PublishReadiness(BaseModel):
    """Whether an edition can be published, and what blocks it."""

    is_ready: bool
    blockers: list[str] = []


class MessageResponse(BaseModel):
    """One-line confirmation of a successful mutation."""

    message: str
