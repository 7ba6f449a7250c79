"""Edition model: a dated collection of pages with a draft/published lifecycle."""

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from epaper.database import Base


class EditionStatus(str, Enum):
    """Edition publishing status."""

    DRAFT = "draft"
    PUBLISHED = "published"


class Edition(Base):
    """One issue of the paper for a calendar date.

    Several editions may share a date (morning/evening runs), so the date
    is indexed but not unique.
    """

    __tablename__ = "editions"
    __table_args__ = (Index("ix_editions_status_date", "status", "edition_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    edition_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(150), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=EditionStatus.DRAFT.value, nullable=False
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    pages: Mapped[list["Page"]] = relationship(
        "Page",
        back_populates="edition",
        order_by="Page.page_no",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_published(self) -> bool:
        return self.status == EditionStatus.PUBLISHED.value

    def __repr__(self) -> str:
        return f"<Edition(id={self.id}, date={self.edition_date}, status={self.status})>"
