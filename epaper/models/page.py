"""Page model for scanned page images within an edition."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from epaper.database import Base


class Page(Base):
    """One scanned page of an edition, numbered uniquely within that edition."""

    __tablename__ = "pages"
    __table_args__ = (
        UniqueConstraint("edition_id", "page_no", name="uq_pages_edition_page_no"),
        Index("ix_pages_edition_category", "edition_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    edition_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("editions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    page_no: Mapped[int] = mapped_column(Integer, nullable=False)

    # Storage (written by the image uploader)
    image_original_path: Mapped[str] = mapped_column(String(500), nullable=False)
    image_large_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_thumb_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    edition: Mapped["Edition"] = relationship("Edition", back_populates="pages")
    category: Mapped["Category"] = relationship("Category", back_populates="pages")
    hotspots: Mapped[list["PageHotspot"]] = relationship(
        "PageHotspot",
        back_populates="page",
        order_by="PageHotspot.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def image_paths(self) -> list[str]:
        """Storage keys of every rendition of this page that exists."""
        return [
            path
            for path in (self.image_original_path, self.image_large_path, self.image_thumb_path)
            if path
        ]

    def __repr__(self) -> str:
        return f"<Page(id={self.id}, edition_id={self.edition_id}, page_no={self.page_no})>"
