"""PageHotspot model for clickable navigation regions on a page image."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from epaper.database import Base


class RelationKind(str, Enum):
    """Semantic label of where a hotspot leads."""

    NEXT = "next"
    PREVIOUS = "previous"


class PageHotspot(Base):
    """Rectangular region on a page, in normalized [0, 1] image coordinates.

    Two independent references describe where the hotspot leads:

    - ``target_page_no`` is a soft reference by page number, resolved at read
      time and kept in sync by the renumber propagator.
    - ``target_hotspot_id`` / ``linked_hotspot_id`` form a strict one-to-one
      pair between two hotspots, kept symmetric by the link synchronizer.

    Neither is a foreign key.
    """

    __tablename__ = "page_hotspots"
    __table_args__ = (Index("ix_page_hotspots_page_relation", "page_id", "relation_kind"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    page_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relation_kind: Mapped[str] = mapped_column(
        String(20), default=RelationKind.NEXT.value, nullable=False
    )

    # Navigation references
    target_page_no: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_hotspot_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    linked_hotspot_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    # Geometry
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    w: Mapped[float] = mapped_column(Float, nullable=False)
    h: Mapped[float] = mapped_column(Float, nullable=False)

    label: Mapped[str | None] = mapped_column(String(150), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    page: Mapped["Page"] = relationship("Page", back_populates="hotspots")

    def __repr__(self) -> str:
        return (
            f"<PageHotspot(id={self.id}, page_id={self.page_id}, "
            f"target_page_no={self.target_page_no}, target_hotspot_id={self.target_hotspot_id}, "
            f"linked_hotspot_id={self.linked_hotspot_id})>"
        )
