"""Edition lifecycle: creation per date, renaming, deletion and publishing."""

import logging
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from epaper.config import get_settings
from epaper.core.exceptions import ValidationError
from epaper.core.publish_readiness import PublishReadiness, evaluate_publish_readiness
from epaper.database import transaction
from epaper.models.edition import Edition, EditionStatus
from epaper.models.page import Page
from epaper.services.page_service import delete_page_files, get_edition, lock_edition
from epaper.storage import StorageService

logger = logging.getLogger(__name__)


def _normalize_name(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def create_edition(db: Session, edition_date: date, name: str | None = None) -> Edition:
    """Create a draft edition for a date."""
    with transaction(db):
        edition = Edition(
            edition_date=edition_date,
            name=_normalize_name(name),
            status=EditionStatus.DRAFT.value,
        )
        db.add(edition)
        db.flush()

    db.refresh(edition)
    logger.info(
        "Created edition %d for %s",
        edition.id,
        edition_date.isoformat(),
        extra={"event": "edition.create", "edition_id": edition.id},
    )
    return edition


def list_editions_for_date(db: Session, edition_date: date) -> list[tuple[Edition, int]]:
    """Editions sharing a date, newest first, each with its page count."""
    rows = db.execute(
        select(Edition, func.count(Page.id))
        .outerjoin(Page, Page.edition_id == Edition.id)
        .where(Edition.edition_date == edition_date)
        .group_by(Edition.id)
        .order_by(Edition.id.desc())
    ).all()
    return [(edition, pages_count) for edition, pages_count in rows]


def find_or_create_edition_for_date(db: Session, edition_date: date) -> Edition:
    """Newest edition for the date, or a new draft if there is none yet."""
    edition = (
        db.query(Edition)
        .filter(Edition.edition_date == edition_date)
        .order_by(Edition.id.desc())
        .first()
    )
    if edition is not None:
        return edition
    return create_edition(db, edition_date)


def rename_edition(db: Session, edition_id: int, name: str | None) -> Edition:
    """Set or clear (empty name) an edition's display name."""
    edition = get_edition(db, edition_id)

    with transaction(db):
        edition.name = _normalize_name(name)

    db.refresh(edition)
    return edition


async def delete_edition(db: Session, storage: StorageService, edition_id: int) -> int:
    """
    Delete an edition with all its pages and hotspots.

    Page image files are removed best-effort before the rows.

    Returns:
        Number of pages deleted along with the edition
    """
    edition = get_edition(db, edition_id)
    pages = list(edition.pages)

    with transaction(db):
        for page in pages:
            await delete_page_files(storage, page)
        db.delete(edition)
        db.flush()

    logger.info(
        "Deleted edition %d with %d pages",
        edition_id,
        len(pages),
        extra={"event": "edition.delete", "edition_id": edition_id, "count": len(pages)},
    )
    return len(pages)


def evaluate_edition_readiness(db: Session, edition_id: int) -> PublishReadiness:
    """Run the publish readiness check on an edition's current page numbers."""
    settings = get_settings()
    get_edition(db, edition_id)

    page_numbers = db.execute(
        select(Page.page_no).where(Page.edition_id == edition_id)
    ).scalars().all()

    return evaluate_publish_readiness(
        page_numbers,
        preview_limit=settings.publish_blocker_preview_limit,
    )


def publish_edition(db: Session, edition_id: int) -> Edition:
    """
    Move an edition from draft to published.

    Raises:
        NotFoundError: If the edition does not exist
        ValidationError: If page numbering has duplicates or gaps, or there
            are no pages; ``blockers`` lists every reason
    """
    with transaction(db):
        edition = lock_edition(db, edition_id)
        readiness = evaluate_edition_readiness(db, edition_id)

        if not readiness.is_ready:
            raise ValidationError({"edition_id": readiness.blockers}, blockers=readiness.blockers)

        edition.status = EditionStatus.PUBLISHED.value
        edition.published_at = datetime.utcnow()

    db.refresh(edition)
    logger.info(
        "Published edition %d",
        edition_id,
        extra={"event": "edition.publish", "edition_id": edition_id},
    )
    return edition


def unpublish_edition(db: Session, edition_id: int) -> Edition:
    """Move an edition back to draft; always allowed."""
    edition = get_edition(db, edition_id)

    with transaction(db):
        edition.status = EditionStatus.DRAFT.value
        edition.published_at = None

    db.refresh(edition)
    logger.info(
        "Unpublished edition %d",
        edition_id,
        extra={"event": "edition.unpublish", "edition_id": edition_id},
    )
    return edition
