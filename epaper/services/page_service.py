"""Page ordering, renumbering and deletion for an edition.

Every mutation runs in one transaction together with the hotspot
``target_page_no`` propagation it implies, so readers never see a page
moved without the hotspots that point at it.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from epaper.config import get_settings
from epaper.core.exceptions import NotFoundError, ValidationError
from epaper.core.hotspot_links import detach_hotspot_links
from epaper.core.page_renumber import (
    clear_page_number_targets,
    propagate_page_number_change,
    remap_target_page_numbers,
)
from epaper.core.position_sequencer import (
    apply_sequential_positions,
    load_positions,
    plan_sequential_positions,
)
from epaper.database import transaction
from epaper.models.category import Category
from epaper.models.edition import Edition
from epaper.models.page import Page
from epaper.storage import StorageService

logger = logging.getLogger(__name__)


def get_page(db: Session, page_id: int) -> Page:
    """Load a page or raise NotFoundError."""
    page = db.get(Page, page_id)
    if page is None:
        raise NotFoundError("Page", page_id)
    return page


def get_edition(db: Session, edition_id: int) -> Edition:
    """Load an edition or raise NotFoundError."""
    edition = db.get(Edition, edition_id)
    if edition is None:
        raise NotFoundError("Edition", edition_id)
    return edition


def edition_lock_query(edition_id: int):
    return select(Edition).where(Edition.id == edition_id).with_for_update()


def lock_edition(db: Session, edition_id: int) -> Edition:
    """
    Load an edition with its row locked until the current transaction ends.

    Every writer to an edition's page set takes this lock first, so inserts,
    renumbers, reorders and publishing of one edition run one at a time.

    Raises:
        NotFoundError: If the edition does not exist
    """
    edition = db.execute(edition_lock_query(edition_id)).scalar_one_or_none()
    if edition is None:
        raise NotFoundError("Edition", edition_id)
    return edition


def next_page_no(db: Session, edition_id: int) -> int:
    """First page number after the highest one currently used in the edition."""
    current_max = db.execute(
        select(func.max(Page.page_no)).where(Page.edition_id == edition_id)
    ).scalar()
    return (current_max or 0) + 1


def _validate_page_fields(
    db: Session,
    edition_id: int,
    page_no: int,
    category_id: int | None,
    page_id: int | None = None,
) -> None:
    settings = get_settings()
    errors: dict[str, list[str]] = {}

    if page_no < 1 or page_no > settings.position_max_value:
        errors["page_no"] = [
            f"Page number must be between 1 and {settings.position_max_value}."
        ]
    else:
        clash_query = select(Page.id).where(
            Page.edition_id == edition_id,
            Page.page_no == page_no,
        )
        if page_id is not None:
            clash_query = clash_query.where(Page.id != page_id)
        if db.execute(clash_query).first() is not None:
            errors["page_no"] = [f"Page number {page_no} is already used in this edition."]

    if category_id is not None and db.get(Category, category_id) is None:
        errors["category_id"] = ["Selected category does not exist."]

    if errors:
        raise ValidationError(errors)


def create_page(
    db: Session,
    edition_id: int,
    image_original_path: str,
    *,
    page_no: int | None = None,
    category_id: int | None = None,
    image_large_path: str | None = None,
    image_thumb_path: str | None = None,
    width: int | None = None,
    height: int | None = None,
) -> Page:
    """
    Register a page whose image files the uploader has already stored.

    Args:
        db: Database session
        edition_id: Owning edition
        image_original_path: Storage key of the original scan
        page_no: Explicit page number, or None to append after the last page

    Returns:
        The created Page

    Raises:
        NotFoundError: If the edition does not exist
        ValidationError: If the page number is out of range or taken
    """
    try:
        with transaction(db):
            lock_edition(db, edition_id)

            if page_no is None:
                page_no = next_page_no(db, edition_id)

            _validate_page_fields(db, edition_id, page_no, category_id)

            page = Page(
                edition_id=edition_id,
                page_no=page_no,
                category_id=category_id,
                image_original_path=image_original_path,
                image_large_path=image_large_path,
                image_thumb_path=image_thumb_path,
                width=width,
                height=height,
            )
            db.add(page)
            db.flush()
    except IntegrityError:
        raise ValidationError.for_field(
            "page_no", f"Page number {page_no} is already used in this edition."
        ) from None

    db.refresh(page)
    logger.info(
        "Created page %d in edition %d",
        page.page_no,
        edition_id,
        extra={"event": "page.create", "edition_id": edition_id, "page_id": page.id},
    )
    return page


def reorder_pages(db: Session, edition_id: int, ordered_page_ids: Sequence[int]) -> int:
    """
    Renumber every page of an edition to match a new order.

    Page numbers become 1..N in the given order. Hotspots targeting a page by
    number follow the page to its new number.

    Args:
        db: Database session
        edition_id: Edition whose pages are reordered
        ordered_page_ids: All page ids of the edition, in the new order

    Returns:
        Number of pages reordered

    Raises:
        NotFoundError: If the edition does not exist
        ValidationError: If the ids are not exactly the edition's pages, or
            there are too many pages for the page number range
    """
    settings = get_settings()

    with transaction(db):
        lock_edition(db, edition_id)
        current = load_positions(db, Page.page_no, Page.edition_id == edition_id)
        plan = plan_sequential_positions(
            current,
            ordered_page_ids,
            max_value=settings.position_max_value,
            field="ordered_page_ids",
            invalid_message="Reorder payload is invalid for this edition.",
            too_many_message="Too many pages to reorder.",
        )
        remap = plan.value_remap()

        apply_sequential_positions(db, Page.page_no, plan)
        retargeted = remap_target_page_numbers(db, edition_id, remap)

    logger.info(
        "Reordered %d pages in edition %d (%d hotspot targets updated)",
        plan.count,
        edition_id,
        retargeted,
        extra={"event": "pages.reorder", "edition_id": edition_id, "count": plan.count},
    )
    return plan.count


def update_page(
    db: Session,
    page_id: int,
    page_no: int,
    category_id: int | None = None,
) -> Page:
    """
    Change a page's number and category.

    Hotspots anywhere in the edition that targeted the old number are
    rewritten to the new one.

    Raises:
        NotFoundError: If the page does not exist
        ValidationError: If the new number is out of range or already taken
    """
    page = get_page(db, page_id)
    edition_id = page.edition_id

    try:
        with transaction(db):
            lock_edition(db, edition_id)
            db.refresh(page)
            old_page_no = page.page_no

            _validate_page_fields(db, edition_id, page_no, category_id, page_id=page.id)

            page.page_no = page_no
            page.category_id = category_id
            db.flush()

            retargeted = propagate_page_number_change(db, edition_id, old_page_no, page_no)
    except IntegrityError:
        raise ValidationError.for_field(
            "page_no", f"Page number {page_no} is already used in this edition."
        ) from None

    db.refresh(page)
    logger.info(
        "Updated page %d (was %d, %d hotspot targets updated)",
        page_no,
        old_page_no,
        retargeted,
        extra={"event": "page.update", "edition_id": edition_id, "page_id": page.id},
    )
    return page


async def delete_page_files(storage: StorageService, page: Page) -> int:
    """
    Delete the image renditions of a page, best-effort.

    A failed deletion is logged and skipped; an orphaned file is preferable
    to a page that cannot be removed.

    Returns:
        Number of files actually deleted
    """
    deleted = 0
    for key in page.image_paths:
        try:
            if await storage.delete_file(key):
                deleted += 1
        except Exception as e:
            logger.warning(
                f"Failed to delete page image {key}: {e}",
                extra={"event": "page.file_delete_failed", "page_id": page.id, "key": key},
            )
    return deleted


async def delete_page(db: Session, storage: StorageService, page_id: int) -> int:
    """
    Delete a page, its image files and its hotspots.

    Hotspot-id links from other pages into this page's hotspots are detached.
    Hotspots elsewhere that target this page *by number* keep that number
    unless ``clear_stale_page_targets_on_delete`` is enabled.

    Returns:
        Page number of the deleted page

    Raises:
        NotFoundError: If the page does not exist
    """
    settings = get_settings()
    page = get_page(db, page_id)
    edition_id = page.edition_id
    page_no = page.page_no

    with transaction(db):
        await delete_page_files(storage, page)

        for hotspot in list(page.hotspots):
            detach_hotspot_links(db, hotspot)

        if settings.clear_stale_page_targets_on_delete:
            clear_page_number_targets(db, edition_id, page_no)

        db.delete(page)
        db.flush()

    logger.info(
        "Deleted page %d from edition %d",
        page_no,
        edition_id,
        extra={"event": "page.delete", "edition_id": edition_id, "page_id": page_id},
    )
    return page_no
