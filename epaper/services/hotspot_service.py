"""Hotspot create/update/delete with link and reference maintenance."""

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from epaper.config import get_settings
from epaper.core.exceptions import NotFoundError, ValidationError
from epaper.core.hotspot_links import detach_hotspot_links, sync_linked_hotspot
from epaper.database import transaction
from epaper.models.page import Page
from epaper.models.page_hotspot import PageHotspot
from epaper.schemas.hotspot import HotspotInput
from epaper.services.page_service import get_page

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 6


def get_hotspot(db: Session, hotspot_id: int) -> PageHotspot:
    """Load a hotspot or raise NotFoundError."""
    hotspot = db.get(PageHotspot, hotspot_id)
    if hotspot is None:
        raise NotFoundError("Hotspot", hotspot_id)
    return hotspot


def list_page_hotspots(db: Session, page_id: int) -> list[PageHotspot]:
    """Hotspots of a page in creation order."""
    get_page(db, page_id)
    return (
        db.query(PageHotspot)
        .filter(PageHotspot.page_id == page_id)
        .order_by(PageHotspot.id)
        .all()
    )


def _normalize_label(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _validate_geometry(data: HotspotInput, errors: dict[str, list[str]]) -> None:
    for name in ("x", "y"):
        value = getattr(data, name)
        if not 0 <= value <= 1:
            errors.setdefault(name, []).append(f"The {name} field must be between 0 and 1.")

    for name in ("w", "h"):
        value = getattr(data, name)
        if not 0 < value <= 1:
            errors.setdefault(name, []).append(
                f"The {name} field must be greater than 0 and at most 1."
            )

    if errors:
        return

    if round(data.x + data.w, COORDINATE_PRECISION) > 1.0:
        errors.setdefault("w", []).append("x + w must be less than or equal to 1.")
    if round(data.y + data.h, COORDINATE_PRECISION) > 1.0:
        errors.setdefault("h", []).append("y + h must be less than or equal to 1.")


def _validate_hotspot_input(
    db: Session,
    page: Page,
    data: HotspotInput,
    hotspot_id: int | None = None,
) -> int | None:
    """
    Check a hotspot payload against its page's edition.

    Args:
        db: Database session
        page: Page that owns (or will own) the hotspot
        data: Submitted hotspot fields
        hotspot_id: Id of the hotspot being updated, None on create

    Returns:
        The target page number to store: the submitted one, or the page
        number of the target hotspot when only that was given

    Raises:
        ValidationError: With every problem found, keyed by field
    """
    settings = get_settings()
    errors: dict[str, list[str]] = {}

    _validate_geometry(data, errors)

    label = _normalize_label(data.label)
    if label is not None and len(label) > settings.hotspot_label_max_length:
        errors.setdefault("label", []).append(
            f"The label may not be greater than {settings.hotspot_label_max_length} characters."
        )

    edition_id = page.edition_id
    max_page_no = db.execute(
        select(func.max(Page.page_no)).where(Page.edition_id == edition_id)
    ).scalar() or 0

    target_page_no = data.target_page_no
    if target_page_no is not None and not 1 <= target_page_no <= max_page_no:
        errors.setdefault("target_page_no", []).append(
            f"Target page must be between 1 and {max(max_page_no, 1)} for this edition."
        )

    target_hotspot_id = data.target_hotspot_id
    target_hotspot = None
    if target_hotspot_id is not None:
        if hotspot_id is not None and target_hotspot_id == hotspot_id:
            errors.setdefault("target_hotspot_id", []).append("A hotspot cannot link to itself.")
        else:
            target_hotspot = db.get(PageHotspot, target_hotspot_id)
            if target_hotspot is None:
                errors.setdefault("target_hotspot_id", []).append(
                    "Selected target hotspot does not exist."
                )
            elif target_hotspot.page.edition_id != edition_id:
                errors.setdefault("target_hotspot_id", []).append(
                    "Selected target hotspot must belong to the same edition."
                )
            elif target_page_no is not None and target_hotspot.page.page_no != target_page_no:
                errors.setdefault("target_hotspot_id", []).append(
                    f"Selected hotspot must belong to target page {target_page_no}."
                )

    if errors:
        raise ValidationError(errors)

    if target_page_no is None and target_hotspot is not None:
        return target_hotspot.page.page_no
    return target_page_no


def _apply_fields(hotspot: PageHotspot, data: HotspotInput, target_page_no: int | None) -> None:
    hotspot.relation_kind = data.relation_kind.value
    hotspot.target_page_no = target_page_no
    hotspot.x = round(data.x, COORDINATE_PRECISION)
    hotspot.y = round(data.y, COORDINATE_PRECISION)
    hotspot.w = round(data.w, COORDINATE_PRECISION)
    hotspot.h = round(data.h, COORDINATE_PRECISION)
    hotspot.label = _normalize_label(data.label)


def create_hotspot(db: Session, page_id: int, data: HotspotInput) -> PageHotspot:
    """
    Create a hotspot on a page and link it to its target hotspot, if any.

    Raises:
        NotFoundError: If the page does not exist
        ValidationError: If geometry or target references are invalid
    """
    page = get_page(db, page_id)
    target_page_no = _validate_hotspot_input(db, page, data)

    with transaction(db):
        hotspot = PageHotspot(
            page_id=page.id,
            target_hotspot_id=None,
            linked_hotspot_id=None,
        )
        _apply_fields(hotspot, data, target_page_no)
        db.add(hotspot)
        db.flush()

        sync_linked_hotspot(db, hotspot, data.target_hotspot_id)

    db.refresh(hotspot)
    logger.info(
        "Created hotspot %d on page %d",
        hotspot.id,
        page.id,
        extra={"event": "hotspot.create", "page_id": page.id, "hotspot_id": hotspot.id},
    )
    return hotspot


def update_hotspot(db: Session, hotspot_id: int, data: HotspotInput) -> PageHotspot:
    """
    Update a hotspot's geometry, label and targets.

    Raises:
        NotFoundError: If the hotspot does not exist
        ValidationError: If geometry or target references are invalid,
            including a link to itself
    """
    hotspot = get_hotspot(db, hotspot_id)
    target_page_no = _validate_hotspot_input(db, hotspot.page, data, hotspot_id=hotspot.id)

    with transaction(db):
        _apply_fields(hotspot, data, target_page_no)
        sync_linked_hotspot(db, hotspot, data.target_hotspot_id)

    db.refresh(hotspot)
    logger.info(
        "Updated hotspot %d",
        hotspot.id,
        extra={"event": "hotspot.update", "page_id": hotspot.page_id, "hotspot_id": hotspot.id},
    )
    return hotspot


def _delete_hotspot_and_detach_links(db: Session, hotspot: PageHotspot) -> None:
    detach_hotspot_links(db, hotspot)
    db.delete(hotspot)
    db.flush()


def delete_hotspot(db: Session, hotspot_id: int) -> int:
    """
    Delete a hotspot, clearing every link that points to or from it.

    Returns:
        Id of the page the hotspot was on

    Raises:
        NotFoundError: If the hotspot does not exist
    """
    hotspot = get_hotspot(db, hotspot_id)
    page_id = hotspot.page_id

    with transaction(db):
        _delete_hotspot_and_detach_links(db, hotspot)

    logger.info(
        "Deleted hotspot %d",
        hotspot_id,
        extra={"event": "hotspot.delete", "page_id": page_id, "hotspot_id": hotspot_id},
    )
    return page_id


def bulk_delete_hotspots(db: Session, page_id: int, hotspot_ids: Sequence[int]) -> int:
    """
    Delete several hotspots of one page as a single unit.

    Every id must still belong to ``page_id``; otherwise nothing is deleted.

    Returns:
        Number of hotspots deleted

    Raises:
        ValidationError: If the selection is empty, too large, has duplicates,
            or includes hotspots that are not on the page
    """
    settings = get_settings()
    ids = [int(hotspot_id) for hotspot_id in hotspot_ids]

    if not ids:
        raise ValidationError.for_field("hotspot_ids", "Select at least one hotspot.")
    if len(ids) > settings.hotspot_bulk_delete_limit:
        raise ValidationError.for_field(
            "hotspot_ids",
            f"You may not delete more than {settings.hotspot_bulk_delete_limit} hotspots at once.",
        )
    if len(set(ids)) != len(ids):
        raise ValidationError.for_field("hotspot_ids", "Selected hotspots must be distinct.")

    hotspots = (
        db.query(PageHotspot)
        .filter(PageHotspot.page_id == page_id, PageHotspot.id.in_(ids))
        .order_by(PageHotspot.id)
        .all()
    )

    if len(hotspots) != len(ids):
        raise ValidationError.for_field(
            "hotspot_ids",
            "Some selected hotspots are no longer available on this page.",
        )

    with transaction(db):
        for hotspot in hotspots:
            _delete_hotspot_and_detach_links(db, hotspot)

    logger.info(
        "Deleted %d hotspots from page %d",
        len(hotspots),
        page_id,
        extra={"event": "hotspots.bulk_delete", "page_id": page_id, "count": len(hotspots)},
    )
    return len(hotspots)
