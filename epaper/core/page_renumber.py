"""Keeps ``target_page_no`` soft references pointing at the right page after renumbering."""

from collections.abc import Mapping

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from epaper.models.page import Page
from epaper.models.page_hotspot import PageHotspot


def _edition_page_ids(edition_id: int):
    return select(Page.id).where(Page.edition_id == edition_id)


def propagate_page_number_change(
    db: Session,
    edition_id: int,
    old_page_no: int,
    new_page_no: int,
) -> int:
    """
    Rewrite every hotspot in the edition that targets ``old_page_no``.

    Returns:
        Number of hotspots rewritten (0 when the number did not change)
    """
    if old_page_no == new_page_no:
        return 0

    result = db.execute(
        update(PageHotspot)
        .where(
            PageHotspot.page_id.in_(_edition_page_ids(edition_id)),
            PageHotspot.target_page_no == old_page_no,
        )
        .values(target_page_no=new_page_no)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def remap_target_page_numbers(
    db: Session,
    edition_id: int,
    mapping: Mapping[int, int],
) -> int:
    """
    Apply a full old -> new page number mapping to every hotspot in the edition.

    The mapping must be captured before any page was renumbered. It is applied
    in one UPDATE with a CASE expression, so each hotspot is rewritten exactly
    once from its original value even when two pages trade numbers.

    Returns:
        Number of hotspots rewritten
    """
    changed = {old: new for old, new in mapping.items() if old != new}
    if not changed:
        return 0

    result = db.execute(
        update(PageHotspot)
        .where(
            PageHotspot.page_id.in_(_edition_page_ids(edition_id)),
            PageHotspot.target_page_no.in_(list(changed)),
        )
        .values(
            target_page_no=case(changed, value=PageHotspot.target_page_no),
        )
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def clear_page_number_targets(db: Session, edition_id: int, page_no: int) -> int:
    """Null out soft references to ``page_no`` across the edition."""
    result = db.execute(
        update(PageHotspot)
        .where(
            PageHotspot.page_id.in_(_edition_page_ids(edition_id)),
            PageHotspot.target_page_no == page_no,
        )
        .values(target_page_no=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
