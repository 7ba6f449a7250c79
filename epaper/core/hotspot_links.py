"""Keeps hotspot-to-hotspot links a strict, symmetric one-to-one pairing.

``A.target_hotspot_id == B.id`` must always be matched by
``B.linked_hotspot_id == A.id``. A hotspot nobody targets carries its own
target in ``linked_hotspot_id`` (the pair is treated as mutual once
established). Every step below is a conditional set-based UPDATE, so stale
or already-deleted ids simply match no rows.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from epaper.models.page_hotspot import PageHotspot

logger = logging.getLogger(__name__)


def _update(db: Session, *criteria, **values) -> int:
    result = db.execute(
        update(PageHotspot)
        .where(*criteria)
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


def _ids(db: Session, *criteria) -> set[int]:
    return set(db.execute(select(PageHotspot.id).where(*criteria)).scalars())


def _reconcile_linked(db: Session, hotspot_ids: Iterable[int | None]) -> None:
    """Recompute ``linked_hotspot_id`` for each row: its claimer, else its own target."""
    for hotspot_id in sorted({hotspot_id for hotspot_id in hotspot_ids if hotspot_id is not None}):
        linked_id = db.execute(
            select(PageHotspot.id)
            .where(PageHotspot.target_hotspot_id == hotspot_id)
            .order_by(PageHotspot.id)
            .limit(1)
        ).scalar()
        if linked_id is None:
            linked_id = db.execute(
                select(PageHotspot.target_hotspot_id).where(PageHotspot.id == hotspot_id)
            ).scalar()

        _update(db, PageHotspot.id == hotspot_id, linked_hotspot_id=linked_id)


def sync_linked_hotspot(
    db: Session,
    source: PageHotspot,
    target_hotspot_id: int | None,
) -> None:
    """
    Point ``source`` at ``target_hotspot_id`` (or unlink it when None).

    The source must already be flushed so it has an id. Self-links are the
    caller's responsibility to reject.

    Args:
        db: Database session (inside the caller's transaction)
        source: Hotspot being created or updated
        target_hotspot_id: Desired target hotspot id, or None to unlink
    """
    db.flush()
    source_id = source.id
    previous_target_id = source.target_hotspot_id
    touched: set[int | None] = {source_id, previous_target_id, target_hotspot_id}

    # The old target no longer has this source as its linker.
    if previous_target_id is not None and previous_target_id != target_hotspot_id:
        _update(
            db,
            PageHotspot.id == previous_target_id,
            PageHotspot.linked_hotspot_id == source_id,
            linked_hotspot_id=None,
        )

    # Only the desired target may keep a backlink to this source.
    backlink_criteria = [PageHotspot.linked_hotspot_id == source_id]
    if target_hotspot_id is not None:
        backlink_criteria.append(PageHotspot.id != target_hotspot_id)
    touched |= _ids(db, *backlink_criteria)
    _update(db, *backlink_criteria, linked_hotspot_id=None)

    if target_hotspot_id is None:
        source.target_hotspot_id = None
        source.linked_hotspot_id = None
        db.flush()
        _reconcile_linked(db, touched)
        return

    # One source per target: detach anyone else pointing at it.
    rival_criteria = (
        PageHotspot.target_hotspot_id == target_hotspot_id,
        PageHotspot.id != source_id,
    )
    touched |= _ids(db, *rival_criteria)
    _update(db, *rival_criteria, target_hotspot_id=None, linked_hotspot_id=None)

    # The target can only be claimed by one linker.
    current_linker_id = db.execute(
        select(PageHotspot.linked_hotspot_id).where(PageHotspot.id == target_hotspot_id)
    ).scalar_one_or_none()

    if current_linker_id is not None and current_linker_id != source_id:
        touched.add(current_linker_id)
        _update(
            db,
            PageHotspot.id == current_linker_id,
            PageHotspot.target_hotspot_id == target_hotspot_id,
            target_hotspot_id=None,
            linked_hotspot_id=None,
        )

    source.target_hotspot_id = target_hotspot_id
    source.linked_hotspot_id = target_hotspot_id
    db.flush()

    _update(db, PageHotspot.id == target_hotspot_id, linked_hotspot_id=source_id)

    # A source that is itself someone's target keeps that backlink.
    _reconcile_linked(db, touched)

    logger.debug(
        "Linked hotspot %s -> %s",
        source_id,
        target_hotspot_id,
        extra={"event": "hotspot.link", "hotspot_id": source_id},
    )


def detach_hotspot_links(db: Session, hotspot: PageHotspot) -> None:
    """Clear every hotspot-id reference to or from ``hotspot`` ahead of its deletion."""
    hotspot_id = hotspot.id
    touched: set[int | None] = {hotspot.target_hotspot_id}

    if hotspot.target_hotspot_id is not None:
        _update(
            db,
            PageHotspot.id == hotspot.target_hotspot_id,
            PageHotspot.linked_hotspot_id == hotspot_id,
            linked_hotspot_id=None,
        )

    touched |= _ids(db, PageHotspot.target_hotspot_id == hotspot_id)
    _update(
        db,
        PageHotspot.target_hotspot_id == hotspot_id,
        target_hotspot_id=None,
        linked_hotspot_id=None,
    )

    touched |= _ids(db, PageHotspot.linked_hotspot_id == hotspot_id)
    _update(db, PageHotspot.linked_hotspot_id == hotspot_id, linked_hotspot_id=None)

    _update(db, PageHotspot.id == hotspot_id, target_hotspot_id=None, linked_hotspot_id=None)

    touched.discard(hotspot_id)
    _reconcile_linked(db, touched)
