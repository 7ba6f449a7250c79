"""Tests for symmetric hotspot-to-hotspot link maintenance."""

import random

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from epaper.core.hotspot_links import detach_hotspot_links, sync_linked_hotspot
from epaper.models.page_hotspot import PageHotspot
from tests.conftest import create_edition, create_hotspot, create_pages


def _links(db: Session) -> dict[int, tuple[int | None, int | None]]:
    """id -> (target_hotspot_id, linked_hotspot_id) straight from the table."""
    db.expire_all()
    rows = db.execute(
        select(PageHotspot.id, PageHotspot.target_hotspot_id, PageHotspot.linked_hotspot_id)
    ).all()
    return {row_id: (target, linked) for row_id, target, linked in rows}


def _assert_symmetric(db: Session) -> None:
    links = _links(db)
    for hotspot_id, (target, linked) in links.items():
        if target is not None:
            assert links[target][1] == hotspot_id, f"{target} should link back to {hotspot_id}"
        if linked is not None:
            partner_target, partner_linked = links[linked]
            assert partner_target == hotspot_id or target == linked, (
                f"{hotspot_id}.linked={linked} has no matching target"
            )

    targets = [target for target, _ in links.values() if target is not None]
    assert len(targets) == len(set(targets)), "a hotspot is targeted by more than one source"


def _link(db: Session, source: PageHotspot, target_id: int | None) -> None:
    sync_linked_hotspot(db, source, target_id)
    db.commit()


@pytest.fixture
def hotspots(db: Session) -> list[PageHotspot]:
    """Three hotspots on page 1 and three on page 2 of one edition."""
    edition = create_edition(db)
    first, second = create_pages(db, edition, 2)
    return [create_hotspot(db, first) for _ in range(3)] + [
        create_hotspot(db, second) for _ in range(3)
    ]


class TestSyncLinkedHotspot:
    def test_link_sets_both_sides(self, db: Session, hotspots):
        a, b = hotspots[0], hotspots[3]

        _link(db, a, b.id)

        links = _links(db)
        assert links[a.id] == (b.id, b.id)
        assert links[b.id] == (None, a.id)

    def test_retarget_releases_previous_target(self, db: Session, hotspots):
        a, b, c = hotspots[0], hotspots[3], hotspots[4]
        _link(db, a, b.id)

        _link(db, a, c.id)

        links = _links(db)
        assert links[a.id] == (c.id, c.id)
        assert links[b.id] == (None, None)
        assert links[c.id] == (None, a.id)

    def test_new_source_steals_target(self, db: Session, hotspots):
        a, b, c = hotspots[0], hotspots[3], hotspots[1]
        _link(db, a, b.id)

        _link(db, c, b.id)

        links = _links(db)
        assert links[c.id] == (b.id, b.id)
        assert links[b.id][1] == c.id
        assert links[a.id] == (None, None)

    def test_unlink_clears_both_sides(self, db: Session, hotspots):
        a, b = hotspots[0], hotspots[3]
        _link(db, a, b.id)

        _link(db, a, None)

        links = _links(db)
        assert links[a.id] == (None, None)
        assert links[b.id] == (None, None)

    def test_unlink_is_idempotent(self, db: Session, hotspots):
        a = hotspots[0]

        _link(db, a, None)
        _link(db, a, None)

        assert _links(db)[a.id] == (None, None)

    def test_relink_same_target_is_stable(self, db: Session, hotspots):
        a, b = hotspots[0], hotspots[3]
        _link(db, a, b.id)

        _link(db, a, b.id)

        links = _links(db)
        assert links[a.id] == (b.id, b.id)
        assert links[b.id] == (None, a.id)

    def test_stale_backlinks_to_source_are_cleared(self, db: Session, hotspots):
        a, b, c = hotspots[0], hotspots[3], hotspots[4]
        # Inconsistent row left behind by an earlier failure
        c.linked_hotspot_id = a.id
        db.commit()

        _link(db, a, b.id)

        assert _links(db)[c.id] == (None, None)

    def test_missing_target_id_matches_no_rows(self, db: Session, hotspots):
        a = hotspots[0]

        _link(db, a, 99999)

        assert _links(db)[a.id] == (99999, 99999)

    def test_random_sequences_keep_links_symmetric(self, db: Session, hotspots):
        rng = random.Random(20261017)
        ids = [hotspot.id for hotspot in hotspots]

        for _ in range(200):
            source = db.get(PageHotspot, rng.choice(ids))
            candidates = [hotspot_id for hotspot_id in ids if hotspot_id != source.id]
            target = rng.choice(candidates + [None])

            _link(db, source, target)
            _assert_symmetric(db)


class TestDetachHotspotLinks:
    def test_detach_target_clears_source(self, db: Session, hotspots):
        a, b = hotspots[0], hotspots[3]
        _link(db, a, b.id)

        detach_hotspot_links(db, db.get(PageHotspot, b.id))
        db.commit()

        links = _links(db)
        assert links[a.id] == (None, None)
        assert links[b.id] == (None, None)

    def test_detach_source_clears_target_backlink(self, db: Session, hotspots):
        a, b = hotspots[0], hotspots[3]
        _link(db, a, b.id)

        detach_hotspot_links(db, db.get(PageHotspot, a.id))
        db.commit()

        assert _links(db)[b.id] == (None, None)

    def test_detach_leaves_unrelated_links(self, db: Session, hotspots):
        a, b, c, d = hotspots[0], hotspots[3], hotspots[1], hotspots[4]
        _link(db, a, b.id)
        _link(db, c, d.id)

        detach_hotspot_links(db, db.get(PageHotspot, a.id))
        db.commit()

        links = _links(db)
        assert links[c.id] == (d.id, d.id)
        assert links[d.id] == (None, c.id)
