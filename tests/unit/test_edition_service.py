"""Tests for edition lifecycle and publishing."""

from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from epaper.core.exceptions import NotFoundError, ValidationError
from epaper.models.edition import Edition, EditionStatus
from epaper.models.page import Page
from epaper.models.page_hotspot import PageHotspot
from epaper.services import edition_service, page_service
from tests.conftest import create_edition, create_hotspot, create_page, create_pages


class TestEditionLifecycle:
    def test_create_edition_is_draft(self, db: Session):
        edition = edition_service.create_edition(db, date(2026, 10, 17), name="  Morning  ")

        assert edition.status == EditionStatus.DRAFT.value
        assert edition.name == "Morning"
        assert edition.published_at is None

    def test_list_for_date_newest_first_with_page_counts(self, db: Session):
        day = date(2026, 10, 17)
        older = create_edition(db, edition_date=day)
        newer = create_edition(db, edition_date=day)
        create_edition(db, edition_date=date(2026, 10, 16))
        create_pages(db, older, 2)

        listed = edition_service.list_editions_for_date(db, day)

        assert [(edition.id, count) for edition, count in listed] == [
            (newer.id, 0),
            (older.id, 2),
        ]

    def test_find_or_create_reuses_newest(self, db: Session):
        day = date(2026, 10, 17)
        create_edition(db, edition_date=day)
        newest = create_edition(db, edition_date=day)

        assert edition_service.find_or_create_edition_for_date(db, day).id == newest.id

    def test_find_or_create_creates_when_missing(self, db: Session):
        edition = edition_service.find_or_create_edition_for_date(db, date(2026, 1, 1))

        assert edition.id is not None
        assert edition.edition_date == date(2026, 1, 1)

    def test_rename_and_clear_name(self, db: Session):
        edition = create_edition(db, name="Old")

        assert edition_service.rename_edition(db, edition.id, "Evening").name == "Evening"
        assert edition_service.rename_edition(db, edition.id, "").name is None

    def test_rename_unknown(self, db: Session):
        with pytest.raises(NotFoundError):
            edition_service.rename_edition(db, 404, "x")

    @pytest.mark.asyncio
    async def test_delete_edition_cascades(self, db: Session, mock_storage):
        edition = create_edition(db)
        pages = create_pages(db, edition, 2)
        create_hotspot(db, pages[0], target_page_no=2)
        other = create_edition(db)
        create_page(db, other, 1)
        edition_id = edition.id

        deleted = await edition_service.delete_edition(db, mock_storage, edition_id)

        assert deleted == 2
        assert db.get(Edition, edition_id) is None
        assert db.execute(
            select(func.count(Page.id)).where(Page.edition_id == edition_id)
        ).scalar() == 0
        assert db.execute(select(func.count(PageHotspot.id))).scalar() == 0
        assert db.execute(select(func.count(Page.id))).scalar() == 1
        assert mock_storage.delete_file.await_count == 2


class TestPublishing:
    def test_publish_complete_edition(self, db: Session):
        edition = create_edition(db)
        create_pages(db, edition, 3)

        published = edition_service.publish_edition(db, edition.id)

        assert published.status == EditionStatus.PUBLISHED.value
        assert published.is_published
        assert published.published_at is not None

    def test_publish_checks_readiness_under_the_edition_lock(self, db: Session):
        edition = create_edition(db)
        create_pages(db, edition, 2)
        calls = []
        evaluate = edition_service.evaluate_edition_readiness

        def lock(session, edition_id):
            calls.append("lock")
            return page_service.lock_edition(session, edition_id)

        def readiness(session, edition_id):
            calls.append("readiness")
            assert session.in_transaction()
            return evaluate(session, edition_id)

        with patch("epaper.services.edition_service.lock_edition", side_effect=lock), patch(
            "epaper.services.edition_service.evaluate_edition_readiness", side_effect=readiness
        ):
            edition_service.publish_edition(db, edition.id)

        assert calls == ["lock", "readiness"]

    def test_publish_blocked_by_gap(self, db: Session):
        edition = create_edition(db)
        create_page(db, edition, 1)
        create_page(db, edition, 2)
        create_page(db, edition, 4)

        with pytest.raises(ValidationError) as exc_info:
            edition_service.publish_edition(db, edition.id)

        assert exc_info.value.blockers == ["Page numbering has a gap: missing page 3."]
        assert exc_info.value.errors == {
            "edition_id": ["Page numbering has a gap: missing page 3."]
        }
        db.expire_all()
        assert db.get(Edition, edition.id).status == EditionStatus.DRAFT.value

    def test_publish_blocked_without_pages(self, db: Session):
        edition = create_edition(db)

        with pytest.raises(ValidationError) as exc_info:
            edition_service.publish_edition(db, edition.id)

        assert exc_info.value.blockers == ["Add at least one page before publishing."]

    def test_readiness_reports_blockers(self, db: Session):
        edition = create_edition(db)
        create_page(db, edition, 2)

        readiness = edition_service.evaluate_edition_readiness(db, edition.id)

        assert not readiness.is_ready
        assert readiness.blockers == ["Page numbering has a gap: missing page 1."]

    def test_unpublish(self, db: Session):
        edition = create_edition(db)
        create_pages(db, edition, 1)
        edition_service.publish_edition(db, edition.id)

        draft = edition_service.unpublish_edition(db, edition.id)

        assert draft.status == EditionStatus.DRAFT.value
        assert draft.published_at is None

    def test_publish_unknown(self, db: Session):
        with pytest.raises(NotFoundError):
            edition_service.publish_edition(db, 404)
