"""Test configuration and fixtures for pytest.

Provides fixtures for:
- In-memory SQLite database (foreign keys enforced)
- Mocked page image storage
- A FastAPI test client wired to the test database
- Test data factories for editions, pages, hotspots and categories
"""

from contextlib import asynccontextmanager
from datetime import date
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from epaper.api import api_router
from epaper.api.errors import register_exception_handlers
from epaper.config import get_settings
from epaper.database import Base, get_db
from epaper.dependencies import get_storage_service
from epaper.models.category import Category
from epaper.models.edition import Edition, EditionStatus
from epaper.models.page import Page
from epaper.models.page_hotspot import PageHotspot, RelationKind

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def settings():
    """Cached settings instance; attribute changes are undone after the test."""
    current = get_settings()
    snapshot = current.model_dump()
    yield current
    for key, value in snapshot.items():
        setattr(current, key, value)


@pytest.fixture
def mock_storage() -> MagicMock:
    """Storage double whose deletes always succeed."""
    storage = MagicMock()
    storage.delete_file = AsyncMock(return_value=True)
    storage.file_exists = AsyncMock(return_value=True)
    return storage


@asynccontextmanager
async def noop_lifespan(app: FastAPI):
    """No-op lifespan for testing."""
    yield


def create_test_app(db: Session, storage) -> FastAPI:
    """Create a FastAPI app with all routers, using the test session and storage."""
    app = FastAPI(lifespan=noop_lifespan)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/v1")

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage

    return app


@pytest.fixture
def test_client(db: Session, mock_storage) -> TestClient:
    """Test client for the full API."""
    return TestClient(create_test_app(db, mock_storage))


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def create_edition(
    db: Session,
    edition_date: date = date(2026, 10, 17),
    name: str | None = None,
    status: str = EditionStatus.DRAFT.value,
) -> Edition:
    """Helper to create an edition."""
    edition = Edition(edition_date=edition_date, name=name, status=status)
    db.add(edition)
    db.commit()
    db.refresh(edition)
    return edition


def create_category(db: Session, name: str = "City", position: int = 1) -> Category:
    """Helper to create a category."""
    category = Category(name=name, position=position)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def create_page(
    db: Session,
    edition: Edition,
    page_no: int,
    image_original_path: str | None = None,
    image_large_path: str | None = None,
    image_thumb_path: str | None = None,
) -> Page:
    """Helper to create a page; the image path defaults to one derived from the number."""
    page = Page(
        edition_id=edition.id,
        page_no=page_no,
        image_original_path=image_original_path
        or f"epaper/{edition.edition_date.isoformat()}/page-{page_no}.jpg",
        image_large_path=image_large_path,
        image_thumb_path=image_thumb_path,
    )
    db.add(page)
    db.commit()
    db.refresh(page)
    return page


def create_pages(db: Session, edition: Edition, count: int) -> list[Page]:
    """Helper to create pages numbered 1..count."""
    return [create_page(db, edition, page_no) for page_no in range(1, count + 1)]


def create_hotspot(
    db: Session,
    page: Page,
    target_page_no: int | None = None,
    target_hotspot_id: int | None = None,
    linked_hotspot_id: int | None = None,
    relation_kind: str = RelationKind.NEXT.value,
    x: float = 0.1,
    y: float = 0.1,
    w: float = 0.2,
    h: float = 0.2,
) -> PageHotspot:
    """Helper to insert a hotspot row directly, bypassing link maintenance."""
    hotspot = PageHotspot(
        page_id=page.id,
        relation_kind=relation_kind,
        target_page_no=target_page_no,
        target_hotspot_id=target_hotspot_id,
        linked_hotspot_id=linked_hotspot_id,
        x=x,
        y=y,
        w=w,
        h=h,
    )
    db.add(hotspot)
    db.commit()
    db.refresh(hotspot)
    return hotspot
