"""Edition management and publishing endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from epaper.database import get_db
from epaper.dependencies import get_storage_service
from epaper.schemas.edition import Edition as EditionSchema
from epaper.schemas.edition import (
    EditionCreate,
    EditionSummary,
    EditionUpdate,
    EditionWithPages,
    MessageResponse,
    PublishReadiness,
)
from epaper.services import edition_service
from epaper.services.page_service import get_edition
from epaper.storage import StorageService

router = APIRouter()


@router.post("/", response_model=EditionSchema, status_code=status.HTTP_201_CREATED)
async def create_edition(
    payload: EditionCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a draft edition for a date."""
    return edition_service.create_edition(db, payload.edition_date, payload.name)


@router.get("/", response_model=list[EditionSummary])
async def list_editions(
    db: Annotated[Session, Depends(get_db)],
    edition_date: Annotated[date, Query(alias="date")],
):
    """
    List editions for a date, newest first.

    Args:
        edition_date: Edition date (YYYY-MM-DD)
        db: Database session

    Returns:
        Editions with their page counts
    """
    return [
        EditionSummary(
            **EditionSchema.model_validate(edition).model_dump(),
            pages_count=pages_count,
        )
        for edition, pages_count in edition_service.list_editions_for_date(db, edition_date)
    ]


@router.get("/{edition_id}", response_model=EditionWithPages)
async def get_edition_detail(
    edition_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get an edition with its pages (in page order) and their hotspots."""
    return get_edition(db, edition_id)


@router.patch("/{edition_id}", response_model=EditionSchema)
async def rename_edition(
    edition_id: int,
    payload: EditionUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Set or clear an edition's name."""
    return edition_service.rename_edition(db, edition_id, payload.name)


@router.delete("/{edition_id}", response_model=MessageResponse)
async def delete_edition(
    edition_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
):
    """Delete an edition, its pages, hotspots and page images."""
    await edition_service.delete_edition(db, storage, edition_id)
    return MessageResponse(message=f"Edition {edition_id} deleted successfully.")


@router.get("/{edition_id}/readiness", response_model=PublishReadiness)
async def get_publish_readiness(
    edition_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Report whether the edition's page numbering allows publishing."""
    readiness = edition_service.evaluate_edition_readiness(db, edition_id)
    return PublishReadiness(is_ready=readiness.is_ready, blockers=readiness.blockers)


@router.post("/{edition_id}/publish", response_model=EditionSchema)
async def publish_edition(
    edition_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Publish an edition; 422 with blockers if numbering is incomplete."""
    return edition_service.publish_edition(db, edition_id)


@router.post("/{edition_id}/unpublish", response_model=EditionSchema)
async def unpublish_edition(
    edition_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Move an edition back to draft."""
    return edition_service.unpublish_edition(db, edition_id)
