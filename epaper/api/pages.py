"""Page management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from epaper.database import get_db
from epaper.dependencies import get_storage_service
from epaper.schemas.edition import MessageResponse
from epaper.schemas.hotspot import Hotspot as HotspotSchema
from epaper.schemas.page import Page as PageSchema
from epaper.schemas.page import PageCreate, PageReorder, PageUpdate
from epaper.services import hotspot_service, page_service
from epaper.storage import StorageService

router = APIRouter()


@router.post("/", response_model=PageSchema, status_code=status.HTTP_201_CREATED)
async def create_page(
    payload: PageCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Register an uploaded page image in an edition."""
    return page_service.create_page(
        db,
        payload.edition_id,
        payload.image_original_path,
        page_no=payload.page_no,
        category_id=payload.category_id,
        image_large_path=payload.image_large_path,
        image_thumb_path=payload.image_thumb_path,
        width=payload.width,
        height=payload.height,
    )


@router.post("/reorder", response_model=MessageResponse)
async def reorder_pages(
    payload: PageReorder,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Renumber all pages of an edition to follow a new order.

    Args:
        payload: Edition id and every page id of that edition, in order
        db: Database session

    Returns:
        Confirmation message
    """
    count = page_service.reorder_pages(db, payload.edition_id, payload.ordered_page_ids)
    return MessageResponse(message=f"{count} page(s) reordered successfully.")


@router.patch("/{page_id}", response_model=PageSchema)
async def update_page(
    page_id: int,
    payload: PageUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    """Change a page's number and category."""
    return page_service.update_page(db, page_id, payload.page_no, payload.category_id)


@router.delete("/{page_id}", response_model=MessageResponse)
async def delete_page(
    page_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
):
    """Delete a page with its hotspots and image files."""
    page_no = await page_service.delete_page(db, storage, page_id)
    return MessageResponse(message=f"Page {page_no} deleted successfully.")


@router.get("/{page_id}/hotspots", response_model=list[HotspotSchema])
async def list_page_hotspots(
    page_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """List a page's hotspots in creation order."""
    return hotspot_service.list_page_hotspots(db, page_id)
