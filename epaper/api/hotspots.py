"""Hotspot management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from epaper.database import get_db
from epaper.schemas.edition import MessageResponse
from epaper.schemas.hotspot import Hotspot as HotspotSchema
from epaper.schemas.hotspot import HotspotBulkDelete, HotspotCreate, HotspotInput
from epaper.services import hotspot_service

router = APIRouter()


@router.post("/", response_model=HotspotSchema, status_code=status.HTTP_201_CREATED)
async def create_hotspot(
    payload: HotspotCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a hotspot and link it to its target hotspot, if given."""
    return hotspot_service.create_hotspot(db, payload.page_id, payload)


@router.put("/{hotspot_id}", response_model=HotspotSchema)
async def update_hotspot(
    hotspot_id: int,
    payload: HotspotInput,
    db: Annotated[Session, Depends(get_db)],
):
    """Replace a hotspot's geometry, label and targets."""
    return hotspot_service.update_hotspot(db, hotspot_id, payload)


@router.delete("/{hotspot_id}", response_model=MessageResponse)
async def delete_hotspot(
    hotspot_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a hotspot and detach any links to it."""
    hotspot_service.delete_hotspot(db, hotspot_id)
    return MessageResponse(message="Hotspot deleted successfully.")


@router.post("/bulk-delete", response_model=MessageResponse)
async def bulk_delete_hotspots(
    payload: HotspotBulkDelete,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete several hotspots of one page; all or nothing."""
    count = hotspot_service.bulk_delete_hotspots(db, payload.page_id, payload.hotspot_ids)
    return MessageResponse(message=f"{count} hotspot(s) deleted successfully.")
