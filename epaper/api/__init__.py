"""API routers."""

from fastapi import APIRouter

from epaper.api import editions, hotspots, pages

api_router = APIRouter()

# Include routers
api_router.include_router(editions.router, prefix="/editions", tags=["editions"])
api_router.include_router(pages.router, prefix="/pages", tags=["pages"])
api_router.include_router(hotspots.router, prefix="/hotspots", tags=["hotspots"])
