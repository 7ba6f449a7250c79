"""Shared dependencies for FastAPI routes."""

from functools import lru_cache

from epaper.config import get_settings
from epaper.storage import LocalStorageService, StorageService


@lru_cache
def get_storage_service() -> StorageService:
    """
    Get storage service instance.

    Page images live on the local public disk configured by
    ``storage_base_path``.
    """
    settings = get_settings()
    return LocalStorageService(base_path=settings.storage_base_path)
