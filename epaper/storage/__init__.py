"""Storage services for page image files."""

from epaper.storage.base import StorageService
from epaper.storage.local import LocalStorageService

__all__ = ["StorageService", "LocalStorageService"]
