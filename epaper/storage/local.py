"""Local filesystem storage implementation."""

from pathlib import Path

import aiofiles.os

from epaper.storage.base import StorageService


class LocalStorageService(StorageService):
    """Page images kept under a local directory (public disk in development)."""

    def __init__(self, base_path: str = "./storage"):
        """
        Initialize local storage.

        Args:
            base_path: Base directory for file storage
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Get full filesystem path for a storage key.

        Raises:
            ValueError: If the key attempts path traversal outside base_path
        """
        # Remove leading slashes to prevent absolute path interpretation
        clean_key = key.lstrip("/")

        full_path = (self.base_path / clean_key).resolve()

        try:
            full_path.relative_to(self.base_path.resolve())
        except ValueError:
            raise ValueError(f"Path traversal attempt detected: {key}")

        return full_path

    async def delete_file(self, key: str) -> bool:
        """Delete file from local storage."""
        file_path = self._get_full_path(key)

        if await aiofiles.os.path.exists(file_path):
            await aiofiles.os.remove(file_path)
            return True

        return False

    async def file_exists(self, key: str) -> bool:
        """Check if file exists in local storage."""
        return await aiofiles.os.path.exists(self._get_full_path(key))
