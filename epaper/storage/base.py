"""Abstract storage service interface for page image artifacts."""

from abc import ABC, abstractmethod


class StorageService(ABC):
    """Interface to wherever the uploader put the page images.

    The admin core never writes images; it only removes them when a page or
    edition is deleted.
    """

    @abstractmethod
    async def delete_file(self, key: str) -> bool:
        """
        Delete a file from storage.

        Args:
            key: Storage key of the file

        Returns:
            True if a file was deleted, False if nothing was there
        """
        pass

    @abstractmethod
    async def file_exists(self, key: str) -> bool:
        """
        Check if a file exists in storage.

        Args:
            key: Storage key to check

        Returns:
            True if file exists
        """
        pass
