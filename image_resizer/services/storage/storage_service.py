"""
Storage service for the Image Resizer.
This is a facade that abstracts the underlying storage implementation.
"""

from typing import Optional

from image_resizer.config import Settings, get_settings
from image_resizer.core.logging import logger
from image_resizer.services.storage.gcs_service import GCSService
from image_resizer.services.storage.local_service import LocalService


class StorageService:
    """
    Service for handling storage operations.
    This service provides a unified interface for different storage backends.
    """

    def __init__(self, settings: Optional[Settings] = None, backend=None):
        """
        Initialize the storage service with appropriate backend.

        Args:
            settings: Settings used to pick and configure the backend
            backend: Explicit backend exposing read_object/write_object
        """
        settings = settings or get_settings()

        # Use local storage for development, GCS for production
        if backend is not None:
            self.storage = backend
        elif settings.DEV_MODE:
            self.storage = LocalService(settings)
        else:
            self.storage = GCSService(settings)

        logger.debug(f"Storage backend: {type(self.storage).__name__}")

    async def read_object(self, bucket_name: str, path: str) -> bytes:
        """
        Read a whole object.

        Raises:
            ObjectNotFoundError: If the object does not exist
            StorageError: If the backend fails
        """
        return await self.storage.read_object(bucket_name, path)

    async def write_object(self, bucket_name: str, path: str, data: bytes, content_type: str) -> None:
        """
        Write a whole object with its content type, overwriting any existing one.

        Raises:
            StorageError: If the backend fails
        """
        await self.storage.write_object(bucket_name, path, data, content_type)
