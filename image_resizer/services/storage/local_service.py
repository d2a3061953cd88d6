"""
Local filesystem implementation for the Image Resizer.
Used primarily for development and testing.
"""

import os
import json
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from image_resizer.config import Settings, get_settings
from image_resizer.core.logging import logger
from image_resizer.core.exceptions import ObjectNotFoundError, StorageError

METADATA_DIR = ".metadata"


class LocalService:
    """
    Local filesystem implementation for storage operations.
    Objects live at <base_dir>/<bucket>/<path>; the content type of each
    object is kept in a JSON sidecar under <base_dir>/.metadata/.
    """

    def __init__(self, settings: Optional[Settings] = None, base_dir: Optional[str] = None):
        """Initialize the local service with base directory."""
        settings = settings or get_settings()
        self.base_dir = Path(base_dir or settings.LOCAL_STORAGE_DIR)
        self.metadata_dir = self.base_dir / METADATA_DIR

        # Create directories if they don't exist
        os.makedirs(self.base_dir, exist_ok=True)
        os.makedirs(self.metadata_dir, exist_ok=True)

    def _contained_path(self, root: Path, bucket_name: str, relative: str) -> Path:
        """
        Resolve <root>/<bucket>/<relative> and make sure it stays inside the bucket directory.

        Raises:
            StorageError: If the bucket or object name points outside of root
        """
        bucket_root = (root / bucket_name).resolve()
        resolved = (bucket_root / relative).resolve()
        if root.resolve() not in bucket_root.parents or bucket_root not in resolved.parents:
            logger.error(f"Rejected object path {bucket_name}/{relative} outside of {root}")
            raise StorageError("resolve_path", f"Object path {bucket_name}/{relative} is outside of {root}")
        return resolved

    def _object_path(self, bucket_name: str, path: str) -> Path:
        return self._contained_path(self.base_dir, bucket_name, path)

    def _metadata_path(self, bucket_name: str, path: str) -> Path:
        return self._contained_path(self.metadata_dir, bucket_name, f"{path}.json")

    async def read_object(self, bucket_name: str, path: str) -> bytes:
        """
        Read an object from the local filesystem.

        Args:
            bucket_name: Name of the bucket directory
            path: Object name within the bucket

        Returns:
            Object content as bytes

        Raises:
            ObjectNotFoundError: If the object does not exist
            StorageError: If there's an error reading the object
        """
        object_path = self._object_path(bucket_name, path)
        try:
            async with aiofiles.open(object_path, "rb") as f:
                return await f.read()

        except FileNotFoundError:
            logger.error(f"Object {object_path} not found")
            raise ObjectNotFoundError(bucket_name, path)

        except Exception as e:
            logger.error(f"Error reading object from local filesystem: {str(e)}")
            raise StorageError("read_object", f"Failed to read {object_path}: {str(e)}")

    async def write_object(self, bucket_name: str, path: str, data: bytes, content_type: str) -> None:
        """
        Write an object and its content type sidecar to the local filesystem.

        Args:
            bucket_name: Name of the bucket directory
            path: Object name within the bucket
            data: Object content
            content_type: Content type metadata for the object

        Raises:
            StorageError: If there's an error writing the object
        """
        object_path = self._object_path(bucket_name, path)
        metadata_path = self._metadata_path(bucket_name, path)
        try:
            await aiofiles.os.makedirs(object_path.parent, exist_ok=True)
            await aiofiles.os.makedirs(metadata_path.parent, exist_ok=True)

            async with aiofiles.open(object_path, "wb") as f:
                await f.write(data)

            async with aiofiles.open(metadata_path, "w") as f:
                await f.write(json.dumps({"contentType": content_type}))

            logger.info(f"Saved {object_path} ({content_type}, {len(data)} bytes)")

        except Exception as e:
            logger.error(f"Error writing object to local filesystem: {str(e)}")
            raise StorageError("write_object", f"Failed to write {object_path}: {str(e)}")

    async def get_content_type(self, bucket_name: str, path: str) -> Optional[str]:
        """
        Get the stored content type of an object.

        Returns:
            The content type, or None if no metadata was recorded
        """
        metadata_path = self._metadata_path(bucket_name, path)
        try:
            async with aiofiles.open(metadata_path, "r") as f:
                metadata = json.loads(await f.read())
            return metadata.get("contentType")

        except FileNotFoundError:
            return None

        except json.JSONDecodeError as e:
            logger.error(f"Error parsing object metadata JSON: {str(e)}")
            raise StorageError("get_content_type", f"Failed to parse metadata JSON: {str(e)}")
