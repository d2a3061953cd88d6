"""
Google Cloud Storage (GCS) implementation for the Image Resizer.
"""

import asyncio
from typing import Optional
from urllib.parse import quote

from google.cloud import storage
from google.cloud.exceptions import NotFound
from google.oauth2 import service_account
from google.resumable_media.requests import MultipartUpload

from image_resizer.config import Settings, get_settings
from image_resizer.core.logging import logger
from image_resizer.core.exceptions import ObjectNotFoundError, StorageError

MULTIPART_UPLOAD_URL = "{api_base}/upload/storage/v1/b/{bucket}/o?uploadType=multipart"


class GCSService:
    """
    Google Cloud Storage implementation for storage operations.
    Blocking client calls run in the default executor so several uploads
    can be in flight at once.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[storage.Client] = None):
        """
        Initialize the GCS service.

        Uses the service account JSON from the settings when present,
        otherwise application default credentials.

        Args:
            settings: Settings to read credentials from
            client: Pre-built storage client (skips credential loading)
        """
        settings = settings or get_settings()

        if client is not None:
            self.client = client
        elif settings.GCP_SERVICE_ACCOUNT_INFO:
            credentials = service_account.Credentials.from_service_account_info(
                info=settings.GCP_SERVICE_ACCOUNT_INFO
            )
            self.client = storage.Client(
                project=settings.GCP_PROJECT_ID or credentials.project_id,
                credentials=credentials,
            )
            logger.info("Initialized GCS client with service account JSON from settings")
        else:
            self.client = storage.Client(project=settings.GCP_PROJECT_ID or None)
            logger.info("Initialized GCS client with application default credentials")

    def _read_object_sync(self, bucket_name: str, path: str) -> bytes:
        blob = self.client.bucket(bucket_name).blob(path)
        return blob.download_as_bytes()

    def _write_object_sync(self, bucket_name: str, path: str, data: bytes, content_type: str) -> None:
        # Always one multipart request; Blob.upload_from_string turns resumable above 8 MiB
        upload_url = MULTIPART_UPLOAD_URL.format(
            api_base=self.client._connection.API_BASE_URL, bucket=quote(bucket_name, safe="")
        )
        upload = MultipartUpload(upload_url)
        upload.transmit(
            self.client._http, data, {"name": path, "contentType": content_type}, content_type
        )

    async def read_object(self, bucket_name: str, path: str) -> bytes:
        """
        Download an object from GCS.

        Args:
            bucket_name: Name of the bucket
            path: Object name within the bucket

        Returns:
            Object content as bytes

        Raises:
            ObjectNotFoundError: If the object does not exist
            StorageError: If there's an error downloading the object
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read_object_sync, bucket_name, path)

        except NotFound:
            logger.error(f"Object gs://{bucket_name}/{path} not found")
            raise ObjectNotFoundError(bucket_name, path)

        except Exception as e:
            logger.error(f"Error reading object from GCS: {str(e)}")
            raise StorageError("read_object", f"Failed to read gs://{bucket_name}/{path}: {str(e)}")

    async def write_object(self, bucket_name: str, path: str, data: bytes, content_type: str) -> None:
        """
        Upload an object to GCS.

        Args:
            bucket_name: Name of the bucket
            path: Object name within the bucket
            data: Object content
            content_type: Content type metadata for the object

        Raises:
            StorageError: If there's an error uploading the object
        """
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None, self._write_object_sync, bucket_name, path, data, content_type
            )
            logger.info(f"Uploaded gs://{bucket_name}/{path} ({content_type}, {len(data)} bytes)")

        except Exception as e:
            logger.error(f"Error writing object to GCS: {str(e)}")
            raise StorageError("write_object", f"Failed to write gs://{bucket_name}/{path}: {str(e)}")
