"""
Storage backends for the image resizer.
"""

from .gcs_service import GCSService
from .local_service import LocalService
from .storage_service import StorageService

__all__ = [
    "GCSService",
    "LocalService",
    "StorageService"
]
