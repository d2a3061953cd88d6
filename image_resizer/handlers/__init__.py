"""
Storage event handlers.
"""

from .finalize import generate_resized_images, handle_finalize_event, upload_resized_image

__all__ = [
    "generate_resized_images",
    "handle_finalize_event",
    "upload_resized_image"
]
