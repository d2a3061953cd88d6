"""
Image processing for the image resizer.
"""

from .image_processor import ImageProcessor

__all__ = [
    "ImageProcessor"
]
