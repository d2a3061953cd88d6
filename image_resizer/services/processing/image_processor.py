"""
Image processing utilities for resized image generation.
"""

import io
import mimetypes
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from image_resizer.core.logging import logger
from image_resizer.core.exceptions import ImageProcessingError

# Modes the JPEG encoder cannot write
JPEG_INCOMPATIBLE_MODES = ("RGBA", "LA", "P", "PA", "I;16")

FIT_POLICIES = ("cover", "fill", "contain")

# Formats Pillow decodes under their own name but that are written with another encoder.
# MPO is a multi-picture JPEG (camera uploads); resized copies are plain JPEG.
OUTPUT_FORMATS = {"MPO": "JPEG"}


class ImageProcessor:
    """
    Class for decoding, resizing and re-encoding images with Pillow.

    A source image is decoded once and shared read-only; every resize works
    on its own copy so concurrent resizes never touch the same pixel buffer.
    """

    def __init__(self, fit: str = "cover", jpeg_quality: int = 80):
        """
        Initialize the image processor.

        Args:
            fit: Fit policy, one of "cover", "fill" or "contain"
            jpeg_quality: Quality for JPEG and WebP output
        """
        if fit not in FIT_POLICIES:
            raise ValueError(f"Unsupported fit policy: {fit}")
        self.fit = fit
        self.jpeg_quality = jpeg_quality

    def decode(self, data: bytes, path: str) -> Image.Image:
        """
        Decode image bytes into a fully loaded Pillow image.

        Args:
            data: Encoded image bytes
            path: Object name, used in error messages

        Returns:
            Decoded image (its ``format`` attribute is preserved)

        Raises:
            ImageProcessingError: If the bytes are not a readable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
            logger.debug(f"Decoded {path}: {image.format} {image.size[0]}x{image.size[1]} {image.mode}")
            return image
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Error decoding image {path}: {str(e)}")
            raise ImageProcessingError(path, f"Failed to decode image: {str(e)}")

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """
        Resize a copy of an image to exactly width x height.

        "cover" scales preserving aspect ratio and centre-crops the overflow,
        "fill" stretches, "contain" scales to fit and pads the remainder.

        Args:
            image: Source image (left untouched)
            width: Target width in pixels
            height: Target height in pixels

        Returns:
            New resized image
        """
        clone = image.copy()
        size = (width, height)

        if self.fit == "fill":
            return clone.resize(size, Image.Resampling.LANCZOS)
        if self.fit == "contain":
            return ImageOps.pad(clone, size, method=Image.Resampling.LANCZOS)
        return ImageOps.fit(clone, size, method=Image.Resampling.LANCZOS)

    def encode(self, image: Image.Image, image_format: str) -> bytes:
        """
        Encode an image into bytes.

        Args:
            image: Image to encode
            image_format: Pillow format name, e.g. "JPEG"

        Returns:
            Encoded image bytes
        """
        save_kwargs = {}

        if image_format == "JPEG":
            if image.mode in JPEG_INCOMPATIBLE_MODES:
                image = image.convert("RGB")
            save_kwargs["quality"] = self.jpeg_quality
        elif image_format == "WEBP":
            save_kwargs["quality"] = self.jpeg_quality

        buffer = io.BytesIO()
        image.save(buffer, format=image_format, **save_kwargs)
        return buffer.getvalue()

    def resize_and_encode(
        self,
        source: Image.Image,
        width: int,
        height: int,
        content_type: str,
        path: str,
    ) -> bytes:
        """
        Resize a decoded source and encode it in the source's format.

        Args:
            source: Decoded source image
            width: Target width in pixels
            height: Target height in pixels
            content_type: MIME type of the source, used when the image has no
                format of its own (built in memory rather than decoded)
            path: Destination object name, used in error messages

        Returns:
            Encoded resized image

        Raises:
            ImageProcessingError: If resizing or encoding fails
        """
        image_format = source.format or format_for_content_type(content_type)
        if not image_format:
            raise ImageProcessingError(path, f"No encoder for content type {content_type}")
        image_format = OUTPUT_FORMATS.get(image_format, image_format)

        try:
            resized = self.resize(source, width, height)
            return self.encode(resized, image_format)
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Error resizing image {path}: {str(e)}")
            raise ImageProcessingError(path, f"Failed to resize image: {str(e)}")

    def analyze_image(self, data: bytes) -> dict:
        """
        Analyze encoded image bytes and extract their properties.

        Args:
            data: Encoded image bytes

        Returns:
            Dictionary of image properties
        """
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            return {
                "width": width,
                "height": height,
                "format": img.format,
                "mode": img.mode,
                "file_size": len(data),
            }


def format_for_content_type(content_type: str) -> Optional[str]:
    """
    Map a MIME type such as "image/png" to a Pillow format name.

    Fallback for images created in memory, whose format is None; decoded
    sources always carry the format Pillow detected.
    """
    extension = mimetypes.guess_extension(content_type or "")
    if not extension:
        return None
    return Image.registered_extensions().get(extension)
