"""
Local trigger script for the Image Resizer.

Stores an image in the local storage backend and runs the finalize handler
on it, as the platform would after an upload.

Usage:
    python scripts/trigger_local.py photo.jpg --bucket=dev-bucket --name=images/photo_xoriginal.jpg
"""

import asyncio
import argparse
import mimetypes
import os
import sys

from image_resizer.config import get_settings
from image_resizer.core import state
from image_resizer.core.logging import setup_logging
from image_resizer.handlers.finalize import generate_resized_images
from image_resizer.models import StorageObjectEvent
from image_resizer.services.storage.local_service import LocalService
from image_resizer.services.storage.storage_service import StorageService

logger = setup_logging()


async def main() -> int:
    """Main entry point for the local trigger script."""
    parser = argparse.ArgumentParser(description="Run the resize handler against local storage")

    parser.add_argument("image", help="Path of the image file to upload")
    parser.add_argument("--bucket", default="dev-bucket", help="Bucket name (default: dev-bucket)")
    parser.add_argument("--name", default=None,
                        help="Object name (default: file name with the original marker appended)")
    parser.add_argument("--content-type", default=None,
                        help="Content type (default: guessed from the file name)")
    parser.add_argument("--storage-dir", default=None,
                        help="Local storage directory (default: LOCAL_STORAGE_DIR setting)")

    args = parser.parse_args()

    settings = get_settings()
    backend = LocalService(settings, base_dir=args.storage_dir)
    app_state = state.init(settings=settings, storage=StorageService(settings, backend=backend))

    base, ext = os.path.splitext(os.path.basename(args.image))
    name = args.name or f"{base}{settings.ORIGINAL_IMAGE_IDENTIFIER}{ext}"
    content_type = args.content_type or mimetypes.guess_type(args.image)[0] or "application/octet-stream"

    try:
        with open(args.image, "rb") as f:
            await backend.write_object(args.bucket, name, f.read(), content_type)

        event = StorageObjectEvent(bucket=args.bucket, name=name, content_type=content_type)
        result = await generate_resized_images(event, app_state)

    except Exception as e:
        logger.error(f"Error running resize handler: {str(e)}")
        return 1

    if result.reason:
        logger.info(f"Skipped {name}: {result.reason.value}")

    for resized in result.results:
        if not resized.success:
            logger.error(f"{resized.size_name}: {resized.error}")
            continue
        data = await backend.read_object(args.bucket, resized.destination_path)
        info = app_state.image_processor.analyze_image(data)
        logger.info(
            f"{resized.size_name}: {resized.destination_path} "
            f"{info['width']}x{info['height']} {info['format']} {info['file_size']} bytes"
        )

    return 0 if not result.failed else 1


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
