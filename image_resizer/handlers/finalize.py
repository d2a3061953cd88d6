"""
Storage finalize handler for the Image Resizer.

When an original image lands in a bucket, one resized copy per configured
size is written next to it. The source is read and decoded once; every size
is resized from its own copy and uploaded concurrently.
"""

import asyncio
from typing import Any, Dict, List, Optional

from PIL import Image

from image_resizer.core.logging import logger
from image_resizer.core.state import AppState, get_state
from image_resizer.models import (
    HandlerResult,
    HandlerStatus,
    ObjectPath,
    ResizeJob,
    ResizeResult,
    SizeSpec,
    SkipReason,
    StorageObjectEvent,
)
from image_resizer.utils.paths import derive_resized_paths, is_image, is_original, parse_object_path


def build_resize_jobs(
    event: StorageObjectEvent,
    object_path: ObjectPath,
    source: Image.Image,
    identifier: str,
    sizes: Dict[str, SizeSpec],
) -> List[ResizeJob]:
    """
    Create one resize job per configured size.

    Args:
        event: Finalize event of the original image
        object_path: Parsed name of the original image
        source: Decoded original image
        identifier: Original image marker
        sizes: Configured target sizes

    Returns:
        List of resize jobs, in configuration order
    """
    destinations = derive_resized_paths(object_path, identifier, sizes)
    return [
        ResizeJob(
            bucket=event.bucket,
            size_name=size_name,
            source=source,
            destination_path=destinations[size_name],
            width=size.width,
            height=size.height,
            content_type=event.content_type,
        )
        for size_name, size in sizes.items()
    ]


async def upload_resized_image(job: ResizeJob, state: AppState) -> ResizeResult:
    """
    Resize the job's source and upload it to the destination path.

    Never raises: any failure is logged and returned as an unsuccessful
    result so sibling jobs keep running.

    Args:
        job: Resize job to run
        state: Runtime state providing the storage and image processor

    Returns:
        Result of this job
    """
    result = ResizeResult(
        size_name=job.size_name,
        destination_path=job.destination_path,
        width=job.width,
        height=job.height,
        success=False,
    )

    try:
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(
            None,
            state.image_processor.resize_and_encode,
            job.source,
            job.width,
            job.height,
            job.content_type,
            job.destination_path,
        )

        await state.storage.write_object(job.bucket, job.destination_path, data, job.content_type)

        logger.info(f"Resized image to w: {job.width}, h: {job.height} successfully ({job.destination_path})")
        result.success = True

    except Exception as e:
        logger.error(f"Error resizing image to w: {job.width}, h: {job.height} ({job.destination_path}): {str(e)}")
        result.error = str(e)

    return result


async def generate_resized_images(
    event: StorageObjectEvent, state: Optional[AppState] = None
) -> HandlerResult:
    """
    Create resized copies of an uploaded original image.

    Args:
        event: Storage finalize event
        state: Runtime state (defaults to the process-wide state)

    Returns:
        Handler result with one entry per configured size, or a skipped result

    Raises:
        StorageError: If the original image cannot be read
        ImageProcessingError: If the original image cannot be decoded
    """
    state = state or get_state()
    settings = state.settings
    object_path = parse_object_path(event.name)
    filename = f"{object_path.name}{object_path.extension}"

    # Exit if this is triggered on a file that is not an image
    if not is_image(event.content_type):
        logger.info(f"This is not an image - {filename} ({event.content_type})")
        return HandlerResult(
            status=HandlerStatus.SKIPPED, source_path=event.name, reason=SkipReason.NOT_AN_IMAGE
        )

    # Exit if the image is already a resized version
    if not is_original(object_path.name, settings.ORIGINAL_IMAGE_IDENTIFIER):
        logger.info(f"Not an original image - {filename}")
        return HandlerResult(
            status=HandlerStatus.SKIPPED, source_path=event.name, reason=SkipReason.NOT_ORIGINAL
        )

    logger.info(f"Resizing {event.bucket}/{event.name} to {len(settings.IMAGE_SIZES)} sizes")

    data = await state.storage.read_object(event.bucket, event.name)

    loop = asyncio.get_running_loop()
    source = await loop.run_in_executor(None, state.image_processor.decode, data, event.name)

    jobs = build_resize_jobs(
        event, object_path, source, settings.ORIGINAL_IMAGE_IDENTIFIER, settings.IMAGE_SIZES
    )
    results = await asyncio.gather(*(upload_resized_image(job, state) for job in jobs))

    handler_result = HandlerResult(
        status=HandlerStatus.COMPLETED, source_path=event.name, results=list(results)
    )

    if handler_result.failed:
        failed_sizes = ", ".join(r.size_name for r in handler_result.failed)
        logger.warning(
            f"Resized image {filename} with {len(handler_result.failed)} of {len(jobs)} sizes failed: {failed_sizes}"
        )
    else:
        logger.info(f"Resized image {filename} successfully")

    return handler_result


def handle_finalize_event(payload: Dict[str, Any], state: Optional[AppState] = None) -> HandlerResult:
    """
    Validate a raw finalize payload and run the handler to completion.

    Args:
        payload: Event data as delivered by the platform
        state: Runtime state (defaults to the process-wide state)

    Returns:
        Handler result

    Raises:
        pydantic.ValidationError: If the payload lacks a bucket or name
    """
    event = StorageObjectEvent.model_validate(payload)
    return asyncio.run(generate_resized_images(event, state))


def build_response(result: HandlerResult, processing_time: float) -> Dict[str, Any]:
    """
    Summarize a handler result as the entry point response payload.

    Status is "skipped" for ignored events, "success" when every size was
    written, "partial" when some were and "error" when none were.
    """
    if result.status == HandlerStatus.SKIPPED:
        status = "skipped"
    elif not result.failed:
        status = "success"
    elif result.succeeded:
        status = "partial"
    else:
        status = "error"

    return {
        "status": status,
        "source": result.source_path,
        "reason": result.reason.value if result.reason else None,
        "resized_images": [r.destination_path for r in result.succeeded],
        "failed": [
            {"size": r.size_name, "path": r.destination_path, "error": r.error}
            for r in result.failed
        ],
        "processing_time": processing_time,
    }
