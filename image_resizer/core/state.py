"""
Process-wide runtime state for the Image Resizer.

The state is built once by init() before the entry points are registered
and reused by every invocation served by the same instance.
"""

from typing import Optional

from image_resizer.config import Settings, get_settings
from image_resizer.core.logging import logger
from image_resizer.core.exceptions import AlreadyInitializedError
from image_resizer.services.storage.storage_service import StorageService
from image_resizer.services.processing.image_processor import ImageProcessor


class AppState:
    """Settings and services shared by all invocations."""

    def __init__(self, settings: Settings, storage: StorageService, image_processor: ImageProcessor):
        self.settings = settings
        self.storage = storage
        self.image_processor = image_processor


_state: Optional[AppState] = None


def init(
    settings: Optional[Settings] = None,
    storage: Optional[StorageService] = None,
    image_processor: Optional[ImageProcessor] = None,
) -> AppState:
    """
    Build the runtime state.

    Args:
        settings: Settings (defaults to get_settings())
        storage: Storage service (defaults to one built from the settings)
        image_processor: Image processor (defaults to one built from the settings)

    Returns:
        The new runtime state

    Raises:
        AlreadyInitializedError: If init() already ran in this process
    """
    global _state

    if _state is not None:
        raise AlreadyInitializedError()

    settings = settings or get_settings()
    state = AppState(
        settings=settings,
        storage=storage or StorageService(settings),
        image_processor=image_processor or ImageProcessor(
            fit=settings.RESIZE_FIT, jpeg_quality=settings.JPEG_QUALITY
        ),
    )
    _state = state

    logger.info(
        f"Initialized {settings.PROJECT_NAME}: marker {settings.ORIGINAL_IMAGE_IDENTIFIER!r}, "
        f"sizes {sorted(settings.IMAGE_SIZES)}, fit {settings.RESIZE_FIT}"
    )
    return state


def get_state() -> AppState:
    """Return the runtime state, initializing it on first use."""
    if _state is None:
        return init()
    return _state


def reset() -> None:
    """Drop the runtime state so init() can run again."""
    global _state
    _state = None
