import io
import pytest
from PIL import Image

from image_resizer.config import Settings, get_settings
from image_resizer.core import state
from image_resizer.services.processing.image_processor import ImageProcessor
from image_resizer.services.storage.local_service import LocalService
from image_resizer.services.storage.storage_service import StorageService

TEST_SIZES = {
    "thumb": {"width": 100, "height": 100},
    "large": {"width": 1200, "height": 800},
}


def make_image_bytes(width=640, height=480, image_format="JPEG", mode="RGB", color=(200, 40, 40)):
    """Encode a solid-colour test image."""
    if mode in ("RGBA", "LA"):
        color = color + (128,) if mode == "RGBA" else (color[0], 128)
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def clean_runtime():
    """Reset cached settings and runtime state around every test."""
    get_settings.cache_clear()
    state.reset()
    yield
    get_settings.cache_clear()
    state.reset()


@pytest.fixture
def settings(tmp_path):
    """Development settings storing objects under a temporary directory."""
    return Settings(
        _env_file=None,
        DEV_MODE=True,
        LOCAL_STORAGE_DIR=str(tmp_path / "storage"),
        ORIGINAL_IMAGE_IDENTIFIER="_xoriginal",
        IMAGE_SIZES=TEST_SIZES,
    )


@pytest.fixture
def local_backend(settings):
    """Local filesystem storage backend."""
    return LocalService(settings)


@pytest.fixture
def app_state(settings, local_backend):
    """Runtime state wired to the local backend."""
    return state.init(
        settings=settings,
        storage=StorageService(settings, backend=local_backend),
        image_processor=ImageProcessor(fit=settings.RESIZE_FIT, jpeg_quality=settings.JPEG_QUALITY),
    )


@pytest.fixture
def jpeg_bytes():
    """A 640x480 JPEG image."""
    return make_image_bytes()
