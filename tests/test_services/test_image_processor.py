import io
import pytest
from unittest.mock import patch
from PIL import Image

from conftest import make_image_bytes
from image_resizer.core.exceptions import ImageProcessingError
from image_resizer.services.processing.image_processor import ImageProcessor, format_for_content_type


@pytest.mark.parametrize("fit", ["cover", "fill", "contain"])
@pytest.mark.parametrize("width, height", [(100, 100), (1200, 800), (50, 300)])
def test_resize_produces_exact_dimensions(fit, width, height):
    """Test that every fit policy yields exactly the requested size."""
    processor = ImageProcessor(fit=fit)
    source = processor.decode(make_image_bytes(640, 480), "photo_xoriginal.jpg")

    data = processor.resize_and_encode(source, width, height, "image/jpeg", "photo_thumb.jpg")

    with Image.open(io.BytesIO(data)) as resized:
        assert resized.size == (width, height)
        assert resized.format == "JPEG"


def test_resize_leaves_source_untouched():
    """Test that resizing works on a copy of the decoded source."""
    processor = ImageProcessor()
    source = processor.decode(make_image_bytes(640, 480), "photo_xoriginal.jpg")

    processor.resize(source, 100, 100)

    assert source.size == (640, 480)


def test_cover_crops_instead_of_stretching():
    """Test that cover keeps the centre of a wide image."""
    image = Image.new("RGB", (300, 100), (0, 0, 255))
    image.paste((255, 0, 0), (100, 0, 200, 100))

    resized = ImageProcessor(fit="cover").resize(image, 100, 100)

    assert resized.size == (100, 100)
    assert resized.getpixel((5, 50))[0] > 200
    assert resized.getpixel((95, 50))[0] > 200


def test_png_keeps_format_and_alpha():
    """Test that a PNG with transparency is re-encoded as PNG."""
    processor = ImageProcessor()
    source = processor.decode(make_image_bytes(200, 200, "PNG", mode="RGBA"), "logo_xoriginal.png")

    data = processor.resize_and_encode(source, 64, 64, "image/png", "logo_thumb.png")

    info = processor.analyze_image(data)
    assert info["format"] == "PNG"
    assert info["mode"] == "RGBA"
    assert (info["width"], info["height"]) == (64, 64)


def test_jpeg_encode_converts_alpha():
    """Test that images with alpha can still be written as JPEG."""
    processor = ImageProcessor()
    image = Image.new("RGBA", (20, 20), (10, 20, 30, 128))

    data = processor.encode(image, "JPEG")

    with Image.open(io.BytesIO(data)) as encoded:
        assert encoded.mode == "RGB"


def test_format_falls_back_to_content_type():
    """Test the encoder choice when the source format is unknown."""
    processor = ImageProcessor()
    source = Image.new("RGB", (40, 40))

    data = processor.resize_and_encode(source, 10, 10, "image/png", "x_thumb.png")

    assert processor.analyze_image(data)["format"] == "PNG"


def test_mpo_source_is_written_as_jpeg():
    """Test that multi-picture JPEGs from cameras are resized into plain JPEG."""
    processor = ImageProcessor(jpeg_quality=60)
    source = Image.new("RGB", (80, 60), (10, 120, 200))
    source.format = "MPO"

    with patch.object(processor, "encode", wraps=processor.encode) as mock_encode:
        data = processor.resize_and_encode(source, 40, 30, "image/jpeg", "camera_thumb.jpg")

    assert mock_encode.call_args.args[1] == "JPEG"
    info = processor.analyze_image(data)
    assert info["format"] == "JPEG"
    assert (info["width"], info["height"]) == (40, 30)


def test_unknown_format_raises():
    """Test that an image without a format or known content type fails."""
    with pytest.raises(ImageProcessingError):
        ImageProcessor().resize_and_encode(Image.new("RGB", (4, 4)), 2, 2, "image/x-unknown", "x.bin")


def test_decode_invalid_bytes_raises():
    """Test that non-image bytes are reported as a processing error."""
    with pytest.raises(ImageProcessingError) as exc_info:
        ImageProcessor().decode(b"definitely not an image", "broken_xoriginal.jpg")

    assert exc_info.value.path == "broken_xoriginal.jpg"


def test_unknown_fit_policy_rejected():
    """Test that the fit policy is validated."""
    with pytest.raises(ValueError):
        ImageProcessor(fit="stretchy")


@pytest.mark.parametrize("content_type, expected", [
    ("image/jpeg", "JPEG"),
    ("image/png", "PNG"),
    ("image/gif", "GIF"),
    ("image/x-unknown", None),
])
def test_format_for_content_type(content_type, expected):
    """Test mapping MIME types to Pillow formats."""
    assert format_for_content_type(content_type) == expected
