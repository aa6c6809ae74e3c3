from io import BytesIO
import pybase64 as base64
from PIL import Image
from prewarm.util.image import create_placeholder_image

PREFIX = "data:image/jpeg;base64,"


def _decode(data_uri: str) -> Image.Image:
    assert data_uri.startswith(PREFIX)
    return Image.open(BytesIO(base64.b64decode(data_uri[len(PREFIX):])))


def test_placeholder_is_small_jpeg():
    image = _decode(create_placeholder_image())
    assert image.format == "JPEG"
    assert image.size == (64, 64)


def test_placeholder_is_deterministic():
    create_placeholder_image.cache_clear()
    first = create_placeholder_image()
    create_placeholder_image.cache_clear()
    assert create_placeholder_image() == first


def test_placeholder_pattern():
    """Light background with dark eyes and mouth (allowing for JPEG noise)."""
    image = _decode(create_placeholder_image()).convert("L")
    assert image.getpixel((4, 4)) > 200
    assert image.getpixel((23, 23)) < 100
    assert image.getpixel((39, 23)) < 100
    assert image.getpixel((31, 37)) < 120
