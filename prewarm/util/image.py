"""
Placeholder image used as the source of warm calls.
"""

from functools import lru_cache
from io import BytesIO
import pybase64 as base64
from PIL import Image, ImageDraw

SIZE = 64
BACKGROUND = "#f0f0f0"
FOREGROUND = "#333333"


@lru_cache(maxsize=1)
def create_placeholder_image(quality: int = 70) -> str:
    """
    Render a tiny face-like pattern (two eyes and a mouth) as a JPEG data URI.

    The output is deterministic, so it is rendered once and cached.
    """
    image = Image.new("RGB", (SIZE, SIZE), BACKGROUND)
    draw = ImageDraw.Draw(image)
    # Rectangle boxes are inclusive of both corners.
    draw.rectangle((20, 20, 27, 27), fill=FOREGROUND)
    draw.rectangle((36, 20, 43, 27), fill=FOREGROUND)
    draw.rectangle((28, 36, 35, 39), fill=FOREGROUND)

    buffer = BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    encoded = base64.b64encode(buffer.getvalue()).decode()
    return f"data:image/jpeg;base64,{encoded}"
