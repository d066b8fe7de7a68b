"""Client-side face cropping for album creation.

The crop is a square picked by a center point (fractions of the image) and
a zoom factor; zoom 1 is the largest square that fits the image. Everything
here runs locally; the backend only sees the final JPEG.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

from curatai.api.client import ApiClient, CancelToken
from curatai.core.exceptions import ImageProcessingError
from curatai.models import CropArea

logger = logging.getLogger(__name__)

MIN_ZOOM = 1.0
MAX_ZOOM = 3.0
JPEG_QUALITY = 92


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, float(zoom)))


def compute_crop_area(
    image_size: Tuple[int, int],
    center: Tuple[float, float] = (0.5, 0.5),
    zoom: float = 1.0,
    aspect: float = 1.0,
) -> CropArea:
    """Pixel rectangle for a crop of ``aspect`` ratio around ``center``.

    The rectangle always lies inside the image; a center too close to an edge
    shifts the rectangle rather than shrinking it.
    """
    width, height = image_size
    if width <= 0 or height <= 0:
        raise ImageProcessingError(f"Invalid image size: {image_size}")

    zoom = clamp_zoom(zoom)
    if width / height > aspect:
        base_w, base_h = height * aspect, height
    else:
        base_w, base_h = width, width / aspect

    crop_w = max(1, min(width, int(round(base_w / zoom))))
    crop_h = max(1, min(height, int(round(base_h / zoom))))

    cx = min(max(center[0], 0.0), 1.0) * width
    cy = min(max(center[1], 0.0), 1.0) * height
    x = int(round(cx - crop_w / 2))
    y = int(round(cy - crop_h / 2))
    x = min(max(x, 0), width - crop_w)
    y = min(max(y, 0), height - crop_h)

    return CropArea(x=x, y=y, width=crop_w, height=crop_h)


def _open(image_bytes: bytes) -> Image.Image:
    """Decode image bytes with EXIF orientation applied."""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageProcessingError(f"Could not decode image: {e}") from e
    return ImageOps.exif_transpose(img)


def image_size(image_bytes: bytes) -> Tuple[int, int]:
    """(width, height) as displayed, i.e. after EXIF orientation."""
    return _open(image_bytes).size


def crop_to_jpeg(image_bytes: bytes, area: CropArea, quality: int = JPEG_QUALITY) -> bytes:
    """Crop ``area`` out of the image and serialize it as JPEG."""
    img = _open(image_bytes)
    img_w, img_h = img.size
    if area.x < 0 or area.y < 0 or area.x + area.width > img_w or area.y + area.height > img_h:
        raise ImageProcessingError(f"Crop {area} exceeds image bounds {img.size}")

    cropped = img.crop(area.box).convert("RGB")
    buf = io.BytesIO()
    cropped.save(buf, format="JPEG", quality=quality)
    logger.debug(f"Cropped {area.width}x{area.height} face region at ({area.x}, {area.y})")
    return buf.getvalue()


def draw_crop_outline(image_bytes: bytes, area: CropArea, max_side: Optional[int] = 640) -> bytes:
    """Preview of the full image with the crop rectangle outlined and the rest dimmed."""
    img = _open(image_bytes).convert("RGB")
    shade = Image.new("RGB", img.size, (0, 0, 0))
    preview = Image.blend(img, shade, 0.45)
    preview.paste(img.crop(area.box), (area.x, area.y))

    draw = ImageDraw.Draw(preview)
    line = max(2, min(img.size) // 200)
    draw.rectangle(area.box, outline=(255, 255, 255), width=line)

    if max_side:
        preview.thumbnail((max_side, max_side))
    buf = io.BytesIO()
    preview.save(buf, format="JPEG", quality=85)
    return buf.getvalue()


def fetch_image(client: ApiClient, url: str, cancel_token: Optional[CancelToken] = None) -> bytes:
    """Download the full-resolution image to crop from."""
    logger.debug(f"Fetching image for cropping: {url}")
    return client.fetch_bytes(url, cancel_token=cancel_token)
