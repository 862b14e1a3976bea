"""
Find the dominant color of an album cover.

The dominant color is the mode of the exact RGB values: every pixel is packed
into a 24-bit key (r << 16 | g << 8 | b) and counted in a histogram covering
the whole color space. Channels are packed as-is; no bias is applied.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from models import Color

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

HIST_SIZE = 1 << 24  # One bucket per 24-bit color
DEFAULT_RESIZE = 256  # Covers are downscaled to 256x256 before counting

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


PixelData = Union[bytes, bytearray, memoryview, np.ndarray, list, tuple]


# =============================================================================
# Histogram
# =============================================================================

def to_rgb_triples(pixels: PixelData) -> np.ndarray:
    """
    Normalize raw pixel input into an (n, 3) uint8 array.

    Bytes-like input is read as-is. Any other input is clipped into 0-255 so
    malformed values saturate instead of wrapping. Trailing values that do not
    complete a triple are dropped.
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = np.asarray(pixels).reshape(-1)
        if flat.dtype != np.uint8:
            if flat.size and not np.issubdtype(flat.dtype, np.number):
                raise ValueError(f"Pixel data must be numeric, got {flat.dtype}")
            flat = np.clip(np.nan_to_num(flat.astype(np.float64)), 0, 255).astype(np.uint8)

    usable = (flat.size // 3) * 3
    return flat[:usable].reshape(-1, 3)


def pack_rgb(triples: np.ndarray) -> np.ndarray:
    """Pack (n, 3) uint8 triples into 24-bit integer keys."""
    triples = triples.astype(np.int64)
    return (triples[:, 0] << 16) | (triples[:, 1] << 8) | triples[:, 2]


def unpack_rgb(key: int) -> Color:
    return Color((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)


def build_histogram(triples: np.ndarray) -> np.ndarray:
    """Count pixels per 24-bit color in a freshly allocated histogram."""
    histogram = np.zeros(HIST_SIZE, dtype=np.int32)
    np.add.at(histogram, pack_rgb(triples), 1)
    return histogram


def find_dominant_color(pixels: PixelData) -> Color:
    """
    Return the most frequent exact color in a flat RGB buffer.

    Args:
        pixels: Raw RGB bytes (r, g, b, r, g, b, ...) or an array of triples

    Returns:
        The color with the greatest pixel count. Ties go to the lowest packed
        value. An empty buffer yields black.
    """
    triples = to_rgb_triples(pixels)
    if len(triples) == 0:
        return Color(0, 0, 0)

    histogram = build_histogram(triples)

    # argmax returns the first maximum, i.e. the lowest packed color
    return unpack_rgb(int(np.argmax(histogram)))


# =============================================================================
# Decoding
# =============================================================================

def load_cover_pixels(image_path: Union[str, Path], size: int = DEFAULT_RESIZE) -> bytes:
    """
    Decode a cover and return raw RGB bytes after resizing to size x size.

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If file is not a valid image or exceeds size limits
    """
    path = Path(image_path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")

    try:
        img = Image.open(path)
    except UnidentifiedImageError as e:
        raise ValueError(f"Not an image: {path}") from e
    except Image.DecompressionBombError as e:
        raise ValueError(f"Could not open image {path}: {e}") from e

    with img:
        width, height = img.size
        if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
            raise ValueError(
                f"Image dimensions {width}x{height} exceed maximum "
                f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
            )
        if width * height > MAX_IMAGE_PIXELS:
            raise ValueError(
                f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
            )

        try:
            rgb = img.convert('RGB')
        except (OSError, Image.DecompressionBombError) as e:
            raise ValueError(f"Could not decode image {path}: {e}") from e

    if size:
        rgb = rgb.resize((size, size), Image.Resampling.NEAREST)

    return rgb.tobytes()


def extract_cover_color(image_path: Union[str, Path], size: int = DEFAULT_RESIZE) -> Color:
    """Decode a cover file and find its dominant color."""
    color = find_dominant_color(load_cover_pixels(image_path, size=size))
    logger.debug("Dominant color of %s: %s", image_path, color.hex)
    return color
