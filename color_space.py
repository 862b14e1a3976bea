"""
Color conversions used to rank covers: RGB <-> HSV and luminosity.

HSV outputs use degree/percent scales (hue 0-360, saturation and value
0-100), not 0-1. The sort keys in sort_keys.py depend on these scales.
"""

import math
from typing import NamedTuple

import numpy as np

from models import Color


# Perceived brightness weights
LUM_WEIGHTS = (0.241, 0.691, 0.068)


class HsvColor(NamedTuple):
    h: float  # degrees [0, 360), 0 when achromatic
    s: float  # percent [0, 100]
    v: float  # percent [0, 100]


def luminosity(r: float, g: float, b: float) -> float:
    """Weighted brightness of 0-255 channels."""
    return r * LUM_WEIGHTS[0] + g * LUM_WEIGHTS[1] + b * LUM_WEIGHTS[2]


def luminosity_sqrt(r: float, g: float, b: float) -> float:
    """Square-rooted luminosity, the form used by the step sort."""
    return math.sqrt(luminosity(r, g, b))


def rgb_to_hsv(r: float, g: float, b: float) -> HsvColor:
    """Convert 0-255 channels to HSV on degree/percent scales."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    cmax = max(r, g, b)
    cmin = min(r, g, b)
    diff = cmax - cmin

    if cmax == cmin:
        h = 0.0
    elif cmax == r:
        h = (60.0 * ((g - b) / diff) + 360.0) % 360.0
    elif cmax == g:
        h = (60.0 * ((b - r) / diff) + 120.0) % 360.0
    else:
        h = (60.0 * ((r - g) / diff) + 240.0) % 360.0

    s = (diff / cmax) * 100.0 if cmax != 0 else 0.0
    v = cmax * 100.0

    return HsvColor(h, s, v)


def hsv_to_rgb(h: float, s: float, v: float) -> Color:
    """Inverse of rgb_to_hsv, rounded to the nearest 8-bit color."""
    s, v = s / 100.0, v / 100.0
    c = v * s
    hp = (h % 360.0) / 60.0
    x = c * (1 - abs(hp % 2 - 1))
    m = v - c

    if hp < 1:
        rgb = (c, x, 0.0)
    elif hp < 2:
        rgb = (x, c, 0.0)
    elif hp < 3:
        rgb = (0.0, c, x)
    elif hp < 4:
        rgb = (0.0, x, c)
    elif hp < 5:
        rgb = (x, 0.0, c)
    else:
        rgb = (c, 0.0, x)

    r, g, b = (min(255, max(0, round((ch + m) * 255))) for ch in rgb)
    return Color(r, g, b)


def color_to_hsv(color: Color) -> HsvColor:
    return rgb_to_hsv(color.r, color.g, color.b)


def rgb_to_hsv_array(rgb: np.ndarray) -> np.ndarray:
    """
    Vectorized rgb_to_hsv.

    Args:
        rgb: Array of shape (n, 3) with 0-255 channels

    Returns:
        Array of shape (n, 3) with columns [h, s, v]
    """
    rgb = np.asarray(rgb, dtype=np.float64).reshape(-1, 3) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    cmax = rgb.max(axis=1)
    cmin = rgb.min(axis=1)
    diff = cmax - cmin

    # Greys divide by 1 here; their hue is forced to 0 below
    safe_diff = np.where(diff == 0, 1.0, diff)
    h = np.where(
        cmax == r, (60.0 * ((g - b) / safe_diff) + 360.0) % 360.0,
        np.where(
            cmax == g, (60.0 * ((b - r) / safe_diff) + 120.0) % 360.0,
            (60.0 * ((r - g) / safe_diff) + 240.0) % 360.0,
        ),
    )
    h = np.where(diff == 0, 0.0, h)

    s = np.where(cmax == 0, 0.0, diff / np.where(cmax == 0, 1.0, cmax) * 100.0)
    v = cmax * 100.0

    return np.column_stack([h, s, v])
