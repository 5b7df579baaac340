# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Color space conversions.

Conversion chain: sRGB uint8 → sRGB [0,1] → HSV

HSV conventions used throughout Huearea:
- H (Hue): degrees in [0, 360); NaN where undefined (zero chroma)
- S (Saturation): 0.0 = gray, 1.0 = fully saturated
- V (Value): 0.0 = black, 1.0 = brightest

All conversions are pure NumPy for determinism and no external dependencies.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


# =============================================================================
# sRGB → HSV
# =============================================================================


def srgb_to_hsv(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert sRGB values [0,1] to HSV.

    Hue is NaN where max == min (grays, black, white): hue is undefined
    at zero saturation and must never match a hue range.

    Args:
        rgb: Array of shape (..., 3) with sRGB values in [0, 1]

    Returns:
        Array of shape (..., 3) with (H, S, V)
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    shape = rgb.shape
    flat = rgb.reshape(-1, 3)
    r, g, b = flat[:, 0], flat[:, 1], flat[:, 2]

    maxc = flat.max(axis=1)
    minc = flat.min(axis=1)
    delta = maxc - minc

    v = maxc
    s = np.divide(delta, maxc, out=np.zeros_like(maxc), where=maxc > 0)

    # Avoid division by zero; achromatic hues are overwritten with NaN below
    safe = np.where(delta > 0, delta, 1.0)
    h = np.select(
        [maxc == r, maxc == g],
        [
            np.mod((g - b) / safe, 6.0),
            (b - r) / safe + 2.0,
        ],
        default=(r - g) / safe + 4.0,
    )
    h = np.mod(h * 60.0, 360.0)
    h = np.where(delta > 0, h, np.nan)

    return np.stack([h, s, v], axis=-1).reshape(shape)


def srgb_uint8_to_hsv(pixels: NDArray[np.uint8]) -> NDArray[np.float64]:
    """
    Convert uint8 sRGB pixels [0,255] to HSV.

    Args:
        pixels: Array of shape (..., 3) with uint8 sRGB values

    Returns:
        Array of shape (..., 3) with (H, S, V)
    """
    return srgb_to_hsv(np.asarray(pixels, dtype=np.float64) / 255.0)


# =============================================================================
# Hue ranges
# =============================================================================


def hue_in_range(
    hue: NDArray[np.float64],
    low: float,
    high: float,
) -> NDArray[np.bool_]:
    """
    Test hues against an inclusive range on the hue circle.

    A range with low > high wraps through 0° (e.g. 345 → 15 covers
    [345, 360) and [0, 15]). NaN hues never match.

    Args:
        hue: Array of hues in degrees
        low: Range start in degrees
        high: Range end in degrees

    Returns:
        Boolean array with the same shape as ``hue``
    """
    hue = np.asarray(hue, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        if low <= high:
            return (hue >= low) & (hue <= high)
        return (hue >= low) | (hue <= high)
