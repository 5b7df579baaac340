# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Pixel buffers and image loading.

A PixelBuffer is the only input the measurement core accepts. It wraps a
read-only (H, W, 3) or (H, W, 4) uint8 array, origin top-left, row-major.
"""

from __future__ import annotations

import hashlib
import io
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from huearea.errors import InvalidInput

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, NDArray, "PixelBuffer"]


class PixelBuffer:
    """
    Immutable width × height grid of RGB(A) samples.

    Invariants:
        - width, height >= 1
        - every channel value is in [0, 255] (stored as uint8)
        - the backing array is never written after construction

    Example:
        >>> buf = PixelBuffer(np.zeros((2, 3, 3), dtype=np.uint8))
        >>> buf.width, buf.height
        (3, 2)
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: NDArray) -> None:
        self._pixels = _validate_pixels(pixels)

    @property
    def pixels(self) -> NDArray[np.uint8]:
        """Read-only (H, W, C) array, C in {3, 4}."""
        return self._pixels

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def has_alpha(self) -> bool:
        return self._pixels.shape[2] == 4

    @property
    def rgb(self) -> NDArray[np.uint8]:
        """(H, W, 3) view of the color channels."""
        return self._pixels[:, :, :3]

    @property
    def alpha(self) -> Optional[NDArray[np.uint8]]:
        """(H, W) view of the alpha channel, or None for RGB buffers."""
        if not self.has_alpha:
            return None
        return self._pixels[:, :, 3]

    @property
    def digest(self) -> str:
        """Short content hash, stable across runs."""
        h = hashlib.sha256()
        h.update(np.asarray(self._pixels.shape, dtype=np.int64).tobytes())
        h.update(self._pixels.tobytes())
        return f"sha256:{h.hexdigest()[:16]}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self._pixels.shape == other._pixels.shape
            and bool(np.array_equal(self._pixels, other._pixels))
        )

    __hash__ = None

    def __repr__(self) -> str:
        mode = "RGBA" if self.has_alpha else "RGB"
        return f"PixelBuffer({self.width}x{self.height}, {mode})"


def _validate_pixels(pixels: NDArray) -> NDArray[np.uint8]:
    """Check shape, dtype and range; return a private read-only copy."""
    if not isinstance(pixels, np.ndarray):
        raise InvalidInput(f"Expected numpy array, got {type(pixels)}")

    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise InvalidInput(
            f"Expected (H, W, 3) or (H, W, 4) array, got shape {pixels.shape}"
        )

    height, width = pixels.shape[:2]
    if height < 1 or width < 1:
        raise InvalidInput(
            f"Image has no pixels ({width}x{height}): "
            f"minimum dimensions are 1x1"
        )

    if pixels.dtype != np.uint8:
        if not (
            np.issubdtype(pixels.dtype, np.integer)
            or np.issubdtype(pixels.dtype, np.floating)
        ):
            raise InvalidInput(f"Expected numeric array, got {pixels.dtype}")
        if not np.all(np.isfinite(pixels)) or not np.all(pixels == np.round(pixels)):
            raise InvalidInput("Channel values must be integers in [0, 255]")
        if pixels.min() < 0 or pixels.max() > 255:
            raise InvalidInput(
                f"Channel values must be in [0, 255], "
                f"got [{pixels.min()}, {pixels.max()}]"
            )

    out = np.array(pixels, dtype=np.uint8, copy=True, order="C")
    out.setflags(write=False)
    return out


def load_pixels(image: ImageSource) -> PixelBuffer:
    """
    Produce a PixelBuffer from a file path, array, or existing buffer.

    Files are decoded with Pillow. An embedded ICC profile is converted
    to sRGB so hue thresholds see the same colors a color picker shows.
    Images with transparency keep their alpha channel (RGBA); all other
    modes are converted to RGB.

    Args:
        image: One of:
            - Path to image file (str or Path)
            - NumPy array of shape (H, W, 3) or (H, W, 4), values in [0, 255]
            - An existing PixelBuffer (returned unchanged)

    Returns:
        PixelBuffer

    Raises:
        InvalidInput: Unsupported type, shape, range, or empty image
    """
    if isinstance(image, PixelBuffer):
        return image

    if isinstance(image, np.ndarray):
        return PixelBuffer(image)

    if isinstance(image, (str, Path)):
        return PixelBuffer(_read_image_file(image))

    raise InvalidInput(
        f"Expected file path, numpy array or PixelBuffer, got {type(image)}"
    )


def _read_image_file(path: Union[str, Path]) -> NDArray[np.uint8]:
    """Decode an image file to an (H, W, 3|4) uint8 array."""
    try:
        from PIL import Image
    except ImportError as e:
        raise ImportError(
            "Pillow is required for image loading. "
            "Install with: pip install huearea[image]"
        ) from e

    with Image.open(path) as img:
        img.load()
        keep_alpha = img.mode in ("RGBA", "LA", "PA") or (
            img.mode == "P" and "transparency" in img.info
        )
        alpha = img.convert("RGBA").getchannel("A") if keep_alpha else None
        rgb = img if img.mode == "RGB" else img.convert("RGB")

        if "icc_profile" in img.info:
            rgb = _to_srgb(rgb, img.info["icc_profile"], path)

        if alpha is not None:
            rgb = rgb.copy()
            rgb.putalpha(alpha)

        pixels = np.array(rgb, dtype=np.uint8)

    logger.debug(
        "Loaded %s: %dx%d %s",
        path, pixels.shape[1], pixels.shape[0], "RGBA" if keep_alpha else "RGB",
    )
    return pixels


def _to_srgb(img, icc_profile: bytes, path: Union[str, Path]):
    """Apply embedded-profile → sRGB conversion to an RGB Pillow image."""
    from PIL import ImageCms

    try:
        embedded_profile = ImageCms.ImageCmsProfile(io.BytesIO(icc_profile))
        srgb_profile = ImageCms.createProfile("sRGB")
        return ImageCms.profileToProfile(img, embedded_profile, srgb_profile)
    except (OSError, ImageCms.PyCMSError) as e:
        # Unreadable profile: measure the raw RGB values instead
        logger.warning("ICC conversion failed for %s, using raw RGB: %s", path, e)
        return img
