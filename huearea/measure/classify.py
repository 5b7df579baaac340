# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Per-pixel hue classification.

Maps every pixel to exactly one Category (RED, BLUE or NONE) from its
color alone. Classification is hue-based with saturation/value floors,
which keeps shadows, highlights and grays out of the colored regions.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from huearea.errors import UnsupportedConfig
from huearea.measure.buffer import ImageSource, PixelBuffer, load_pixels
from huearea.measure.cancel import CancellationToken, check
from huearea.measure.colorspace import hue_in_range, srgb_uint8_to_hsv
from huearea.schema import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationConfig:
    """Configuration for pixel classification."""

    # Hue ranges in degrees, inclusive at both ends.
    # min > max wraps through 0° (345 → 15 covers magenta-red to orange-red).
    # The two ranges must not overlap: one category per pixel.
    red_hue_range: tuple[float, float] = (345.0, 15.0)
    blue_hue_range: tuple[float, float] = (200.0, 250.0)

    # A pixel must be strictly above both floors to be colored.
    # Saturation 0 (grays) never qualifies; hue is undefined there.
    min_saturation: float = 0.35
    min_value: float = 0.2

    # RGBA only: pixels with alpha below this are NONE (0 disables)
    min_alpha: int = 1

    # Rows classified per batch; cancellation is checked between batches
    rows_per_chunk: int = 256

    def __post_init__(self) -> None:
        """Validate settings before any pixel work."""
        for name in ("red_hue_range", "blue_hue_range"):
            object.__setattr__(self, name, _hue_range(name, getattr(self, name)))

        for name in ("min_saturation", "min_value"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise UnsupportedConfig(f"{name} must be a number, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise UnsupportedConfig(f"{name} must be 0-1, got {value}")
            object.__setattr__(self, name, float(value))

        if isinstance(self.min_alpha, bool) or not isinstance(self.min_alpha, int):
            raise UnsupportedConfig(f"min_alpha must be an int, got {self.min_alpha!r}")
        if not 0 <= self.min_alpha <= 255:
            raise UnsupportedConfig(f"min_alpha must be 0-255, got {self.min_alpha}")

        if isinstance(self.rows_per_chunk, bool) or not isinstance(self.rows_per_chunk, int):
            raise UnsupportedConfig(
                f"rows_per_chunk must be an int, got {self.rows_per_chunk!r}"
            )
        if self.rows_per_chunk < 1:
            raise UnsupportedConfig(
                f"rows_per_chunk must be >= 1, got {self.rows_per_chunk}"
            )

        if _arcs_overlap(self.red_hue_range, self.blue_hue_range):
            raise UnsupportedConfig(
                f"Red hue range {self.red_hue_range} overlaps "
                f"blue hue range {self.blue_hue_range}"
            )

    def hue_range(self, category: Category) -> tuple[float, float]:
        """Hue range for a measured category."""
        if category is Category.RED:
            return self.red_hue_range
        if category is Category.BLUE:
            return self.blue_hue_range
        raise KeyError(f"No hue range for category '{category.value}'")

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        d = asdict(self)
        d["red_hue_range"] = list(self.red_hue_range)
        d["blue_hue_range"] = list(self.blue_hue_range)
        return d

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> ClassificationConfig:
        """
        Build a config from an external source.

        Missing keys take the documented defaults; unknown keys are rejected.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise UnsupportedConfig(f"Unknown classification settings: {unknown}")
        return cls(**data)


def _hue_range(name: str, value) -> tuple[float, float]:
    """Normalize and validate a (min, max) hue pair."""
    try:
        low, high = value
    except (TypeError, ValueError):
        raise UnsupportedConfig(
            f"{name} must be a (min, max) pair, got {value!r}"
        ) from None
    for bound in (low, high):
        if not isinstance(bound, (int, float)) or isinstance(bound, bool):
            raise UnsupportedConfig(f"{name} bounds must be numbers, got {value!r}")
        if not 0.0 <= bound < 360.0:
            raise UnsupportedConfig(f"{name} bounds must be in [0, 360), got {value!r}")
    return float(low), float(high)


def _arc_intervals(arc: tuple[float, float]) -> list[tuple[float, float]]:
    """Split a possibly wrapping arc into plain intervals."""
    low, high = arc
    if low <= high:
        return [(low, high)]
    return [(low, 360.0), (0.0, high)]


def _arcs_overlap(a: tuple[float, float], b: tuple[float, float]) -> bool:
    return any(
        a_lo <= b_hi and b_lo <= a_hi
        for a_lo, a_hi in _arc_intervals(a)
        for b_lo, b_hi in _arc_intervals(b)
    )


DEFAULT_CONFIG = ClassificationConfig()


class ClassifiedGrid:
    """
    Height × width grid of Category codes.

    Same dimensions as the PixelBuffer it was derived from. The backing
    int8 array is read-only; a grid is never mutated after creation.
    """

    __slots__ = ("_codes",)

    def __init__(self, codes: NDArray) -> None:
        codes = np.asarray(codes)
        if codes.ndim != 2:
            raise ValueError(f"Expected (H, W) array, got shape {codes.shape}")
        valid = [c.code for c in Category]
        if not np.isin(codes, valid).all():
            raise ValueError(f"Grid codes must be one of {valid}")
        out = np.array(codes, dtype=np.int8, copy=True, order="C")
        out.setflags(write=False)
        self._codes = out

    @classmethod
    def from_categories(cls, rows: list[list[Category]]) -> ClassifiedGrid:
        """Build a grid from nested lists of Category (handy for fixtures)."""
        return cls(np.array([[c.code for c in row] for row in rows], dtype=np.int8))

    @property
    def codes(self) -> NDArray[np.int8]:
        return self._codes

    @property
    def height(self) -> int:
        return self._codes.shape[0]

    @property
    def width(self) -> int:
        return self._codes.shape[1]

    def category_at(self, row: int, col: int) -> Category:
        return Category.from_code(self._codes[row, col])

    def mask(self, category: Category) -> NDArray[np.bool_]:
        """Boolean (H, W) mask of cells in ``category``."""
        return self._codes == category.code

    def counts(self) -> dict[Category, int]:
        """Cell count per category (all categories present as keys)."""
        return {c: int(np.count_nonzero(self._codes == c.code)) for c in Category}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassifiedGrid):
            return NotImplemented
        return (
            self._codes.shape == other._codes.shape
            and bool(np.array_equal(self._codes, other._codes))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"ClassifiedGrid({self.width}x{self.height})"


def classify(
    buffer: ImageSource,
    config: Optional[ClassificationConfig] = None,
    *,
    cancel: Optional[CancellationToken] = None,
) -> ClassifiedGrid:
    """
    Classify every pixel of an image as RED, BLUE or NONE.

    A pixel is RED (BLUE) when its hue falls inside ``red_hue_range``
    (``blue_hue_range``) AND its saturation and value are strictly above
    the configured floors. Everything else is NONE, including every
    zero-saturation pixel and, for RGBA input, pixels with alpha below
    ``min_alpha``.

    Pure function of its inputs. Rows are processed in chunks of
    ``config.rows_per_chunk``; the cancellation token is checked before
    each chunk.

    Args:
        buffer: PixelBuffer (or anything ``load_pixels`` accepts)
        config: Classification settings (uses defaults if None)
        cancel: Optional cancellation token

    Returns:
        ClassifiedGrid with the buffer's dimensions
    """
    cfg = config or DEFAULT_CONFIG
    if not isinstance(buffer, PixelBuffer):
        buffer = load_pixels(buffer)

    height = buffer.height
    codes = np.empty((height, buffer.width), dtype=np.int8)
    rgb = buffer.rgb
    alpha = buffer.alpha

    for start in range(0, height, cfg.rows_per_chunk):
        check(cancel, "classification")
        stop = min(start + cfg.rows_per_chunk, height)
        codes[start:stop] = _classify_rows(
            rgb[start:stop],
            alpha[start:stop] if alpha is not None else None,
            cfg,
        )

    grid = ClassifiedGrid(codes)
    logger.debug(
        "Classified %dx%d: %s",
        grid.width, grid.height,
        {c.value: n for c, n in grid.counts().items()},
    )
    return grid


def _classify_rows(
    rgb: NDArray[np.uint8],
    alpha: Optional[NDArray[np.uint8]],
    cfg: ClassificationConfig,
) -> NDArray[np.int8]:
    """Classify a horizontal band of pixels."""
    hsv = srgb_uint8_to_hsv(rgb)
    hue, sat, val = hsv[..., 0], hsv[..., 1], hsv[..., 2]

    colored = (sat > cfg.min_saturation) & (val > cfg.min_value)
    if alpha is not None:
        colored &= alpha >= cfg.min_alpha

    red = colored & hue_in_range(hue, *cfg.red_hue_range)
    blue = colored & hue_in_range(hue, *cfg.blue_hue_range)

    out = np.full(rgb.shape[:2], Category.NONE.code, dtype=np.int8)
    out[red] = Category.RED.code
    out[blue] = Category.BLUE.code
    return out
