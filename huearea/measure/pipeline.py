# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Main analysis API.

This is the primary entry point for Huearea's measurement core:
classify → label → measure → aggregate, for one image or many.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from huearea.measure.buffer import ImageSource, load_pixels
from huearea.measure.cancel import CancellationToken
from huearea.measure.classify import (
    ClassificationConfig,
    ClassifiedGrid,
    DEFAULT_CONFIG,
    classify,
)
from huearea.measure.geometry import aggregate, mask_perimeter
from huearea.measure.labeling import label_all
from huearea.schema import AnalysisReport, Category, CategoryTotals

logger = logging.getLogger(__name__)


def analyze(
    buffer: ImageSource,
    config: Optional[ClassificationConfig] = None,
    *,
    include_regions: bool = False,  # Attach per-region detail to the report
    include_hash: bool = True,  # Include SHA256 prefix of the pixel data
    cancel: Optional[CancellationToken] = None,
) -> AnalysisReport:
    """
    Measure the red and blue regions of an image.

    Args:
        buffer: One of:
            - PixelBuffer
            - NumPy array of shape (H, W, 3) or (H, W, 4), values in [0, 255]
            - Path to an image file (str or Path), decoded with Pillow
        config: Classification settings (uses defaults if None). Pass
            ``ClassificationConfig.from_dict(...)`` for external settings.
        include_regions: If True, the report carries every Region
            (row-major order within each category, RED before BLUE).
        include_hash: Include a hash of the pixel data (default: True)
        cancel: Optional token; checked between classification row chunks
            and between labeling passes.

    Returns:
        AnalysisReport with per-category totals

    Raises:
        UnsupportedConfig: Invalid classification settings (raised when
            the config is constructed, before any pixel work)
        InvalidInput: Empty, malformed or out-of-range pixel data
        AnalysisCancelled: The token was cancelled or its deadline passed

    Example:
        >>> from huearea import analyze
        >>> report = analyze("photo.png")
        >>> report.to_presentation()
        {'redArea': 5321, 'blueArea': 4872, 'redPerimeter': 610, 'bluePerimeter': 580}
    """
    cfg = config or DEFAULT_CONFIG
    pixels = load_pixels(buffer)

    grid = classify(pixels, cfg, cancel=cancel)
    regions_by_category = label_all(grid, cancel=cancel)

    totals = tuple(
        aggregate(regions_by_category[category], category)
        for category in Category.measured()
    )
    if logger.isEnabledFor(logging.DEBUG):
        _cross_check_perimeters(grid, totals)

    regions = None
    if include_regions:
        regions = tuple(
            region
            for category in Category.measured()
            for region in regions_by_category[category]
        )

    report = AnalysisReport(
        width=pixels.width,
        height=pixels.height,
        totals=totals,
        regions=regions,
        image_hash=pixels.digest if include_hash else None,
    )
    logger.debug(
        "Analyzed %dx%d: %s",
        pixels.width, pixels.height, report.to_presentation(),
    )
    return report


def _cross_check_perimeters(
    grid: ClassifiedGrid,
    totals: tuple[CategoryTotals, ...],
) -> None:
    """Compare region perimeter sums with the whole-mask edge count."""
    for t in totals:
        edges = mask_perimeter(grid.mask(t.category))
        if edges != t.perimeter:
            logger.warning(
                "%s perimeter %d disagrees with mask edge count %d",
                t.category.value, t.perimeter, edges,
            )


def analyze_many(
    buffers: Iterable[ImageSource],
    config: Optional[ClassificationConfig] = None,
    *,
    max_workers: Optional[int] = None,
    cancel: Optional[CancellationToken] = None,
    include_regions: bool = False,
    include_hash: bool = True,
) -> list[AnalysisReport]:
    """
    Analyze independent images concurrently.

    Runs share nothing but the (immutable) config and the caller's
    token. Reports come back in input order. The first failure is
    re-raised; runs that have not started are cancelled.

    Args:
        buffers: Images, in any form ``analyze`` accepts
        config: Classification settings shared by every run
        max_workers: Thread pool size (``ThreadPoolExecutor`` default if None)
        cancel: Optional token shared by every run
        include_regions: Passed to ``analyze``
        include_hash: Passed to ``analyze``

    Returns:
        One AnalysisReport per input, in input order
    """
    items = list(buffers)
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(
                analyze,
                item,
                config,
                include_regions=include_regions,
                include_hash=include_hash,
                cancel=cancel,
            )
            for item in items
        ]
        try:
            return [f.result() for f in futures]
        except BaseException:
            for f in futures:
                f.cancel()
            raise
