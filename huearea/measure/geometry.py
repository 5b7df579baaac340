# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Region geometry: area and perimeter.

Area is the exact member cell count. Perimeter is the exposed edge
count: for every member cell, the number of its 4 edge-neighbors that
are not members of the same region (off-grid neighbors are
non-members). Under 4-connectivity this gives:

- a single cell has perimeter 4
- an N×M rectangle has perimeter 2·(N+M)
- every shared edge between two member cells removes exactly 2,
  so perimeter = 4·area − 2·(internal adjacencies), always even
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray

from huearea.schema import Category, CategoryTotals, Region

# Edge neighbors as (d_row, d_col)
_EDGE_STEPS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def perimeter_of(cells: Iterable[tuple[int, int]]) -> int:
    """
    Exposed edge count of a set of cells.

    Args:
        cells: (row, col) coordinates of the member cells

    Returns:
        Number of member-cell edges whose other side is not a member
    """
    members = set(cells)
    return sum(
        1
        for row, col in members
        for d_row, d_col in _EDGE_STEPS
        if (row + d_row, col + d_col) not in members
    )


def measure_region(region: Region) -> tuple[int, int]:
    """
    Measure a region from its member cells.

    Returns:
        (area, perimeter)
    """
    return len(region.cells), perimeter_of(region.cells)


def _exposed_edges(labels: NDArray[np.integer]) -> NDArray[np.int64]:
    """Per-cell count of edge-neighbors carrying a different label."""
    padded = np.pad(labels, 1, mode="constant", constant_values=0)
    center = padded[1:-1, 1:-1]
    exposed = np.zeros(labels.shape, dtype=np.int64)
    exposed += padded[:-2, 1:-1] != center  # up
    exposed += padded[2:, 1:-1] != center   # down
    exposed += padded[1:-1, :-2] != center  # left
    exposed += padded[1:-1, 2:] != center   # right
    return exposed


def label_perimeters(labels: NDArray[np.integer], count: int) -> NDArray[np.int64]:
    """
    Perimeter of every labeled region at once.

    Args:
        labels: (H, W) array, 0 for background, 1..count for regions
        count: Number of regions

    Returns:
        Array of length ``count``; entry i is the perimeter of label i+1
    """
    labels = np.asarray(labels)
    exposed = _exposed_edges(labels)
    sums = np.bincount(
        labels.ravel(),
        weights=exposed.ravel(),
        minlength=count + 1,
    )
    return sums[1:count + 1].astype(np.int64)


def mask_perimeter(mask: NDArray[np.bool_]) -> int:
    """
    Total exposed edge count of every True cell in a mask.

    Equal to the summed perimeters of the mask's 4-connected regions:
    two cells in different regions never share an edge.
    """
    mask = np.asarray(mask, dtype=bool)
    return int(_exposed_edges(mask.astype(np.int8))[mask].sum())


def aggregate(regions: Iterable[Region], category: Category) -> CategoryTotals:
    """
    Sum the regions of one category.

    Regions of other categories are ignored; there is no cross-region
    perimeter cancellation.
    """
    area = perimeter = count = 0
    for region in regions:
        if region.category is not category:
            continue
        area += region.area
        perimeter += region.perimeter
        count += 1
    return CategoryTotals(
        category=category,
        area=area,
        perimeter=perimeter,
        region_count=count,
    )
