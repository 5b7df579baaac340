# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Connected-component labeling of classified grids.

Two-pass union-find labeling restricted to cells of one category.

Adjacency is 4-connected and fixed: only cells that share an edge are
merged; cells touching at a corner stay separate regions. Perimeter is
an edge count, so 8-connectivity would let a region's perimeter double
count the corner it is joined through.

Both passes walk row-major from (0, 0). Final labels are numbered in
order of each region's first cell, so enumeration is reproducible.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from huearea.measure.cancel import CancellationToken, check
from huearea.measure.classify import ClassifiedGrid
from huearea.measure.geometry import label_perimeters
from huearea.schema import Category, Region

logger = logging.getLogger(__name__)


class UnionFind:
    """
    Union-Find over dense integer labels 0..n-1.

    Path compression plus union by rank; rank ties keep the smaller
    label as root.

    Example:
        >>> uf = UnionFind(4)
        >>> uf.union(1, 2)
        1
        >>> uf.union(2, 3)
        1
        >>> uf.connected(1, 3)
        True
        >>> uf.connected(0, 3)
        False
    """

    def __init__(self, size: int = 0) -> None:
        self._parent: list[int] = list(range(size))
        self._rank: list[int] = [0] * size

    def __len__(self) -> int:
        return len(self._parent)

    def add(self) -> int:
        """Create a new singleton set and return its label."""
        label = len(self._parent)
        self._parent.append(label)
        self._rank.append(0)
        return label

    def find(self, x: int) -> int:
        """Representative of the set containing ``x``."""
        parent = self._parent
        root = x
        while parent[root] != root:
            root = parent[root]
        while parent[x] != root:
            parent[x], x = root, parent[x]
        return root

    def union(self, a: int, b: int) -> int:
        """Merge the sets containing ``a`` and ``b``; return the new root."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        if self._rank[ra] < self._rank[rb] or (
            self._rank[ra] == self._rank[rb] and rb < ra
        ):
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return ra

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)


def _row_runs(mask: NDArray[np.bool_]):
    """
    Horizontal runs of True cells, in row-major order.

    Returns:
        (rows, starts, ends) arrays; each run covers
        ``mask[row, start:end]``.
    """
    height, width = mask.shape
    padded = np.zeros((height, width + 2), dtype=np.int8)
    padded[:, 1:-1] = mask
    steps = np.diff(padded, axis=1)
    rows, starts = np.nonzero(steps == 1)
    _, ends = np.nonzero(steps == -1)
    return rows, starts, ends


def label_mask(
    mask: NDArray[np.bool_],
    *,
    cancel: Optional[CancellationToken] = None,
) -> tuple[NDArray[np.int32], int]:
    """
    Label the 4-connected components of a boolean mask.

    The unit of work is a horizontal run of True cells: each run takes
    one provisional label, and runs in consecutive rows are merged when
    their column spans overlap (sharing at least one column, never just
    a corner).

    Args:
        mask: (H, W) boolean array
        cancel: Optional cancellation token, checked between passes

    Returns:
        (labels, count) where labels is an (H, W) int32 array with 0 for
        background and 1..count for components, numbered in row-major
        order of each component's first cell.
    """
    mask = np.asarray(mask, dtype=bool)
    height, width = mask.shape
    labels = np.zeros((height, width), dtype=np.int32)

    check(cancel, "labeling pass 1")
    rows, starts, ends = _row_runs(mask)
    # Run index range of each row
    bounds = np.searchsorted(rows, np.arange(height + 1)).tolist()
    starts = starts.tolist()
    ends = ends.tolist()

    # Label 0 is background
    uf = UnionFind(1)
    provisional = [0] * len(starts)

    # Pass 1: provisional label per run, unions with overlapping runs above
    for row in range(height):
        lo, hi = bounds[row], bounds[row + 1]
        if lo == hi:
            continue
        above = bounds[row - 1] if row > 0 else lo
        for i in range(lo, hi):
            start, end = starts[i], ends[i]
            # Runs above that end before this one starts cannot touch it
            while above < lo and ends[above] <= start:
                above += 1
            run_label = 0
            j = above
            while j < lo and starts[j] < end:
                if run_label:
                    uf.union(run_label, provisional[j])
                else:
                    run_label = provisional[j]
                j += 1
            provisional[i] = run_label or uf.add()

    # Pass 2: resolve equivalences, renumber by first appearance
    check(cancel, "labeling pass 2")
    lut = np.zeros(len(uf), dtype=np.int32)
    final_of_root: dict[int, int] = {}
    for p in range(1, len(uf)):
        root = uf.find(p)
        if root not in final_of_root:
            final_of_root[root] = len(final_of_root) + 1
        lut[p] = final_of_root[root]

    # Runs concatenated in row-major order are exactly the True cells
    run_labels = lut[np.asarray(provisional, dtype=np.int64)]
    lengths = np.asarray(ends, dtype=np.int64) - np.asarray(starts, dtype=np.int64)
    labels[mask] = np.repeat(run_labels, lengths)

    return labels, len(final_of_root)


def label(
    grid: ClassifiedGrid,
    category: Category,
    *,
    cancel: Optional[CancellationToken] = None,
) -> tuple[Region, ...]:
    """
    Find every region of one category.

    Args:
        grid: Classified grid
        category: A measured (non-NONE) category
        cancel: Optional cancellation token

    Returns:
        Regions in row-major order of their first cell. Empty when the
        category has no cells.
    """
    if category is Category.NONE:
        raise ValueError("Cannot label category NONE")

    labels, count = label_mask(grid.mask(category), cancel=cancel)
    if count == 0:
        return ()

    perimeters = label_perimeters(labels, count)

    coords = np.argwhere(labels > 0)  # row-major
    owners = labels[coords[:, 0], coords[:, 1]]
    # Stable sort keeps cells row-major within each region
    coords = coords[np.argsort(owners, kind="stable")]
    sizes = np.bincount(owners, minlength=count + 1)[1:]
    groups = np.split(coords, np.cumsum(sizes)[:-1])

    regions = []
    for idx, cells in enumerate(groups):
        mins = cells.min(axis=0)
        maxs = cells.max(axis=0)
        regions.append(Region(
            category=category,
            label=idx + 1,
            cells=tuple(map(tuple, cells.tolist())),
            area=int(sizes[idx]),
            perimeter=int(perimeters[idx]),
            bbox=(int(mins[0]), int(mins[1]), int(maxs[0]), int(maxs[1])),
        ))

    logger.debug("Labeled %d %s regions", count, category.value)
    return tuple(regions)


def label_all(
    grid: ClassifiedGrid,
    *,
    cancel: Optional[CancellationToken] = None,
) -> dict[Category, tuple[Region, ...]]:
    """
    Label every measured category of a grid.

    Returns:
        Mapping from each of ``Category.measured()`` (in that order) to its
        regions; categories with no cells map to an empty tuple.
    """
    counts = grid.counts()
    return {
        category: label(grid, category, cancel=cancel) if counts[category] else ()
        for category in Category.measured()
    }
