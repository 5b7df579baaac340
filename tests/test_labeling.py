# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""Tests for union-find and 4-connected region labeling."""

import time

import numpy as np
import pytest

from huearea import Category
from huearea.errors import AnalysisCancelled
from huearea.measure import CancellationToken, ClassifiedGrid, label, label_all
from huearea.measure.labeling import UnionFind, label_mask

_CHARS = {"R": Category.RED, "B": Category.BLUE, ".": Category.NONE}


def _grid(*rows):
    """Build a grid from strings like 'RR.B'."""
    return ClassifiedGrid.from_categories([[_CHARS[ch] for ch in row] for row in rows])


def _checkerboard(size, first=Category.RED, second=Category.BLUE):
    return ClassifiedGrid.from_categories([
        [first if (r + c) % 2 == 0 else second for c in range(size)]
        for r in range(size)
    ])


class TestUnionFind:

    def test_singletons(self):
        uf = UnionFind(3)
        assert not uf.connected(0, 1)
        assert uf.find(2) == 2

    def test_union_is_transitive(self):
        uf = UnionFind(5)
        uf.union(1, 2)
        uf.union(3, 4)
        uf.union(2, 4)
        assert uf.connected(1, 3)
        assert not uf.connected(0, 1)

    def test_tie_keeps_smaller_root(self):
        uf = UnionFind(4)
        assert uf.union(3, 1) == 1
        assert uf.find(3) == 1

    def test_add(self):
        uf = UnionFind()
        assert uf.add() == 0
        assert uf.add() == 1
        assert len(uf) == 2


class TestLabelMask:

    def test_empty_mask(self):
        labels, count = label_mask(np.zeros((3, 4), dtype=bool))
        assert count == 0
        assert not labels.any()

    def test_u_shape_merges(self):
        """Two arms get different provisional labels and merge at the bottom."""
        mask = np.array([
            [1, 0, 1],
            [1, 0, 1],
            [1, 1, 1],
        ], dtype=bool)
        labels, count = label_mask(mask)
        assert count == 1
        assert set(np.unique(labels[mask])) == {1}

    def test_staircase_merges(self):
        mask = np.array([
            [0, 0, 0, 1],
            [0, 0, 1, 1],
            [0, 1, 1, 0],
            [1, 1, 0, 0],
        ], dtype=bool)
        _, count = label_mask(mask)
        assert count == 1

    def test_diagonal_cells_stay_separate(self):
        mask = np.eye(4, dtype=bool)
        labels, count = label_mask(mask)
        assert count == 4
        assert [labels[i, i] for i in range(4)] == [1, 2, 3, 4]

    def test_numbered_by_first_cell(self):
        # The right-hand region's first cell (0, 3) precedes the
        # left-hand region's first cell (1, 0) in row-major order.
        mask = np.array([
            [0, 0, 0, 1],
            [1, 0, 0, 1],
            [1, 0, 0, 0],
        ], dtype=bool)
        labels, count = label_mask(mask)
        assert count == 2
        assert labels[0, 3] == 1
        assert labels[1, 0] == 2

    def test_run_spanning_two_runs_below(self):
        mask = np.array([
            [1, 1, 1, 1, 1],
            [1, 0, 1, 0, 1],
        ], dtype=bool)
        labels, count = label_mask(mask)
        assert count == 1
        assert set(np.unique(labels[mask])) == {1}

    def test_runs_touching_at_a_corner_stay_separate(self):
        mask = np.array([
            [1, 1, 0, 0],
            [0, 0, 1, 1],
        ], dtype=bool)
        labels, count = label_mask(mask)
        assert count == 2
        assert labels[0, 0] == 1
        assert labels[1, 3] == 2

    def test_long_runs_fill_every_cell(self):
        mask = np.zeros((4, 9), dtype=bool)
        mask[0, 1:8] = True
        mask[2, :] = True
        mask[3, 4] = True
        labels, count = label_mask(mask)
        assert count == 2
        assert np.all(labels[0, 1:8] == 1)
        assert np.all(labels[2] == 2)
        assert labels[3, 4] == 2
        assert not labels[~mask].any()

    def test_row_stripes_throughput(self):
        mask = np.zeros((2000, 2000), dtype=bool)
        mask[::2] = True
        started = time.perf_counter()
        labels, count = label_mask(mask)
        elapsed = time.perf_counter() - started
        assert count == 1000
        assert labels[0, 0] == 1
        assert labels[1998, 1999] == 1000
        assert elapsed < 2.0

    def test_agrees_with_scipy(self):
        ndimage = pytest.importorskip("scipy.ndimage")
        cross = ndimage.generate_binary_structure(2, 1)
        rng = np.random.RandomState(0)
        for density in (0.3, 0.5, 0.6, 0.8):
            mask = rng.random_sample((40, 50)) < density
            ours, count = label_mask(mask)
            theirs, expected = ndimage.label(mask, structure=cross)
            assert count == expected
            # Same partition: every (ours, theirs) pair is unique
            pairs = set(zip(ours[mask].tolist(), theirs[mask].tolist()))
            assert len(pairs) == count

    def test_cancelled_between_passes(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(AnalysisCancelled, match="labeling"):
            label_mask(np.ones((2, 2), dtype=bool), cancel=token)


class TestLabel:

    def test_no_cells_no_regions(self):
        assert label(_grid("...", "..."), Category.RED) == ()

    def test_none_category_rejected(self):
        with pytest.raises(ValueError, match="NONE"):
            label(_grid("R"), Category.NONE)

    def test_single_pixel_region(self):
        (region,) = label(_grid("...", ".R.", "..."), Category.RED)
        assert region.area == 1
        assert region.perimeter == 4
        assert region.cells == ((1, 1),)
        assert region.bbox == (1, 1, 1, 1)
        assert region.label == 1

    def test_checkerboard_gives_unit_regions(self):
        grid = _checkerboard(4)
        reds = label(grid, Category.RED)
        blues = label(grid, Category.BLUE)
        assert len(reds) == 8
        assert len(blues) == 8
        assert all(r.area == 1 and r.perimeter == 4 for r in reds + blues)

    def test_only_matching_category_merges(self):
        grid = _grid("RBR", "RBR")
        reds = label(grid, Category.RED)
        assert [r.area for r in reds] == [2, 2]
        (blue,) = label(grid, Category.BLUE)
        assert blue.area == 2

    def test_cells_row_major_and_regions_ordered(self):
        grid = _grid(
            "..RR",
            "R..R",
            "RR.R",
        )
        regions = label(grid, Category.RED)
        assert [r.label for r in regions] == [1, 2]
        assert regions[0].cells == ((0, 2), (0, 3), (1, 3), (2, 3))
        assert regions[1].cells == ((1, 0), (2, 0), (2, 1))
        firsts = [r.cells[0] for r in regions]
        assert firsts == sorted(firsts)

    def test_bbox(self):
        (region,) = label(_grid("....", ".RR.", ".R..", "...."), Category.RED)
        assert region.bbox == (1, 1, 2, 2)

    def test_deterministic(self):
        rng = np.random.RandomState(5)
        codes = rng.randint(0, 3, (25, 25))
        grid = ClassifiedGrid(codes)
        assert label(grid, Category.BLUE) == label(grid, Category.BLUE)


class TestLabelAll:

    def test_keys_in_report_order(self):
        result = label_all(_grid("R.B"))
        assert list(result) == [Category.RED, Category.BLUE]

    def test_missing_category_empty(self):
        result = label_all(_grid("RR", ".."))
        assert len(result[Category.RED]) == 1
        assert result[Category.BLUE] == ()

    def test_categories_never_share_regions(self):
        result = label_all(_grid("RB", "BR"))
        assert len(result[Category.RED]) == 2
        assert len(result[Category.BLUE]) == 2
        assert all(r.category is Category.RED for r in result[Category.RED])
