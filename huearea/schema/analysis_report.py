# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
AnalysisReport v1.0 — Canonical schema for hue region measurement.

Design principles:
- Immutable: All types are frozen dataclasses
- Deterministic: Same pixels + same config → equal report
- Exact: Areas and perimeters are integer pixel/edge counts
- Serializable: JSON-ready for the presentation layer

Geometry conventions:
    Regions are maximal 4-connected sets of same-category cells.
    Area is the cell count. Perimeter is the number of exposed cell
    edges: an edge is exposed when the cell on the other side is not
    a member of the same region (cells outside the grid count as
    non-members). A single cell has area 1 and perimeter 4; an N×M
    rectangle has area N·M and perimeter 2·(N+M).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0"


# =============================================================================
# Categories
# =============================================================================


class Category(Enum):
    """
    Per-pixel classification label.

    Exactly one category per pixel, decided from its color alone.
    """
    NONE = "none"
    RED = "red"
    BLUE = "blue"

    @property
    def code(self) -> int:
        """Integer code stored in a ClassifiedGrid cell."""
        return _CATEGORY_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> Category:
        """Inverse of ``code``."""
        return _CODE_CATEGORIES[int(code)]

    @classmethod
    def measured(cls) -> tuple[Category, ...]:
        """Categories that produce regions, in report order."""
        return (cls.RED, cls.BLUE)


_CATEGORY_CODES = {Category.NONE: 0, Category.RED: 1, Category.BLUE: 2}
_CODE_CATEGORIES = {code: cat for cat, code in _CATEGORY_CODES.items()}


# =============================================================================
# Region
# =============================================================================


@dataclass(frozen=True, slots=True)
class Region:
    """
    A maximal 4-connected set of same-category cells.

    Attributes:
        category: The (non-None) category shared by every member cell
        label: 1-based enumeration index within its category, assigned
            in row-major order of each region's first cell
        cells: Member coordinates as (row, col), in row-major order
        area: Number of member cells
        perimeter: Number of exposed member-cell edges
        bbox: (min_row, min_col, max_row, max_col), inclusive
    """
    category: Category
    label: int
    cells: tuple[tuple[int, int], ...]
    area: int
    perimeter: int
    bbox: tuple[int, int, int, int]

    def __post_init__(self) -> None:
        """Validate region geometry."""
        if self.category is Category.NONE:
            raise ValueError("Regions cannot have category NONE")
        if self.label < 1:
            raise ValueError(f"Region label must be >= 1, got {self.label}")
        if self.area < 1:
            raise ValueError(f"Region area must be >= 1, got {self.area}")
        if self.area != len(self.cells):
            raise ValueError(
                f"Region area {self.area} does not match {len(self.cells)} cells"
            )
        if self.perimeter < 4 or self.perimeter % 2:
            raise ValueError(
                f"Region perimeter must be even and >= 4, got {self.perimeter}"
            )

    def to_dict(self, include_cells: bool = False) -> dict:
        """
        Serialize to dictionary.

        Args:
            include_cells: If True, include the full member coordinate list
        """
        d = {
            "category": self.category.value,
            "label": self.label,
            "area": self.area,
            "perimeter": self.perimeter,
            "bbox": list(self.bbox),
        }
        if include_cells:
            d["cells"] = [list(c) for c in self.cells]
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Region:
        """Deserialize from dictionary (requires ``cells``)."""
        return cls(
            category=Category(data["category"]),
            label=data["label"],
            cells=tuple((int(r), int(c)) for r, c in data["cells"]),
            area=data["area"],
            perimeter=data["perimeter"],
            bbox=tuple(data["bbox"]),
        )


# =============================================================================
# Category Totals
# =============================================================================


@dataclass(frozen=True, slots=True)
class CategoryTotals:
    """
    Aggregate geometry for one category.

    Totals are plain sums over the category's regions. Perimeters of
    different regions never cancel, even where regions touch diagonally.
    """
    category: Category
    area: int = 0
    perimeter: int = 0
    region_count: int = 0

    def __post_init__(self) -> None:
        """Validate totals are non-negative and consistent."""
        if self.category is Category.NONE:
            raise ValueError("Totals cannot be reported for category NONE")
        if self.area < 0 or self.perimeter < 0 or self.region_count < 0:
            raise ValueError(
                f"Totals must be non-negative, got area={self.area} "
                f"perimeter={self.perimeter} regions={self.region_count}"
            )
        if (self.region_count == 0) != (self.area == 0):
            raise ValueError(
                f"Area {self.area} inconsistent with {self.region_count} regions"
            )

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "area": self.area,
            "perimeter": self.perimeter,
            "regions": self.region_count,
        }

    @classmethod
    def from_dict(cls, category: Category, data: dict) -> CategoryTotals:
        """Deserialize from dictionary."""
        return cls(
            category=category,
            area=data.get("area", 0),
            perimeter=data.get("perimeter", 0),
            region_count=data.get("regions", 0),
        )


# =============================================================================
# Top-Level Report
# =============================================================================


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """
    Complete region measurement for one image.

    This is the sole externally visible output of the core.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        totals: One CategoryTotals per measured category, in
            ``Category.measured()`` order
        regions: Optional per-region detail (row-major order within each
            category, categories in report order)
        image_hash: Optional hash of the source pixels for verification
        version: Schema version

    Usage:
        report = analyze(pixels)
        report.red_area, report.blue_perimeter
        report.to_presentation()
        # {"redArea": 5321, "blueArea": 4872, "redPerimeter": 610, ...}
    """
    width: int
    height: int
    totals: tuple[CategoryTotals, ...]
    regions: Optional[tuple[Region, ...]] = None
    image_hash: Optional[str] = None
    version: str = field(default=SCHEMA_VERSION)

    def __post_init__(self) -> None:
        """Validate report structure."""
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Report dimensions must be >= 1, got {self.width}x{self.height}"
            )
        categories = tuple(t.category for t in self.totals)
        if categories != Category.measured():
            raise ValueError(
                f"Totals must cover {[c.value for c in Category.measured()]} "
                f"in order, got {[c.value for c in categories]}"
            )
        if sum(t.area for t in self.totals) > self.width * self.height:
            raise ValueError("Total area exceeds image area")
        if self.regions is not None:
            for totals in self.totals:
                members = [r for r in self.regions if r.category is totals.category]
                if (
                    sum(r.area for r in members) != totals.area
                    or sum(r.perimeter for r in members) != totals.perimeter
                    or len(members) != totals.region_count
                ):
                    raise ValueError(
                        f"Totals for {totals.category.value} do not match its regions"
                    )

    def get_totals(self, category: Category) -> CategoryTotals:
        """Get the totals for a category."""
        for totals in self.totals:
            if totals.category is category:
                return totals
        raise KeyError(f"No totals for category '{category.value}'")

    def regions_of(self, category: Category) -> tuple[Region, ...]:
        """Regions of one category; empty if regions were not requested."""
        if self.regions is None:
            return ()
        return tuple(r for r in self.regions if r.category is category)

    @property
    def red_area(self) -> int:
        return self.get_totals(Category.RED).area

    @property
    def blue_area(self) -> int:
        return self.get_totals(Category.BLUE).area

    @property
    def red_perimeter(self) -> int:
        return self.get_totals(Category.RED).perimeter

    @property
    def blue_perimeter(self) -> int:
        return self.get_totals(Category.BLUE).perimeter

    def to_presentation(self) -> dict:
        """
        Flattened two-category view consumed by the uploader UI.

        Returns:
            {"redArea", "blueArea", "redPerimeter", "bluePerimeter"}
        """
        return {
            "redArea": self.red_area,
            "blueArea": self.blue_area,
            "redPerimeter": self.red_perimeter,
            "bluePerimeter": self.blue_perimeter,
        }

    def to_dict(self, include_cells: bool = True) -> dict:
        """
        Serialize to dictionary for JSON output.

        Args:
            include_cells: Include each region's member coordinates.
                Without them the dictionary cannot be read back by
                ``from_dict``.
        """
        result = {
            "version": self.version,
            "width": self.width,
            "height": self.height,
            "totals": {t.category.value: t.to_dict() for t in self.totals},
        }
        if self.regions is not None:
            result["regions"] = [
                r.to_dict(include_cells=include_cells) for r in self.regions
            ]
        if self.image_hash is not None:
            result["image_hash"] = self.image_hash
        return result

    def to_json(self, indent: Optional[int] = 2, include_cells: bool = True) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(include_cells=include_cells), indent=indent)

    def to_xml(self, include_regions: bool = True) -> str:
        """Serialize to XML block format."""
        # Import here to avoid circular imports
        from huearea.runtime.serializers.block import to_context_block, BlockFormat
        return to_context_block(
            self,
            format=BlockFormat.XML,
            include_regions=include_regions,
        )

    @classmethod
    def from_dict(cls, data: dict) -> AnalysisReport:
        """
        Deserialize from dictionary.

        Raises:
            ValueError: Region entries were serialized without cells
        """
        totals_data = data.get("totals", {})
        regions = None
        regions_data = data.get("regions")
        if regions_data is not None:
            if not all("cells" in r for r in regions_data):
                raise ValueError(
                    "Region entries have no cells; serialize with include_cells=True"
                )
            regions = tuple(Region.from_dict(r) for r in regions_data)
        return cls(
            width=data["width"],
            height=data["height"],
            totals=tuple(
                CategoryTotals.from_dict(cat, totals_data.get(cat.value, {}))
                for cat in Category.measured()
            ),
            regions=regions,
            image_hash=data.get("image_hash"),
            version=data.get("version", SCHEMA_VERSION),
        )

    @classmethod
    def from_json(cls, json_str: str) -> AnalysisReport:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))
