# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Schema definitions for region measurements.

All types in this module are immutable (frozen dataclasses).
Once a report is produced, it is a fact and cannot be altered.
"""

from huearea.schema.analysis_report import (
    SCHEMA_VERSION,
    AnalysisReport,
    Category,
    CategoryTotals,
    Region,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Classification label
    "Category",
    # Geometry
    "Region",
    "CategoryTotals",
    # Top-level container
    "AnalysisReport",
]
