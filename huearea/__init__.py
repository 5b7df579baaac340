# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Huearea -- Red/blue region measurement for uploaded images.

Classifies pixels by hue, labels 4-connected regions, and reports the
total area and perimeter of the red and blue regions.

Quick start::

    from huearea import analyze

    report = analyze("image.png")
    report.to_presentation()  # {"redArea": ..., "bluePerimeter": ...}
    report.to_json()          # Full report
"""

from __future__ import annotations

import logging

__version__ = "1.0.0"

from huearea.errors import AnalysisCancelled, InvalidInput, UnsupportedConfig
from huearea.measure import (
    CancellationToken,
    ClassificationConfig,
    PixelBuffer,
    analyze,
    analyze_many,
)
from huearea.schema import (
    AnalysisReport,
    Category,
    CategoryTotals,
    Region,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "analyze",
    "analyze_many",
    "AnalysisReport",
    # Inputs
    "PixelBuffer",
    "ClassificationConfig",
    "CancellationToken",
    # Types (commonly needed)
    "Category",
    "CategoryTotals",
    "Region",
    # Errors
    "InvalidInput",
    "UnsupportedConfig",
    "AnalysisCancelled",
    # Version
    "__version__",
]
