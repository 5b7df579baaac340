# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Measurement core for Huearea.

This module provides deterministic hue region measurement from images.
All operations are pixel-based and free of side effects.
"""

from huearea.measure.buffer import PixelBuffer, load_pixels
from huearea.measure.cancel import CancellationToken
from huearea.measure.classify import (
    DEFAULT_CONFIG,
    ClassificationConfig,
    ClassifiedGrid,
    classify,
)
from huearea.measure.geometry import aggregate, measure_region, perimeter_of
from huearea.measure.labeling import label, label_all
from huearea.measure.pipeline import analyze, analyze_many

__all__ = [
    "analyze",
    "analyze_many",
    "PixelBuffer",
    "load_pixels",
    "ClassificationConfig",
    "DEFAULT_CONFIG",
    "ClassifiedGrid",
    "classify",
    "label",
    "label_all",
    "measure_region",
    "perimeter_of",
    "aggregate",
    "CancellationToken",
]
