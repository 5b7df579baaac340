# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the measurement core.

Every failure is atomic: a run either returns a complete AnalysisReport
or raises one of these, never a partial result.
"""

from __future__ import annotations


class InvalidInput(ValueError):
    """Pixel data cannot be measured (empty, wrong shape, out of range)."""


class UnsupportedConfig(ValueError):
    """Classification settings are inverted or out of range."""


class AnalysisCancelled(RuntimeError):
    """The caller cancelled the run or its deadline passed."""
