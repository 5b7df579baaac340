# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Result payload serializer for the uploader front end.

Formats an AnalysisReport as the JSON object the result view renders:
four integer totals, plus optional context the view may ignore.
"""

from __future__ import annotations

import json

from huearea.runtime.serializers.base import SerializerFormat
from huearea.schema import AnalysisReport


def to_result_payload(
    report: AnalysisReport,
    *,
    format: SerializerFormat = SerializerFormat.JSON,
    image_id: str | None = None,
    include_counts: bool = False,
    include_dimensions: bool = False,
) -> str:
    """Serialize an AnalysisReport as the front end's result payload.

    Args:
        report: The AnalysisReport to serialize.
        format: Output format (JSON or JSON_PRETTY).
        image_id: Optional identifier echoed back (e.g. upload file name).
        include_counts: Include the number of regions per category.
        include_dimensions: Include image width and height.

    Returns:
        JSON string.

    Example::

        {
          "image_id": "sample.png",
          "redArea": 5321,
          "blueArea": 4872,
          "redPerimeter": 610,
          "bluePerimeter": 580
        }
    """
    data: dict = {}

    if image_id:
        data["image_id"] = image_id

    data.update(report.to_presentation())

    if include_counts:
        data["regionCounts"] = {
            t.category.value: t.region_count for t in report.totals
        }

    if include_dimensions:
        data["width"] = report.width
        data["height"] = report.height

    if format == SerializerFormat.JSON_PRETTY:
        return json.dumps(data, indent=2)
    return json.dumps(data, separators=(",", ":"))
