# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Context block serializer.

Formats an AnalysisReport as a structured block (XML, JSON, or Markdown)
for logs, reports or any text channel shown next to the image.
"""

from __future__ import annotations

import json
from enum import Enum

from huearea.schema import AnalysisReport


class BlockFormat(Enum):
    """Block format options."""

    XML = "xml"
    JSON = "json"
    MARKDOWN = "markdown"


def to_context_block(
    report: AnalysisReport,
    *,
    format: BlockFormat = BlockFormat.XML,
    include_regions: bool = False,
    tag_name: str = "region_measurement",
) -> str:
    """Serialize an AnalysisReport as a context block.

    Args:
        report: The AnalysisReport to serialize.
        format: Block format (XML, JSON, or MARKDOWN).
        include_regions: Include per-region detail when the report has it.
        tag_name: XML/markdown tag name for the block.

    Returns:
        Formatted block string.

    Example (XML)::

        <region_measurement version="1.0" width="640" height="480">
          <category name="red" area="5321" perimeter="610" regions="3"/>
          <category name="blue" area="4872" perimeter="580" regions="1"/>
        </region_measurement>
    """
    if format == BlockFormat.XML:
        return _to_xml(report, include_regions, tag_name)
    elif format == BlockFormat.JSON:
        return _to_json(report, include_regions, tag_name)
    else:
        return _to_markdown(report, include_regions, tag_name)


def _to_xml(
    report: AnalysisReport,
    include_regions: bool,
    tag_name: str,
) -> str:
    """Generate XML block."""
    lines = [
        f'<{tag_name} version="{report.version}" '
        f'width="{report.width}" height="{report.height}">'
    ]

    for totals in report.totals:
        lines.append(
            f'  <category name="{totals.category.value}" area="{totals.area}" '
            f'perimeter="{totals.perimeter}" regions="{totals.region_count}"/>'
        )

    if include_regions and report.regions is not None:
        lines.append("  <regions>")
        for region in report.regions:
            r0, c0, r1, c1 = region.bbox
            lines.append(
                f'    <region category="{region.category.value}" '
                f'label="{region.label}" area="{region.area}" '
                f'perimeter="{region.perimeter}" bbox="{r0},{c0},{r1},{c1}"/>'
            )
        lines.append("  </regions>")

    lines.append(f"</{tag_name}>")
    return "\n".join(lines)


def _block_data(report: AnalysisReport, include_regions: bool) -> dict:
    data = report.to_dict(include_cells=False)
    if not include_regions:
        data.pop("regions", None)
    return data


def _to_json(
    report: AnalysisReport,
    include_regions: bool,
    tag_name: str,
) -> str:
    """Generate JSON block with wrapper."""
    wrapped = {tag_name: _block_data(report, include_regions)}
    return json.dumps(wrapped, indent=2)


def _to_markdown(
    report: AnalysisReport,
    include_regions: bool,
    tag_name: str,
) -> str:
    """Generate markdown block with code fence."""
    lines = [
        f"<!-- {tag_name} -->",
        "```json",
        json.dumps(_block_data(report, include_regions), indent=2),
        "```",
        f"<!-- /{tag_name} -->",
    ]
    return "\n".join(lines)
