# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""Tests for the runtime serializers (payload, block)."""

import json

import numpy as np
import pytest

from huearea import analyze
from huearea.runtime import (
    BlockFormat,
    SerializerFormat,
    to_context_block,
    to_result_payload,
)


def _two_tone_image(rgb1, rgb2, height=10, width=20):
    """Left half one color, right half another."""
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, : width // 2] = rgb1
    img[:, width // 2 :] = rgb2
    return img


@pytest.fixture
def two_tone_report():
    return analyze(_two_tone_image([255, 0, 0], [0, 0, 255]), include_hash=False)


@pytest.fixture
def detailed_report():
    return analyze(
        _two_tone_image([255, 0, 0], [0, 0, 255]),
        include_regions=True,
        include_hash=False,
    )


# ---------------------------------------------------------------------------
# to_result_payload
# ---------------------------------------------------------------------------

class TestResultPayload:

    def test_flattened_totals(self, two_tone_report):
        data = json.loads(to_result_payload(two_tone_report))
        assert data == {
            "redArea": 100,
            "blueArea": 100,
            "redPerimeter": 40,
            "bluePerimeter": 40,
        }

    def test_compact_by_default(self, two_tone_report):
        result = to_result_payload(two_tone_report)
        assert " " not in result
        assert "\n" not in result

    def test_pretty(self, two_tone_report):
        result = to_result_payload(two_tone_report, format=SerializerFormat.JSON_PRETTY)
        assert "\n" in result

    def test_image_id(self, two_tone_report):
        data = json.loads(to_result_payload(two_tone_report, image_id="upload.png"))
        assert data["image_id"] == "upload.png"

    def test_counts_and_dimensions(self, two_tone_report):
        data = json.loads(to_result_payload(
            two_tone_report,
            include_counts=True,
            include_dimensions=True,
        ))
        assert data["regionCounts"] == {"red": 1, "blue": 1}
        assert (data["width"], data["height"]) == (20, 10)


# ---------------------------------------------------------------------------
# to_context_block
# ---------------------------------------------------------------------------

class TestContextBlockXML:

    def test_wrapped_in_tag(self, two_tone_report):
        xml = to_context_block(two_tone_report)
        assert xml.startswith('<region_measurement version="1.0" width="20" height="10">')
        assert xml.endswith("</region_measurement>")

    def test_category_lines(self, two_tone_report):
        xml = to_context_block(two_tone_report)
        assert '<category name="red" area="100" perimeter="40" regions="1"/>' in xml
        assert '<category name="blue" area="100" perimeter="40" regions="1"/>' in xml

    def test_regions_opt_in(self, detailed_report):
        assert "<regions>" not in to_context_block(detailed_report)
        xml = to_context_block(detailed_report, include_regions=True)
        assert '<region category="red" label="1" area="100"' in xml
        assert 'bbox="0,10,9,19"' in xml

    def test_regions_requested_but_absent(self, two_tone_report):
        xml = to_context_block(two_tone_report, include_regions=True)
        assert "<regions>" not in xml

    def test_custom_tag(self, two_tone_report):
        xml = to_context_block(two_tone_report, tag_name="analysis")
        assert xml.startswith("<analysis ")

    def test_report_to_xml(self, detailed_report):
        assert "<regions>" in detailed_report.to_xml()
        assert "<regions>" not in detailed_report.to_xml(include_regions=False)


class TestContextBlockJSON:

    def test_wrapper_key(self, two_tone_report):
        data = json.loads(to_context_block(two_tone_report, format=BlockFormat.JSON))
        assert list(data) == ["region_measurement"]
        assert data["region_measurement"]["totals"]["red"]["area"] == 100

    def test_regions_dropped_unless_requested(self, detailed_report):
        data = json.loads(to_context_block(detailed_report, format=BlockFormat.JSON))
        assert "regions" not in data["region_measurement"]
        data = json.loads(to_context_block(
            detailed_report, format=BlockFormat.JSON, include_regions=True,
        ))
        assert len(data["region_measurement"]["regions"]) == 2
        assert "cells" not in data["region_measurement"]["regions"][0]


class TestContextBlockMarkdown:

    def test_fenced(self, two_tone_report):
        md = to_context_block(two_tone_report, format=BlockFormat.MARKDOWN)
        lines = md.splitlines()
        assert lines[0] == "<!-- region_measurement -->"
        assert lines[1] == "```json"
        assert lines[-2] == "```"
        assert lines[-1] == "<!-- /region_measurement -->"
        body = json.loads("\n".join(lines[2:-2]))
        assert body["totals"]["blue"]["perimeter"] == 40
