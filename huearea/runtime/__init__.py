# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Presentation runtime for Huearea.

Serialization of AnalysisReport data for the layers that display it:

1. Result Payload -- Flattened JSON the uploader UI renders
2. Context Block -- Structured XML / JSON / Markdown block

The delivery layer never modifies measurement content.
"""

from huearea.runtime.serializers import (
    BlockFormat,
    SerializerFormat,
    to_context_block,
    to_result_payload,
)

__all__ = [
    "to_result_payload",
    "to_context_block",
    "SerializerFormat",
    "BlockFormat",
]
