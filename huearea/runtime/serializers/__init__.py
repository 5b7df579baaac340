# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""
Serializers for AnalysisReport delivery.

Each serializer formats an AnalysisReport for a specific consumer.
All serializers preserve the measurement exactly -- no modification.
"""

from huearea.runtime.serializers.base import SerializerFormat
from huearea.runtime.serializers.block import to_context_block, BlockFormat
from huearea.runtime.serializers.payload import to_result_payload

__all__ = [
    "SerializerFormat",
    "BlockFormat",
    "to_result_payload",
    "to_context_block",
]
