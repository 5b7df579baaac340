# Copyright (c) 2026 Huearea
# SPDX-License-Identifier: MIT

"""Cooperative cancellation for long measurement runs."""

from __future__ import annotations

import threading
import time
from typing import Optional

from huearea.errors import AnalysisCancelled


class CancellationToken:
    """
    Caller-owned cancel flag with an optional deadline.

    The core checks the token only between classification row chunks and
    between labeling passes, never mid-pixel. One token may be shared by
    several concurrent runs to cancel them together.

    Args:
        timeout: Seconds from construction after which the token counts
            as cancelled. None for no deadline.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self, stage: str = "") -> None:
        """Raise AnalysisCancelled if cancelled or past the deadline."""
        if self.cancelled:
            where = f" during {stage}" if stage else ""
            raise AnalysisCancelled(f"Analysis cancelled{where}")


def check(token: Optional[CancellationToken], stage: str) -> None:
    """No-op when no token was supplied."""
    if token is not None:
        token.raise_if_cancelled(stage)
