"""Common time utilities."""

from __future__ import annotations

import time
import typing as typ

Clock = typ.Callable[[], int]


def epoch_seconds() -> int:
    """Return the current wall-clock time as whole seconds since the epoch."""
    return int(time.time())
