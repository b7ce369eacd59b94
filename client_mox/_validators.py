"""Shared validation helpers."""

from __future__ import annotations

import math


def validate_page_size(page_size: int) -> None:
    """Ensure *page_size* is a usable number of items per page."""
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        msg = "page_size must be an integer"
        raise TypeError(msg)

    if page_size <= 0:
        msg = "page_size must be > 0"
        raise ValueError(msg)


def validate_delay(delay: float) -> None:
    """Ensure *delay* is a non-negative, finite number of seconds."""
    if isinstance(delay, bool) or not isinstance(delay, int | float):
        msg = "delay must be a real number"
        raise TypeError(msg)

    if not (delay >= 0 and math.isfinite(delay)):
        msg = "delay must be >= 0 and finite"
        raise ValueError(msg)
