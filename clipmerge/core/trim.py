"""Clip trimming: drop a fixed trailing window from each source."""

from __future__ import annotations

from fractions import Fraction
from typing import Optional

from .. import config
from .timebase import ZERO, TimeLike, TimeRange, to_time


def trailing_window(frames: int = 1, fps: int = 30) -> Fraction:
    """Length of ``frames`` frames at ``fps`` as an exact time value."""
    if frames < 0 or fps <= 0:
        raise ValueError("frames must be >= 0 and fps > 0")
    return Fraction(frames, fps)


def trim_range(raw_duration: TimeLike, window: Optional[TimeLike] = None) -> TimeRange:
    """Usable range of a source: [0, raw_duration - window), never negative.

    An empty range means the source is too short to contribute anything.
    """
    window = config.TRAILING_WINDOW if window is None else to_time(window)
    usable = to_time(raw_duration) - window
    return TimeRange(ZERO, max(ZERO, usable))


__all__ = ["trim_range", "trailing_window"]
