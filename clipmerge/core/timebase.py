"""Rational time values.

Times are ``fractions.Fraction`` seconds so cumulative offsets never drift the
way repeated float addition does (1/30 s frames add up exactly).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Union

TimeLike = Union[Fraction, int, float, str]

# Denominator bound used when converting decoder floats (ffmpeg reports
# durations with at most microsecond precision).
MAX_TIMESCALE = 1_000_000

ZERO = Fraction(0)


def to_time(value: TimeLike) -> Fraction:
    """Convert seconds (float, int, str or Fraction) into a Fraction."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(value).limit_denominator(MAX_TIMESCALE)
    return Fraction(value)


@dataclass(frozen=True)
class TimeRange:
    start: Fraction = ZERO
    duration: Fraction = ZERO

    def __post_init__(self):
        # Normalize so callers may pass ints/floats
        object.__setattr__(self, "start", to_time(self.start))
        object.__setattr__(self, "duration", to_time(self.duration))
        if self.start < 0:
            raise ValueError(f"range start must be >= 0, got {self.start}")
        if self.duration < 0:
            raise ValueError(f"range duration must be >= 0, got {self.duration}")

    @property
    def end(self) -> Fraction:
        return self.start + self.duration

    @property
    def is_empty(self) -> bool:
        return self.duration == 0

    def shifted(self, offset: TimeLike) -> "TimeRange":
        return TimeRange(self.start + to_time(offset), self.duration)


__all__ = ["TimeRange", "TimeLike", "ZERO", "to_time"]
