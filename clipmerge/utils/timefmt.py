"""Time formatting utilities.

``format_time`` renders seconds as [h:]mm:ss.mmm for log lines and UI labels.
Rational times are formatted exactly, without a float round-trip.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Union

__all__ = ["format_time", "format_range"]


def _milliseconds(seconds: Union[float, int, Fraction]) -> int:
    if isinstance(seconds, Fraction):
        exact = Decimal(seconds.numerator) / Decimal(seconds.denominator)
    else:
        exact = Decimal(str(seconds))
    return int((exact * 1000).to_integral_value(rounding=ROUND_HALF_UP))


def format_time(seconds: Union[float, int, Fraction]) -> str:
    """Return mm:ss.mmm (h:mm:ss.mmm past one hour).

    Uses ROUND_HALF_UP for milliseconds (1.2345 -> 1.235). Negative values clamp to 0.
    """
    if seconds < 0:
        seconds = 0
    ms_total = _milliseconds(seconds)
    h, rem = divmod(ms_total, 3_600_000)
    m, rem = divmod(rem, 60000)
    s, ms = divmod(rem, 1000)
    if h:
        return f"{h}:{m:02d}:{s:02d}.{ms:03d}"
    return f"{m:02d}:{s:02d}.{ms:03d}"


def format_range(start, duration) -> str:
    return f"{format_time(start)}-{format_time(start + duration)}"
