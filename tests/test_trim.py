from fractions import Fraction

import pytest

from clipmerge import config
from clipmerge.core.timebase import TimeRange, to_time
from clipmerge.core.trim import trailing_window, trim_range


def test_default_window_is_one_frame_at_30fps():
    assert config.TRAILING_WINDOW == Fraction(1, 30)
    assert trailing_window() == Fraction(1, 30)
    assert trailing_window(2, 60) == Fraction(1, 30)


def test_trim_removes_trailing_window():
    r = trim_range(10)
    assert r.start == 0
    assert r.duration == Fraction(299, 30)
    assert float(r.duration) == pytest.approx(9.9667, abs=1e-4)


def test_trim_is_idempotent_for_same_duration():
    assert trim_range(10) == trim_range(10)
    assert trim_range(7.25, Fraction(1, 25)) == trim_range(7.25, Fraction(1, 25))


def test_short_sources_yield_empty_range():
    assert trim_range(Fraction(1, 30)).is_empty
    assert trim_range(0.01).is_empty
    assert trim_range(0).duration == 0


def test_custom_window():
    assert trim_range(5, 0).duration == 5
    assert trim_range(5, Fraction(1, 2)).duration == Fraction(9, 2)


def test_float_durations_become_exact_fractions():
    assert to_time(0.5) == Fraction(1, 2)
    assert trim_range(10.0).duration == Fraction(299, 30)


def test_invalid_window_arguments():
    with pytest.raises(ValueError):
        trailing_window(1, 0)
    with pytest.raises(ValueError):
        trailing_window(-1, 30)


def test_time_range_rejects_negative_values():
    with pytest.raises(ValueError):
        TimeRange(-1, 1)
    with pytest.raises(ValueError):
        TimeRange(0, -1)
    assert TimeRange(1, 2).end == 3
    assert TimeRange(1, 2).shifted(Fraction(1, 2)).start == Fraction(3, 2)
