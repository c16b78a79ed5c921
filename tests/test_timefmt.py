from fractions import Fraction

from clipmerge.utils.timefmt import format_range, format_time


def test_format_time_edge_cases():
    assert format_time(-1.0) == "00:00.000"  # negative clamps
    assert format_time(0.0) == "00:00.000"
    assert format_time(0.9996) == "00:01.000"
    assert format_time(61.0) == "01:01.000"
    assert format_time(3600 + 62.5) == "1:01:02.500"


def test_format_time_precision():
    assert format_time(1.2344) == "00:01.234"
    assert format_time(1.2345) == "00:01.235"  # rounds up (half-up)


def test_format_time_fraction():
    assert format_time(Fraction(299, 30)) == "00:09.967"
    assert format_time(Fraction(899, 30)) == "00:29.967"
    assert format_time(Fraction(-1, 30)) == "00:00.000"


def test_format_range():
    assert format_range(Fraction(0), Fraction(1, 2)) == "00:00.000-00:00.500"
