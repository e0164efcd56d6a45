import math

import pytest

from harmonic_chart.analysis.position import format_body, format_position, normalize
from harmonic_chart.errors import InvalidArgument
from harmonic_chart.models import Body, NormalizedPosition


def _arc(a: float, b: float) -> float:
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff)


def test_basic_split():
    assert normalize(0.0) == NormalizedPosition(0, 0, 0)
    assert normalize(38.5) == NormalizedPosition(1, 8, 30)  # 8°30' Taurus
    assert normalize(149.25) == NormalizedPosition(4, 29, 15)  # 29°15' Leo


def test_negative_and_large_longitudes_wrap():
    assert normalize(-10.0) == NormalizedPosition(11, 20, 0)  # 20° Pisces
    assert normalize(370.0) == NormalizedPosition(0, 10, 0)
    assert normalize(-370.0) == NormalizedPosition(11, 20, 0)
    assert normalize(720.0 + 95.5) == NormalizedPosition(3, 5, 30)


def test_minute_rounding_rolls_into_degree_and_sign():
    # 29°59.988' rounds to 60 minutes -> next sign at 0°00'
    assert normalize(29.9998) == NormalizedPosition(1, 0, 0)
    assert normalize(15.9999) == NormalizedPosition(0, 16, 0)
    # Last sign wraps back to Aries
    assert normalize(359.9999) == NormalizedPosition(0, 0, 0)


def test_tiny_negative_longitude_stays_in_range():
    pos = normalize(-1e-20)
    assert 0 <= pos.sign_index <= 11
    assert 0 <= pos.degree <= 29
    assert 0 <= pos.minute <= 59


@pytest.mark.parametrize("longitude", [0.0, 12.345, 29.99, 88.9833, 179.5, 271.001, 359.99, -45.7, 1234.56])
def test_reconstruction_within_one_minute(longitude):
    pos = normalize(longitude)
    assert 0 <= pos.sign_index <= 11
    assert 0 <= pos.degree <= 29
    assert 0 <= pos.minute <= 59
    assert _arc(pos.to_longitude(), longitude % 360.0) <= 1.0 / 60.0


@pytest.mark.parametrize("k", [-3, -1, 1, 2, 5])
def test_full_turns_do_not_change_position(k):
    assert normalize(123.25) == normalize(123.25 + 360.0 * k)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_longitude_rejected(bad):
    with pytest.raises(InvalidArgument):
        normalize(bad)


def test_sign_names():
    pos = normalize(200.0)
    assert pos.sign == "Lib"
    assert pos.sign_name == "Libra"


def test_format_position_short_and_full():
    pos = normalize(38.5)
    assert format_position(pos) == "8º Tau 30"
    assert format_position(pos, "full", "sun") == "Sun 8º Tau 30"
    with pytest.raises(InvalidArgument):
        format_position(pos, "long")


def test_format_body_uses_name():
    moon = Body(name="moon", symbol="☽", longitude=91.0166)
    assert format_body(moon) == "Moon 1º Can 1"
    assert format_body(moon, "short") == "1º Can 1"
