"""Tests for the PM2.5 to AQI conversion.

Reference values were worked by hand from the breakpoint table. Comparisons
are strict, so a concentration exactly on a bracket edge is converted with
the bracket below it.
"""

import math

import pytest

from purpleair.transformers.calculate_aqi import (
    AQI_BREAKPOINTS,
    NOT_COMPUTABLE,
    aqi_from_pm,
    calc_aqi,
)


@pytest.mark.parametrize(
    "pm25, expected",
    [
        (0.0, 0),
        (9.0, 38),
        (12.0, 50),
        (20.0, 68),
        (35.4, 100),
        (35.6, 101),
        (100.0, 174),
        (200.0, 250),
        (300.0, 350),
        (500.0, 500),
        (1000.0, 831),
    ],
)
def test_reference_values(pm25, expected):
    assert aqi_from_pm(pm25) == expected


@pytest.mark.parametrize(
    "edge, expected",
    [
        (12.1, 50),
        (35.5, 100),
        (55.5, 150),
        (150.5, 200),
        (250.5, 300),
        (350.5, 400),
    ],
)
def test_bracket_edges_use_lower_bracket(edge, expected):
    assert aqi_from_pm(edge) == expected
    # just above the edge moves into the next bracket
    assert aqi_from_pm(edge + 0.1) > expected


def test_result_is_integer_for_computed_values():
    for pm25 in (0.0, 7.3, 41.2, 123.4, 420.0):
        assert isinstance(aqi_from_pm(pm25), int)


def test_negative_concentration_passes_through():
    assert aqi_from_pm(-5.0) == -5.0
    assert aqi_from_pm(-0.5) == -0.5


@pytest.mark.parametrize("pm25", [None, math.nan, float("nan"), 1000.01, 1500.0])
def test_not_computable(pm25):
    assert aqi_from_pm(pm25) == NOT_COMPUTABLE == -1


def test_calc_aqi_rounds_half_up():
    # 50 / 12 * 1.5 = 6.25 -> 6; 50 / 12 * 3.0 = 12.5 -> 13
    assert calc_aqi(1.5, 50, 0, 12, 0) == 6
    assert calc_aqi(3.0, 50, 0, 12, 0) == 13


def test_breakpoints_are_ordered_highest_first():
    lower_edges = [bp.above for bp in AQI_BREAKPOINTS]
    assert lower_edges == sorted(lower_edges, reverse=True)
    assert AQI_BREAKPOINTS[-1].inclusive is True
