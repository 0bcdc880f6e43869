from __future__ import annotations

import pytest

from grant_browser.core.transforms import (
    MAX_DOLLARS,
    clamp_slider,
    dollars_to_slider,
    format_count,
    format_dollar_amount,
    slider_to_dollars,
)


def test_slider_endpoints():
    assert slider_to_dollars(0) == 0
    assert slider_to_dollars(100) == MAX_DOLLARS
    assert dollars_to_slider(0) == 0
    assert dollars_to_slider(MAX_DOLLARS) == 100


def test_slider_midpoint_is_ten_thousand():
    assert slider_to_dollars(50) == 10_000
    assert dollars_to_slider(10_000) == 50


def test_slider_to_dollars_is_monotonic():
    amounts = [slider_to_dollars(p) for p in range(0, 101)]
    assert amounts == sorted(amounts)


@pytest.mark.parametrize("position", [0, 1, 25, 50, 73, 99, 100])
def test_round_trip_drifts_at_most_one_position(position):
    assert abs(dollars_to_slider(slider_to_dollars(position)) - position) <= 1


def test_out_of_range_and_junk_values_are_clamped():
    assert slider_to_dollars(150) == MAX_DOLLARS
    assert slider_to_dollars(-5) == 0
    assert slider_to_dollars("abc") == 0
    assert dollars_to_slider(-100) == 0
    assert dollars_to_slider(10 * MAX_DOLLARS) == 100
    assert dollars_to_slider(None) == 0
    assert clamp_slider("42.9") == 42


def test_formatting():
    assert format_dollar_amount(1234567) == "$1,234,567"
    assert format_dollar_amount(None) == "$0"
    assert format_count(12345) == "12,345"
