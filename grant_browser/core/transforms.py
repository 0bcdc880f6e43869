from __future__ import annotations

import math
from typing import Union

MAX_DOLLARS = 100_000_000
SLIDER_MIN = 0
SLIDER_MAX = 100

_LOG_MAX = math.log(MAX_DOLLARS)
# absorbs float noise at exact grid points (e.g. 10,000 <-> 50)
_EPSILON = 1e-6

Number = Union[int, float, str]


def slider_to_dollars(position: Number) -> int:
    """
    Map a linear slider position (0-100) onto a dollar amount.

    The curve is exponential: position 0 is $0, position 1 is $1 and position 100
    is $100,000,000. Low amounts get fine-grained control, high amounts coarse.
    """
    position = clamp_slider(position)
    if position == SLIDER_MIN:
        return 0
    if position == SLIDER_MAX:
        # exp(log(x)) is not exact in floating point
        return MAX_DOLLARS
    return int(math.floor(math.exp(_LOG_MAX * position / SLIDER_MAX) + _EPSILON))


def dollars_to_slider(dollars: Number) -> int:
    """
    Inverse of slider_to_dollars. Floor rounding means a round trip can drift
    by one position.
    """
    try:
        dollars = float(dollars)
    except (TypeError, ValueError):
        return SLIDER_MIN
    if math.isnan(dollars) or dollars <= 0:
        return SLIDER_MIN
    position = math.floor(math.log(dollars) / _LOG_MAX * SLIDER_MAX + _EPSILON)
    return max(SLIDER_MIN, min(SLIDER_MAX, int(position)))


def clamp_slider(position: Number) -> int:
    try:
        value = float(position)
    except (TypeError, ValueError):
        return SLIDER_MIN
    if math.isnan(value):
        return SLIDER_MIN
    return max(SLIDER_MIN, min(SLIDER_MAX, int(value)))


def format_dollar_amount(amount: Number | None) -> str:
    """en-US currency without cents, e.g. 1234567 -> '$1,234,567'."""
    try:
        value = float(amount) if amount is not None else 0.0
    except (TypeError, ValueError):
        value = 0.0
    if math.isnan(value):
        value = 0.0
    return f"${value:,.0f}"


def format_count(value: Number | None) -> str:
    try:
        number = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        number = 0.0
    return f"{round(number):,}"
