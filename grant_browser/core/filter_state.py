from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .ids import IDs
from .transforms import (
    MAX_DOLLARS,
    dollars_to_slider,
    format_dollar_amount,
    slider_to_dollars,
)

MIN_MAX_ORGS = 1
MAX_MAX_ORGS = 100
DEFAULT_MAX_ORGS = 14

MIN_DEPTH = 1
MAX_DEPTH = 5
DEFAULT_DEPTH = 1

DEFAULT_MIN_AMOUNT = 10_000
DEFAULT_SLIDER_POSITION = dollars_to_slider(DEFAULT_MIN_AMOUNT)

COLOR_SCHEMES = ("depth", "amount")
DEFAULT_COLOR_SCHEME = "depth"

YearsLookup = Callable[[str], Sequence[int]]


@dataclass
class FilterState:
    """
    Represents the current user selection/filters.

    Fields:

    - org_filter: identifier (or typed name) of the root organization, "" when nothing is selected
    - min_amount: smallest grant amount shown, in whole dollars
    - max_orgs: maximum number of recipients kept per grantor
    - depth: how many grant hops to follow from the root organization
    - selected_years: grant years to include, most recent first
    - color_scheme: how nodes are colored ("depth" or "amount")

    Instances built through from_dict / read_filter_state are always clamp-safe.
    """

    org_filter: str = ""
    min_amount: int = DEFAULT_MIN_AMOUNT
    max_orgs: int = DEFAULT_MAX_ORGS
    depth: int = DEFAULT_DEPTH
    selected_years: List[int] = field(default_factory=list)
    color_scheme: str = DEFAULT_COLOR_SCHEME

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        return cls(
            org_filter=clean_org(data.get("org_filter")),
            min_amount=clamp_amount(data.get("min_amount"), DEFAULT_MIN_AMOUNT),
            max_orgs=clamp_max_orgs(data.get("max_orgs")),
            depth=clamp_depth(data.get("depth")),
            selected_years=normalise_years(data.get("selected_years") or []),
            color_scheme=clean_color_scheme(data.get("color_scheme")),
        )


# -----------------------------------------------------------------------------
# Clamp / parse rules (the only place defaults are defined)
# -----------------------------------------------------------------------------
def parse_int(value: Any) -> Optional[int]:
    """Lenient integer parse: '12', 12.7 and ' 12 ' all give 12, junk gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _clamp(value: Any, lo: int, hi: int, default: int) -> int:
    parsed = parse_int(value)
    if parsed is None:
        parsed = default
    return max(lo, min(hi, parsed))


def clamp_max_orgs(value: Any) -> int:
    return _clamp(value, MIN_MAX_ORGS, MAX_MAX_ORGS, DEFAULT_MAX_ORGS)


def clamp_depth(value: Any) -> int:
    return _clamp(value, MIN_DEPTH, MAX_DEPTH, DEFAULT_DEPTH)


def clamp_amount(value: Any, default: int = 0) -> int:
    return _clamp(value, 0, MAX_DOLLARS, default)


def clean_org(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clean_color_scheme(value: Any) -> str:
    return value if value in COLOR_SCHEMES else DEFAULT_COLOR_SCHEME


def normalise_years(values: Iterable[Any]) -> List[int]:
    years = {y for y in (parse_int(v) for v in values) if y is not None}
    return sorted(years, reverse=True)


# -----------------------------------------------------------------------------
# Widget <-> FilterState
# -----------------------------------------------------------------------------
def read_filter_state(values: Mapping[str, Any], available_years: YearsLookup) -> FilterState:
    """
    Assemble a FilterState from a snapshot of widget values keyed by widget id.

    The numeric amount mirror wins over the slider when it holds a number, since
    the slider can only express amounts on its logarithmic grid. When no year is
    checked the years available for the current organization are used instead
    ("" asks for every year in the dataset).
    """
    org_filter = clean_org(values.get(IDs.Control.ORG_FILTER))

    typed_amount = parse_int(values.get(IDs.Control.MIN_AMOUNT_INPUT))
    if typed_amount is not None:
        min_amount = clamp_amount(typed_amount)
    else:
        min_amount = slider_to_dollars(values.get(IDs.Control.MIN_AMOUNT, DEFAULT_SLIDER_POSITION))

    selected_years = normalise_years(values.get(IDs.Control.YEAR_FILTER) or [])
    if not selected_years:
        selected_years = normalise_years(available_years(org_filter))

    return FilterState(
        org_filter=org_filter,
        min_amount=min_amount,
        max_orgs=clamp_max_orgs(values.get(IDs.Control.MAX_ORGS)),
        depth=clamp_depth(values.get(IDs.Control.DEPTH)),
        selected_years=selected_years,
        color_scheme=clean_color_scheme(values.get(IDs.Control.COLOR_SCHEME)),
    )


def widget_values_for(state: FilterState, include_years: bool = True) -> Dict[str, Any]:
    """Widget id -> value needed to make the bound widgets show `state`."""
    values: Dict[str, Any] = {
        IDs.Control.MAX_ORGS: state.max_orgs,
        IDs.Control.DEPTH: state.depth,
        IDs.Control.MIN_AMOUNT: dollars_to_slider(state.min_amount),
        IDs.Control.MIN_AMOUNT_INPUT: state.min_amount,
        IDs.Control.MIN_AMOUNT_DISPLAY: format_dollar_amount(state.min_amount),
        IDs.Control.COLOR_SCHEME: state.color_scheme,
    }
    if include_years:
        values[IDs.Control.YEAR_FILTER] = list(state.selected_years)
    return values
