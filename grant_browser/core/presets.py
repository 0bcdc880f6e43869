from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence

from .exceptions import UnknownPresetError
from .filter_state import FilterState, clamp_amount, clamp_depth, clamp_max_orgs, normalise_years

BASELINE_MAX_ORGS = 15


@dataclass(frozen=True)
class Preset:
    """
    Named partial override of a FilterState.

    Unset fields keep the current value, except max_orgs which falls back to
    BASELINE_MAX_ORGS. recent_years=N selects the N most recent years available
    for the current organization.
    """
    name: str
    label: str
    min_amount: Optional[int] = None
    max_orgs: Optional[int] = None
    depth: Optional[int] = None
    recent_years: Optional[int] = None


PRESETS: Dict[str, Preset] = {
    "small": Preset("small", "Small Grants", min_amount=1_000, max_orgs=20, depth=1),
    "large": Preset("large", "Large Grants", min_amount=1_000_000, max_orgs=10, depth=2),
    "recent": Preset("recent", "Recent Years", min_amount=50_000, depth=1, recent_years=3),
    "network": Preset("network", "Network Analysis", min_amount=500_000, max_orgs=25, depth=3, recent_years=5),
}

# older button markup used "complex" for the network preset
PRESET_ALIASES: Dict[str, str] = {"complex": "network"}


def get_preset(name: str) -> Preset:
    key = PRESET_ALIASES.get(name, name)
    try:
        return PRESETS[key]
    except KeyError:
        raise UnknownPresetError(f"Preset '{name}' not found")


def build_preset_state(
    name: str,
    current: FilterState,
    available_years: Sequence[int] = (),
) -> FilterState:
    """
    Merge preset `name` onto `current`.

    org_filter and color_scheme are always carried over from `current`.
    `available_years` must be the years for current.org_filter; only presets
    with recent_years look at it.

    Raises:
        UnknownPresetError: if no preset is registered under `name`
    """
    preset = get_preset(name)

    state = replace(current, max_orgs=BASELINE_MAX_ORGS)
    if preset.min_amount is not None:
        state.min_amount = clamp_amount(preset.min_amount)
    if preset.max_orgs is not None:
        state.max_orgs = clamp_max_orgs(preset.max_orgs)
    if preset.depth is not None:
        state.depth = clamp_depth(preset.depth)
    if preset.recent_years is not None:
        state.selected_years = normalise_years(available_years)[: preset.recent_years]
    else:
        state.selected_years = list(current.selected_years)
    return state
