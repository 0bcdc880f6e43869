from __future__ import annotations

import pytest

from grant_browser.core.exceptions import UnknownPresetError
from grant_browser.core.filter_state import FilterState
from grant_browser.core.presets import BASELINE_MAX_ORGS, PRESETS, build_preset_state, get_preset

YEARS = [2024, 2023, 2022, 2021, 2020, 2019]


def _current() -> FilterState:
    return FilterState(
        org_filter="A",
        min_amount=123,
        max_orgs=7,
        depth=4,
        selected_years=[2019],
        color_scheme="amount",
    )


def test_small_preset_overrides_and_keeps_org():
    st = build_preset_state("small", _current(), YEARS)

    assert (st.min_amount, st.max_orgs, st.depth) == (1_000, 20, 1)
    assert st.org_filter == "A"
    assert st.color_scheme == "amount"
    # small leaves the year selection alone
    assert st.selected_years == [2019]


def test_large_preset():
    st = build_preset_state("large", _current(), YEARS)

    assert (st.min_amount, st.max_orgs, st.depth) == (1_000_000, 10, 2)


def test_recent_preset_selects_three_latest_years_and_baseline_max_orgs():
    st = build_preset_state("recent", _current(), YEARS)

    assert st.min_amount == 50_000
    assert st.max_orgs == BASELINE_MAX_ORGS
    assert st.depth == 1
    assert st.selected_years == [2024, 2023, 2022]


def test_network_preset_and_complex_alias():
    st = build_preset_state("network", _current(), YEARS)
    alias = build_preset_state("complex", _current(), YEARS)

    assert (st.min_amount, st.max_orgs, st.depth) == (500_000, 25, 3)
    assert st.selected_years == [2024, 2023, 2022, 2021, 2020]
    assert alias == st


def test_recent_preset_with_fewer_years_than_requested():
    st = build_preset_state("recent", _current(), [2020])

    assert st.selected_years == [2020]


def test_preset_does_not_mutate_current():
    current = _current()
    build_preset_state("recent", current, YEARS)

    assert current == _current()


def test_unknown_preset_raises():
    with pytest.raises(UnknownPresetError):
        build_preset_state("huge", _current(), YEARS)


def test_every_preset_has_a_label():
    for name, preset in PRESETS.items():
        assert get_preset(name).label
        assert preset.name == name
