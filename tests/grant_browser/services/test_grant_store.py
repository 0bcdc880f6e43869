from __future__ import annotations

import asyncio

import pytest

from grant_browser.core.exceptions import DataLoadError
from grant_browser.core.filter_state import FilterState
from grant_browser.services.grant_store import GrantDataStore


def _state(**kwargs) -> FilterState:
    base = dict(org_filter="A", min_amount=0, max_orgs=10, depth=1, selected_years=[])
    base.update(kwargs)
    return FilterState(**base)


def test_charities_fall_back_to_id_without_name(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    assert store.charities["A"].name == "Alpha Foundation"
    assert store.charities["F"].name == "F"
    assert store.total_grants == 6


def test_available_years_newest_first(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    assert store.get_available_years("") == [2024, 2023, 2022]
    assert store.get_available_years("C") == [2024, 2022]
    assert store.get_available_years("gamma fund") == [2024, 2022]
    assert store.get_available_years("nobody") == []


def test_search_ranks_id_matches_before_name_matches(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    # exact id "A" first, then names containing "a" alphabetically
    assert [m.id for m in store.search_organizations("a")] == ["A", "B", "D", "C"]
    assert [m.id for m in store.search_organizations("fund")] == ["C"]
    assert [m.id for m in store.search_organizations("beta")] == ["B"]
    assert store.search_organizations("   ") == []


def test_search_limit(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)
    assert len(store.search_organizations("a", limit=2)) == 2


def test_filter_depth_one(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    result = store.filter_data(_state())

    assert {n.id for n in result.graph.nodes} == {"A", "B", "C", "D"}
    assert result.graph.root_id == "A"
    assert result.stats.org_count == 4
    assert result.stats.grant_count == 4
    assert result.stats.total_amount == 105_000


def test_filter_depth_two_follows_grantees(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    result = store.filter_data(_state(depth=2))

    depths = {n.id: n.depth for n in result.graph.nodes}
    assert depths == {"A": 0, "B": 1, "C": 1, "D": 1, "E": 2, "F": 2}


def test_filter_min_amount_years_and_max_orgs(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    by_amount = store.filter_data(_state(min_amount=20_000))
    assert {n.id for n in by_amount.graph.nodes} == {"A", "B", "C"}

    by_year = store.filter_data(_state(selected_years=[2023]))
    assert {n.id for n in by_year.graph.nodes} == {"A", "B", "D"}

    top_one = store.filter_data(_state(max_orgs=1))
    assert {n.id for n in top_one.graph.nodes} == {"A", "B"}
    # both grants to B are kept
    assert top_one.stats.grant_count == 2


def test_warning_when_min_amount_exceeds_largest_root_grant(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    result = store.filter_data(_state(min_amount=60_000))

    assert result.stats.show_warning
    assert result.stats.max_root_grant == 50_000
    assert result.graph.links == []
    assert not store.filter_data(_state(min_amount=1_000)).stats.show_warning


def test_unknown_org_gives_empty_result(grant_frame):
    store = GrantDataStore.from_frame(grant_frame)

    result = store.filter_data(_state(org_filter="nobody"))

    assert result.graph.nodes == []
    assert result.stats.total_grants == 6


def test_load_data_from_csv(tmp_path, grant_frame):
    path = tmp_path / "grants.csv"
    grant_frame.to_csv(path, index=False)
    store = GrantDataStore(path)

    asyncio.run(store.load_data())

    assert store.loaded
    assert store.total_grants == 6
    assert store.charities["A"].name == "Alpha Foundation"


def test_load_data_errors(tmp_path, grant_frame):
    with pytest.raises(DataLoadError):
        asyncio.run(GrantDataStore(tmp_path / "missing.csv").load_data())

    with pytest.raises(DataLoadError):
        asyncio.run(GrantDataStore().load_data())

    with pytest.raises(DataLoadError):
        GrantDataStore.from_frame(grant_frame.drop(columns=["year"]))
