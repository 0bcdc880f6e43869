from __future__ import annotations

import asyncio
from datetime import date
from typing import Dict, List, Optional

import pandas as pd
import pytest

from grant_browser.core.collaborators import (
    Charity,
    FilterResult,
    FilterStats,
    GraphData,
    GraphNode,
    OrgMatch,
)
from grant_browser.core.filter_state import FilterState

TODAY = date(2024, 6, 1)


class FakeStore:
    """DataStore double: records calls, answers from small fixed tables."""

    def __init__(self, years=(2024, 2023, 2022, 2021)):
        self.charities: Dict[str, Charity] = {
            "111": Charity("111", "Alpha Foundation"),
            "222": Charity("222", "Beta Trust"),
            "333": Charity("333", "Gamma Fund"),
        }
        self.years = list(years)
        self.stats = FilterStats(org_count=2, grant_count=1, total_grants=10, total_amount=5000.0)

        self.load_error: Optional[Exception] = None
        self.filter_error: Optional[Exception] = None
        self.delays: Dict[str, float] = {}

        self.loaded = False
        self.search_calls: List[str] = []
        self.filter_calls: List[FilterState] = []

    async def load_data(self) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.loaded = True

    def get_available_years(self, org: str) -> List[int]:
        return list(self.years)

    def search_organizations(self, query: str) -> List[OrgMatch]:
        self.search_calls.append(query)
        q = query.lower()
        return [
            OrgMatch(id=c.id, name=c.name)
            for c in self.charities.values()
            if q in c.name.lower() or c.id.startswith(q)
        ]

    async def filter_data(self, state: FilterState) -> FilterResult:
        self.filter_calls.append(state)
        delay = self.delays.get(state.org_filter, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if self.filter_error is not None:
            raise self.filter_error
        graph = GraphData(
            root_id=state.org_filter,
            nodes=[GraphNode(id=state.org_filter, name=state.org_filter, depth=0)],
        )
        return FilterResult(graph=graph, stats=self.stats)


class FakeRenderer:
    def __init__(self, width: int = 800, height: int = 600):
        self.width = width
        self.height = height
        self.revision = 0
        self.figure = {"data": [], "layout": {}}
        self.updates: List[GraphData] = []
        self.resizes: List[tuple] = []
        self.zooms = 0
        self.themes: List[bool] = []

    def update(self, graph, charities, color_scheme) -> None:
        self.updates.append(graph)
        self.figure = {"data": [{"root": graph.root_id}], "layout": {}}
        self.revision += 1

    def resize(self, width: int, height: int) -> None:
        self.resizes.append((width, height))
        self.revision += 1

    def zoom_to_fit(self) -> None:
        self.zooms += 1
        self.revision += 1

    def set_theme(self, light: bool) -> None:
        self.themes.append(light)
        self.revision += 1


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def grant_frame() -> pd.DataFrame:
    """
    A -> B, C, D (2023/2024), B -> E, C -> F.

    Amounts are chosen so min_amount / max_orgs cut-offs are easy to reason about.
    """
    rows = [
        ("A", "Alpha Foundation", "B", "Beta Trust", 50_000, 2024),
        ("A", "Alpha Foundation", "C", "Gamma Fund", 20_000, 2024),
        ("A", "Alpha Foundation", "D", "Delta Aid", 5_000, 2023),
        ("A", "Alpha Foundation", "B", "Beta Trust", 30_000, 2023),
        ("B", "Beta Trust", "E", "Epsilon Society", 12_000, 2024),
        ("C", "Gamma Fund", "F", None, 1_000, 2022),
    ]
    return pd.DataFrame(
        rows,
        columns=["grantor_id", "grantor_name", "grantee_id", "grantee_name", "amount", "year"],
    )
