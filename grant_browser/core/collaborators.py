from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

from .filter_state import FilterState


@dataclass(frozen=True)
class Charity:
    id: str
    name: str


@dataclass(frozen=True)
class OrgMatch:
    id: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass
class GraphNode:
    id: str
    name: str
    depth: int
    total_amount: float = 0.0


@dataclass
class GraphLink:
    source: str
    target: str
    amount: float
    year: int


@dataclass
class GraphData:
    root_id: Optional[str] = None
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)


@dataclass
class FilterStats:
    """
    Summary numbers shown in the statistics panel.

    show_warning/max_root_grant flag the case where min_amount is above every
    grant the root organization made in the selected years.
    """
    org_count: int = 0
    grant_count: int = 0
    total_grants: int = 0
    total_amount: float = 0.0
    average_amount: float = 0.0
    standard_deviation: float = 0.0
    show_warning: bool = False
    max_root_grant: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FilterResult:
    graph: GraphData
    stats: FilterStats


@runtime_checkable
class DataStore(Protocol):
    charities: Mapping[str, Charity]

    async def load_data(self) -> None:
        ...

    def get_available_years(self, org: str) -> List[int]:
        ...

    def search_organizations(self, query: str) -> List[OrgMatch]:
        ...

    def filter_data(self, state: FilterState) -> Union[FilterResult, Awaitable[FilterResult]]:
        ...


@runtime_checkable
class Renderer(Protocol):
    def update(self, graph: GraphData, charities: Mapping[str, Charity], color_scheme: str) -> None:
        ...

    def resize(self, width: int, height: int) -> None:
        ...

    def zoom_to_fit(self) -> None:
        ...
