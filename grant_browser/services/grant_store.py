from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from grant_browser.core.collaborators import (
    Charity,
    FilterResult,
    FilterStats,
    GraphData,
    GraphLink,
    GraphNode,
    OrgMatch,
)
from grant_browser.core.exceptions import DataLoadError
from grant_browser.core.filter_state import FilterState

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("grantor_id", "grantee_id", "amount", "year")
NAME_COLUMNS = ("grantor_name", "grantee_name")
SEARCH_LIMIT = 20


class GrantDataStore:
    """
    In-memory grant table with the queries the controller needs.

    Rows are single grants: grantor_id -> grantee_id, amount (dollars) and year.
    Optional grantor_name / grantee_name columns feed the charity lookup; an
    organization without a name is shown by its id.

    Design Notes:
    - The table is loaded once (load_data) and never mutated afterwards
    - Organizations can be referred to by id or by exact (case-insensitive) name
    """

    def __init__(self, path: Optional[Path | str] = None, frame: Optional[pd.DataFrame] = None):
        self.path = Path(path) if path is not None else None
        self._grants: pd.DataFrame = pd.DataFrame(columns=list(REQUIRED_COLUMNS))
        self._orgs: pd.DataFrame = pd.DataFrame(columns=["id", "name", "name_lower"])
        self.charities: Dict[str, Charity] = {}
        self._id_by_name: Dict[str, str] = {}
        self.loaded = False
        if frame is not None:
            self._ingest(frame)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> GrantDataStore:
        return cls(frame=frame)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def load_data(self) -> None:
        if self.loaded:
            return
        if self.path is None:
            raise DataLoadError("No grant data file configured")
        loop = asyncio.get_running_loop()
        frame = await loop.run_in_executor(None, self._read_table, self.path)
        self._ingest(frame)

    @staticmethod
    def _read_table(path: Path) -> pd.DataFrame:
        if not path.is_file():
            raise DataLoadError(f"Grant data file not found at {path}")
        logger.info("Loading grant data", extra={"path": str(path)})
        try:
            if path.suffix.lower() in (".parquet", ".pq"):
                return pd.read_parquet(path)
            return pd.read_csv(path, dtype={"grantor_id": str, "grantee_id": str})
        except (OSError, ValueError) as e:
            raise DataLoadError(f"Failed to read {path.name}: {e}") from e

    def _ingest(self, frame: pd.DataFrame) -> None:
        missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
        if missing:
            raise DataLoadError(f"Grant table is missing columns: {missing}")

        df = frame.copy()
        df["grantor_id"] = df["grantor_id"].astype(str).str.strip()
        df["grantee_id"] = df["grantee_id"].astype(str).str.strip()
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
        df["year"] = pd.to_numeric(df["year"], errors="coerce")

        n_before = len(df)
        df = df.dropna(subset=["amount", "year"])
        if len(df) < n_before:
            logger.warning("Dropped grant rows with invalid amount/year", extra={"n_dropped": n_before - len(df)})
        df["year"] = df["year"].astype(int)
        for col in NAME_COLUMNS:
            if col not in df.columns:
                df[col] = None

        self._grants = df.reset_index(drop=True)
        self._build_charities()
        self.loaded = True

        logger.info(
            "Grant data loaded",
            extra={"n_grants": len(self._grants), "n_orgs": len(self.charities)},
        )

    def _build_charities(self) -> None:
        grantors = self._grants[["grantor_id", "grantor_name"]].set_axis(["id", "name"], axis=1)
        grantees = self._grants[["grantee_id", "grantee_name"]].set_axis(["id", "name"], axis=1)
        orgs = pd.concat([grantors, grantees], ignore_index=True)

        # prefer a real name over a missing one for the same id
        orgs["has_name"] = orgs["name"].notna()
        orgs = orgs.sort_values("has_name", ascending=False).drop_duplicates("id")
        orgs["name"] = orgs["name"].where(orgs["name"].notna(), orgs["id"]).astype(str)
        orgs["name_lower"] = orgs["name"].str.lower()
        self._orgs = orgs[["id", "name", "name_lower"]].sort_values("name").reset_index(drop=True)

        self.charities = {
            row.id: Charity(id=row.id, name=row.name) for row in self._orgs.itertuples(index=False)
        }
        self._id_by_name = {}
        for row in self._orgs.itertuples(index=False):
            self._id_by_name.setdefault(row.name_lower, row.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def total_grants(self) -> int:
        return len(self._grants)

    def resolve_org(self, org: str) -> Optional[str]:
        org = (org or "").strip()
        if not org:
            return None
        if org in self.charities:
            return org
        return self._id_by_name.get(org.lower())

    def get_available_years(self, org: str) -> List[int]:
        """Years with at least one grant given or received by `org`, newest first ("" = all)."""
        df = self._grants
        if (org or "").strip():
            org_id = self.resolve_org(org)
            if org_id is None:
                return []
            df = df[(df["grantor_id"] == org_id) | (df["grantee_id"] == org_id)]
        return sorted((int(y) for y in df["year"].unique()), reverse=True)

    def search_organizations(self, query: str, limit: int = SEARCH_LIMIT) -> List[OrgMatch]:
        """
        Case-insensitive partial match on id or name.

        Ranking: exact id, id prefix, name prefix, then name substring;
        ties broken alphabetically by name.
        """
        q = (query or "").strip().lower()
        if not q:
            return []

        orgs = self._orgs
        ids = orgs["id"].str.lower()
        rank = pd.Series(np.nan, index=orgs.index)
        rank = rank.mask(orgs["name_lower"].str.contains(q, regex=False), 3)
        rank = rank.mask(orgs["name_lower"].str.startswith(q), 2)
        rank = rank.mask(ids.str.startswith(q), 1)
        rank = rank.mask(ids == q, 0)

        hits = orgs.assign(rank=rank).dropna(subset=["rank"])
        hits = hits.sort_values(["rank", "name"]).head(limit)
        return [OrgMatch(id=row.id, name=row.name) for row in hits.itertuples(index=False)]

    def filter_data(self, state: FilterState) -> FilterResult:
        """
        Subgraph reachable from state.org_filter.

        Walks outgoing grants breadth-first for state.depth levels. Only grants
        in state.selected_years (all years if empty) with amount >= min_amount
        are followed, and each grantor keeps its state.max_orgs largest
        recipients by total amount.
        """
        root = self.resolve_org(state.org_filter)
        if root is None:
            return FilterResult(graph=GraphData(), stats=FilterStats(total_grants=self.total_grants))

        grants = self._grants
        if state.selected_years:
            grants = grants[grants["year"].isin(state.selected_years)]

        root_grants = grants[grants["grantor_id"] == root]
        eligible = grants[grants["amount"] >= state.min_amount]

        depth_by_id: Dict[str, int] = {root: 0}
        frontier = [root]
        kept: List[pd.DataFrame] = []

        for level in range(1, state.depth + 1):
            sub = eligible[eligible["grantor_id"].isin(frontier)]
            if sub.empty:
                break

            totals = (
                sub.groupby(["grantor_id", "grantee_id"], as_index=False)["amount"].sum()
                .sort_values(["grantor_id", "amount"], ascending=[True, False])
                .groupby("grantor_id")
                .head(state.max_orgs)
            )
            pairs = totals[["grantor_id", "grantee_id"]]
            sub = sub.merge(pairs, on=["grantor_id", "grantee_id"], how="inner")
            kept.append(sub)

            frontier = []
            for grantee in pairs["grantee_id"].unique():
                if grantee not in depth_by_id:
                    depth_by_id[grantee] = level
                    frontier.append(grantee)
            if not frontier:
                break

        edges = pd.concat(kept, ignore_index=True) if kept else eligible.iloc[0:0]
        graph = self._build_graph(root, depth_by_id, edges)
        stats = self._build_stats(graph, edges, root_grants, state.min_amount)

        logger.debug(
            "filter_data",
            extra={"org": root, "n_nodes": len(graph.nodes), "n_links": len(graph.links)},
        )
        return FilterResult(graph=graph, stats=stats)

    def _build_graph(self, root: str, depth_by_id: Dict[str, int], edges: pd.DataFrame) -> GraphData:
        received = edges.groupby("grantee_id")["amount"].sum().to_dict() if not edges.empty else {}
        given = edges[edges["grantor_id"] == root]["amount"].sum() if not edges.empty else 0.0

        nodes = []
        for org_id, depth in depth_by_id.items():
            charity = self.charities.get(org_id)
            total = float(given) if org_id == root else float(received.get(org_id, 0.0))
            nodes.append(
                GraphNode(
                    id=org_id,
                    name=charity.name if charity is not None else org_id,
                    depth=depth,
                    total_amount=total,
                )
            )

        links = [
            GraphLink(source=row.grantor_id, target=row.grantee_id, amount=float(row.amount), year=int(row.year))
            for row in edges.itertuples(index=False)
        ]
        return GraphData(root_id=root, nodes=nodes, links=links)

    def _build_stats(
        self,
        graph: GraphData,
        edges: pd.DataFrame,
        root_grants: pd.DataFrame,
        min_amount: int,
    ) -> FilterStats:
        amounts = edges["amount"].to_numpy(dtype=float) if not edges.empty else np.array([])

        show_warning = False
        max_root_grant = None
        if not root_grants.empty:
            max_root_grant = float(root_grants["amount"].max())
            show_warning = max_root_grant < min_amount

        return FilterStats(
            org_count=len(graph.nodes),
            grant_count=len(graph.links),
            total_grants=self.total_grants,
            total_amount=float(amounts.sum()) if amounts.size else 0.0,
            average_amount=float(amounts.mean()) if amounts.size else 0.0,
            standard_deviation=float(amounts.std()) if amounts.size else 0.0,
            show_warning=show_warning,
            max_root_grant=max_root_grant,
        )
