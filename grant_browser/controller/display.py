from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from grant_browser.core.collaborators import FilterStats
from grant_browser.core.transforms import format_count, format_dollar_amount

logger = logging.getLogger(__name__)

SCENE_WELCOME = "welcome"
SCENE_GRAPH = "graph"

BANNER_WARNING = "warning"
BANNER_ERROR = "error"

WELCOME_TITLE = "Nonprofit Grant Flow Network"
WELCOME_LINES = (
    "Visualize grant relationships and taxpayer funding impact",
    "Enter an organization name or EIN in the search box to begin",
    "Try using the Quick Filters below for common visualizations",
)


@dataclass
class Banner:
    kind: str
    message: str
    id: int = 0
    dismissible: bool = True


@dataclass
class DisplayState:
    """
    Everything the page shows outside the input widgets.

    - loading / loading_message: the busy overlay
    - scene: "welcome" before an organization is chosen, "graph" afterwards
    - banners: at most one banner per kind (warning, error)
    - stats_lines: rendered statistics panel, last_stats the raw numbers
    - download: export waiting to be handed to the browser
    - revision: bumped on every change so hosts can skip redundant syncs
    """
    loading: bool = False
    loading_message: str = ""
    scene: str = SCENE_WELCOME
    banners: Dict[str, Banner] = field(default_factory=dict)
    stats_lines: List[str] = field(default_factory=list)
    last_stats: Optional[FilterStats] = None
    theme: str = "dark"
    download: Optional[Dict[str, Any]] = None
    revision: int = 0

    _banner_ids: Any = field(default_factory=lambda: itertools.count(1), repr=False, compare=False)

    def _touch(self) -> None:
        self.revision += 1

    # ------------------------------------------------------------------
    # Busy indicator
    # ------------------------------------------------------------------
    def show_loading(self, message: str = "Loading...") -> None:
        self.loading = True
        self.loading_message = message
        self._touch()

    def hide_loading(self) -> None:
        if self.loading:
            self.loading = False
            self._touch()

    # ------------------------------------------------------------------
    # Scenes
    # ------------------------------------------------------------------
    def show_welcome(self) -> None:
        self.scene = SCENE_WELCOME
        self._touch()

    def show_graph(self) -> None:
        self.scene = SCENE_GRAPH
        self._touch()

    # ------------------------------------------------------------------
    # Banners
    # ------------------------------------------------------------------
    def show_banner(self, kind: str, message: str) -> Banner:
        banner = Banner(kind=kind, message=message, id=next(self._banner_ids))
        self.banners[kind] = banner
        self._touch()
        return banner

    def dismiss(self, kind: str) -> None:
        if self.banners.pop(kind, None) is not None:
            self._touch()

    def show_error(self, message: str) -> Banner:
        logger.warning("Showing error banner", extra={"banner_message": message})
        return self.show_banner(BANNER_ERROR, message)

    def show_grant_warning(self, max_grant: Optional[float], org_name: str) -> Banner:
        return self.show_banner(
            BANNER_WARNING,
            f"Warning: {org_name} has a maximum grant value of {format_dollar_amount(max_grant)}. "
            "Filtering above this amount may hide connections.",
        )

    # ------------------------------------------------------------------
    # Statistics panel
    # ------------------------------------------------------------------
    def update_stats(self, stats: FilterStats, org_name: Optional[str] = None) -> None:
        self.last_stats = stats

        if stats.show_warning:
            self.show_grant_warning(stats.max_root_grant, org_name or "Selected organization")
        else:
            self.dismiss(BANNER_WARNING)

        self.stats_lines = [
            f"Organizations: {format_count(stats.org_count)}",
            f"Grants Visualized: {format_count(stats.grant_count)}",
            f"Total Dataset Grants: {format_count(stats.total_grants)}",
            f"Total Grant Amount: {format_dollar_amount(stats.total_amount)}",
            f"Average Grant: {format_dollar_amount(stats.average_amount)}",
            f"Standard Deviation: {format_dollar_amount(stats.standard_deviation)}",
        ]
        self._touch()

    def offer_download(self, filename: str, content: str, mime_type: str) -> None:
        self.download = {"filename": filename, "content": content, "type": mime_type}
        self._touch()

    def take_download(self) -> Optional[Dict[str, Any]]:
        download, self.download = self.download, None
        return download

    def set_theme(self, theme: str) -> None:
        self.theme = theme
        self._touch()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "loading": self.loading,
            "loading_message": self.loading_message,
            "scene": self.scene,
            "banners": {k: {"id": b.id, "message": b.message} for k, b in self.banners.items()},
            "stats_lines": list(self.stats_lines),
            "theme": self.theme,
            "revision": self.revision,
        }
