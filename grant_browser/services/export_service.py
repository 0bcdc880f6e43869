from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

import plotly.graph_objs as go

from grant_browser.core.collaborators import FilterStats
from grant_browser.core.filter_state import FilterState

logger = logging.getLogger(__name__)


@dataclass
class ExportBundle:
    filename: str
    content: str
    metadata: Dict[str, Any]
    mime_type: str = "text/html"


class ExportService:
    """
    Turns the current figure, filters and statistics into a standalone HTML file.

    The metadata (filters + timestamp + stats) is embedded as a JSON script tag
    so an exported file can be traced back to the view that produced it.
    """

    def __init__(self, now: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._now = now

    def build(
        self,
        figure: Optional[Union[go.Figure, Dict[str, Any]]],
        filters: FilterState,
        stats: Optional[FilterStats],
    ) -> ExportBundle:
        stamp = self._now()
        metadata: Dict[str, Any] = {
            **filters.to_dict(),
            "timestamp": stamp.isoformat(),
            "stats": stats.to_dict() if stats is not None else None,
        }

        if not isinstance(figure, go.Figure):
            figure = go.Figure(figure)

        body = figure.to_html(full_html=True, include_plotlyjs="cdn")
        meta_tag = (
            '<script type="application/json" id="grant-visualization-metadata">'
            f"{json.dumps(metadata)}</script>"
        )
        content = body.replace("</body>", f"{meta_tag}\n</body>", 1)

        filename = f"grant-visualization-{stamp.date().isoformat()}.html"
        logger.info("export_built", extra={"export_filename": filename, "org": filters.org_filter})
        return ExportBundle(filename=filename, content=content, metadata=metadata)
