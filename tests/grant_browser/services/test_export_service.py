from __future__ import annotations

import json
import re
from datetime import datetime, timezone

import plotly.graph_objs as go

from grant_browser.core.collaborators import FilterStats
from grant_browser.core.filter_state import FilterState
from grant_browser.services.export_service import ExportService

STAMP = datetime(2024, 3, 9, 12, 30, tzinfo=timezone.utc)


def _metadata(content: str) -> dict:
    match = re.search(r'id="grant-visualization-metadata">(.*?)</script>', content, re.S)
    assert match is not None
    return json.loads(match.group(1))


def test_export_embeds_filters_stats_and_timestamp():
    filters = FilterState(org_filter="131684331", min_amount=5_000, selected_years=[2024])
    stats = FilterStats(org_count=3, total_amount=1_500.0)
    figure = go.Figure(go.Scatter(x=[0, 1], y=[0, 1]))

    bundle = ExportService(now=lambda: STAMP).build(figure, filters, stats)

    assert bundle.filename == "grant-visualization-2024-03-09.html"
    assert bundle.mime_type == "text/html"
    meta = _metadata(bundle.content)
    assert meta["org_filter"] == "131684331"
    assert meta["selected_years"] == [2024]
    assert meta["timestamp"] == STAMP.isoformat()
    assert meta["stats"]["org_count"] == 3
    assert meta == bundle.metadata


def test_export_without_figure_or_stats():
    bundle = ExportService(now=lambda: STAMP).build(None, FilterState(), None)

    assert bundle.content.lstrip().lower().startswith("<html")
    assert _metadata(bundle.content)["stats"] is None
