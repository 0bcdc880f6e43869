from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import plotly.graph_objs as go

from grant_browser.core.collaborators import Charity, GraphData
from grant_browser.core.transforms import format_dollar_amount

logger = logging.getLogger(__name__)

DEPTH_COLORS = ["#ef4444", "#4299e1", "#84cc16", "#f59e0b", "#a855f7", "#14b8a6"]
AMOUNT_COLORSCALE = "Viridis"

DARK_THEME = {"paper": "#0f172a", "text": "white", "secondary": "#94a3b8", "edge": "#475569"}
LIGHT_THEME = {"paper": "#f8fafc", "text": "#0f172a", "secondary": "#64748b", "edge": "#94a3b8"}


def radial_layout(graph: GraphData) -> Dict[str, Tuple[float, float]]:
    """
    Root at the origin, each depth level on its own ring, nodes spread evenly
    around the ring in id order.
    """
    rings: Dict[int, List[str]] = {}
    for node in graph.nodes:
        rings.setdefault(node.depth, []).append(node.id)

    positions: Dict[str, Tuple[float, float]] = {}
    for depth, ids in rings.items():
        ids = sorted(ids)
        if depth == 0 and len(ids) == 1:
            positions[ids[0]] = (0.0, 0.0)
            continue
        # offset each ring a little so spokes don't line up
        offset = depth * 0.35
        for i, node_id in enumerate(ids):
            angle = offset + 2 * math.pi * i / len(ids)
            positions[node_id] = (depth * math.cos(angle), depth * math.sin(angle))
    return positions


class NetworkRenderer:
    """
    Plotly rendering engine for grant networks.

    Keeps one go.Figure that is rebuilt on update() and resized/re-zoomed in
    place; hosts display `figure`.
    """

    def __init__(self, width: int, height: int, light: bool = False):
        self.width = width
        self.height = height
        self.light = light
        self.revision = 0
        self.figure = go.Figure()
        self._apply_layout()

    @property
    def palette(self) -> Dict[str, str]:
        return LIGHT_THEME if self.light else DARK_THEME

    def _apply_layout(self) -> None:
        colors = self.palette
        self.figure.update_layout(
            width=self.width,
            height=self.height,
            showlegend=False,
            hovermode="closest",
            paper_bgcolor=colors["paper"],
            plot_bgcolor=colors["paper"],
            font=dict(color=colors["text"]),
            margin=dict(l=20, r=20, t=20, b=20),
        )
        self.figure.update_xaxes(visible=False)
        self.figure.update_yaxes(visible=False, scaleanchor="x", scaleratio=1)

    def update(self, graph: GraphData, charities: Mapping[str, Charity], color_scheme: str) -> None:
        positions = radial_layout(graph)
        colors = self.palette
        fig = go.Figure()

        edge_x: List[Optional[float]] = []
        edge_y: List[Optional[float]] = []
        for link in graph.links:
            if link.source not in positions or link.target not in positions:
                continue
            x0, y0 = positions[link.source]
            x1, y1 = positions[link.target]
            edge_x += [x0, x1, None]
            edge_y += [y0, y1, None]

        fig.add_trace(
            go.Scatter(
                x=edge_x,
                y=edge_y,
                mode="lines",
                line=dict(width=1, color=colors["edge"]),
                hoverinfo="skip",
            )
        )

        nodes = [n for n in graph.nodes if n.id in positions]
        labels = []
        for node in nodes:
            charity = charities.get(node.id)
            labels.append(charity.name if charity is not None else node.name)

        amounts = np.array([n.total_amount for n in nodes], dtype=float)
        sizes = 10 + 20 * np.sqrt(amounts / amounts.max()) if amounts.size and amounts.max() > 0 else 12

        if color_scheme == "amount":
            marker = dict(
                size=sizes,
                color=np.log10(amounts + 1) if amounts.size else [],
                colorscale=AMOUNT_COLORSCALE,
                showscale=True,
                colorbar=dict(title="log10 $"),
            )
        else:
            marker = dict(
                size=sizes,
                color=[DEPTH_COLORS[n.depth % len(DEPTH_COLORS)] for n in nodes],
            )

        fig.add_trace(
            go.Scatter(
                x=[positions[n.id][0] for n in nodes],
                y=[positions[n.id][1] for n in nodes],
                mode="markers+text",
                text=labels,
                textposition="top center",
                textfont=dict(color=colors["text"]),
                marker=marker,
                customdata=[[n.id, format_dollar_amount(n.total_amount), n.depth] for n in nodes],
                hovertemplate="%{text}<br>%{customdata[0]}<br>%{customdata[1]}<br>depth %{customdata[2]}<extra></extra>",
            )
        )

        self.figure = fig
        self._apply_layout()
        self.revision += 1
        logger.debug("network_rendered", extra={"n_nodes": len(nodes), "color_scheme": color_scheme})

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.figure.update_layout(width=width, height=height)
        self.revision += 1

    def zoom_to_fit(self) -> None:
        self.figure.update_xaxes(autorange=True)
        self.figure.update_yaxes(autorange=True)
        self.revision += 1

    def set_theme(self, light: bool) -> None:
        self.light = light
        self._apply_layout()
        colors = self.palette
        for trace in self.figure.data:
            if trace.mode == "lines":
                trace.line.color = colors["edge"]
            else:
                trace.textfont.color = colors["text"]
        self.revision += 1
