from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import plotly.graph_objs as go
from dash import html

from grant_browser.controller.display import WELCOME_LINES, WELCOME_TITLE
from grant_browser.services.network_renderer import DARK_THEME, LIGHT_THEME

MIN_GRAPH_WIDTH = 400
MIN_GRAPH_HEIGHT = 300


def welcome_figure(theme: str = "dark") -> go.Figure:
    colors = LIGHT_THEME if theme == "light" else DARK_THEME
    fig = go.Figure()

    # node icon above the title
    fig.add_trace(
        go.Scatter(
            x=[-0.15, 0.15],
            y=[1.65, 1.55],
            mode="lines+markers",
            line=dict(color="#4299e1", width=2),
            marker=dict(size=[16, 12], color=["#ef4444", "#84cc16"]),
            hoverinfo="skip",
        )
    )

    lines = [(WELCOME_TITLE, 1.0, 32, colors["text"])] + [
        (text, y, size, color)
        for text, y, size, color in zip(
            WELCOME_LINES,
            (0.6, 0.0, -0.4),
            (18, 16, 14),
            (colors["secondary"], colors["text"], colors["secondary"]),
        )
    ]
    for text, y, size, color in lines:
        fig.add_annotation(
            text=f"<b>{text}</b>" if size == 32 else text,
            x=0,
            y=y,
            showarrow=False,
            font=dict(size=size, color=color),
        )

    fig.update_xaxes(visible=False, range=[-2, 2])
    fig.update_yaxes(visible=False, range=[-1, 2])
    fig.update_layout(
        showlegend=False,
        paper_bgcolor=colors["paper"],
        plot_bgcolor=colors["paper"],
        margin=dict(l=20, r=20, t=20, b=20),
    )
    return fig


def stats_children(lines: List[str]) -> List[Any]:
    children: List[Any] = [html.Strong("Statistics")]
    for line in lines:
        children.extend([html.Br(), line])
    return children


def loading_class(loading: bool) -> str:
    return "loading-overlay active" if loading else "loading-overlay"


def visible_style(visible: bool) -> Dict[str, str]:
    return {} if visible else {"display": "none"}


def banner_message(banners: Dict[str, Dict[str, Any]], kind: str) -> Optional[str]:
    banner = banners.get(kind)
    return banner["message"] if banner else None


def busy_class(busy: bool) -> str:
    return "form-control mb-2 searching" if busy else "form-control mb-2"


def graph_size(viewport: List[int]) -> Tuple[int, int]:
    """Graph area for a browser viewport of [width, height]: the plot column minus chrome."""
    width, height = viewport
    return max(MIN_GRAPH_WIDTH, int(width * 0.7)), max(MIN_GRAPH_HEIGHT, int(height) - 180)
