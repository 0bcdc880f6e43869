from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from grant_browser.core.ids import IDs
from grant_browser.ui.layout.build_control_panel import build_control_panel
from grant_browser.ui.layout.build_navbar import build_navbar
from grant_browser.ui.layout.build_plot_panel import build_plot_panel

if TYPE_CHECKING:
    from grant_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    """
    Page layout. Called once per page load so every tab gets its own session id
    and therefore its own controller on the server.
    """
    return dbc.Container(
        id=IDs.Display.ROOT,
        fluid=True,
        className="gb-root theme-dark",
        children=[
            build_navbar(ctx.settings),

            # App-level stores
            dcc.Store(id=IDs.Store.SESSION_ID, data=uuid.uuid4().hex),
            dcc.Store(id=IDs.Store.EVENT_ACK),
            dcc.Store(id=IDs.Store.VIEWPORT),
            dcc.Store(id=IDs.Store.PREFERENCES, storage_type="local"),
            dcc.Interval(id=IDs.Display.POLL, interval=ctx.settings.poll_interval_ms),

            dbc.Row(
                [
                    dbc.Col(build_control_panel(), md=3, className="mt-3"),
                    dbc.Col(build_plot_panel(), md=9, className="mt-3"),
                ],
                className="gx-3",
            ),
        ],
    )
