from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from grant_browser.core.ids import IDs
from grant_browser.ui.helpers import welcome_figure


def build_plot_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("Grant network"),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dbc.Alert(
                        id=IDs.Display.ERROR_BANNER,
                        color="danger",
                        is_open=False,
                        dismissable=True,
                        className="gb-banner",
                    ),
                    dbc.Alert(
                        id=IDs.Display.WARNING_BANNER,
                        color="warning",
                        is_open=False,
                        dismissable=True,
                        className="gb-banner",
                    ),
                    html.Div(
                        className="gb-graph-wrapper",
                        children=[
                            dcc.Graph(
                                id=IDs.Display.MAIN_GRAPH,
                                figure=welcome_figure(),
                                config={"displaylogo": False},
                            ),
                            html.Div(
                                id=IDs.Display.LOADING_OVERLAY,
                                className="loading-overlay",
                                children=[
                                    dbc.Spinner(color="light", size="sm"),
                                    html.Span(id=IDs.Display.LOADING_TEXT, className="ms-2"),
                                ],
                            ),
                        ],
                    ),
                    html.Div(id=IDs.Display.STATS, className="gb-stats mt-2"),
                    dcc.Download(id=IDs.Display.DOWNLOAD),
                ],
                className="gb-main-body",
            ),
        ],
        className="gb-maincard",
    )
