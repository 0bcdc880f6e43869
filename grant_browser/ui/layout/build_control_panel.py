from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from grant_browser.core.filter_state import (
    COLOR_SCHEMES,
    DEFAULT_COLOR_SCHEME,
    DEFAULT_DEPTH,
    DEFAULT_MAX_ORGS,
    DEFAULT_MIN_AMOUNT,
    DEFAULT_SLIDER_POSITION,
    MAX_DEPTH,
    MAX_MAX_ORGS,
    MIN_DEPTH,
    MIN_MAX_ORGS,
)
from grant_browser.core.ids import IDs, PRESET_BUTTONS
from grant_browser.core.presets import PRESETS
from grant_browser.core.transforms import MAX_DOLLARS, format_dollar_amount


def build_control_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Div(
                        className="control-group",
                        children=[
                            html.Label("Organization", className="form-label"),
                            dcc.Input(
                                id=IDs.Control.ORG_FILTER,
                                type="text",
                                value="",
                                placeholder="Enter EIN or organization name",
                                className="form-control mb-2",
                            ),
                            dcc.RadioItems(
                                id=IDs.Control.MATCHING_ORGS,
                                options=[],
                                value=None,
                                className="matching-orgs mb-3",
                                style={"display": "none"},
                            ),
                        ],
                    ),
                    html.Div(
                        id=IDs.Control.YEAR_FILTER_CONTAINER,
                        children=[
                            html.Label("Filter by Grant Years:", className="form-label"),
                            dcc.Checklist(
                                id=IDs.Control.YEAR_FILTER,
                                options=[],
                                value=[],
                                inline=True,
                                className="year-checkboxes mb-3",
                            ),
                        ],
                    ),
                    html.Div(
                        [
                            html.Label("Minimum grant amount", className="form-label"),
                            html.Span(
                                format_dollar_amount(DEFAULT_MIN_AMOUNT),
                                id=IDs.Control.MIN_AMOUNT_DISPLAY,
                                className="ms-2 fw-semibold",
                            ),
                            dcc.Slider(
                                id=IDs.Control.MIN_AMOUNT,
                                min=0,
                                max=100,
                                step=1,
                                value=DEFAULT_SLIDER_POSITION,
                                marks=None,
                                updatemode="drag",
                            ),
                            dcc.Input(
                                id=IDs.Control.MIN_AMOUNT_INPUT,
                                type="number",
                                min=0,
                                max=MAX_DOLLARS,
                                value=DEFAULT_MIN_AMOUNT,
                                className="form-control mb-3",
                            ),
                        ],
                    ),
                    dbc.Row(
                        [
                            dbc.Col(
                                [
                                    html.Label("Max organizations", className="form-label"),
                                    dcc.Input(
                                        id=IDs.Control.MAX_ORGS,
                                        type="number",
                                        min=MIN_MAX_ORGS,
                                        max=MAX_MAX_ORGS,
                                        value=DEFAULT_MAX_ORGS,
                                        className="form-control",
                                    ),
                                ]
                            ),
                            dbc.Col(
                                [
                                    html.Label("Depth", className="form-label"),
                                    dcc.Input(
                                        id=IDs.Control.DEPTH,
                                        type="number",
                                        min=MIN_DEPTH,
                                        max=MAX_DEPTH,
                                        value=DEFAULT_DEPTH,
                                        className="form-control",
                                    ),
                                ]
                            ),
                        ],
                        className="mb-3",
                    ),
                    html.Label("Color by", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.COLOR_SCHEME,
                        options=[{"label": s.title(), "value": s} for s in COLOR_SCHEMES],
                        value=DEFAULT_COLOR_SCHEME,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Div(
                        className="preset-buttons",
                        children=[
                            html.Div("Quick Filters:", className="preset-title"),
                            html.Div(
                                [
                                    dbc.Button(
                                        PRESETS[name].label,
                                        id=button_id,
                                        size="sm",
                                        color="secondary",
                                        className="preset-button me-1 mb-1",
                                    )
                                    for button_id, name in PRESET_BUTTONS.items()
                                ],
                                className="preset-button-container",
                            ),
                        ],
                    ),
                    html.Hr(),
                    html.Div(
                        [
                            dbc.Button("Zoom to Fit", id=IDs.Control.ZOOM_TO_FIT, size="sm", className="me-1"),
                            dbc.Button("Export Visualization", id=IDs.Control.EXPORT, size="sm", className="me-1"),
                            dbc.Button("Toggle theme", id=IDs.Control.THEME_TOGGLE, size="sm", color="light"),
                        ]
                    ),
                ]
            ),
        ],
        className="gb-sidebar",
    )
