from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import dash
from dash import Input, Output, State, exceptions

from grant_browser.controller.display import BANNER_ERROR, BANNER_WARNING, SCENE_WELCOME
from grant_browser.core.ids import IDs
from grant_browser.ui.helpers import (
    banner_message,
    busy_class,
    graph_size,
    loading_class,
    stats_children,
    visible_style,
    welcome_figure,
)

if TYPE_CHECKING:
    from grant_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

# (widget id, dash prop, widget attribute) mirrored into the page
WIDGET_PROPS: List[Tuple[str, str, str]] = [
    (IDs.Control.ORG_FILTER, "value", "value"),
    (IDs.Control.ORG_FILTER, "placeholder", "placeholder"),
    (IDs.Control.ORG_FILTER, "className", "busy"),
    (IDs.Control.MATCHING_ORGS, "options", "options"),
    (IDs.Control.MATCHING_ORGS, "value", "value"),
    (IDs.Control.MATCHING_ORGS, "style", "visible"),
    (IDs.Control.MIN_AMOUNT, "value", "value"),
    (IDs.Control.MIN_AMOUNT_INPUT, "value", "value"),
    (IDs.Control.MIN_AMOUNT_DISPLAY, "children", "value"),
    (IDs.Control.MAX_ORGS, "value", "value"),
    (IDs.Control.DEPTH, "value", "value"),
    (IDs.Control.COLOR_SCHEME, "value", "value"),
    (IDs.Control.YEAR_FILTER, "options", "options"),
    (IDs.Control.YEAR_FILTER, "value", "value"),
    (IDs.Control.YEAR_FILTER, "style", "visible"),
]

DISPLAY_OUTPUTS: List[Tuple[str, str]] = [
    (IDs.Display.MAIN_GRAPH, "figure"),
    (IDs.Display.STATS, "children"),
    (IDs.Display.LOADING_OVERLAY, "className"),
    (IDs.Display.LOADING_TEXT, "children"),
    (IDs.Display.WARNING_BANNER, "children"),
    (IDs.Display.WARNING_BANNER, "is_open"),
    (IDs.Display.ERROR_BANNER, "children"),
    (IDs.Display.ERROR_BANNER, "is_open"),
    (IDs.Display.ROOT, "className"),
    (IDs.Display.DOWNLOAD, "data"),
]


def _to_prop(prop: str, value: Any) -> Any:
    if prop == "style":
        return visible_style(bool(value))
    if prop == "className":
        return busy_class(bool(value))
    return value


def widget_outputs(widgets: Dict[str, Dict[str, Any]]) -> List[Any]:
    """One value per WIDGET_PROPS entry; no_update for anything not written."""
    values = []
    for widget_id, prop, attr in WIDGET_PROPS:
        attrs = widgets.get(widget_id, {})
        values.append(_to_prop(prop, attrs[attr]) if attr in attrs else dash.no_update)
    return values


def display_outputs(payload: Dict[str, Any]) -> List[Any]:
    """One value per DISPLAY_OUTPUTS entry."""
    values: List[Any] = [dash.no_update] * len(DISPLAY_OUTPUTS)
    display: Optional[Dict[str, Any]] = payload.get("display")

    figure = payload.get("figure")
    if figure is not None:
        values[0] = figure
    elif display is not None and display["scene"] == SCENE_WELCOME:
        values[0] = welcome_figure(display["theme"])

    if display is not None:
        warning = banner_message(display["banners"], BANNER_WARNING)
        error = banner_message(display["banners"], BANNER_ERROR)
        values[1:9] = [
            stats_children(display["stats_lines"]) if display["stats_lines"] else None,
            loading_class(display["loading"]),
            display["loading_message"],
            warning,
            warning is not None,
            error,
            error is not None,
            f"gb-root theme-{display['theme']}",
        ]

    download = payload.get("download")
    if download is not None:
        values[9] = dict(content=download["content"], filename=download["filename"], type=download["type"])
    return values


def preference_output(payload: Dict[str, Any]) -> Any:
    """New local-storage contents when the session changed a preference."""
    preferences = payload.get("preferences")
    return preferences if preferences is not None else dash.no_update


def register_sync_callbacks(app: dash.Dash, ctx: AppConfig) -> None:

    @app.callback(
        [Output(component_id, prop) for component_id, prop in DISPLAY_OUTPUTS]
        + [Output(widget_id, prop) for widget_id, prop, _ in WIDGET_PROPS]
        + [Output(IDs.Store.PREFERENCES, "data")],
        Input(IDs.Display.POLL, "n_intervals"),
        State(IDs.Store.SESSION_ID, "data"),
        State(IDs.Store.PREFERENCES, "data"),
    )
    def sync_page(_n_intervals, session_id, preferences):
        if not session_id:
            raise exceptions.PreventUpdate

        payload = ctx.hub.sync(session_id, preferences=preferences)
        values = (
            display_outputs(payload)
            + widget_outputs(payload["widgets"])
            + [preference_output(payload)]
        )
        if all(v is dash.no_update for v in values):
            raise exceptions.PreventUpdate
        return values

    # viewport size only changes in the browser, so read it there
    app.clientside_callback(
        """
        function(_n, current) {
            const size = [window.innerWidth, window.innerHeight];
            if (current && current[0] === size[0] && current[1] === size[1]) {
                return window.dash_clientside.no_update;
            }
            return size;
        }
        """,
        Output(IDs.Store.VIEWPORT, "data"),
        Input(IDs.Display.POLL, "n_intervals"),
        State(IDs.Store.VIEWPORT, "data"),
    )

    @app.callback(
        Output(IDs.Store.EVENT_ACK, "data", allow_duplicate=True),
        Input(IDs.Store.VIEWPORT, "data"),
        State(IDs.Store.SESSION_ID, "data"),
        State(IDs.Store.PREFERENCES, "data"),
        prevent_initial_call=True,
    )
    def resize_graph(viewport, session_id, preferences):
        if not session_id or not viewport:
            raise exceptions.PreventUpdate
        width, height = graph_size(viewport)
        logger.debug("viewport_resized", extra={"width": width, "height": height})
        ctx.hub.resize(session_id, width, height, preferences=preferences)
        return dash.no_update
