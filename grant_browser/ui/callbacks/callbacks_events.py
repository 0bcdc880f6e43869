from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Tuple

import dash
from dash import Input, Output, State, exceptions

from grant_browser.controller.display import BANNER_ERROR, BANNER_WARNING
from grant_browser.controller.widgets import CHANGE, CLICK, INPUT, SELECT, SUBMIT
from grant_browser.core.ids import IDs, PRESET_BUTTONS

if TYPE_CHECKING:
    from grant_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

# (component id, dash prop) -> (widget id, event)
EVENT_SOURCES: Dict[Tuple[str, str], Tuple[str, str]] = {
    (IDs.Control.ORG_FILTER, "value"): (IDs.Control.ORG_FILTER, INPUT),
    (IDs.Control.MATCHING_ORGS, "value"): (IDs.Control.MATCHING_ORGS, SELECT),
    (IDs.Control.MIN_AMOUNT, "value"): (IDs.Control.MIN_AMOUNT, INPUT),
    (IDs.Control.MIN_AMOUNT_INPUT, "value"): (IDs.Control.MIN_AMOUNT_INPUT, INPUT),
    (IDs.Control.MAX_ORGS, "value"): (IDs.Control.MAX_ORGS, INPUT),
    (IDs.Control.DEPTH, "value"): (IDs.Control.DEPTH, INPUT),
    (IDs.Control.COLOR_SCHEME, "value"): (IDs.Control.COLOR_SCHEME, CHANGE),
    (IDs.Control.YEAR_FILTER, "value"): (IDs.Control.YEAR_FILTER, CHANGE),
    (IDs.Control.THEME_TOGGLE, "n_clicks"): (IDs.Control.THEME_TOGGLE, CLICK),
    (IDs.Control.ZOOM_TO_FIT, "n_clicks"): (IDs.Control.ZOOM_TO_FIT, CLICK),
    (IDs.Control.EXPORT, "n_clicks"): (IDs.Control.EXPORT, CLICK),
    # Enter in any numeric field submits the controls form
    (IDs.Control.MIN_AMOUNT_INPUT, "n_submit"): (IDs.Control.FORM, SUBMIT),
    (IDs.Control.MAX_ORGS, "n_submit"): (IDs.Control.FORM, SUBMIT),
    (IDs.Control.DEPTH, "n_submit"): (IDs.Control.FORM, SUBMIT),
}
EVENT_SOURCES.update({(button_id, "n_clicks"): (button_id, CLICK) for button_id in PRESET_BUTTONS})


def resolve_events(triggered: List[Dict]) -> List[Tuple[str, str, object]]:
    """
    Translate dash.ctx.triggered entries into (widget id, event, value),
    dropping anything that is not a known event source.
    """
    events = []
    for item in triggered:
        component_id, _, prop = item.get("prop_id", "").rpartition(".")
        source = EVENT_SOURCES.get((component_id, prop))
        if source is None:
            continue
        widget_id, event = source
        events.append((widget_id, event, item.get("value")))
    return events


def register_event_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    """
    Forward browser events to the session's controller. Everything visible
    comes back through the sync poll.
    """

    @app.callback(
        Output(IDs.Store.EVENT_ACK, "data"),
        [Input(component_id, prop) for component_id, prop in EVENT_SOURCES],
        State(IDs.Store.SESSION_ID, "data"),
        State(IDs.Store.PREFERENCES, "data"),
        prevent_initial_call=True,
    )
    def forward_events(*args):
        session_id, preferences = args[-2:]
        if not session_id:
            raise exceptions.PreventUpdate

        handled = 0
        for widget_id, event, value in resolve_events(dash.ctx.triggered):
            if ctx.hub.dispatch(session_id, widget_id, event, value, preferences=preferences):
                handled += 1

        if not handled:
            raise exceptions.PreventUpdate
        return {"handled": handled}

    @app.callback(
        Output(IDs.Store.EVENT_ACK, "data", allow_duplicate=True),
        Input(IDs.Display.WARNING_BANNER, "is_open"),
        Input(IDs.Display.ERROR_BANNER, "is_open"),
        State(IDs.Store.SESSION_ID, "data"),
        State(IDs.Store.PREFERENCES, "data"),
        prevent_initial_call=True,
    )
    def dismiss_banner(_warning_open, _error_open, session_id, preferences):
        triggered = dash.ctx.triggered_id
        is_open = dash.ctx.triggered[0]["value"] if dash.ctx.triggered else True
        if not session_id or is_open:
            raise exceptions.PreventUpdate

        kind = BANNER_WARNING if triggered == IDs.Display.WARNING_BANNER else BANNER_ERROR
        ctx.hub.dismiss(session_id, kind, preferences=preferences)
        return dash.no_update
