from __future__ import annotations

import logging

from grant_browser.core.collaborators import DataStore
from grant_browser.core.filter_state import (
    FilterState,
    clamp_depth,
    clamp_max_orgs,
    read_filter_state,
    widget_values_for,
)
from grant_browser.core.ids import IDs
from grant_browser.core.transforms import clamp_slider
from .widgets import WidgetSurface

logger = logging.getLogger(__name__)


class FilterStateModel:
    """
    Two-way binding between the widget surface and FilterState.

    read() is never cached: it looks at the widgets every time, so whatever the
    user last touched is what the next update sees. write() is the one place
    widgets are updated from a FilterState.
    """

    def __init__(self, widgets: WidgetSurface, store: DataStore):
        self.widgets = widgets
        self.store = store

    def read(self) -> FilterState:
        return read_filter_state(self.widgets.snapshot(), self.store.get_available_years)

    def write(self, state: FilterState, include_years: bool = True) -> None:
        self.widgets.apply(widget_values_for(state, include_years=include_years))

    def validate_inputs(self) -> None:
        """Clamp numeric widgets in place; junk becomes the default."""
        w = self.widgets
        if w.has(IDs.Control.MAX_ORGS):
            w.set_value(IDs.Control.MAX_ORGS, clamp_max_orgs(w.value(IDs.Control.MAX_ORGS)))
        if w.has(IDs.Control.DEPTH):
            w.set_value(IDs.Control.DEPTH, clamp_depth(w.value(IDs.Control.DEPTH)))
        if w.has(IDs.Control.MIN_AMOUNT):
            w.set_value(IDs.Control.MIN_AMOUNT, clamp_slider(w.value(IDs.Control.MIN_AMOUNT)))
