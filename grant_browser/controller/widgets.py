from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from grant_browser.core.filter_state import (
    DEFAULT_COLOR_SCHEME,
    DEFAULT_DEPTH,
    DEFAULT_MAX_ORGS,
    DEFAULT_MIN_AMOUNT,
    DEFAULT_SLIDER_POSITION,
)
from grant_browser.core.ids import IDs, PRESET_BUTTONS
from grant_browser.core.transforms import format_dollar_amount

logger = logging.getLogger(__name__)

Handler = Callable[["Widget", Any], None]

# event names
INPUT = "input"
CHANGE = "change"
CLICK = "click"
SELECT = "select"
SUBMIT = "submit"


@dataclass
class Widget:
    """
    One named input element of the page.

    - value: current value (text, number, list of checked values, ...)
    - options: choices for lists / checklists, as {"label", "value"} dicts
    - visible: whether the element is shown
    - placeholder: hint text for text inputs
    - busy: transient "working" marker (e.g. search pending)
    """
    id: str
    value: Any = None
    options: List[Dict[str, Any]] = field(default_factory=list)
    visible: bool = True
    placeholder: str = ""
    busy: bool = False


class WidgetSurface:
    """
    In-process model of the page's input elements.

    Controllers read and write widgets by id and attach event handlers to them.
    `emit` is how a host (browser bridge, test) reports a user event; it first
    stores the new value then calls the handlers registered for that event.
    Programmatic writes through `set_value` never fire handlers.

    Hosts that mirror the surface to a real page poll `dirty()` to find widgets
    the controller changed since the last sync.
    """

    def __init__(self, widgets: Iterable[Widget] = ()):
        self._widgets: Dict[str, Widget] = {}
        self._handlers: Dict[Tuple[str, str], List[Handler]] = {}
        self._dirty: Dict[str, Set[str]] = {}
        for widget in widgets:
            self.add(widget)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def add(self, widget: Widget) -> Widget:
        self._widgets[widget.id] = widget
        return widget

    def remove(self, widget_id: str) -> None:
        self._widgets.pop(widget_id, None)
        for key in [k for k in self._handlers if k[0] == widget_id]:
            del self._handlers[key]

    def get(self, widget_id: str) -> Optional[Widget]:
        return self._widgets.get(widget_id)

    def has(self, widget_id: str) -> bool:
        return widget_id in self._widgets

    def ids(self) -> List[str]:
        return list(self._widgets)

    def value(self, widget_id: str, default: Any = None) -> Any:
        widget = self._widgets.get(widget_id)
        return default if widget is None else widget.value

    def snapshot(self) -> Dict[str, Any]:
        """Widget id -> current value for every present widget."""
        return {wid: w.value for wid, w in self._widgets.items()}

    # ------------------------------------------------------------------
    # Programmatic writes (absent widgets are skipped)
    # ------------------------------------------------------------------
    def set_value(self, widget_id: str, value: Any) -> bool:
        widget = self._widgets.get(widget_id)
        if widget is None:
            return False
        widget.value = value
        self._mark(widget_id, "value")
        return True

    def update(self, widget_id: str, **attrs: Any) -> bool:
        widget = self._widgets.get(widget_id)
        if widget is None:
            return False
        for name, val in attrs.items():
            if not hasattr(widget, name) or name == "id":
                raise AttributeError(f"Widget has no attribute '{name}'")
            setattr(widget, name, val)
            self._mark(widget_id, name)
        return True

    def apply(self, values: Dict[str, Any]) -> None:
        for widget_id, value in values.items():
            self.set_value(widget_id, value)

    def _mark(self, widget_id: str, attr: str) -> None:
        self._dirty.setdefault(widget_id, set()).add(attr)

    def dirty(self, clear: bool = True) -> Dict[str, Set[str]]:
        """Widget id -> attributes written programmatically since the last call."""
        changed = {wid: set(attrs) for wid, attrs in self._dirty.items() if wid in self._widgets}
        if clear:
            self._dirty.clear()
        return changed

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on(self, widget_id: str, event: str, handler: Handler) -> bool:
        if widget_id not in self._widgets:
            return False
        self._handlers.setdefault((widget_id, event), []).append(handler)
        return True

    def off(self, widget_id: str, event: str, handler: Handler) -> None:
        handlers = self._handlers.get((widget_id, event), [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, widget_id: str, event: str, value: Any = None) -> int:
        """
        Report a user event. Returns the number of handlers that ran.

        Clicks carry no value; every other event stores `value` first.
        """
        widget = self._widgets.get(widget_id)
        if widget is None:
            logger.debug("Event for unknown widget ignored", extra={"widget_id": widget_id, "event": event})
            return 0
        if event != CLICK:
            widget.value = value
        handlers = list(self._handlers.get((widget_id, event), []))
        for handler in handlers:
            handler(widget, value)
        return len(handlers)


def build_page_surface(include: Optional[Iterable[str]] = None) -> WidgetSurface:
    """
    Surface holding the standard control-panel widgets with their initial values.
    `include` restricts it to a subset of ids (partially rendered pages).
    """
    start_amount = DEFAULT_MIN_AMOUNT
    widgets = [
        Widget(IDs.Control.ORG_FILTER, value="", placeholder="Enter EIN or organization name"),
        Widget(IDs.Control.MATCHING_ORGS, value=None, visible=False),
        Widget(IDs.Control.MIN_AMOUNT, value=DEFAULT_SLIDER_POSITION),
        Widget(IDs.Control.MIN_AMOUNT_INPUT, value=start_amount),
        Widget(IDs.Control.MIN_AMOUNT_DISPLAY, value=format_dollar_amount(start_amount)),
        Widget(IDs.Control.MAX_ORGS, value=DEFAULT_MAX_ORGS),
        Widget(IDs.Control.DEPTH, value=DEFAULT_DEPTH),
        Widget(IDs.Control.COLOR_SCHEME, value=DEFAULT_COLOR_SCHEME),
        Widget(IDs.Control.YEAR_FILTER, value=[]),
        Widget(IDs.Control.THEME_TOGGLE),
        Widget(IDs.Control.ZOOM_TO_FIT),
        Widget(IDs.Control.EXPORT),
        Widget(IDs.Control.FORM),
    ]
    widgets.extend(Widget(button_id) for button_id in PRESET_BUTTONS)

    if include is not None:
        wanted = set(include)
        widgets = [w for w in widgets if w.id in wanted]
    return WidgetSurface(widgets)
