from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional, Set, Tuple

from grant_browser.core.collaborators import DataStore, Renderer
from grant_browser.core.exceptions import ConfigError, UnknownPresetError
from grant_browser.core.filter_state import FilterState, clamp_amount, parse_int
from grant_browser.core.ids import IDs, PRESET_BUTTONS
from grant_browser.core.presets import build_preset_state
from grant_browser.core.transforms import dollars_to_slider, format_dollar_amount, slider_to_dollars
from grant_browser.services.export_service import ExportService
from .debounce import DEBOUNCE_DELAY, Debouncer
from .display import DisplayState
from .state_model import FilterStateModel
from .theme import ThemePreference
from .widgets import CHANGE, CLICK, INPUT, SELECT, SUBMIT, Handler, Widget, WidgetSurface

logger = logging.getLogger(__name__)

SEARCH_PLACEHOLDER = "Enter EIN or organization name"
RECENT_YEAR_WINDOW = 2

UpdateCallback = Callable[[FilterState], Optional[Awaitable[Any]]]


class Controls:
    """
    Binds the control-panel widgets to filter-state updates.

    One handler per widget; each one mutates widgets as needed and asks
    `on_update` to recompute with a freshly read FilterState:

    - organization search: debounced (300 ms from the last keystroke)
    - organization pick, amount slider/entry, max-orgs, depth, color scheme,
      year checkboxes: immediate
    - presets: rewrite the widgets from the preset's FilterState, one update

    Widgets missing from the surface are skipped, so a partially rendered page
    still gets whatever controls it has.

    `on_update` may return an awaitable (e.g. UpdateOrchestrator.handle_update);
    it is scheduled on the running loop and tracked until `drain()`.
    """

    def __init__(
        self,
        store: DataStore,
        on_update: UpdateCallback,
        renderer: Optional[Renderer] = None,
        *,
        widgets: WidgetSurface,
        display: Optional[DisplayState] = None,
        theme: Optional[ThemePreference] = None,
        exporter: Optional[ExportService] = None,
        debounce_delay: float = DEBOUNCE_DELAY,
        today: Callable[[], date] = date.today,
    ):
        if store is None:
            raise ConfigError("DataStore is required")
        if on_update is None or not callable(on_update):
            raise ConfigError("on_update callback is required and must be callable")

        self.store = store
        self.on_update = on_update
        self.renderer = renderer
        self.widgets = widgets
        self.display = display if display is not None else DisplayState()
        self.theme = theme
        self.exporter = exporter
        self._today = today

        self.model = FilterStateModel(widgets, store)
        self._search_debounce = Debouncer(debounce_delay)
        self._submit_debounce = Debouncer(debounce_delay)
        self._listeners: List[Tuple[str, str, Handler]] = []
        self._tasks: Set[asyncio.Future] = set()

        self.setup_event_listeners()
        self.setup_input_validation()
        self.setup_theme_toggle()
        self.setup_buttons()
        self.setup_filter_presets()
        self.setup_year_checkboxes()

    # ------------------------------------------------------------------
    # Listener bookkeeping
    # ------------------------------------------------------------------
    def add_listener(self, widget_id: str, event: str, handler: Handler) -> bool:
        if not self.widgets.on(widget_id, event, handler):
            logger.debug("Widget missing; binding skipped", extra={"widget_id": widget_id, "event": event})
            return False
        self._listeners.append((widget_id, event, handler))
        return True

    def destroy(self) -> None:
        for widget_id, event, handler in self._listeners:
            self.widgets.off(widget_id, event, handler)
        self._listeners.clear()
        self._search_debounce.cancel()
        self._submit_debounce.cancel()

    @property
    def bindings(self) -> List[Tuple[str, str]]:
        return [(widget_id, event) for widget_id, event, _ in self._listeners]

    # ------------------------------------------------------------------
    # Update requests
    # ------------------------------------------------------------------
    def get_filters(self) -> FilterState:
        return self.model.read()

    def request_update(self) -> FilterState:
        filters = self.model.read()
        result = self.on_update(filters)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)
        return filters

    def _task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Update task failed", exc_info=task.exception())

    def trigger_update(self) -> None:
        """Debounced update request (form submit)."""
        self._submit_debounce.schedule(self.request_update)

    async def drain(self) -> None:
        """Wait for every update task scheduled so far."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Input bindings
    # ------------------------------------------------------------------
    def setup_event_listeners(self) -> None:
        c = IDs.Control
        self.add_listener(c.ORG_FILTER, INPUT, self._on_search_input)
        self.add_listener(c.MATCHING_ORGS, SELECT, self._on_org_selected)

        # the pair only makes sense with its label
        if self.widgets.has(c.MIN_AMOUNT) and self.widgets.has(c.MIN_AMOUNT_DISPLAY):
            self.add_listener(c.MIN_AMOUNT, INPUT, self._on_slider_input)
            self.add_listener(c.MIN_AMOUNT_INPUT, INPUT, self._on_amount_input)

        self.add_listener(c.MAX_ORGS, INPUT, self._on_numeric_input)
        self.add_listener(c.DEPTH, INPUT, self._on_numeric_input)
        self.add_listener(c.COLOR_SCHEME, CHANGE, lambda _w, _v: self.request_update())
        self.add_listener(c.YEAR_FILTER, CHANGE, lambda _w, _v: self.request_update())

    def _on_search_input(self, widget: Widget, _value: Any) -> None:
        self.widgets.update(widget.id, busy=True)
        self._search_debounce.schedule(self._run_search)

    def _run_search(self) -> None:
        search_id = IDs.Control.ORG_FILTER
        value = str(self.widgets.value(search_id) or "").strip()

        if not value:
            self.widgets.update(search_id, placeholder=SEARCH_PLACEHOLDER, busy=False)
            self.update_org_search_results([])
            return

        try:
            matches = self.store.search_organizations(value)
        except Exception as exc:
            logger.exception("Organization search failed", extra={"query": value})
            self.update_org_search_results([])
            self.display.show_error(f"Organization search failed: {exc}")
            return
        finally:
            self.widgets.update(search_id, busy=False)

        self.update_org_search_results(matches)
        self.setup_year_checkboxes(value)
        self.request_update()

    def _on_org_selected(self, _widget: Widget, value: Any) -> None:
        if not value:
            return
        org = str(value)
        self.widgets.set_value(IDs.Control.ORG_FILTER, org)
        self.widgets.update(IDs.Control.MATCHING_ORGS, visible=False)
        self.setup_year_checkboxes(org)
        self.request_update()

    def _on_slider_input(self, _widget: Widget, value: Any) -> None:
        dollars = slider_to_dollars(value)
        self.widgets.set_value(IDs.Control.MIN_AMOUNT_DISPLAY, format_dollar_amount(dollars))
        self.widgets.set_value(IDs.Control.MIN_AMOUNT_INPUT, dollars)
        self.request_update()

    def _on_amount_input(self, _widget: Widget, value: Any) -> None:
        parsed = parse_int(value)
        dollars = clamp_amount(parsed if parsed is not None else 0)
        self.widgets.set_value(IDs.Control.MIN_AMOUNT_DISPLAY, format_dollar_amount(dollars))
        self.widgets.set_value(IDs.Control.MIN_AMOUNT, dollars_to_slider(dollars))
        self.request_update()

    def _on_numeric_input(self, _widget: Widget, _value: Any) -> None:
        self.validate_inputs()
        self.request_update()

    def update_org_search_results(self, matches) -> None:
        results_id = IDs.Control.MATCHING_ORGS
        if not self.widgets.has(results_id):
            return
        options = [{"label": m.label, "value": m.id} for m in matches]
        self.widgets.update(results_id, options=options, visible=bool(options), value=None)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_inputs(self) -> None:
        self.model.validate_inputs()

    def setup_input_validation(self) -> None:
        self.validate_inputs()
        self.add_listener(IDs.Control.FORM, SUBMIT, self._on_submit)

    def _on_submit(self, _widget: Widget, _value: Any) -> None:
        self.validate_inputs()
        self.trigger_update()

    # ------------------------------------------------------------------
    # Year checkboxes
    # ------------------------------------------------------------------
    def default_year_state(self, year: int) -> bool:
        return year >= self._today().year - RECENT_YEAR_WINDOW

    def setup_year_checkboxes(self, current_org: str = "") -> None:
        """
        Rebuild the year checklist for `current_org` ("" = whole dataset) with
        recent years pre-checked. Does not request an update by itself.
        """
        year_id = IDs.Control.YEAR_FILTER
        if not self.widgets.has(year_id):
            return
        try:
            years = sorted(self.store.get_available_years(current_org), reverse=True)
        except Exception:
            logger.exception("Error setting up year checkboxes", extra={"org": current_org})
            return

        self.widgets.update(
            year_id,
            options=[{"label": str(y), "value": y} for y in years],
            value=[y for y in years if self.default_year_state(y)],
            visible=True,
        )

    def update_selected_years(self, selected_years: List[int]) -> None:
        wanted = set(selected_years)
        widget = self.widgets.get(IDs.Control.YEAR_FILTER)
        if widget is None:
            return
        available = [opt["value"] for opt in widget.options]
        self.widgets.set_value(IDs.Control.YEAR_FILTER, [y for y in available if y in wanted])

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------
    def setup_filter_presets(self) -> None:
        for button_id, preset in PRESET_BUTTONS.items():
            self.add_listener(button_id, CLICK, lambda _w, _v, name=preset: self.apply_preset(name))

    def apply_preset(self, name: str) -> Optional[FilterState]:
        """
        Apply preset `name`: keep the organization, overwrite the other widgets
        and issue one update. Unknown names are logged and ignored.
        """
        current = self.model.read()
        try:
            years = self.store.get_available_years(current.org_filter)
            state = build_preset_state(name, current, years)
        except UnknownPresetError:
            logger.warning("Unknown preset ignored", extra={"preset": name})
            return None

        # years the preset leaves alone keep their checkbox state, including "none checked"
        years_changed = state.selected_years != current.selected_years
        self.model.write(state, include_years=False)
        if years_changed:
            self.update_selected_years(state.selected_years)

        logger.info("preset_applied", extra={"preset": name, "org": state.org_filter})
        self.request_update()
        return state

    # ------------------------------------------------------------------
    # Theme, zoom, export
    # ------------------------------------------------------------------
    def setup_theme_toggle(self) -> None:
        if self.theme is not None:
            self.display.set_theme(self.theme.load())
            self._apply_renderer_theme()
        self.add_listener(IDs.Control.THEME_TOGGLE, CLICK, self._on_theme_toggle)

    def _on_theme_toggle(self, _widget: Widget, _value: Any) -> None:
        if self.theme is None:
            return
        self.display.set_theme(self.theme.toggle())
        self._apply_renderer_theme()

    def _apply_renderer_theme(self) -> None:
        set_theme = getattr(self.renderer, "set_theme", None)
        if callable(set_theme):
            set_theme(self.display.theme == "light")

    def setup_buttons(self) -> None:
        self.add_listener(IDs.Control.ZOOM_TO_FIT, CLICK, lambda _w, _v: self.zoom_to_fit())
        self.add_listener(IDs.Control.EXPORT, CLICK, lambda _w, _v: self.export_visualization())

    def zoom_to_fit(self) -> None:
        zoom = getattr(self.renderer, "zoom_to_fit", None)
        if callable(zoom):
            zoom()

    def export_visualization(self) -> None:
        if self.exporter is None:
            logger.error("No exporter configured")
            return
        figure = getattr(self.renderer, "figure", None)
        bundle = self.exporter.build(figure, self.model.read(), self.display.last_stats)
        self.display.offer_download(bundle.filename, bundle.content, bundle.mime_type)
