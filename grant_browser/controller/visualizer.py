from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from grant_browser.core.collaborators import DataStore, Renderer
from grant_browser.core.exceptions import ConfigError
from grant_browser.core.filter_state import FilterState
from grant_browser.services.export_service import ExportService
from .controls import Controls
from .debounce import DEBOUNCE_DELAY
from .display import DisplayState
from .orchestrator import PAINT_DELAY, UpdateOrchestrator
from .theme import ThemePreference
from .widgets import CLICK, WidgetSurface, build_page_surface

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 800

RendererFactory = Callable[[int, int], Renderer]


class GrantVisualizer:
    """
    Application bootstrap: loads the dataset, then wires renderer, controls
    and the update orchestrator together.

    Until initialize() succeeds there are no controls; a failed load leaves an
    error banner and the busy overlay hidden.
    """

    def __init__(
        self,
        store: DataStore,
        renderer_factory: RendererFactory,
        *,
        widgets: Optional[WidgetSurface] = None,
        display: Optional[DisplayState] = None,
        theme: Optional[ThemePreference] = None,
        exporter: Optional[ExportService] = None,
        debounce_delay: float = DEBOUNCE_DELAY,
        paint_delay: float = PAINT_DELAY,
        size: tuple[int, int] = (DEFAULT_WIDTH, DEFAULT_HEIGHT),
    ):
        if store is None:
            raise ConfigError("DataStore is required")

        self.store = store
        self.renderer_factory = renderer_factory
        self.widgets = widgets if widgets is not None else build_page_surface()
        self.display = display if display is not None else DisplayState()
        self.theme = theme
        self.exporter = exporter
        self.debounce_delay = debounce_delay
        self.paint_delay = paint_delay
        self.size = size

        self.renderer: Optional[Renderer] = None
        self.controls: Optional[Controls] = None
        self.orchestrator: Optional[UpdateOrchestrator] = None

    @property
    def ready(self) -> bool:
        return self.controls is not None

    @property
    def current_filters(self) -> Optional[FilterState]:
        return self.orchestrator.current_filters if self.orchestrator is not None else None

    async def initialize(self) -> bool:
        try:
            self.display.show_loading("Loading grant data...")
            await self.store.load_data()
            self.display.hide_loading()

            width, height = self.size
            self.renderer = self.renderer_factory(width, height)
            self.orchestrator = UpdateOrchestrator(
                self.store, self.renderer, self.display, paint_delay=self.paint_delay
            )
            self.controls = Controls(
                self.store,
                self.handle_update,
                self.renderer,
                widgets=self.widgets,
                display=self.display,
                theme=self.theme,
                exporter=self.exporter,
                debounce_delay=self.debounce_delay,
            )

            self.display.show_welcome()
            logger.info("visualizer_ready", extra={"n_charities": len(self.store.charities)})
            return True

        except Exception as exc:
            logger.exception("Initialization failed")
            self.display.hide_loading()
            self.display.show_error(f"Failed to initialize visualization: {exc}")
            return False

    async def handle_update(self, filters: FilterState) -> bool:
        if self.orchestrator is None:
            raise ConfigError("Visualizer is not initialized")
        return await self.orchestrator.handle_update(filters)

    async def handle_resize(self, width: int, height: int) -> bool:
        self.size = (width, height)
        if self.orchestrator is None:
            return False
        return await self.orchestrator.handle_resize(width, height)

    def dispatch(self, widget_id: str, event: str, value: Any = None) -> int:
        """
        Host entry point for a user event on a widget. Events arriving before
        initialization only update the widget value.
        """
        if self.controls is None:
            widget = self.widgets.get(widget_id)
            if widget is not None and event != CLICK:
                widget.value = value
            return 0
        return self.widgets.emit(widget_id, event, value)
