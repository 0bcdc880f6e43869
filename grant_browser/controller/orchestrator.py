from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Callable, List, Optional

from grant_browser.core.collaborators import DataStore, FilterResult, Renderer
from grant_browser.core.filter_state import FilterState
from .display import BANNER_ERROR, DisplayState

logger = logging.getLogger(__name__)

PAINT_DELAY = 0.05  # seconds; lets the busy overlay show before the heavy work
UPDATING_MESSAGE = "Updating visualization..."


class UpdatePhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERING = "rendering"
    ERROR = "error"


class UpdateOrchestrator:
    """
    Runs the recompute-and-render cycle for a FilterState.

    Phases: IDLE -> LOADING -> RENDERING -> IDLE, or LOADING/RENDERING -> ERROR
    -> IDLE on failure. Errors are never fatal; the next request starts again
    from LOADING.

    Ordering: every request gets a sequence number. A run that notices a newer
    request was issued (after the paint yield, or once the data store returns)
    stops without touching the display, so the most recently *issued* request
    always determines what is shown. Rapid bursts (slider drags) collapse into
    one data-store call because superseded runs bail out during the yield.
    """

    def __init__(
        self,
        store: DataStore,
        renderer: Optional[Renderer],
        display: DisplayState,
        paint_delay: float = PAINT_DELAY,
    ):
        self.store = store
        self.renderer = renderer
        self.display = display
        self.paint_delay = paint_delay

        self.phase = UpdatePhase.IDLE
        self.current_filters: Optional[FilterState] = None
        self.last_error: Optional[BaseException] = None
        self._seq = 0
        self._listeners: List[Callable[[UpdatePhase], None]] = []

    # ------------------------------------------------------------------
    # Phase bookkeeping
    # ------------------------------------------------------------------
    def on_phase_change(self, listener: Callable[[UpdatePhase], None]) -> None:
        self._listeners.append(listener)

    def _set_phase(self, phase: UpdatePhase) -> None:
        if phase is self.phase:
            return
        logger.debug("update_phase", extra={"from": self.phase.value, "to": phase.value})
        self.phase = phase
        for listener in self._listeners:
            listener(phase)

    @property
    def sequence(self) -> int:
        return self._seq

    def _is_stale(self, seq: int) -> bool:
        return seq != self._seq

    # ------------------------------------------------------------------
    # Update cycle
    # ------------------------------------------------------------------
    async def handle_update(self, filters: FilterState) -> bool:
        """
        Recompute and redraw for `filters`.

        Returns True when this request's result reached the display, False when
        it was superseded, short-circuited to the welcome scene, or failed.
        """
        self.current_filters = filters
        self._seq += 1
        seq = self._seq

        if not filters.org_filter:
            self.display.hide_loading()
            self.display.show_welcome()
            self._set_phase(UpdatePhase.IDLE)
            return False

        self._set_phase(UpdatePhase.LOADING)
        self.display.show_loading(UPDATING_MESSAGE)

        try:
            await asyncio.sleep(self.paint_delay)
            if self._is_stale(seq):
                logger.debug("update_superseded", extra={"seq": seq, "latest": self._seq})
                return False

            result = await self._filter(filters)
            if self._is_stale(seq):
                logger.debug("update_result_discarded", extra={"seq": seq, "latest": self._seq})
                return False

            self._set_phase(UpdatePhase.RENDERING)
            self._render(filters, result)

            self.display.hide_loading()
            self.display.dismiss(BANNER_ERROR)
            self._set_phase(UpdatePhase.IDLE)
            self.last_error = None
            return True

        except asyncio.CancelledError:
            if not self._is_stale(seq):
                self.display.hide_loading()
                self._set_phase(UpdatePhase.IDLE)
            raise
        except Exception as exc:
            logger.exception(
                "Update error",
                extra={"filter_state": filters.to_dict(), "seq": seq},
            )
            # a newer request owns the phase and the overlay
            if not self._is_stale(seq):
                self.last_error = exc
                self._set_phase(UpdatePhase.ERROR)
                self.display.hide_loading()
                self.display.show_error(f"Failed to update visualization: {exc}")
                self._set_phase(UpdatePhase.IDLE)
            return False

    async def _filter(self, filters: FilterState) -> FilterResult:
        """
        Coroutine stores are awaited on the loop. Plain ones run in the default
        executor so a slow recompute does not stall other sessions on the loop.
        """
        filter_data = self.store.filter_data
        if inspect.iscoroutinefunction(filter_data):
            return await filter_data(filters)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, filter_data, filters)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _render(self, filters: FilterState, result: FilterResult) -> None:
        charities = self.store.charities
        resolve = getattr(self.store, "resolve_org", None)
        org_id = resolve(filters.org_filter) if callable(resolve) else filters.org_filter
        charity = charities.get(org_id) if org_id else None
        org_name = charity.name if charity is not None else None

        self.display.update_stats(result.stats, org_name=org_name)
        if self.renderer is not None:
            self.renderer.update(result.graph, charities, filters.color_scheme)
        self.display.show_graph()

        logger.info(
            "render_done",
            extra={
                "org": filters.org_filter,
                "n_nodes": len(result.graph.nodes),
                "n_links": len(result.graph.links),
            },
        )

    async def handle_resize(self, width: int, height: int) -> bool:
        if self.renderer is not None:
            self.renderer.resize(width, height)

        if self.current_filters is not None:
            return await self.handle_update(self.current_filters)

        self.display.show_welcome()
        return False
