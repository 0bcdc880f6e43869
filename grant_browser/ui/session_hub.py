from __future__ import annotations

import asyncio
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Optional, Set, TypeVar

from grant_browser.config.model import AppSettings
from grant_browser.controller.display import SCENE_GRAPH
from grant_browser.controller.theme import ThemePreference
from grant_browser.controller.visualizer import GrantVisualizer, RendererFactory
from grant_browser.controller.widgets import CLICK
from grant_browser.core.collaborators import DataStore
from grant_browser.services.export_service import ExportService
from grant_browser.services.network_renderer import NetworkRenderer
from grant_browser.services.storage import BrowserPreferenceStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

CALL_TIMEOUT = 30.0  # seconds a request thread waits for the loop
MAX_SESSIONS = 100


class EventLoopThread:
    """
    Runs one asyncio event loop on a daemon thread.

    Every controller lives on this loop; request threads hand work over with
    run(), which blocks until the coroutine finishes.
    """

    def __init__(self, name: str = "grant-browser-loop"):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> EventLoopThread:
        if not self._thread.is_alive():
            self._thread.start()
        return self

    def run(self, coro: Awaitable[T], timeout: float = CALL_TIMEOUT) -> T:
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)


@dataclass
class _Session:
    visualizer: GrantVisualizer
    ready: asyncio.Future
    preferences: BrowserPreferenceStore
    sent_display_revision: int = -1
    sent_figure_revision: int = -1
    sent_preferences_revision: int = 0
    tasks: Set[asyncio.Future] = field(default_factory=set)

    def track(self, task: asyncio.Future) -> None:
        self.tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future) -> None:
        self.tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Session task failed", exc_info=task.exception())

    def close(self) -> None:
        for task in list(self.tasks):
            task.cancel()
        if self.visualizer.controls is not None:
            self.visualizer.controls.destroy()


def _same_value(current: Any, incoming: Any) -> bool:
    if isinstance(current, (list, tuple)) and isinstance(incoming, (list, tuple)):
        return sorted(map(str, current)) == sorted(map(str, incoming))
    return current == incoming


class SessionHub:
    """
    One GrantVisualizer per browser session, all sharing the same data store.

    Methods are called from Dash request threads and hop onto the loop thread,
    so controllers are only ever touched from a single thread.

    Preferences belong to the browser: every call may carry the page's
    local-storage preferences, which seed the session's BrowserPreferenceStore
    when the session is created. Changes travel back through sync().
    """

    def __init__(
        self,
        settings: AppSettings,
        store: DataStore,
        loop_thread: EventLoopThread,
        renderer_factory: Optional[RendererFactory] = None,
        max_sessions: int = MAX_SESSIONS,
    ):
        self.settings = settings
        self.store = store
        self.loop_thread = loop_thread
        self.renderer_factory = renderer_factory or NetworkRenderer
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, _Session]" = OrderedDict()

    # ------------------------------------------------------------------
    # Session lifecycle (loop thread)
    # ------------------------------------------------------------------
    async def _session(self, session_id: str, preferences: Any = None) -> _Session:
        session = self._sessions.get(session_id)
        if session is None:
            prefs = BrowserPreferenceStore(preferences)
            visualizer = GrantVisualizer(
                self.store,
                self.renderer_factory,
                theme=ThemePreference(prefs),
                exporter=ExportService(),
                debounce_delay=self.settings.debounce_delay,
                paint_delay=self.settings.paint_delay,
                size=(self.settings.graph_width, self.settings.graph_height),
            )
            session = _Session(
                visualizer=visualizer,
                ready=asyncio.ensure_future(visualizer.initialize()),
                preferences=prefs,
            )
            self._sessions[session_id] = session
            self._evict()
            logger.info("session_created", extra={"session_id": session_id, "n_sessions": len(self._sessions)})
        else:
            self._sessions.move_to_end(session_id)
        await session.ready
        return session

    def _evict(self) -> None:
        while len(self._sessions) > self.max_sessions:
            old_id, old = self._sessions.popitem(last=False)
            old.close()
            logger.info("session_evicted", extra={"session_id": old_id})

    # ------------------------------------------------------------------
    # Request-thread API
    # ------------------------------------------------------------------
    def dispatch(
        self, session_id: str, widget_id: str, event: str, value: Any = None, preferences: Any = None
    ) -> bool:
        return self.loop_thread.run(self._dispatch(session_id, widget_id, event, value, preferences))

    async def _dispatch(self, session_id: str, widget_id: str, event: str, value: Any, preferences: Any) -> bool:
        viz = (await self._session(session_id, preferences)).visualizer
        widget = viz.widgets.get(widget_id)
        if widget is None:
            return False
        # writes pushed to the browser come straight back as events
        if event != CLICK and _same_value(widget.value, value):
            return False
        viz.dispatch(widget_id, event, value)
        return True

    def dismiss(self, session_id: str, kind: str, preferences: Any = None) -> None:
        self.loop_thread.run(self._dismiss(session_id, kind, preferences))

    async def _dismiss(self, session_id: str, kind: str, preferences: Any) -> None:
        (await self._session(session_id, preferences)).visualizer.display.dismiss(kind)

    def resize(self, session_id: str, width: int, height: int, preferences: Any = None) -> None:
        self.loop_thread.run(self._resize(session_id, width, height, preferences))

    async def _resize(self, session_id: str, width: int, height: int, preferences: Any) -> None:
        session = await self._session(session_id, preferences)
        session.track(asyncio.ensure_future(session.visualizer.handle_resize(width, height)))

    def sync(self, session_id: str, preferences: Any = None) -> Dict[str, Any]:
        return self.loop_thread.run(self._sync(session_id, preferences))

    async def _sync(self, session_id: str, preferences: Any) -> Dict[str, Any]:
        """
        Everything that changed since the previous sync for this session:
        display snapshot, widget attributes written by the controller,
        figure, preferences to store in the browser, and a pending download.
        """
        session = await self._session(session_id, preferences)
        viz = session.visualizer
        display = viz.display

        payload: Dict[str, Any] = {
            "display": None,
            "figure": None,
            "widgets": {},
            "preferences": None,
            "download": display.take_download(),
        }

        if display.revision != session.sent_display_revision:
            payload["display"] = display.snapshot()
            session.sent_display_revision = display.revision

        renderer = viz.renderer
        if renderer is not None and display.scene == SCENE_GRAPH:
            figure_revision = getattr(renderer, "revision", 0)
            if figure_revision != session.sent_figure_revision:
                figure = getattr(renderer, "figure", None)
                payload["figure"] = figure.to_dict() if hasattr(figure, "to_dict") else figure
                session.sent_figure_revision = figure_revision
        elif display.scene != SCENE_GRAPH:
            # force a resend once the graph comes back
            session.sent_figure_revision = -1

        if session.preferences.revision != session.sent_preferences_revision:
            payload["preferences"] = session.preferences.to_dict()
            session.sent_preferences_revision = session.preferences.revision

        for widget_id, attrs in viz.widgets.dirty().items():
            widget = viz.widgets.get(widget_id)
            payload["widgets"][widget_id] = {attr: getattr(widget, attr) for attr in attrs}

        return payload
