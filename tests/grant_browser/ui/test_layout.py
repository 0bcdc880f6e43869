from __future__ import annotations

from grant_browser.config.model import AppSettings
from grant_browser.core.ids import IDs, PRESET_BUTTONS
from grant_browser.ui.callbacks.callbacks_events import EVENT_SOURCES
from grant_browser.ui.callbacks.callbacks_sync import DISPLAY_OUTPUTS, WIDGET_PROPS
from grant_browser.ui.config import AppConfig
from grant_browser.ui.layout.build_layout import build_layout


def _component_ids(layout) -> set:
    ids = {layout.id}
    for component in layout._traverse():
        component_id = getattr(component, "id", None)
        if component_id is not None:
            ids.add(component_id)
    return ids


def test_layout_contains_every_bound_component(tmp_path):
    layout = build_layout(AppConfig(settings=AppSettings(config_root=tmp_path)))
    ids = _component_ids(layout)

    wanted = {cid for cid, _ in EVENT_SOURCES}
    wanted |= {cid for cid, _ in DISPLAY_OUTPUTS}
    wanted |= {wid for wid, _, _ in WIDGET_PROPS}
    wanted |= set(PRESET_BUTTONS)
    wanted |= {IDs.Store.SESSION_ID, IDs.Store.VIEWPORT, IDs.Display.POLL}

    assert wanted <= ids


def test_each_page_load_gets_a_new_session_id(tmp_path):
    ctx = AppConfig(settings=AppSettings(config_root=tmp_path))

    def session_id(layout):
        return next(c.data for c in layout._traverse() if getattr(c, "id", None) == IDs.Store.SESSION_ID)

    assert session_id(build_layout(ctx)) != session_id(build_layout(ctx))


def test_preferences_live_in_browser_local_storage(tmp_path):
    layout = build_layout(AppConfig(settings=AppSettings(config_root=tmp_path)))

    store = next(c for c in layout._traverse() if getattr(c, "id", None) == IDs.Store.PREFERENCES)

    assert store.storage_type == "local"
