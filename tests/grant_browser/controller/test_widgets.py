from __future__ import annotations

import pytest

from grant_browser.controller.widgets import CLICK, INPUT, Widget, WidgetSurface, build_page_surface
from grant_browser.core.ids import IDs, PRESET_BUTTONS


def test_emit_stores_value_then_runs_handlers():
    surface = WidgetSurface([Widget("box", value="")])
    seen = []
    surface.on("box", INPUT, lambda w, v: seen.append((w.value, v)))

    ran = surface.emit("box", INPUT, "Ford")

    assert ran == 1
    assert seen == [("Ford", "Ford")]


def test_click_does_not_store_value():
    surface = WidgetSurface([Widget("btn", value=None)])
    surface.on("btn", CLICK, lambda w, v: None)

    surface.emit("btn", CLICK, 3)

    assert surface.value("btn") is None


def test_emit_on_unknown_widget_is_ignored():
    assert WidgetSurface().emit("nope", INPUT, "x") == 0


def test_programmatic_writes_are_tracked_per_attribute():
    surface = WidgetSurface([Widget("a"), Widget("b")])
    seen = []
    surface.on("a", INPUT, lambda w, v: seen.append(v))

    surface.set_value("a", 1)
    surface.update("b", options=[{"label": "x", "value": 1}], visible=False)

    # writes never fire handlers
    assert seen == []
    assert surface.dirty() == {"a": {"value"}, "b": {"options", "visible"}}
    assert surface.dirty() == {}


def test_update_rejects_unknown_attribute():
    surface = WidgetSurface([Widget("a")])
    with pytest.raises(AttributeError):
        surface.update("a", colour="red")


def test_writes_to_missing_widgets_are_skipped():
    surface = WidgetSurface()
    assert surface.set_value("missing", 1) is False
    assert surface.update("missing", visible=False) is False
    assert surface.on("missing", INPUT, lambda w, v: None) is False


def test_off_removes_handler():
    surface = WidgetSurface([Widget("a")])
    handler = lambda w, v: None  # noqa: E731
    surface.on("a", INPUT, handler)
    surface.off("a", INPUT, handler)

    assert surface.emit("a", INPUT, 1) == 0


def test_page_surface_defaults_and_subset():
    surface = build_page_surface()

    assert surface.value(IDs.Control.MIN_AMOUNT) == 50
    assert surface.value(IDs.Control.MIN_AMOUNT_INPUT) == 10_000
    assert surface.value(IDs.Control.MIN_AMOUNT_DISPLAY) == "$10,000"
    assert surface.get(IDs.Control.MATCHING_ORGS).visible is False
    for button_id in PRESET_BUTTONS:
        assert surface.has(button_id)

    subset = build_page_surface(include=[IDs.Control.ORG_FILTER])
    assert subset.ids() == [IDs.Control.ORG_FILTER]
