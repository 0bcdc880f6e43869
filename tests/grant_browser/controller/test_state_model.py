from __future__ import annotations

from grant_browser.controller.state_model import FilterStateModel
from grant_browser.controller.widgets import build_page_surface
from grant_browser.core.filter_state import FilterState
from grant_browser.core.ids import IDs

C = IDs.Control


def test_read_reflects_latest_widget_values(fake_store):
    model = FilterStateModel(build_page_surface(), fake_store)
    model.widgets.set_value(C.ORG_FILTER, "111")
    model.widgets.set_value(C.YEAR_FILTER, [2022])

    st = model.read()

    assert st.org_filter == "111"
    assert st.selected_years == [2022]

    model.widgets.set_value(C.DEPTH, 3)
    assert model.read().depth == 3


def test_write_can_leave_years_untouched(fake_store):
    model = FilterStateModel(build_page_surface(), fake_store)
    model.widgets.set_value(C.YEAR_FILTER, [2021])

    model.write(FilterState(min_amount=1_000_000, max_orgs=10, selected_years=[2024]), include_years=False)

    assert model.widgets.value(C.YEAR_FILTER) == [2021]
    assert model.widgets.value(C.MIN_AMOUNT_DISPLAY) == "$1,000,000"
    assert model.widgets.value(C.MAX_ORGS) == 10


def test_validate_inputs_clamps_numeric_widgets(fake_store):
    model = FilterStateModel(build_page_surface(), fake_store)
    model.widgets.set_value(C.MAX_ORGS, "0")
    model.widgets.set_value(C.DEPTH, 9)
    model.widgets.set_value(C.MIN_AMOUNT, 140)

    model.validate_inputs()

    assert model.widgets.value(C.MAX_ORGS) == 1
    assert model.widgets.value(C.DEPTH) == 5
    assert model.widgets.value(C.MIN_AMOUNT) == 100
