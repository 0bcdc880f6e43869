from __future__ import annotations

import pytest

from grant_browser.core.collaborators import Charity, GraphData, GraphLink, GraphNode
from grant_browser.services.network_renderer import DARK_THEME, LIGHT_THEME, NetworkRenderer, radial_layout


def _graph() -> GraphData:
    return GraphData(
        root_id="A",
        nodes=[
            GraphNode("A", "Alpha", 0, 300.0),
            GraphNode("B", "Beta", 1, 200.0),
            GraphNode("C", "Gamma", 1, 100.0),
            GraphNode("D", "Delta", 2, 50.0),
        ],
        links=[
            GraphLink("A", "B", 200.0, 2024),
            GraphLink("A", "C", 100.0, 2024),
            GraphLink("B", "D", 50.0, 2023),
        ],
    )


def test_radial_layout_puts_root_at_origin_and_rings_by_depth():
    positions = radial_layout(_graph())

    assert positions["A"] == (0.0, 0.0)
    for node_id, ring in (("B", 1), ("C", 1), ("D", 2)):
        x, y = positions[node_id]
        assert (x * x + y * y) ** 0.5 == pytest.approx(ring)


def test_update_builds_edge_and_node_traces():
    renderer = NetworkRenderer(800, 600)
    charities = {"A": Charity("A", "Alpha Foundation")}

    renderer.update(_graph(), charities, "depth")

    edges, nodes = renderer.figure.data
    assert edges.mode == "lines"
    assert len([x for x in edges.x if x is None]) == 3
    assert list(nodes.text) == ["Alpha Foundation", "Beta", "Gamma", "Delta"]
    assert renderer.figure.layout.width == 800
    assert renderer.revision == 1


def test_amount_color_scheme_shows_scale():
    renderer = NetworkRenderer(800, 600)

    renderer.update(_graph(), {}, "amount")

    assert renderer.figure.data[1].marker.showscale is True


def test_resize_zoom_and_theme_bump_revision():
    renderer = NetworkRenderer(800, 600)
    renderer.update(_graph(), {}, "depth")

    renderer.resize(1024, 768)
    renderer.zoom_to_fit()
    renderer.set_theme(True)

    assert renderer.revision == 4
    assert renderer.figure.layout.width == 1024
    assert renderer.figure.layout.xaxis.autorange is True
    assert renderer.figure.layout.paper_bgcolor == LIGHT_THEME["paper"]
    assert renderer.figure.data[0].line.color == LIGHT_THEME["edge"]

    renderer.set_theme(False)
    assert renderer.figure.layout.paper_bgcolor == DARK_THEME["paper"]


def test_empty_graph_renders_without_error():
    renderer = NetworkRenderer(800, 600)
    renderer.update(GraphData(), {}, "amount")
    assert len(renderer.figure.data) == 2
