"""
Test suite for plotly previews.

Figures are built but never shown.
"""

import pytest
import numpy as np
import plotly.graph_objects as go
from orrery import StarSystem, CameraController, demo_system_document
from orrery.plotting import plot_system, add_camera_to_plot, add_body_sphere


@pytest.fixture(scope="module")
def system():
    return StarSystem(demo_system_document())


class TestPlotSystem:
    """System overview figures."""

    def test_returns_figure(self, system):
        fig = plot_system(system, elapsed_hours=24.0)
        assert isinstance(fig, go.Figure)
        assert fig.layout.title.text == "Stanton"

    def test_one_orbit_trace_per_orbiting_body(self, system):
        fig = plot_system(system, n_points=32)
        orbit_traces = [trace for trace in fig.data if trace.mode == 'lines']
        assert len(orbit_traces) == len(system.elements)
        assert all(len(trace.x) == 32 for trace in orbit_traces)

    def test_marker_traces_grouped_by_kind(self, system):
        fig = plot_system(system, show_orbits=False)
        names = [trace.name for trace in fig.data]
        assert sorted(names) == sorted(kind.value for kind in system.graph.kinds)
        assert "star" in names
        total = sum(len(trace.x) for trace in fig.data)
        assert total == len(system)

    def test_spheres(self, system):
        fig = plot_system(system, show_orbits=False, spheres=["Stanton"])
        surfaces = [trace for trace in fig.data if isinstance(trace, go.Surface)]
        assert len(surfaces) == 1
        assert "star" not in [trace.name for trace in fig.data]

    def test_empty_system(self):
        fig = plot_system(StarSystem.empty(), title="Nothing")
        assert len(fig.data) == 0
        assert fig.layout.title.text == "Nothing"


class TestHelpers:
    """Single-trace helpers."""

    def test_add_body_sphere(self, system):
        fig = go.Figure()
        body = system.snapshot(0.0)[1]
        add_body_sphere(fig, body, opacity=0.3)
        surface = fig.data[0]
        assert surface.opacity == 0.3
        assert surface.name == body.label
        x = np.asarray(surface.x)
        assert x.max() - x.min() == pytest.approx(2 * body.radius, rel=1e-2)

    def test_add_camera_to_plot(self):
        fig = go.Figure()
        state = CameraController().state
        returned = add_camera_to_plot(fig, state)
        assert returned is fig
        trace = fig.data[0]
        assert list(trace.z) == [90.0, 0.0]
        assert trace.name == "Camera"
