'''Plotly previews of a star system and the camera.

Quick visual checks outside the real renderer: bodies as markers (or
spheres when asked), orbit guide paths as lines, and the camera pose as a
marker with a sight line. Axes are scene units (gigameters).'''

from typing import Iterable, Optional

import numpy as np
import plotly.graph_objects as go
from .bodies import BodyKind
from .camera import CameraState
from .config import config
from .system import BodySnapshot, StarSystem


def plot_system(system: StarSystem, elapsed_hours: float = 0.0,
                n_points: Optional[int] = None, show_orbits: bool = True,
                spheres: Iterable[str] = (),
                title: Optional[str] = None) -> go.Figure:
    """
    Create a 3D plot of a system at one time.

    Parameters:
        system: Loaded StarSystem
        elapsed_hours: Simulated time to draw (default: 0)
        n_points: Points per orbit guide (default: config.DEFAULT_PLOT_POINTS)
        show_orbits: Whether to draw orbit guides (default: True)
        spheres: Names of bodies to draw as true-size spheres
        title: Figure title (default: system name)

    Returns:
        Plotly Figure object
    """
    n_points = n_points or config.DEFAULT_PLOT_POINTS
    sphere_names = set(spheres)
    frame = system.snapshot(elapsed_hours)
    fig = go.Figure()

    if show_orbits:
        for body in frame:
            if body.orbit is None:
                continue
            path = body.orbit.points(n_points)
            fig.add_trace(go.Scatter3d(
                x=path[:, 0], y=path[:, 1], z=path[:, 2],
                mode='lines',
                line=dict(color=body.orbit.color, width=2),
                opacity=config.DEFAULT_ORBIT_OPACITY,
                name=f'{body.label} orbit',
                showlegend=False,
                hoverinfo='skip'
            ))

    # one marker trace per kind keeps the legend short
    for kind in BodyKind:
        members = [body for body in frame
                   if body.kind is kind and body.name not in sphere_names]
        if not members:
            continue
        positions = np.array([body.position for body in members])
        fig.add_trace(go.Scatter3d(
            x=positions[:, 0], y=positions[:, 1], z=positions[:, 2],
            mode='markers',
            marker=dict(size=8 if kind is BodyKind.STAR else 4,
                        color=[body.color for body in members]),
            text=[body.label for body in members],
            name=kind.value,
            hovertemplate='%{text}<br>x: %{x:.3f}<br>y: %{y:.3f}<br>z: %{z:.3f}<extra></extra>'
        ))

    for body in frame:
        if body.name in sphere_names:
            add_body_sphere(fig, body)

    fig.update_layout(
        scene=dict(
            xaxis_title='X [Gm]',
            yaxis_title='Y [Gm]',
            zaxis_title='Z [Gm]',
            aspectmode='data'
        ),
        title=title or (system.name or 'Star System'),
        showlegend=True
    )
    return fig


def add_body_sphere(fig: go.Figure, body: BodySnapshot,
                    opacity: Optional[float] = None) -> go.Figure:
    """Add a body as a sphere of its scene radius."""
    _add_sphere_to_plot(fig, center=body.position, radius=body.radius,
                        color=body.color,
                        opacity=config.DEFAULT_BODY_OPACITY if opacity is None else opacity,
                        name=body.label)
    return fig


def add_camera_to_plot(fig: go.Figure, state: CameraState,
                       color: str = 'white', name: str = 'Camera') -> go.Figure:
    """
    Add the camera pose to an existing Plotly figure.

    Parameters:
        fig: Existing Plotly Figure object
        state: CameraState from CameraController.update
        color: Marker and sight-line color (default: 'white')
        name: Legend name (default: 'Camera')

    Returns:
        Updated Plotly Figure object (same object, modified in place)
    """
    line = np.vstack([state.position, state.look_at])
    fig.add_trace(go.Scatter3d(
        x=line[:, 0], y=line[:, 1], z=line[:, 2],
        mode='lines+markers',
        line=dict(color=color, width=2, dash='dash'),
        marker=dict(size=[5, 2], color=color),
        name=name,
        hovertemplate=(f'{state.mode.value}<br>near: {state.near:.2e}'
                       f'<br>far: {state.far:.2e}<extra></extra>')
    ))
    return fig


def _add_sphere_to_plot(fig, center, radius, color, opacity, name):
    """Helper to add a sphere to the plot at specified center."""
    u = np.linspace(0, 2 * np.pi, 30)
    v = np.linspace(0, np.pi, 20)

    x = center[0] + radius * np.outer(np.cos(u), np.sin(v))
    y = center[1] + radius * np.outer(np.sin(u), np.sin(v))
    z = center[2] + radius * np.outer(np.ones(np.size(u)), np.cos(v))

    fig.add_trace(go.Surface(
        x=x, y=y, z=z,
        colorscale=[[0, color], [1, color]],
        showscale=False,
        opacity=opacity,
        name=name,
        hoverinfo='name'
    ))
