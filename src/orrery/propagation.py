'''Time-based position propagation over the body graph.

A body's position at elapsed time T is its parent's position at T plus its
own Kepler offset, so positions are resolved recursively up the parent
chain. Each query memoizes the chain it walks; nothing is cached between
queries, so any T may be asked for in any order.'''

from typing import Dict, Iterable, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from .bodies import CelestialBody
from .defaults import ORBIT_SEGMENTS
from .graph import BodyGraph
from .kepler import (orbital_plane_to_cartesian, rotate_to_reference_frame,
                     solve_keplers_equation, true_anomaly_from_eccentric)
from .orbital_elements import OrbitalElements


class Propagator:
    """
    Closed-form positions of every body at any elapsed time.

    Parameters
    ----------
    graph : BodyGraph
        Validated body graph
    elements : Mapping[str, OrbitalElements]
        Derived orbits, keyed by body name. Bodies without an entry (the
        root, at minimum) stay at their recorded position.

    Examples
    --------
    >>> prop = Propagator(graph, derive_all(graph))
    >>> prop.position_at('Stanton2', elapsed_hours=24.0)
    array([...])
    """
    def __init__(self, graph: BodyGraph, elements: Mapping[str, OrbitalElements]):
        unknown = [name for name in elements if name not in graph]
        if unknown:
            raise KeyError(f"Elements given for bodies not in the graph: {unknown}")
        self._graph = graph
        self._elements = dict(elements)

    @property
    def graph(self) -> BodyGraph:
        return self._graph

    @property
    def elements(self) -> Dict[str, OrbitalElements]:
        return dict(self._elements)

    def elements_for(self, name: str) -> Optional[OrbitalElements]:
        return self._elements.get(name)

    # ========== POSITIONS ==========
    def position_at(self, name: str, elapsed_hours: float) -> np.ndarray:
        """
        Absolute position of a body [m].

        Parameters
        ----------
        name : str
            Body name
        elapsed_hours : float
            Simulated hours since the snapshot epoch (any real value)

        Returns
        -------
        np.ndarray
            Position 3-vector [m]

        Raises
        ------
        KeyError
            If no body has this name
        """
        return self._resolve(name, float(elapsed_hours), {}).copy()

    def compute_position(self, body: CelestialBody, elapsed_hours: float) -> np.ndarray:
        """Same as position_at, taking the body record itself."""
        return self.position_at(body.name, elapsed_hours)

    def positions_at(self, elapsed_hours: float) -> Dict[str, np.ndarray]:
        """Positions of every body at one time, sharing one memo table."""
        t = float(elapsed_hours)
        cache: Dict[str, np.ndarray] = {}
        return {name: self._resolve(name, t, cache).copy() for name in self._graph.names}

    def relative_position(self, name: str, elapsed_hours: float) -> np.ndarray:
        """Position relative to the parent's position at the same time [m]."""
        t = float(elapsed_hours)
        cache: Dict[str, np.ndarray] = {}
        position = self._resolve(name, t, cache)
        parent = self._graph.parent_of(name)
        if parent is None:
            return np.zeros(3)
        return position - self._resolve(parent.name, t, cache)

    def distance_between(self, first: str, second: str, elapsed_hours: float) -> float:
        """Straight-line distance between two bodies [m]."""
        t = float(elapsed_hours)
        cache: Dict[str, np.ndarray] = {}
        return float(np.linalg.norm(self._resolve(first, t, cache) -
                                    self._resolve(second, t, cache)))

    def _resolve(self, name: str, t: float, cache: Dict[str, np.ndarray]) -> np.ndarray:
        if name in cache:
            return cache[name]
        body = self._graph[name]
        orbit = self._elements.get(name)
        parent = self._graph.parent_of(name)
        if orbit is None or parent is None:
            position = np.array(body.position, dtype=float)
        else:
            position = self._resolve(parent.name, t, cache) + _kepler_offset(orbit, t)
        cache[name] = position
        return position

    # ========== SAMPLING ==========
    def sample_orbit(self, name: str, n_points: int = ORBIT_SEGMENTS,
                     elapsed_hours: float = 0.0) -> np.ndarray:
        """
        Closed guide path of a body's orbit around its parent.

        Points are spaced evenly in true anomaly; the last point repeats the
        first so the path can be drawn as one closed line.

        Returns
        -------
        np.ndarray
            Array of shape (n_points, 3) [m], centred on the parent's
            position at ``elapsed_hours``

        Raises
        ------
        ValueError
            If the body has no orbit or n_points < 2
        """
        if n_points < 2:
            raise ValueError(f"n_points must be at least 2, got {n_points}")
        orbit = self._elements.get(name)
        parent = self._graph.parent_of(name)
        if orbit is None or parent is None:
            raise ValueError(f"Body '{name}' has no orbit")
        center = self._resolve(parent.name, float(elapsed_hours), {})
        return center + ellipse_points(orbit, n_points)

    def track(self, name: str, times: Iterable[float]) -> np.ndarray:
        """Positions of one body over a sequence of times, shape (n, 3) [m]."""
        return np.array([self._resolve(name, float(t), {}) for t in times]).reshape(-1, 3)

    def to_dataframe(self, times: Sequence[float],
                     names: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """
        Export positions over time to a long-form DataFrame.

        Parameters
        ----------
        times : sequence of float
            Elapsed hours to evaluate
        names : sequence of str, optional
            Bodies to include (default: all, in graph order)

        Returns
        -------
        pd.DataFrame
            Columns ['time_h', 'name', 'x', 'y', 'z'], one row per
            (time, body) pair
        """
        times = np.asarray(times, dtype=float).ravel()
        names = list(self._graph.names if names is None else names)
        rows = []
        for t in times:
            cache: Dict[str, np.ndarray] = {}
            for name in names:
                x, y, z = self._resolve(name, float(t), cache)
                rows.append((float(t), name, x, y, z))
        return pd.DataFrame(rows, columns=['time_h', 'name', 'x', 'y', 'z'])

    def __repr__(self):
        return (f"Propagator(system={self._graph.system_name!r}, "
                f"orbits={len(self._elements)})")


def ellipse_points(orbit: OrbitalElements, n_points: int) -> np.ndarray:
    """
    Points of an orbit ellipse relative to its focus, evenly spaced in true
    anomaly from periapsis round to periapsis again.

    Returns
    -------
    np.ndarray
        Array of shape (n_points, 3), same length unit as the semi-major axis
    """
    anomalies = np.linspace(0.0, 2*np.pi, n_points)
    points = [rotate_to_reference_frame(
                  *orbital_plane_to_cartesian(orbit.semi_major_axis,
                                              orbit.eccentricity, nu),
                  orbit.inclination, orbit.ascending_node,
                  orbit.argument_of_periapsis)
              for nu in anomalies]
    return np.array(points).reshape(-1, 3)


def _kepler_offset(orbit: OrbitalElements, elapsed_hours: float) -> np.ndarray:
    """Offset from the parent at a given time [m]."""
    M = orbit.mean_anomaly_at(elapsed_hours)
    E = solve_keplers_equation(M, orbit.eccentricity)
    nu = true_anomaly_from_eccentric(E, orbit.eccentricity)
    x, y = orbital_plane_to_cartesian(orbit.semi_major_axis, orbit.eccentricity, nu)
    return np.array(rotate_to_reference_frame(x, y, orbit.inclination,
                                              orbit.ascending_node,
                                              orbit.argument_of_periapsis))
