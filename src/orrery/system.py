'''StarSystem facade.

Owns the loaded body graph, its derived orbits and the propagator as one
immutable bundle, and turns them into the per-frame outputs the rendering
and UI layers consume (scene-unit positions and radii, orbit guide paths,
the quick-select list and camera focus targets).'''

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple, Union

import numpy as np
from .bodies import BodyKind
from .camera import FocusTarget
from .defaults import ORBIT_COLOR, ORBIT_SEGMENTS, SCALE_FACTOR
from .derivation import derive_all
from .graph import EMPTY_GRAPH, BodyGraph, load_graph, load_graph_file
from .orbital_elements import OrbitalElements
from .propagation import Propagator, ellipse_points
from .units import m_to_gm

_log = logging.getLogger(__name__)


def to_scene(meters):
    """Meters to scene units (gigameters times SCALE_FACTOR)."""
    return m_to_gm(meters) * SCALE_FACTOR


"""
Core dataclasses for the rendering collaborator.
Everything here is in scene units and read-only.
"""
@dataclass(frozen=True)
class OrbitPath:
    """
    Guide-path parametrization of one orbit.

    Attributes
    ----------
    parent_position : np.ndarray
        Focus of the ellipse (the parent's current position) [scene units]
    semi_major_axis : float
        [scene units]
    eccentricity : float
    inclination_deg : float
    rotation_deg : float
        Longitude of the ascending node [deg]
    argument_of_periapsis_deg : float
    color : str
        Guide line color
    """
    parent_position: np.ndarray
    semi_major_axis: float
    eccentricity: float
    inclination_deg: float
    rotation_deg: float
    argument_of_periapsis_deg: float
    color: str

    @classmethod
    def from_elements(cls, orbit: OrbitalElements, parent_position_m,
                      color: str) -> "OrbitPath":
        parent_position = np.array(to_scene(np.asarray(parent_position_m, dtype=float)))
        parent_position.flags.writeable = False
        return cls(
            parent_position=parent_position,
            semi_major_axis=float(to_scene(orbit.semi_major_axis)),
            eccentricity=orbit.eccentricity,
            inclination_deg=orbit.inclination_deg,
            rotation_deg=orbit.rotation_deg,
            argument_of_periapsis_deg=orbit.argument_of_periapsis_deg,
            color=color,
        )

    def points(self, n_points: int = ORBIT_SEGMENTS) -> np.ndarray:
        """Closed polyline of the ellipse, shape (n_points, 3) [scene units]."""
        if n_points < 2:
            raise ValueError(f"n_points must be at least 2, got {n_points}")
        # a throwaway element set in scene units; period does not affect shape
        shape = OrbitalElements(
            semi_major_axis=self.semi_major_axis,
            eccentricity=self.eccentricity,
            inclination_deg=self.inclination_deg,
            ascending_node_deg=self.rotation_deg,
            argument_of_periapsis_deg=self.argument_of_periapsis_deg,
            initial_mean_anomaly_deg=0.0,
            orbital_period_hours=1.0,
        )
        return self.parent_position + ellipse_points(shape, n_points)


@dataclass(frozen=True)
class BodySnapshot:
    """Resolved per-frame view of one body."""
    name: str
    label: str
    kind: BodyKind
    position: np.ndarray
    radius: float
    color: str
    orbit: Optional[OrbitPath] = None


class BodyChoice(NamedTuple):
    """Quick-select entry for the UI."""
    name: str
    label: str
    kind: BodyKind


@dataclass(frozen=True)
class SystemState:
    """One complete, consistent load: graph, derived orbits and propagator."""
    graph: BodyGraph
    elements: Mapping[str, OrbitalElements]
    propagator: Propagator

    @classmethod
    def build(cls, graph: BodyGraph) -> "SystemState":
        elements = derive_all(graph)
        return cls(graph=graph,
                   elements=MappingProxyType(elements),
                   propagator=Propagator(graph, elements))


_EMPTY_STATE = SystemState(EMPTY_GRAPH, MappingProxyType({}), Propagator(EMPTY_GRAPH, {}))


class StarSystem:
    """
    A loaded star system ready for per-frame queries.

    Parameters
    ----------
    document : Mapping or BodyGraph, optional
        System-map document (see ``load_graph``) or an already loaded
        graph. Omit for an empty system.

    Raises
    ------
    MalformedGraphError
        If the document does not describe a valid body tree

    Notes
    -----
    ``reload`` builds the replacement bundle completely before swapping a
    single reference, so a reader never sees a half-built system. If the
    rebuild fails, the previous bundle stays in place.

    Examples
    --------
    >>> system = StarSystem(demo_system_document())
    >>> frame = system.snapshot(elapsed_hours=12.0)
    >>> [body.name for body in frame][:2]
    ['Stanton', 'Stanton1']
    """
    def __init__(self, document: Union[Mapping, BodyGraph, None] = None):
        self._state = _EMPTY_STATE
        if document is not None:
            self.reload(document)

    # ========== FACTORY METHODS ==========
    @classmethod
    def empty(cls) -> "StarSystem":
        """System with no bodies."""
        return cls()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StarSystem":
        """Load a system-map JSON file."""
        return cls(load_graph_file(path))

    # ========== LOADING ==========
    def reload(self, document: Union[Mapping, BodyGraph]):
        """
        Replace the whole system.

        Raises
        ------
        MalformedGraphError
            If the new document is invalid; the current system is kept
        """
        graph = document if isinstance(document, BodyGraph) else load_graph(document)
        state = SystemState.build(graph)
        self._state = state
        _log.info("System %r ready: %d bodies, %d orbits",
                  graph.system_name, len(graph), len(state.elements))

    # ========== PROPERTY ACCESS ==========
    @property
    def state(self) -> SystemState:
        return self._state

    @property
    def graph(self) -> BodyGraph:
        return self._state.graph

    @property
    def elements(self) -> Mapping[str, OrbitalElements]:
        return self._state.elements

    @property
    def propagator(self) -> Propagator:
        return self._state.propagator

    @property
    def name(self) -> Optional[str]:
        return self._state.graph.system_name

    @property
    def is_empty(self) -> bool:
        return self._state.graph.is_empty

    # ========== FRAME OUTPUTS ==========
    def snapshot(self, elapsed_hours: float = 0.0) -> Tuple[BodySnapshot, ...]:
        """
        Every body resolved at one time, in graph order.

        Positions and radii are in scene units; the root body has no orbit.
        """
        state = self._state
        positions = state.propagator.positions_at(elapsed_hours)
        frames = []
        for body in state.graph:
            orbit = state.elements.get(body.name)
            path = None
            if orbit is not None:
                path = OrbitPath.from_elements(orbit, positions[body.parent_name],
                                               ORBIT_COLOR[body.kind])
            position = np.array(to_scene(positions[body.name]))
            position.flags.writeable = False
            frames.append(BodySnapshot(
                name=body.name,
                label=body.label,
                kind=body.kind,
                position=position,
                radius=float(to_scene(body.radius)),
                color=body.display_color,
                orbit=path,
            ))
        return tuple(frames)

    def position_at(self, name: str, elapsed_hours: float = 0.0) -> np.ndarray:
        """Position of one body [scene units]."""
        return to_scene(self._state.propagator.position_at(name, elapsed_hours))

    # ========== UI OUTPUTS ==========
    def selectable_bodies(self, kinds=None) -> Tuple[BodyChoice, ...]:
        """
        Quick-select list, in graph order.

        Parameters
        ----------
        kinds : iterable of BodyKind or str, optional
            Only list bodies of these kinds
        """
        wanted = None if kinds is None else {BodyKind.parse(kind) for kind in kinds}
        return tuple(BodyChoice(body.name, body.label, body.kind)
                     for body in self._state.graph
                     if wanted is None or body.kind in wanted)

    def focus_target_for(self, name: str, elapsed_hours: float = 0.0) -> FocusTarget:
        """
        Camera focus target for a body at a given time.

        Raises
        ------
        KeyError
            If no body has this name
        """
        body = self._state.graph[name]
        return FocusTarget(
            position=self.position_at(name, elapsed_hours),
            kind=body.kind,
            radius=float(to_scene(body.radius)),
            name=body.name,
        )

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return len(self._state.graph)

    def __contains__(self, name):
        return name in self._state.graph

    def __repr__(self):
        return f"StarSystem(name={self.name!r}, bodies={len(self)})"
