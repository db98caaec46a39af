"""
Orrery: Spatial and Orbital Core for Hierarchical Star-System Maps

A Python package that turns a static snapshot of a star system (a star,
planets, moons, stations and jump points with recorded positions) into a
consistent, animatable scene: guide orbits derived from the snapshot,
closed-form Kepler propagation, and a camera controller that stays usable
from meters to hundreds of gigameters.
"""

# Configuration
from .config import config, temp_config, OrreryConfig

# Core classes
from .bodies import BodyKind, CelestialBody
from .graph import (BodyGraph, BodyGraph as Graph, MalformedGraphError,
                    EMPTY_GRAPH, load_graph, load_graph_file, load_graph_or_empty)
from .orbital_elements import OrbitalElements, OrbitalElements as OE
from .derivation import derive_elements, derive_all
from .propagation import Propagator
from .system import StarSystem, SystemState, BodySnapshot, OrbitPath, BodyChoice
from .camera import (CameraController, CameraMode, CameraState, CameraEvent,
                     FocusTarget, ZoomIntent, NumericDegeneracyError,
                     DegenerateCameraInputWarning, validate_focus_target)
from .kepler import KeplerConvergenceWarning

# Demo data
from .defaults import demo_system_document

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from orrery import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    "OrreryConfig",
    # Classes
    "BodyKind",
    "CelestialBody",
    "BodyGraph",
    "OrbitalElements",
    "Propagator",
    "StarSystem",
    "SystemState",
    "BodySnapshot",
    "OrbitPath",
    "BodyChoice",
    "CameraController",
    "CameraMode",
    "CameraState",
    "CameraEvent",
    "FocusTarget",
    "ZoomIntent",
    # Functions
    "load_graph",
    "load_graph_file",
    "load_graph_or_empty",
    "derive_elements",
    "derive_all",
    "validate_focus_target",
    "demo_system_document",
    # Errors and warnings
    "MalformedGraphError",
    "NumericDegeneracyError",
    "DegenerateCameraInputWarning",
    "KeplerConvergenceWarning",
    # Abbreviations
    "OE",
    "Graph",
    # Constants
    "EMPTY_GRAPH",
]
