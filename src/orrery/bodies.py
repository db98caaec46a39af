'''Celestial body records for the system map.

A CelestialBody is one node of the hierarchical snapshot: a name, a kind, an
absolute position in meters and the optional physical/visual attributes the
source document carries. Bodies are immutable; the graph loader builds them
and nothing mutates them afterwards.'''

import logging
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

_log = logging.getLogger(__name__)


# define an enumerated list of body kinds
class BodyKind(Enum):
    STAR = 'star'
    PLANET = 'planet'
    MOON = 'moon'
    STATION = 'station'
    OUTPOST = 'outpost'
    JUMP_POINT = 'jump_point'
    LAGRANGE = 'lagrange'

    @classmethod
    def parse(cls, raw) -> "BodyKind":
        """
        Convert a source-document type string (or a BodyKind) to a BodyKind.

        Several spellings appear in exported system maps; unknown types fall
        back to STATION so a single odd marker does not sink the whole load.
        """
        if isinstance(raw, BodyKind):
            return raw
        if raw is None:
            _log.warning("Body without a type, treating as station")
            return cls.STATION
        if not isinstance(raw, str):
            raise TypeError(f"kind must be BodyKind or str, got {type(raw)}")
        type_map = {
            'star': cls.STAR,
            'planet': cls.PLANET,
            'moon': cls.MOON,
            'station': cls.STATION,
            'outpost': cls.OUTPOST,
            'city': cls.OUTPOST,
            'gateway': cls.JUMP_POINT,
            'jumppoint': cls.JUMP_POINT,
            'jump_point': cls.JUMP_POINT,
            'lagrange': cls.LAGRANGE,
            'orbital_marker': cls.LAGRANGE,
        }
        key = raw.strip().lower()
        if key in type_map:
            return type_map[key]
        _log.warning("Unknown body type '%s', treating as station", raw)
        return cls.STATION

    @property
    def is_star_class(self) -> bool:
        return self is BodyKind.STAR

    @property
    def has_nominal_size(self) -> bool:
        """Kinds drawn at a fixed size instead of a measured diameter."""
        return self in (BodyKind.STATION, BodyKind.OUTPOST,
                        BodyKind.JUMP_POINT, BodyKind.LAGRANGE)


@dataclass(frozen=True)
class CelestialBody:
    """
    Immutable node of the system map.

    Attributes
    ----------
    name : str
        Unique, stable identifier (e.g. ``'OOC_Stanton_4_Microtech'``)
    label : str
        Display name; defaults to ``name``
    kind : BodyKind
        Body classification
    position : np.ndarray
        Absolute position [m], read-only 3-vector in the snapshot frame
    diameter : float, optional
        Physical diameter [m]; absent for stations and jump points
    color : str, optional
        Hex color from the source document
    parent_name : str, optional
        Name of the body this one orbits; None only for the root
    children : tuple of str
        Names of the bodies orbiting this one, in document order
    destination : str, optional
        Target system of a jump point
    description : str, optional
        Free text from the source document
    """
    name: str
    kind: BodyKind
    position: np.ndarray
    label: Optional[str] = None
    diameter: Optional[float] = None
    color: Optional[str] = None
    parent_name: Optional[str] = None
    children: Tuple[str, ...] = field(default_factory=tuple)
    destination: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        #Validate parameters
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Body name must be a non-empty string, got {self.name!r}")
        position = np.array(self.position, dtype=float)
        if position.shape != (3,):
            raise ValueError(
                f"Position of '{self.name}' must be a 3-vector, got shape {position.shape}")
        if not np.all(np.isfinite(position)):
            raise ValueError(f"Position of '{self.name}' contains NaN or Inf: {position}")
        if self.diameter is not None and not (np.isfinite(self.diameter) and self.diameter > 0):
            raise ValueError(
                f"Diameter of '{self.name}' must be positive, got {self.diameter}")
        position.flags.writeable = False
        # frozen dataclass, so bypass __setattr__ for the normalized fields
        object.__setattr__(self, 'position', position)
        object.__setattr__(self, 'kind', BodyKind.parse(self.kind))
        object.__setattr__(self, 'children', tuple(self.children))
        if self.label is None:
            object.__setattr__(self, 'label', self.name)

    # ========== DERIVED PROPERTIES ==========
    @property
    def is_root(self) -> bool:
        return self.parent_name is None

    @property
    def effective_diameter(self) -> float:
        """Diameter [m], or the kind's nominal size when none was given."""
        if self.diameter is not None:
            return float(self.diameter)
        from .defaults import NOMINAL_DIAMETER
        return NOMINAL_DIAMETER[self.kind]

    @property
    def radius(self) -> float:
        """Radius [m] (half of effective_diameter)"""
        return self.effective_diameter / 2

    @property
    def display_color(self) -> str:
        """Document color, or the kind's default color."""
        if self.color:
            return self.color
        from .defaults import KIND_COLOR
        return KIND_COLOR[self.kind]

    # ========== SPECIAL METHODS ==========
    def __eq__(self, other):
        if not isinstance(other, CelestialBody):
            return NotImplemented
        return (self.name == other.name and
                self.kind == other.kind and
                np.array_equal(self.position, other.position) and
                self.label == other.label and
                self.diameter == other.diameter and
                self.color == other.color and
                self.parent_name == other.parent_name and
                self.children == other.children and
                self.destination == other.destination and
                self.description == other.description)

    def __hash__(self):
        return hash((self.name, self.kind, tuple(self.position.tolist())))

    def __repr__(self):
        parent = f", parent='{self.parent_name}'" if self.parent_name else ""
        return f"CelestialBody('{self.name}', {self.kind.value}{parent})"
