'''OrbitalElements class definition

Derived two-body orbit of a body around its parent. Elements are stored as a
read-only 7-vector
    [a, e, i, Omega, w, M0, T]
with the semi-major axis in meters, angles in degrees and the period in hours,
matching the units the source system maps use for their orbital annotations.'''

import numpy as np
from .config import config
from .utils import validation_error

# element order inside the storage vector
ELEMENT_NAMES = ('semi_major_axis', 'eccentricity', 'inclination_deg',
                 'ascending_node_deg', 'argument_of_periapsis_deg',
                 'initial_mean_anomaly_deg', 'orbital_period_hours')

# short column names for tabular export
COLUMN_NAMES = ('a', 'e', 'i', 'RAAN', 'w', 'M0', 'period_h')


class OrbitalElements:
    """
    Keplerian orbit of a body relative to its parent at epoch T = 0.

    OrbitalElements is immutable; create a new instance to change a value.

    Parameters
    ----------
    elements : array-like, optional
        7-element array [a, e, i, Omega, w, M0, T]
    validate : bool, optional
        Whether to validate elements (default True)
    **kwargs
        Named parameters instead of an array: semi_major_axis, eccentricity,
        inclination_deg, ascending_node_deg, argument_of_periapsis_deg
        (default 0), initial_mean_anomaly_deg, orbital_period_hours

    Examples
    --------
    >>> OrbitalElements(semi_major_axis=22.5e9, eccentricity=0.01,
    ...                 inclination_deg=0.0, ascending_node_deg=0.0,
    ...                 initial_mean_anomaly_deg=89.4,
    ...                 orbital_period_hours=1451.0)
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, elements=None, validate=True, **kwargs):
        if elements is not None:
            if kwargs:
                raise ValueError("Provide either an elements array or named "
                                 "parameters, not both")
            self.elements = np.array(elements, dtype=float)
        elif kwargs:
            self.elements = self._from_named_params(kwargs)
        else:
            raise ValueError(
                "Must provide either:\n"
                "  - elements array [a, e, i, Omega, w, M0, T], or\n"
                f"  - named parameters {list(ELEMENT_NAMES)}"
            )
        # Ensure immutability of elements array
        self.elements.flags.writeable = False
        if validate:
            self._validate()

    # ========== VALIDATION ==========
    def _validate(self):
        """Check elements describe a closed, finite orbit."""
        if self.elements.shape != (7,):
            raise ValueError(
                f"Orbital elements must be a 7-element vector, got shape "
                f"{self.elements.shape}")
        if not np.all(np.isfinite(self.elements)):
            validation_error(f"Elements contain NaN or Inf: {self.elements}")
        a, e, i, omega, w, M0, T = self.elements
        if a <= 0:
            validation_error(f"Semi-major axis must be positive, got a={a}")
        if e < 0 or e >= 1:
            validation_error(f"Closed orbit requires 0 <= e < 1, got e={e}")
        if i < -180 or i > 180:
            validation_error(f"Inclination out of range, got {i} deg")
        if T <= 0:
            validation_error(f"Orbital period must be positive, got {T} h")

    # ========== FACTORY METHODS ==========
    @classmethod
    def from_numpy(cls, array, validate=True):
        """
        Create list of OrbitalElements from NumPy array.

        Parameters
        ----------
        array : np.ndarray
            Array of shape (n_orbits, 7)
        validate : bool, optional, defaults to True

        Returns
        -------
        list of OrbitalElements
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[1] != 7:
            raise ValueError(f"Array must have shape (n, 7), got {array.shape}")
        return [cls(row, validate=validate) for row in array]

    @classmethod
    def from_dataframe(cls, df, validate=True):
        """
        Create a name -> OrbitalElements dict from a DataFrame produced by
        ``Batch.to_dataframe``.
        """
        missing = set(COLUMN_NAMES) - set(df.columns)
        if missing:
            raise ValueError(f"DataFrame is missing columns: {sorted(missing)}")
        return {index: cls(row[list(COLUMN_NAMES)].to_numpy(dtype=float),
                           validate=validate)
                for index, row in df.iterrows()}

    # ========== PROPERTY ACCESS ==========
    @property
    def semi_major_axis(self) -> float:
        """Semi-major axis [m]"""
        return float(self.elements[0])

    @property
    def eccentricity(self) -> float:
        return float(self.elements[1])

    @property
    def inclination_deg(self) -> float:
        """Tilt of the orbital plane above the reference plane [deg]"""
        return float(self.elements[2])

    @property
    def ascending_node_deg(self) -> float:
        """Longitude of the ascending node [deg]"""
        return float(self.elements[3])

    @property
    def rotation_deg(self) -> float:
        """Alias of ascending_node_deg used by orbit guide drawing"""
        return self.ascending_node_deg

    @property
    def argument_of_periapsis_deg(self) -> float:
        return float(self.elements[4])

    @property
    def initial_mean_anomaly_deg(self) -> float:
        """Mean anomaly at epoch T = 0 [deg]"""
        return float(self.elements[5])

    @property
    def orbital_period_hours(self) -> float:
        return float(self.elements[6])

    # radian accessors for the solver
    @property
    def inclination(self) -> float:
        return float(np.deg2rad(self.elements[2]))

    @property
    def ascending_node(self) -> float:
        return float(np.deg2rad(self.elements[3]))

    @property
    def argument_of_periapsis(self) -> float:
        return float(np.deg2rad(self.elements[4]))

    @property
    def initial_mean_anomaly(self) -> float:
        return float(np.deg2rad(self.elements[5]))

    # ========== ORBITAL PROPERTIES ==========
    def mean_motion(self) -> float:
        """Mean motion n = 2*pi / T [rad/h]"""
        return 2 * np.pi / self.orbital_period_hours

    def mean_anomaly_at(self, elapsed_hours: float) -> float:
        """Mean anomaly at a time after epoch, wrapped into [0, 2*pi) [rad]"""
        M = self.initial_mean_anomaly + self.mean_motion() * elapsed_hours
        return float(np.mod(M, 2 * np.pi))

    @property
    def semi_minor_axis(self) -> float:
        """b = a*sqrt(1 - e^2) [m]"""
        return self.semi_major_axis * np.sqrt(1 - self.eccentricity**2)

    @property
    def periapsis(self) -> float:
        """Closest distance to the parent [m]"""
        return self.semi_major_axis * (1 - self.eccentricity)

    @property
    def apoapsis(self) -> float:
        """Farthest distance from the parent [m]"""
        return self.semi_major_axis * (1 + self.eccentricity)

    # ========== UTILITY METHODS ==========
    def copy(self):
        """Create a deep copy of the orbital elements"""
        return OrbitalElements(self.elements.copy(), validate=False)

    def replace(self, **kwargs) -> "OrbitalElements":
        """Copy with some named elements changed."""
        values = self.to_dict()
        unknown = set(kwargs) - set(values)
        if unknown:
            raise ValueError(f"Unknown element names: {sorted(unknown)}")
        values.update(kwargs)
        return OrbitalElements(**values)

    def as_array(self) -> np.ndarray:
        """Writable copy of the storage vector [a, e, i, Omega, w, M0, T]"""
        return self.elements.copy()

    def to_dict(self) -> dict:
        return {name: float(value) for name, value in zip(ELEMENT_NAMES, self.elements)}

    # ========== BATCH OPERATIONS ==========
    class Batch:
        """
        Batch operations on collections of OrbitalElements.

        Methods accept a list of OrbitalElements (or a name -> elements dict
        where noted) and return arrays or tables.
        """
        @staticmethod
        def semi_major_axis(orbits):
            """Get semi-major axis for multiple orbits"""
            return np.array([o.semi_major_axis for o in orbits])

        @staticmethod
        def orbital_period_hours(orbits):
            """Get orbital periods for multiple orbits"""
            return np.array([o.orbital_period_hours for o in orbits])

        @staticmethod
        def to_numpy(orbits):
            """
            Convert list of OrbitalElements to NumPy array.

            Returns
            -------
            np.ndarray
                Array of shape (n_orbits, 7)
            """
            return np.array([o.elements for o in orbits]).reshape(-1, 7)

        @staticmethod
        def to_dataframe(orbits, index=None):
            """
            Convert orbital elements to a pandas DataFrame.

            Parameters
            ----------
            orbits : list of OrbitalElements or dict of name -> OrbitalElements
                Elements to export. A dict supplies its keys as the index.
            index : array-like, optional
                Index for the DataFrame (e.g., body names).
                If None, uses dict keys or an integer index.

            Returns
            -------
            pd.DataFrame
                Columns ['a', 'e', 'i', 'RAAN', 'w', 'M0', 'period_h']

            Raises
            ------
            ValueError
                If index length doesn't match number of orbits
            """
            # pandas isn't needed unless this function is used
            try:
                import pandas as pd
            except ImportError:
                raise ImportError("pandas required for to_dataframe()")
            if isinstance(orbits, dict):
                if index is None:
                    index = pd.Index(list(orbits.keys()), name='name')
                orbits = list(orbits.values())
            # check for empty list input and return empty DataFrame
            if not orbits:
                return pd.DataFrame(columns=list(COLUMN_NAMES))
            if index is not None and len(index) != len(orbits):
                raise ValueError(
                    f"Index length ({len(index)}) must match "
                    f"number of orbits ({len(orbits)})"
                )
            data = np.array([o.elements for o in orbits])
            return pd.DataFrame(data, columns=list(COLUMN_NAMES), index=index)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        #Length of element vector (always 7)
        return 7

    def __getitem__(self, key):
        #Allow indexing like orbit[0]
        return self.elements[key]

    def __iter__(self):
        #Allow iteration over elements
        return iter(self.elements)

    def __repr__(self):
        #Machine-readable representation
        return f"OrbitalElements({self.elements.tolist()})"

    def __str__(self):
        #Human-readable representation
        a, e, i, omega, w, M0, T = self.elements
        return (f"Orbital Elements:\n"
                f"  a     = {a:16.1f} m\n"
                f"  e     = {e:16.6f}\n"
                f"  i     = {i:16.4f}°\n"
                f"  RAAN  = {omega:16.4f}°\n"
                f"  ω     = {w:16.4f}°\n"
                f"  M0    = {M0:16.4f}°\n"
                f"  T     = {T:16.4f} h")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, OrbitalElements):
            return False
        return np.allclose(self.elements, other.elements,
                           rtol=config.EQUALITY_RTOL,
                           atol=config.EQUALITY_ATOL)

    def __hash__(self):
        #Hash with rounding to match equality
        rounded = tuple(round(float(x), config.HASH_DECIMALS) for x in self.elements)
        return hash(rounded)

    # ========== STATIC METHODS ==========
    @staticmethod
    def _from_named_params(kwargs):
        """Convert named parameters to the storage vector."""
        params = dict(kwargs)
        params.setdefault('argument_of_periapsis_deg', 0.0)
        unknown = set(params) - set(ELEMENT_NAMES)
        missing = [name for name in ELEMENT_NAMES if name not in params]
        if unknown or missing:
            raise ValueError(
                f"Could not build orbital elements from parameters: "
                f"{sorted(kwargs)}\n"
                f"Required: {list(ELEMENT_NAMES)}"
                + (f"\nUnknown: {sorted(unknown)}" if unknown else "")
            )
        return np.array([params[name] for name in ELEMENT_NAMES], dtype=float)
