"""
Global Configuration for Orrery Package
=======================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, the orbital-element placeholders used when
deriving orbits from a single position snapshot, camera behaviour and default
plotting options.

Examples
--------
View current configuration:

>>> import orrery
>>> print(orrery.config)

Modify settings:

>>> orrery.config.PLACEHOLDER_ECCENTRICITY = 0.05  # More elliptic guide orbits
>>> orrery.config.ZOOM_BASE_SPEED = 2.0  # Slower zoom

Reset to defaults:

>>> orrery.config.reset()

Temporarily modify settings:

>>> with orrery.temp_config(KEPLER_MAX_ITER=5):
...     # Looser solver for this block only
...     propagator.positions_at(100.0)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset. Orbital elements
already derived are not recomputed; reload the system to apply new
derivation settings.
"""

from dataclasses import dataclass
from contextlib import contextmanager
from .defaults import FOCUS_ANIMATION_DURATION


@dataclass
class OrreryConfig:
    """
    Global configuration for Orrery package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-9 (elements carry meters and degrees)
    SNAP_TO_EQUATORIAL_M : float
        Height above the parent's reference plane [m] below which a derived
        orbit is treated as equatorial and its node is placed on the epoch
        azimuth. The dropped height is the largest epoch position error
        this can cause.
        Default: 1e-3
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    KEPLER_TOLERANCE : float
        Newton-Raphson stopping threshold on the eccentric anomaly step [rad].
        Default: 1e-10
    KEPLER_MAX_ITER : int
        Iteration cap for the Kepler solver.
        Default: 30
    KEPLER_HIGH_ECCENTRICITY : float
        Above this eccentricity the solver starts from E = pi.
        Default: 0.8
    PLACEHOLDER_ECCENTRICITY : float
        Eccentricity assigned to every derived orbit. A single position sample
        cannot constrain it.
        Default: 0.01
    STAR_DENSITY : float
        Density heuristic for star-class parents [kg/m^3].
        Default: 1400.0
    BODY_DENSITY : float
        Density heuristic for every other parent [kg/m^3].
        Default: 5500.0
    TRANSITION_DURATION : float
        Camera focus transition length [s].
        Default: 1.5
    OVERVIEW_HEIGHT : float
        Overview camera height above the origin [scene units].
        Default: 90.0
    OVERVIEW_MIN_HEIGHT : float
        Lowest overview camera height above the reference plane.
        Default: 10.0
    MIN_DISTANCE_FACTOR : float
        Camera never gets closer to the focus than this many radii.
        Default: 1.1
    ZOOM_BASE_SPEED : float
        Zoom speed scale [1/s]; multiplied by distance and frame time.
        Default: 5.0
    ZOOM_MIN_STEP, ZOOM_MAX_STEP : float
        Clamp range for one zoom step [scene units].
        Default: 1e-4, 10.0
    NEAR_PLANE_FLOOR : float
        Absolute minimum near clip distance [scene units] (1e-9 Gm, 1 m).
        Default: 1e-9
    FAR_PLANE_FLOOR : float
        Absolute minimum far clip distance [scene units].
        Default: 100.0
    FAR_PLANE_DISTANCE_MULTIPLE : float
        Far plane is at least this multiple of the focus distance.
        Default: 10.0
    SYSTEM_EXTENT : float
        Radius of the whole system [scene units] the far plane must contain
        when viewed from far away.
        Default: 150.0
    DEFAULT_PLOT_POINTS : int
        Default number of points for orbit guide sampling.
        Default: 128
    DEFAULT_BODY_OPACITY : float
        Default opacity for body spheres in preview plots (0.0 to 1.0).
        Default: 0.8
    DEFAULT_ORBIT_OPACITY : float
        Default opacity for orbit guide lines in preview plots.
        Default: 0.7
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-9

    # Snapping behavior thresholds
    SNAP_TO_EQUATORIAL_M: float = 1e-3

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Kepler solver
    KEPLER_TOLERANCE: float = 1e-10
    KEPLER_MAX_ITER: int = 30
    KEPLER_HIGH_ECCENTRICITY: float = 0.8

    # Orbit derivation placeholders
    PLACEHOLDER_ECCENTRICITY: float = 0.01
    STAR_DENSITY: float = 1400.0
    BODY_DENSITY: float = 5500.0

    # Camera
    TRANSITION_DURATION: float = FOCUS_ANIMATION_DURATION
    OVERVIEW_HEIGHT: float = 90.0
    OVERVIEW_MIN_HEIGHT: float = 10.0
    MIN_DISTANCE_FACTOR: float = 1.1
    ZOOM_BASE_SPEED: float = 5.0
    ZOOM_MIN_STEP: float = 1e-4
    ZOOM_MAX_STEP: float = 10.0
    NEAR_PLANE_FLOOR: float = 1e-9
    FAR_PLANE_FLOOR: float = 100.0
    FAR_PLANE_DISTANCE_MULTIPLE: float = 10.0
    SYSTEM_EXTENT: float = 150.0

    # Plotting defaults
    DEFAULT_PLOT_POINTS: int = 128
    DEFAULT_BODY_OPACITY: float = 0.8
    DEFAULT_ORBIT_OPACITY: float = 0.7

    @property
    def HASH_DECIMALS(self) -> int:
        """
        Compute hash rounding decimals from equality tolerance.

        The hash rounding must be coarse enough that if two values
        are equal (within EQUALITY_ATOL), they hash to the same value.

        Formula: HASH_DECIMALS = -floor(log10(ATOL)) - 2
        The -2 provides safety margin (2 orders of magnitude).

        Returns
        -------
        int
            Number of decimal places for hash rounding
        """
        import math
        magnitude = -math.floor(math.log10(self.EQUALITY_ATOL))
        return max(magnitude - 2, 0)  # At least 0 decimals

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import orrery
        >>> orrery.config.KEPLER_MAX_ITER = 5  # Modify
        >>> orrery.config.reset()  # Back to defaults
        >>> orrery.config.KEPLER_MAX_ITER
        30
        """
        defaults = OrreryConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["OrreryConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    HASH_DECIMALS = {self.HASH_DECIMALS}")
        lines.append(f"    SNAP_TO_EQUATORIAL_M = {self.SNAP_TO_EQUATORIAL_M}")
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_TOLERANCE = {self.KEPLER_TOLERANCE}")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append(f"    KEPLER_HIGH_ECCENTRICITY = {self.KEPLER_HIGH_ECCENTRICITY}")
        lines.append("  Orbit Derivation:")
        lines.append(f"    PLACEHOLDER_ECCENTRICITY = {self.PLACEHOLDER_ECCENTRICITY}")
        lines.append(f"    STAR_DENSITY = {self.STAR_DENSITY}")
        lines.append(f"    BODY_DENSITY = {self.BODY_DENSITY}")
        lines.append("  Camera:")
        lines.append(f"    TRANSITION_DURATION = {self.TRANSITION_DURATION}")
        lines.append(f"    OVERVIEW_HEIGHT = {self.OVERVIEW_HEIGHT}")
        lines.append(f"    OVERVIEW_MIN_HEIGHT = {self.OVERVIEW_MIN_HEIGHT}")
        lines.append(f"    MIN_DISTANCE_FACTOR = {self.MIN_DISTANCE_FACTOR}")
        lines.append(f"    ZOOM_BASE_SPEED = {self.ZOOM_BASE_SPEED}")
        lines.append(f"    ZOOM_MIN_STEP = {self.ZOOM_MIN_STEP}")
        lines.append(f"    ZOOM_MAX_STEP = {self.ZOOM_MAX_STEP}")
        lines.append(f"    NEAR_PLANE_FLOOR = {self.NEAR_PLANE_FLOOR}")
        lines.append(f"    FAR_PLANE_FLOOR = {self.FAR_PLANE_FLOOR}")
        lines.append(f"    FAR_PLANE_DISTANCE_MULTIPLE = {self.FAR_PLANE_DISTANCE_MULTIPLE}")
        lines.append(f"    SYSTEM_EXTENT = {self.SYSTEM_EXTENT}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append("  Plotting:")
        lines.append(f"    DEFAULT_PLOT_POINTS = {self.DEFAULT_PLOT_POINTS}")
        lines.append(f"    DEFAULT_BODY_OPACITY = {self.DEFAULT_BODY_OPACITY}")
        lines.append(f"    DEFAULT_ORBIT_OPACITY = {self.DEFAULT_ORBIT_OPACITY}")
        return "\n".join(lines)


# Global configuration instance
config = OrreryConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import orrery
    >>> with orrery.temp_config(PLACEHOLDER_ECCENTRICITY=0.0):
    ...     # Circular guide orbits for this load only
    ...     system = orrery.StarSystem(document)
    >>> # Original config restored here
    >>> orrery.config.PLACEHOLDER_ECCENTRICITY
    0.01

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"OrreryConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
