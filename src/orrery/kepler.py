'''Two-body Kepler relations used to move bodies along their guide orbits.

All functions are pure. Angles are radians, lengths are whatever unit the
caller passes in (the propagator uses meters), masses are kilograms and
periods are seconds.'''

import warnings
import numpy as np
from .config import config

# Gravitational constant [m^3 kg^-1 s^-2]
G = 6.67430e-11
TWO_PI = 2.0 * np.pi


class KeplerConvergenceWarning(RuntimeWarning):
    """Kepler solver hit its iteration cap and returned its best estimate."""


# ========== KEPLER'S EQUATION ==========
def solve_keplers_equation(mean_anomaly: float, eccentricity: float) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for the eccentric anomaly.

    Uses Newton-Raphson iteration. The mean anomaly is first wrapped into
    [0, 2pi); the initial guess is pi for eccentricities above
    ``config.KEPLER_HIGH_ECCENTRICITY`` and M otherwise.

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly [rad], any real value
    eccentricity : float
        Orbital eccentricity, 0 <= e < 1

    Returns
    -------
    float
        Eccentric anomaly [rad]

    Warns
    -----
    KeplerConvergenceWarning
        If ``config.KEPLER_MAX_ITER`` iterations pass without the step
        dropping below ``config.KEPLER_TOLERANCE``. The current estimate is
        still returned.
    """
    M = float(np.mod(mean_anomaly, TWO_PI))
    e = float(eccentricity)
    E = np.pi if e > config.KEPLER_HIGH_ECCENTRICITY else M

    delta = np.inf
    iteration = 0
    while abs(delta) >= config.KEPLER_TOLERANCE and iteration < config.KEPLER_MAX_ITER:
        delta = (E - e*np.sin(E) - M) / (1 - e*np.cos(E))
        E -= delta
        iteration += 1

    if abs(delta) >= config.KEPLER_TOLERANCE:
        warnings.warn(
            f"Kepler solver did not converge in {iteration} iterations "
            f"(M={M:.6f}, e={e:.6f}, last step={abs(delta):.3e})",
            KeplerConvergenceWarning,
            stacklevel=2
        )
    return float(E)


def true_anomaly_from_eccentric(eccentric_anomaly: float, eccentricity: float) -> float:
    """
    True anomaly from eccentric anomaly.

    Uses the two-argument arctangent so the quadrant is correct over the
    whole orbit, then moves the result onto the same revolution as E
    (nu and E always lie within pi of each other). For a circular orbit
    (e = 0) the result equals E.
    """
    E = eccentric_anomaly
    e = eccentricity
    cosE = np.cos(E)
    sinE = np.sin(E)
    denom = 1 - e*cosE
    cos_nu = (cosE - e) / denom
    sin_nu = np.sqrt(1 - e**2) * sinE / denom
    nu = np.arctan2(sin_nu, cos_nu)
    # atan2 lands in (-pi, pi]
    nu += TWO_PI * np.round((E - nu) / TWO_PI)
    return float(nu)


def eccentric_from_true_anomaly(true_anomaly: float, eccentricity: float) -> float:
    """Eccentric anomaly from true anomaly (inverse of true_anomaly_from_eccentric)."""
    nu = true_anomaly
    e = eccentricity
    return float(np.arctan2(np.sqrt(1 - e**2) * np.sin(nu), e + np.cos(nu)))


def mean_from_eccentric(eccentric_anomaly: float, eccentricity: float) -> float:
    """Mean anomaly from eccentric anomaly (Kepler's equation, forward direction)."""
    return float(eccentric_anomaly - eccentricity*np.sin(eccentric_anomaly))


def radius_from_eccentric(semi_major_axis: float, eccentricity: float,
                          eccentric_anomaly: float) -> float:
    """Distance from the focus at a given eccentric anomaly."""
    return float(semi_major_axis * (1 - eccentricity*np.cos(eccentric_anomaly)))


# ========== GEOMETRY ==========
def orbital_plane_to_cartesian(semi_major_axis: float, eccentricity: float,
                               true_anomaly: float) -> tuple[float, float]:
    """
    Position in the orbital (perifocal) plane.

    Returns
    -------
    tuple of float
        (x, y) with x pointing at periapsis
    """
    a = semi_major_axis
    e = eccentricity
    nu = true_anomaly
    # find semi-latus rectum and radius
    p = a*(1 - e**2)
    r = p / (1 + e*np.cos(nu))
    return float(r*np.cos(nu)), float(r*np.sin(nu))


def rotate_to_reference_frame(x: float, y: float, inclination: float,
                              ascending_node: float,
                              argument_of_periapsis: float) -> tuple[float, float, float]:
    """
    Rotate an orbital-plane point into the reference frame.

    Applies R3(ascending_node) @ R1(inclination) @ R3(argument_of_periapsis)
    as one expanded 2-in/3-out transform (the perifocal z component is
    always zero, so the third DCM column is never needed).

    Parameters
    ----------
    x, y : float
        Orbital-plane coordinates
    inclination, ascending_node, argument_of_periapsis : float
        Orientation angles [rad]

    Returns
    -------
    tuple of float
        (x, y, z) in the reference frame
    """
    cos_w = np.cos(argument_of_periapsis)
    sin_w = np.sin(argument_of_periapsis)
    cos_i = np.cos(inclination)
    sin_i = np.sin(inclination)
    cos_O = np.cos(ascending_node)
    sin_O = np.sin(ascending_node)

    x_ref = ((cos_O*cos_w - sin_O*sin_w*cos_i) * x +
             (-cos_O*sin_w - sin_O*cos_w*cos_i) * y)
    y_ref = ((sin_O*cos_w + cos_O*sin_w*cos_i) * x +
             (-sin_O*sin_w + cos_O*cos_w*cos_i) * y)
    z_ref = (sin_w*sin_i) * x + (cos_w*sin_i) * y
    return float(x_ref), float(y_ref), float(z_ref)


# ========== KEPLER'S THIRD LAW ==========
def orbital_period(semi_major_axis: float, central_mass: float) -> float:
    """
    Orbital period from Kepler's third law, T = 2*pi*sqrt(a^3 / GM).

    Parameters
    ----------
    semi_major_axis : float
        Semi-major axis [m]
    central_mass : float
        Mass of the central body [kg]

    Returns
    -------
    float
        Period [s]
    """
    return float(TWO_PI * np.sqrt(semi_major_axis**3 / (G * central_mass)))


def semi_major_axis_from_period(period: float, central_mass: float) -> float:
    """
    Semi-major axis from the orbital period (inverse of orbital_period).

    Parameters
    ----------
    period : float
        Period [s]
    central_mass : float
        Mass of the central body [kg]

    Returns
    -------
    float
        Semi-major axis [m]
    """
    return float(np.cbrt(G * central_mass * period**2 / (4 * np.pi**2)))


def mass_from_diameter(diameter: float, density: float) -> float:
    """Mass [kg] of a uniform sphere of the given diameter [m] and density [kg/m^3]."""
    radius = diameter / 2
    return float(density * 4.0 / 3.0 * np.pi * radius**3)
