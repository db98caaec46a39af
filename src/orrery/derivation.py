'''Orbital element derivation from a positional snapshot.

The system map only records where every body is at one instant. Each
non-root body gets a near-circular guide orbit around its parent, oriented so
that the orbit passes through the recorded position at epoch T = 0, with a
period from Kepler's third law and a density-based estimate of the parent's
mass.'''

import logging
from typing import Dict, Optional

import numpy as np
from .bodies import CelestialBody
from .config import OrreryConfig, config as global_config
from .graph import BodyGraph, MalformedGraphError
from .kepler import (eccentric_from_true_anomaly, mean_from_eccentric,
                     mass_from_diameter, orbital_period)
from .orbital_elements import OrbitalElements

_log = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


def parent_mass(parent: CelestialBody, config: Optional[OrreryConfig] = None) -> float:
    """
    Estimated mass of a parent body [kg].

    Uniform sphere of the parent's effective diameter; stars use
    ``config.STAR_DENSITY``, everything else ``config.BODY_DENSITY``.
    """
    cfg = config or global_config
    density = cfg.STAR_DENSITY if parent.kind.is_star_class else cfg.BODY_DENSITY
    return mass_from_diameter(parent.effective_diameter, density)


def derive_elements(body: CelestialBody, parent: CelestialBody,
                    config: Optional[OrreryConfig] = None) -> OrbitalElements:
    """
    Derive the guide orbit of ``body`` around ``parent``.

    Parameters
    ----------
    body : CelestialBody
        Orbiting body
    parent : CelestialBody
        Its effective parent
    config : OrreryConfig, optional
        Settings to use; the global config when omitted

    Returns
    -------
    OrbitalElements
        Orbit whose position at T = 0 is ``body.position``

    Raises
    ------
    MalformedGraphError
        If the body sits exactly on its parent (no orbit can be defined)

    Notes
    -----
    a is the current distance and e the placeholder eccentricity. The
    inclination is the elevation of the body above the parent's reference
    plane. The epoch point is put at the true anomaly where r = a
    (cos nu = -e), so the orbit passes through the recorded distance.

    For an equatorial body (height within ``config.SNAP_TO_EQUATORIAL_M``
    of the reference plane) the ascending node points at the body and the
    argument of latitude at epoch is 0. For an inclined body the node sits
    90 deg behind the body's azimuth and the argument of latitude is 90 deg,
    which puts the body at the top of the tilted circle.
    """
    cfg = config or global_config
    relative = body.position - parent.position
    distance = float(np.linalg.norm(relative))
    if not distance > 0:
        raise MalformedGraphError(
            f"Body '{body.name}' coincides with its parent '{parent.name}'", body.name)

    x, y, z = relative
    e = cfg.PLACEHOLDER_ECCENTRICITY
    inclination = np.degrees(np.arctan2(z, np.hypot(x, y)))
    azimuth = np.degrees(np.arctan2(y, x))

    # true anomaly where r = a, on the outbound half of the orbit
    nu0 = np.degrees(np.arccos(-e))

    if abs(z) < cfg.SNAP_TO_EQUATORIAL_M:
        node = azimuth
        arg_latitude = 0.0
    else:
        node = azimuth - 90.0
        arg_latitude = 90.0
    arg_periapsis = arg_latitude - nu0

    E0 = eccentric_from_true_anomaly(np.radians(nu0), e)
    M0 = np.degrees(mean_from_eccentric(E0, e))

    mass = parent_mass(parent, cfg)
    period_hours = orbital_period(distance, mass) / SECONDS_PER_HOUR

    return OrbitalElements(
        semi_major_axis=distance,
        eccentricity=e,
        inclination_deg=float(inclination),
        ascending_node_deg=float(np.mod(node, 360.0)),
        argument_of_periapsis_deg=float(np.mod(arg_periapsis, 360.0)),
        initial_mean_anomaly_deg=float(np.mod(M0, 360.0)),
        orbital_period_hours=period_hours,
    )


def derive_all(graph: BodyGraph,
               config: Optional[OrreryConfig] = None) -> Dict[str, OrbitalElements]:
    """
    Derive elements for every non-root body of a graph.

    Returns
    -------
    dict
        name -> OrbitalElements, in graph order. Deterministic: the same
        graph always gives equal results.
    """
    elements = {}
    for body in graph:
        parent = graph.parent_of(body.name)
        if parent is None:
            continue
        elements[body.name] = derive_elements(body, parent, config)
    _log.debug("Derived %d orbits for system %r", len(elements), graph.system_name)
    return elements
