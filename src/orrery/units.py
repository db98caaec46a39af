"""
Unit conversions between the length scales used by the system map.

Stored body positions are meters; the scene works in gigameters (one scene
unit is one Gm, see ``defaults.SCALE_FACTOR``); labels are shown in whatever
unit keeps the number readable. Every function accepts a float or a numpy
array and is the exact algebraic inverse of its counterpart.
"""

import numpy as np

KM_PER_GM = 1_000_000.0
MM_PER_GM = 1_000.0
M_PER_KM = 1_000.0
M_PER_GM = 1_000_000_000.0
GM_PER_AU = 149.597870707


def km_to_gm(km):
    """Kilometers to gigameters."""
    return km / KM_PER_GM


def gm_to_km(gm):
    """Gigameters to kilometers."""
    return gm * KM_PER_GM


def mm_to_gm(mm):
    """Megameters to gigameters."""
    return mm / MM_PER_GM


def gm_to_mm(gm):
    """Gigameters to megameters."""
    return gm * MM_PER_GM


def m_to_km(m):
    """Meters to kilometers."""
    return m / M_PER_KM


def km_to_m(km):
    """Kilometers to meters."""
    return km * M_PER_KM


def m_to_gm(m):
    """Meters to gigameters (stored positions to scene units)."""
    return m / M_PER_GM


def gm_to_m(gm):
    """Gigameters to meters."""
    return gm * M_PER_GM


def au_to_gm(au):
    """Astronomical units to gigameters (1 AU = 149.597870707 Gm)."""
    return au * GM_PER_AU


def gm_to_au(gm):
    """Gigameters to astronomical units."""
    return gm / GM_PER_AU


def deg_to_rad(deg):
    return np.deg2rad(deg)


def rad_to_deg(rad):
    return np.rad2deg(rad)


def format_distance(distance_gm: float, show_unit: bool = True) -> str:
    """
    Format a distance for display, picking Tm, Gm, Mm or km.

    Parameters
    ----------
    distance_gm : float
        Distance in gigameters
    show_unit : bool, optional
        Append the unit suffix (default True)

    Returns
    -------
    str
        Value with two decimals, e.g. ``'22.50 Gm'`` or ``'287.00 km'``

    Examples
    --------
    >>> format_distance(1500.0)
    '1.50 Tm'
    >>> format_distance(0.0005)
    '500.00 km'
    """
    if distance_gm >= 1000:
        value, unit = distance_gm / 1000, 'Tm'
    elif distance_gm >= 1:
        value, unit = distance_gm, 'Gm'
    elif distance_gm >= 0.001:
        value, unit = gm_to_mm(distance_gm), 'Mm'
    else:
        value, unit = gm_to_km(distance_gm), 'km'
    text = f"{value:.2f}"
    return f"{text} {unit}" if show_unit else text
