"""
Default Visual Parameters and Demo System
=========================================

Per-kind defaults used when the source document is silent (colors, nominal
sizes, density heuristics), the scene scale, and a small built-in system map
for demos and tests.

Examples
--------
>>> from orrery import StarSystem
>>> from orrery.defaults import demo_system_document
>>> system = StarSystem(demo_system_document())
"""
from .bodies import BodyKind
from .units import km_to_m

# One scene unit is one gigameter
SCALE_FACTOR = 1.0

# Segments used to draw an orbit guide path
ORBIT_SEGMENTS = 128

# Duration [s] of the camera focus animation
FOCUS_ANIMATION_DURATION = 1.5

"""
Per-kind body defaults.
Nominal diameters are in meters; stations and jump points never carry a
measured diameter, the others only fall back to these when the document
omits one.
"""
KIND_COLOR = {
    BodyKind.STAR: '#F9D71C',
    BodyKind.PLANET: '#78A0C3',
    BodyKind.MOON: '#AABBCC',
    BodyKind.STATION: '#88DDFF',
    BodyKind.OUTPOST: '#88DDFF',
    BodyKind.JUMP_POINT: '#FFAA22',
    BodyKind.LAGRANGE: '#22FFAA',
}

ORBIT_COLOR = {
    BodyKind.STAR: '#FFFFFF',
    BodyKind.PLANET: '#2288CC',
    BodyKind.MOON: '#55AAFF',
    BodyKind.STATION: '#88DDFF',
    BodyKind.OUTPOST: '#88DDFF',
    BodyKind.JUMP_POINT: '#FFAA22',
    BodyKind.LAGRANGE: '#22FFAA',
}

NOMINAL_DIAMETER = {
    BodyKind.STAR: km_to_m(1_000_000.0),
    BodyKind.PLANET: km_to_m(1_000.0),
    BodyKind.MOON: km_to_m(300.0),
    BodyKind.STATION: km_to_m(5.0),
    BodyKind.OUTPOST: km_to_m(10.0),
    BodyKind.JUMP_POINT: km_to_m(20.0),
    BodyKind.LAGRANGE: km_to_m(10.0),
}

"""
Predefined demo system
Positions in meters, diameters in meters, loosely modelled on a four-planet
system with a handful of moons, stations and one jump gate.
"""
def demo_system_document() -> dict:
    """
    Build a small system-map document in the source format.

    A fresh dict is returned on every call so callers may modify it freely.

    Returns
    -------
    dict
        Document with ``systemName``, ``metadata`` and ``root`` keys
    """
    return {
        "systemName": "Stanton",
        "metadata": {"Version": "1.0", "Generator": "orrery.defaults"},
        "root": {
            "name": "Stanton",
            "label": "Stanton",
            "type": "star",
            "position": {"x": 0.0, "y": 0.0, "z": 0.0},
            "diameter": 696_000_000.0,
            "color": "#F9D71C",
            "children": [
                {
                    "name": "Stanton1",
                    "label": "Hurston",
                    "type": "planet",
                    "parent": "Stanton",
                    "position": {"x": 12_850_457_093.0, "y": 0.0, "z": 0.0},
                    "diameter": 2_000_000.0,
                    "color": "#C4A484",
                    "children": [
                        {
                            "name": "Stanton1a",
                            "label": "Arial",
                            "type": "moon",
                            "parent": "Stanton1",
                            "position": {"x": 12_892_673_309.0,
                                         "y": 31_476_129.0,
                                         "z": 1_150_000.0},
                            "diameter": 688_000.0,
                        },
                        {
                            "name": "Stanton1_L1",
                            "label": "HUR-L1",
                            "type": "lagrange",
                            "parent": "Stanton1",
                            "position": {"x": 11_565_411_383.0, "y": 0.0, "z": 0.0},
                        },
                    ],
                },
                {
                    "name": "Stanton2",
                    "label": "Crusader",
                    "type": "planet",
                    "parent": "Stanton",
                    "position": {"x": -18_962_176_000.0,
                                 "y": -2_664_960_000.0,
                                 "z": 0.0},
                    "diameter": 15_000_000.0,
                    "color": "#E8B77A",
                    "children": [
                        {
                            "name": "Stanton2b",
                            "label": "Daymar",
                            "type": "moon",
                            "parent": "Stanton2",
                            "position": {"x": -18_930_539_540.0,
                                         "y": -2_610_158_765.0,
                                         "z": 0.0},
                            "diameter": 591_000.0,
                        },
                        {
                            "name": "Stanton2_PortOlisar",
                            "label": "Port Olisar",
                            "type": "station",
                            "parent": "Stanton2",
                            "position": {"x": -18_962_176_000.0,
                                         "y": -2_664_960_000.0,
                                         "z": 13_000_000.0},
                        },
                    ],
                },
                {
                    "name": "Stanton3",
                    "label": "ArcCorp",
                    "type": "planet",
                    "parent": "Stanton",
                    "position": {"x": 18_587_664_739.856,
                                 "y": -22_151_916_920.3125,
                                 "z": 0.0},
                    "diameter": 1_600_000.0,
                },
                {
                    "name": "Stanton4",
                    "label": "microTech",
                    "type": "planet",
                    "parent": "Stanton",
                    "position": {"x": 22_462_016_306.0,
                                 "y": 37_185_625_645.0,
                                 "z": 0.0},
                    "diameter": 2_000_000.0,
                    "color": "#EDF5FA",
                    "children": [
                        {
                            "name": "Stanton4a",
                            "label": "Calliope",
                            "type": "moon",
                            "parent": "Stanton4",
                            "position": {"x": 22_398_369_308.0,
                                         "y": 37_168_840_679.0,
                                         "z": 0.0},
                            "diameter": 480_000.0,
                        },
                        {
                            "name": "Stanton4_NewBabbage",
                            "label": "New Babbage",
                            "type": "outpost",
                            "parent": "Stanton4",
                            "position": {"x": 22_462_016_306.0,
                                         "y": 37_185_625_645.0,
                                         "z": 1_000_000.0},
                        },
                    ],
                },
                {
                    "name": "Stanton_Pyro_Gateway",
                    "label": "Stanton-Pyro Jump",
                    "type": "jumppoint",
                    "parent": "Stanton",
                    "destination": "Pyro",
                    "position": {"x": 27_000_000_000.0,
                                 "y": 12_000_000_000.0,
                                 "z": 1_800_000_000.0},
                },
            ],
        },
    }
