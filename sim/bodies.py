import math
from typing import Dict

from autoagl.models import Body


def _step(x: float) -> float:
    """Smooth 0 -> 1 step around x = 0."""
    return 0.5 * (1.0 + math.tanh(x))


def kerbin_terrain(lat: float, lon: float) -> float:
    # Rolling hills
    h = 180.0 + 220.0 * math.sin(math.radians(lon * 9.0)) * math.cos(math.radians(lat * 6.0))
    # Ocean basin west of 20W
    h -= 1100.0 * _step(-(lon + 20.0) * 2.0)
    # Escarpment east of 8E, rising ~2.4 km over a few hundred metres
    h += 2400.0 * _step((lon - 8.0) * 20.0)
    return h


def mun_terrain(lat: float, lon: float) -> float:
    # Lumpy highlands with a deep crater centred on the equator at 30E
    h = 1200.0 + 600.0 * math.sin(math.radians(lon * 5.0)) * math.sin(math.radians(lat * 4.0 + 30.0))
    d = math.hypot(lat, lon - 30.0)
    h -= 2000.0 * _step((3.0 - d) * 2.0)
    return h


KERBIN = Body(
    name="Kerbin",
    radius=600_000.0,
    grav_param=3.5316e12,
    rotation_period=21_549.425,
    ocean=True,
    atmosphere=True,
    atmosphere_depth=70_000.0,
    sea_level_pressure_kpa=101.325,
    scale_height=5_600.0,
    terrain=kerbin_terrain,
)

MUN = Body(
    name="Mun",
    radius=200_000.0,
    grav_param=6.5138398e10,
    rotation_period=138_984.38,
    terrain=mun_terrain,
)

# No surface to hit, no terrain model
KERBOL = Body(
    name="Kerbol",
    radius=261_600_000.0,
    grav_param=1.1723328e18,
    atmosphere=True,
    atmosphere_depth=600_000.0,
    sea_level_pressure_kpa=16.0,
    scale_height=42_000.0,
)

BODIES: Dict[str, Body] = {b.name: b for b in (KERBIN, MUN, KERBOL)}
