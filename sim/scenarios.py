import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from autoagl.models import Body, ChuteState, Situation
from .bodies import KERBIN, MUN, KERBOL


@dataclass
class Flight:
    """Initial conditions for one simulated flight."""
    name: str
    body: Body
    lon_deg: float
    altitude_m: Optional[float] = None      # None -> resting on the surface
    horizontal_mps: float = 0.0             # eastward, relative to the surface
    vertical_mps: float = 0.0
    lat_deg: float = 0.0
    situation: Optional[Situation] = None   # None -> classified by the world
    chutes: List[Tuple[float, ChuteState]] = field(default_factory=list)
    hover: bool = False                     # thrust cancels gravity at start


def surface_speed(body: Body, altitude_m: float) -> float:
    if not body.rotates:
        return 0.0
    return 2.0 * math.pi * (body.radius + altitude_m) / body.rotation_period


def circular_speed(body: Body, altitude_m: float) -> float:
    return math.sqrt(body.grav_param / (body.radius + altitude_m))


def chute_descent() -> Flight:
    # Falling onto the plains with one chute armed at 1000 m
    return Flight("chute_descent", KERBIN, lon_deg=0.0, altitude_m=4500.0,
                  horizontal_mps=40.0, vertical_mps=-90.0,
                  chutes=[(1000.0, ChuteState.ARMED), (500.0, ChuteState.STOWED)])

def cliff_run() -> Flight:
    # Level flight toward the escarpment; only path projection sees it coming
    return Flight("cliff_run", KERBIN, lon_deg=7.6, altitude_m=1400.0,
                  horizontal_mps=140.0, vertical_mps=0.0, hover=True)

def mun_descent() -> Flight:
    return Flight("mun_descent", MUN, lon_deg=20.0, altitude_m=9000.0,
                  horizontal_mps=250.0, vertical_mps=-35.0)

def on_the_pad() -> Flight:
    return Flight("on_the_pad", KERBIN, lon_deg=-0.5, situation=Situation.PRELAUNCH,
                  chutes=[(1000.0, ChuteState.STOWED)])

def low_orbit() -> Flight:
    alt = 80_000.0
    return Flight("low_orbit", KERBIN, lon_deg=0.0, altitude_m=alt,
                  horizontal_mps=circular_speed(KERBIN, alt) - surface_speed(KERBIN, alt))

def ocean_splashdown() -> Flight:
    return Flight("ocean_splashdown", KERBIN, lon_deg=-40.0, altitude_m=2500.0,
                  horizontal_mps=20.0, vertical_mps=-60.0,
                  chutes=[(800.0, ChuteState.ARMED)])

def solar_dive() -> Flight:
    # Nothing underneath to measure clearance against
    return Flight("solar_dive", KERBOL, lon_deg=0.0, altitude_m=5_000_000.0,
                  horizontal_mps=0.0, vertical_mps=-2000.0)


SCENARIOS = {
    "1": chute_descent,
    "2": cliff_run,
    "3": mun_descent,
    "4": on_the_pad,
    "5": low_orbit,
    "6": ocean_splashdown,
    "7": solar_dive,
}

SCENARIOS_BY_NAME: Dict[str, Callable[[], Flight]] = {fn.__name__: fn for fn in SCENARIOS.values()}
