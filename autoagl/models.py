from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple
from enum import Enum, auto
import math

import config
from .math_utils import Vec3, ZERO, norm
from .orbit import Orbit


class AltimeterMode(Enum):
    NONE = auto()   # "no preference" (override state only)
    ASL = auto()
    AGL = auto()


class Situation(Enum):
    LANDED = auto()
    SPLASHED = auto()
    PRELAUNCH = auto()
    FLYING = auto()
    SUB_ORBITAL = auto()
    ORBITING = auto()
    ESCAPING = auto()
    DOCKED = auto()


SURFACE_SITUATIONS = {Situation.LANDED, Situation.SPLASHED, Situation.PRELAUNCH}


class ChuteState(Enum):
    STOWED = auto()
    ARMED = auto()          # waiting for its deploy altitude
    SEMIDEPLOYED = auto()
    DEPLOYED = auto()
    CUT = auto()


ACTIVE_CHUTE_STATES = {ChuteState.ARMED, ChuteState.SEMIDEPLOYED, ChuteState.DEPLOYED}


# (lat_deg, lon_deg) -> terrain height above datum (m)
TerrainFn = Callable[[float, float], float]


@dataclass(frozen=True)
class Body:
    name: str
    radius: float                       # mean radius (m)
    grav_param: float                   # mu (m^3/s^2)
    rotation_period: float = 0.0        # sidereal (s); 0 = not rotating
    initial_rotation: float = 0.0       # rotation angle at ut=0 (deg)
    ocean: bool = False
    atmosphere: bool = False
    atmosphere_depth: float = 0.0       # (m)
    sea_level_pressure_kpa: float = 0.0
    scale_height: float = 5600.0        # (m)
    terrain: Optional[TerrainFn] = None

    @property
    def rotates(self) -> bool:
        return self.rotation_period > 0.0

    def rotation_angle(self, ut: float) -> float:
        """Body rotation angle at universal time ut (deg)."""
        if not self.rotates:
            return self.initial_rotation
        return self.initial_rotation + 360.0 * ut / self.rotation_period

    def lat_lon(self, position: Vec3, ut: float) -> Tuple[float, float]:
        """Body-fixed (lat, lon) in degrees of an inertial body-centred position."""
        r = norm(position)
        if r <= 0.0:
            return 0.0, 0.0
        lat = math.degrees(math.asin(max(-1.0, min(1.0, position[2] / r))))
        lon = math.degrees(math.atan2(position[1], position[0])) - self.rotation_angle(ut)
        return lat, wrap_longitude(lon)

    def terrain_altitude(self, lat: float, lon: float) -> float:
        # Stars and other bodies without a terrain model are flat at datum
        if self.terrain is None:
            return 0.0
        return self.terrain(lat, wrap_longitude(lon))

    def pressure_atm(self, height: float) -> float:
        """Static pressure at height (m), 1.0 = Kerbin sea level."""
        if not self.atmosphere or height >= self.atmosphere_depth:
            return 0.0
        kpa = self.sea_level_pressure_kpa * math.exp(-max(height, 0.0) / self.scale_height)
        return kpa / config.KERBIN_SEALEVEL_PRESSURE_KPA


def wrap_longitude(lon: float) -> float:
    return (lon + 180.0) % 360.0 - 180.0


@dataclass
class Parachute:
    deploy_altitude: float              # height above terrain (m)
    state: ChuteState = ChuteState.STOWED


@dataclass
class Part:
    name: str
    parachute: Optional[Parachute] = None


@dataclass
class Vessel:
    """Telemetry snapshot of the active vessel for one frame."""
    # -------------------------------
    # Identity
    # -------------------------------
    vessel_id: int
    situation: Situation
    body: Body

    # -------------------------------
    # State vector (body-centred, inertial)
    # -------------------------------
    position: Vec3 = ZERO
    velocity: Vec3 = ZERO

    # -------------------------------
    # Flight instruments
    # -------------------------------
    altitude: float = 0.0               # above datum (m)
    terrain_altitude: float = 0.0       # surface below vessel vs datum (m)
    vertical_speed: float = 0.0         # (m/s) +ve = climbing
    ut: float = 0.0

    parts: List[Part] = field(default_factory=list)
    orbit: Optional[Orbit] = None


@dataclass(frozen=True)
class KinematicSample:
    distance_from_center: float
    clearance: float
    horizontal_speed: float
    vertical_speed: float
    surface_altitude: float = 0.0


@dataclass(frozen=True)
class Recommendation:
    mode: AltimeterMode
    reason: str = ""
    threshold_s: Optional[float] = None
    impact_s: float = float("inf")
    lead_s: float = 0.0


@dataclass
class OverrideState:
    pending_click: bool = False
    locked_mode: AltimeterMode = AltimeterMode.NONE


@dataclass(frozen=True)
class ModeCommand:
    mode: AltimeterMode
    reason: str = ""
