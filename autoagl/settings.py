from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

import config
from .models import AltimeterMode

T = TypeVar("T")


def format_collision_threshold(seconds: int) -> str:
    if seconds == config.DISABLED:
        return "Disabled"
    return f"{seconds}s"


def format_parachute_multiplier(factor: float) -> str:
    if factor == config.DISABLED:
        return "Disabled"
    return f"{factor:.1f}x"


class ValueList(Generic[T]):
    """
    Settings-menu option list: maps display labels to values.
    Unknown labels fall back to the default value.
    """

    def __init__(self, default: T, formatter: Callable[[T], str], values: Sequence[T]) -> None:
        self.default = default
        self.default_label = formatter(default)
        self.labels: List[str] = []
        self._values: Dict[str, T] = {}
        for value in values:
            label = formatter(value)
            self.labels.append(label)
            self._values[label] = value

    def __getitem__(self, label: str) -> T:
        return self._values.get(label, self.default)

    def strict(self, label: str) -> T:
        if label not in self._values:
            raise ValueError(f"Unknown option {label!r}; expected one of {self.labels}")
        return self._values[label]


ATM_COLLISION_THRESHOLDS = ValueList(
    config.DEFAULT_ATM_COLLISION_TIME_S, format_collision_threshold, config.COLLISION_TIMES_S
)
VAC_COLLISION_THRESHOLDS = ValueList(
    config.DEFAULT_VAC_COLLISION_TIME_S, format_collision_threshold, config.COLLISION_TIMES_S
)
PARACHUTE_ALTITUDE_MULTIPLIERS = ValueList(
    config.DEFAULT_PARACHUTE_ALTITUDE_MULTIPLIER,
    format_parachute_multiplier,
    config.PARACHUTE_ALTITUDE_MULTIPLIERS,
)


@dataclass(frozen=True)
class Settings:
    """User settings, passed into every evaluation."""
    enabled: bool = True
    landed_preference: AltimeterMode = AltimeterMode.ASL
    atm_collision_s: int = config.DEFAULT_ATM_COLLISION_TIME_S
    vac_collision_s: int = config.DEFAULT_VAC_COLLISION_TIME_S
    parachute_multiplier: float = config.DEFAULT_PARACHUTE_ALTITUDE_MULTIPLIER
    path_projection: bool = True

    def __post_init__(self):
        if self.landed_preference not in (AltimeterMode.ASL, AltimeterMode.AGL):
            raise ValueError(f"Landed preference must be ASL or AGL, got {self.landed_preference}")
        if self.atm_collision_s < 0 or self.vac_collision_s < 0:
            raise ValueError("Collision thresholds must be >= 0 (0 = disabled)")
        if self.parachute_multiplier < 0:
            raise ValueError("Parachute multiplier must be >= 0 (0 = disabled)")

    @classmethod
    def from_labels(
        cls,
        enabled: bool = True,
        landed: str = "ASL",
        atm_collision: str = ATM_COLLISION_THRESHOLDS.default_label,
        vac_collision: str = VAC_COLLISION_THRESHOLDS.default_label,
        parachute: str = PARACHUTE_ALTITUDE_MULTIPLIERS.default_label,
        path_projection: bool = True,
    ) -> "Settings":
        """Build settings from the labels shown in the settings menu."""
        try:
            landed_mode = AltimeterMode[landed.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown landed preference {landed!r}") from None
        return cls(
            enabled=enabled,
            landed_preference=landed_mode,
            atm_collision_s=ATM_COLLISION_THRESHOLDS[atm_collision],
            vac_collision_s=VAC_COLLISION_THRESHOLDS[vac_collision],
            parachute_multiplier=PARACHUTE_ALTITUDE_MULTIPLIERS[parachute],
            path_projection=path_projection,
        )

    def collision_threshold_s(self, pressure_atm: float) -> Optional[float]:
        """
        Terrain-collision threshold (s) for the given surface pressure
        (0 = vacuum, 1 = Kerbin sea level). None when not applicable.
        """
        atm = self.atm_collision_s
        vac = self.vac_collision_s
        has_atm = atm != config.DISABLED
        has_vac = vac != config.DISABLED

        if pressure_atm >= 1.0:
            return float(atm) if has_atm else None
        if pressure_atm <= 0.0:
            return float(vac) if has_vac else None
        if not (has_atm or has_vac):
            return None

        # Somewhere between vacuum and sea level: interpolate
        return pressure_atm * atm + (1.0 - pressure_atm) * vac
