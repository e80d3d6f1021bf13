from typing import List, Optional, Tuple

from .models import Vessel, Parachute, ACTIVE_CHUTE_STATES


class ParachuteCache:
    """
    Parachute modules of the active vessel, rescanned only when the vessel
    identity or its part count changes.
    """

    def __init__(self) -> None:
        self.parachutes: List[Parachute] = []
        self._key: Optional[Tuple[int, int]] = None
        self.rebuilds = 0

    def clear(self) -> None:
        self.parachutes = []
        self._key = None

    def update(self, vessel: Vessel) -> List[Parachute]:
        key = (vessel.vessel_id, len(vessel.parts))
        if key == self._key:
            return self.parachutes
        self._key = key
        self.parachutes = [p.parachute for p in vessel.parts if p.parachute is not None]
        self.rebuilds += 1
        return self.parachutes


def activation_altitude(chute: Parachute) -> float:
    """Deploy altitude of an armed or open chute, else 0."""
    if chute.state in ACTIVE_CHUTE_STATES:
        return chute.deploy_altitude
    return 0.0


def parachute_activation_altitude(parachutes: List[Parachute]) -> float:
    """Highest activation altitude of any armed/open chute (0 if none)."""
    highest = 0.0
    for chute in parachutes:
        highest = max(highest, activation_altitude(chute))
    return highest
