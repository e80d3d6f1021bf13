import math
from typing import Optional

import config
from .models import Situation, KinematicSample

INF = float("inf")

FREE_FALL_SITUATIONS = {Situation.FLYING, Situation.SUB_ORBITAL}
CONIC_SITUATIONS = {Situation.ORBITING, Situation.ESCAPING}


def time_to_impact(
    situation: Situation,
    distance_m: float,
    clearance_m: float,
    horizontal_mps: float,
    vertical_mps: float,
    grav_param: float,
    periapsis_m: Optional[float] = None,
    body_radius_m: Optional[float] = None,
) -> float:
    """
    Seconds until the vessel meets the surface in free fall, or +inf for
    "too far in the future to care about".

    Downward acceleration is gravity minus the centripetal term from the
    surface curving away underneath; thrust and drag are left out on purpose
    so the urgency only reflects gravity and curvature. The answer comes from
    clearance = fall*t + a*t^2/2, which is only meaningful over short
    horizons.
    """
    if math.isinf(clearance_m):
        return INF

    # Exclude cases where meeting the surface can't happen
    if situation in CONIC_SITUATIONS:
        if vertical_mps > 0.0:
            return INF
        if periapsis_m is None or body_radius_m is None or periapsis_m > body_radius_m:
            return INF
    elif situation not in FREE_FALL_SITUATIONS:
        return INF

    if clearance_m <= 0.0:
        return 0.0

    # No state vector to measure from
    if distance_m <= 0.0:
        return INF

    centripetal = horizontal_mps * horizontal_mps / distance_m
    gravity = grav_param / (distance_m * distance_m)
    downward = gravity - centripetal

    fall_mps = max(0.0, -vertical_mps)

    # Net upward acceleration: we may never get there at all
    if downward < 0.0:
        max_fall_m = -(fall_mps * fall_mps) / (2.0 * downward)
        if max_fall_m < clearance_m + config.IMPACT_MARGIN_M:
            return INF
    elif downward == 0.0:
        return clearance_m / fall_mps if fall_mps > 0.0 else INF

    root = math.sqrt(fall_mps * fall_mps + 2.0 * downward * clearance_m)
    return (root - fall_mps) / downward


def sample_time_to_impact(
    situation: Situation,
    sample: KinematicSample,
    grav_param: float,
    periapsis_m: Optional[float] = None,
    body_radius_m: Optional[float] = None,
) -> float:
    return time_to_impact(
        situation,
        sample.distance_from_center,
        sample.clearance,
        sample.horizontal_speed,
        sample.vertical_speed,
        grav_param,
        periapsis_m=periapsis_m,
        body_radius_m=body_radius_m,
    )
