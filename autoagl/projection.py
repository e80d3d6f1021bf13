from typing import Optional, Tuple

import config
from .models import Vessel
from .kinematics import current_sample, sample
from .impact import sample_time_to_impact


def _periapsis(vessel: Vessel) -> Optional[float]:
    return vessel.orbit.periapsis if vessel.orbit is not None else None


def project_impact_time(
    vessel: Vessel,
    threshold_s: float,
    projection_enabled: bool,
) -> Tuple[float, float]:
    """
    Most pessimistic time to impact along the current trajectory.

    Returns (soonest_s, lead_s): soonest_s counts from now, lead_s is how far
    ahead the worst sample lies (0 when the present instant is the worst).

    Sampling forward catches terrain rising ahead of a vessel whose current
    clearance looks safe, e.g. level flight toward a cliff.
    """
    body = vessel.body
    periapsis = _periapsis(vessel)

    soonest = sample_time_to_impact(
        vessel.situation,
        current_sample(vessel),
        body.grav_param,
        periapsis_m=periapsis,
        body_radius_m=body.radius,
    )
    lead = 0.0

    if not projection_enabled or vessel.orbit is None:
        return soonest, lead

    now = vessel.ut
    for i in range(1, config.PROJECTION_SAMPLES + 1):
        offset = i * config.PROJECTION_STEP_S
        # Nothing past the trigger window can change the answer.
        # TODO: the threshold is the one for the air at the present position;
        # recompute it per sample if long glides through thinning air matter.
        if offset > threshold_s:
            break

        ahead = sample(vessel, now + offset, now)
        total = offset + sample_time_to_impact(
            vessel.situation,
            ahead,
            body.grav_param,
            periapsis_m=periapsis,
            body_radius_m=body.radius,
        )
        if total < soonest:
            soonest = total
            lead = offset

    return soonest, lead
