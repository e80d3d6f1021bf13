from typing import List, Optional

from . import models as M
from .kinematics import ground_clearance, atmospheres
from .projection import project_impact_time
from .parachutes import parachute_activation_altitude
from .settings import Settings


def _collision_reason(threshold_s: float, lead_s: float, clearance_m: float, vertical_mps: float) -> str:
    lead = f", {lead_s:.1f}s ahead" if lead_s > 0.0 else ""
    if vertical_mps < 0.0:
        return f"< {threshold_s:.1f}s from terrain{lead}, {clearance_m:.0f}m @ {-vertical_mps:.0f} m/s"
    return f"< {threshold_s:.1f}s from terrain{lead}, {clearance_m:.0f}m"


def recommend(
    vessel: M.Vessel,
    parachutes: List[M.Parachute],
    previous_mode: M.AltimeterMode,
    settings: Settings,
) -> M.Recommendation:
    """
    Decide which altimeter mode the vessel should show right now.

    Checks, first match wins:
      - on the surface -> the landed/splashed preference
      - projected terrain impact sooner than the collision threshold -> AGL
      - below parachute activation altitude x multiplier -> AGL
      - otherwise ASL

    The reason is only spelled out when the mode differs from previous_mode;
    nothing is being switched otherwise.
    """
    if vessel.situation in M.SURFACE_SITUATIONS:
        return M.Recommendation(settings.landed_preference, "on surface")

    changing_to_agl = previous_mode != M.AltimeterMode.AGL

    # ---- Imminent terrain collision ----
    clearance = ground_clearance(vessel)
    threshold = settings.collision_threshold_s(atmospheres(vessel))
    impact_s = float("inf")
    lead_s = 0.0
    if threshold is not None:
        impact_s, lead_s = project_impact_time(vessel, threshold, settings.path_projection)
        if impact_s < threshold:
            reason = ""
            if changing_to_agl:
                reason = _collision_reason(threshold, lead_s, clearance, vessel.vertical_speed)
            return M.Recommendation(M.AltimeterMode.AGL, reason, threshold, impact_s, lead_s)

    # ---- Armed / open parachutes ----
    multiplier = settings.parachute_multiplier
    chute_alt_m: Optional[float] = None
    if multiplier > 0:
        chute_alt_m = parachute_activation_altitude(parachutes)
        if clearance < chute_alt_m * multiplier:
            reason = ""
            if changing_to_agl:
                reason = f"< {multiplier:.1f}x parachute's {chute_alt_m:.0f}m"
            return M.Recommendation(M.AltimeterMode.AGL, reason, threshold, impact_s, lead_s)

    # ---- Nothing urgent: prefer ASL ----
    reason = ""
    if previous_mode != M.AltimeterMode.ASL:
        if threshold is not None:
            reason = f"> {threshold:.1f}s from terrain, {clearance:.0f}m"
        elif chute_alt_m is not None:
            if chute_alt_m > 0:
                reason = f"> {multiplier:.1f}x parachute's {chute_alt_m:.0f}m"
            else:
                reason = "no active chutes"
        else:
            reason = "all checks disabled"
    return M.Recommendation(M.AltimeterMode.ASL, reason, threshold, impact_s, lead_s)
