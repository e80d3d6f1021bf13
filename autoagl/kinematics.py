from .math_utils import norm, cross, unit, split_radial
from .models import Body, Vessel, KinematicSample


def clearance_over(body: Body, altitude: float, surface_altitude: float) -> float:
    """Height above whatever is below: terrain, or the water surface over ocean."""
    clearance = altitude - surface_altitude
    # Ocean floor below datum -> measure to the water instead
    if body.ocean and clearance > altitude:
        clearance = altitude
    return clearance


def ground_clearance(vessel: Vessel) -> float:
    return clearance_over(vessel.body, vessel.altitude, vessel.terrain_altitude)


def atmospheres(vessel: Vessel) -> float:
    """
    Pressure at the surface directly beneath the vessel, normalized to
    0 = vacuum, 1 = Kerbin sea level.
    """
    body = vessel.body
    if not body.atmosphere:
        return 0.0
    surface_height = vessel.terrain_altitude
    if body.ocean and surface_height < 0.0:
        surface_height = 0.0
    return body.pressure_atm(surface_height)


def surface_altitude_at(vessel: Vessel, target_ut: float, current_ut: float) -> float:
    """Terrain height below the vessel's projected position at target_ut."""
    body = vessel.body
    if body.terrain is None:
        return 0.0
    position = vessel.orbit.position_at(target_ut)
    lat, lon = body.lat_lon(position, current_ut)
    if body.rotates:
        # The surface turns under the trajectory while we coast
        lon -= 360.0 * (target_ut - current_ut) / body.rotation_period
    return body.terrain_altitude(lat, lon)


def current_sample(vessel: Vessel) -> KinematicSample:
    """Sample straight from the vessel's instruments."""
    distance = norm(vessel.position)
    lateral = norm(cross(unit(vessel.position), vessel.velocity))
    return KinematicSample(
        distance_from_center=distance,
        clearance=ground_clearance(vessel),
        horizontal_speed=lateral,
        vertical_speed=vessel.vertical_speed,
        surface_altitude=vessel.terrain_altitude,
    )


def sample(vessel: Vessel, target_ut: float, current_ut: float) -> KinematicSample:
    """
    Kinematic state of the vessel at target_ut, assuming it coasts along its
    current orbit from current_ut.
    """
    if target_ut == current_ut or vessel.orbit is None:
        return current_sample(vessel)

    position = vessel.orbit.position_at(target_ut)
    velocity = vessel.orbit.velocity_at(target_ut)
    distance = norm(position)
    altitude = distance - vessel.body.radius
    surface = surface_altitude_at(vessel, target_ut, current_ut)
    horizontal, vertical = split_radial(position, velocity)

    return KinematicSample(
        distance_from_center=distance,
        clearance=clearance_over(vessel.body, altitude, surface),
        horizontal_speed=horizontal,
        vertical_speed=vertical,
        surface_altitude=surface,
    )
