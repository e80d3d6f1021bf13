import math
import pytest

from autoagl.kinematics import (
    atmospheres, clearance_over, current_sample, ground_clearance, sample, surface_altitude_at,
)
from autoagl.models import Body, Situation, Vessel
from autoagl.orbit import Orbit

R = 600_000.0
MU = 3.5316e12


def make_body(**kw):
    params = dict(name="Testbody", radius=R, grav_param=MU)
    params.update(kw)
    return Body(**params)


def make_vessel(body, altitude=1000.0, terrain=0.0, vertical=0.0, horizontal=0.0, ut=0.0, with_orbit=True):
    position = (R + altitude, 0.0, 0.0)
    velocity = (vertical, horizontal, 0.0)
    return Vessel(
        vessel_id=1,
        situation=Situation.FLYING,
        body=body,
        position=position,
        velocity=velocity,
        altitude=altitude,
        terrain_altitude=terrain,
        vertical_speed=vertical,
        ut=ut,
        orbit=Orbit(position, velocity, ut, MU) if with_orbit else None,
    )


class FixedOrbit:
    """Stands still in inertial space."""

    def __init__(self, position):
        self.position = position

    def position_at(self, ut):
        return self.position

    def velocity_at(self, ut):
        return (0.0, 0.0, 0.0)


def test_clearance_over_dry_land():
    body = make_body(ocean=False)
    assert clearance_over(body, 300.0, 100.0) == 200.0
    # Canyon below datum on a dry world: measure to the canyon floor
    assert clearance_over(body, 300.0, -500.0) == 800.0


def test_clearance_over_ocean_uses_water_surface():
    body = make_body(ocean=True)
    assert clearance_over(body, 300.0, -500.0) == 300.0
    # Dry land on an ocean world still uses the terrain
    assert clearance_over(body, 300.0, 120.0) == 180.0


def test_ground_clearance_reads_instruments():
    vessel = make_vessel(make_body(), altitude=2500.0, terrain=400.0)
    assert ground_clearance(vessel) == 2100.0


def test_atmospheres_vacuum_body_is_zero():
    vessel = make_vessel(make_body(atmosphere=False), terrain=0.0)
    assert atmospheres(vessel) == 0.0


def test_atmospheres_at_sea_level_is_one():
    body = make_body(ocean=True, atmosphere=True, atmosphere_depth=70_000.0,
                     sea_level_pressure_kpa=101.325, scale_height=5600.0)
    # Over deep ocean the surface is the water at datum
    vessel = make_vessel(body, terrain=-2000.0)
    assert atmospheres(vessel) == pytest.approx(1.0)


def test_atmospheres_on_high_ground_is_thinner():
    body = make_body(atmosphere=True, atmosphere_depth=70_000.0,
                     sea_level_pressure_kpa=101.325, scale_height=5600.0)
    vessel = make_vessel(body, altitude=8000.0, terrain=5600.0)
    assert atmospheres(vessel) == pytest.approx(math.exp(-1.0))


def test_sample_now_matches_telemetry():
    vessel = make_vessel(make_body(), altitude=1500.0, terrain=200.0, vertical=-30.0, horizontal=80.0)
    s = sample(vessel, vessel.ut, vessel.ut)
    assert s == current_sample(vessel)
    assert s.clearance == 1300.0
    assert s.vertical_speed == -30.0
    assert s.horizontal_speed == pytest.approx(80.0)
    assert s.distance_from_center == pytest.approx(R + 1500.0)


def test_sample_without_orbit_reads_telemetry():
    vessel = make_vessel(make_body(), altitude=900.0, with_orbit=False)
    assert sample(vessel, 10.0, 0.0) == current_sample(vessel)


def test_future_sample_falls_under_gravity():
    vessel = make_vessel(make_body(), altitude=1000.0, horizontal=100.0)
    s = sample(vessel, 2.0, 0.0)
    g = MU / (R + 1000.0) ** 2
    assert s.vertical_speed == pytest.approx(-2.0 * g, rel=0.05)
    assert s.horizontal_speed == pytest.approx(100.0, rel=0.01)
    assert s.clearance == pytest.approx(1000.0 - 0.5 * g * 4.0, abs=1.0)
    # No terrain model: flat at datum
    assert s.surface_altitude == 0.0


def test_future_sample_sees_terrain_ahead():
    # Plateau 1500 m high east of 0.1 deg longitude
    body = make_body(terrain=lambda lat, lon: 1500.0 if lon > 0.1 else 0.0)
    vessel = make_vessel(body, altitude=1000.0, horizontal=200.0)
    now = sample(vessel, 0.0, 0.0)
    ahead = sample(vessel, 10.0, 0.0)   # ~2 km east, past 0.1 deg (~1 km)
    assert now.clearance == 1000.0
    assert ahead.surface_altitude == 1500.0
    assert ahead.clearance < 0.0


def test_surface_altitude_corrects_for_body_rotation():
    # Terrain height equals longitude; body turns 1 deg/s
    body = make_body(rotation_period=360.0, terrain=lambda lat, lon: lon)
    vessel = make_vessel(body, altitude=1000.0, with_orbit=False)
    vessel.orbit = FixedOrbit((R + 1000.0, 0.0, 0.0))

    assert surface_altitude_at(vessel, 10.0, 0.0) == pytest.approx(-10.0)

    still = make_body(terrain=lambda lat, lon: lon)
    vessel_still = make_vessel(still, altitude=1000.0, with_orbit=False)
    vessel_still.orbit = FixedOrbit((R + 1000.0, 0.0, 0.0))
    assert surface_altitude_at(vessel_still, 10.0, 0.0) == pytest.approx(0.0)


def test_surface_altitude_without_terrain_model_is_zero():
    vessel = make_vessel(make_body(terrain=None), altitude=1000.0)
    assert surface_altitude_at(vessel, 5.0, 0.0) == 0.0
