import csv
import pytest

from autoagl.models import AltimeterMode, ChuteState, Situation
from autoagl.settings import Settings
from sim.scenarios import SCENARIOS, chute_descent, cliff_run, on_the_pad
from sim.world import LOG_COLUMNS, World

ASL, AGL, NONE = AltimeterMode.ASL, AltimeterMode.AGL, AltimeterMode.NONE
DT = 0.1


def fly_until_down(world, max_s=240.0):
    """Step until the vessel is on the ground. Returns (first AGL time, mode just before touchdown)."""
    first_agl = None
    before = world.altimeter
    while world.time_s < max_s:
        before = world.altimeter
        world.step(DT)
        if world.altimeter == AGL and first_agl is None:
            first_agl = world.time_s
        if world.landed_at is not None:
            return first_agl, before
    pytest.fail("vessel never came down")


@pytest.mark.parametrize("key", sorted(SCENARIOS))
def test_every_scenario_runs_and_logs(tmp_path, key):
    log_path = tmp_path / "log.csv"
    world = World(SCENARIOS[key](), log_path=str(log_path))
    for _ in range(30):
        world.step(DT)
    world.close()

    with log_path.open(newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == LOG_COLUMNS
    assert len(rows) == 31


def test_world_without_log():
    world = World(on_the_pad(), log_path=None)
    world.step(DT)
    world.close()


def test_chute_descent_lands_in_agl():
    world = World(chute_descent(), log_path=None)
    first_agl, mode_at_touchdown = fly_until_down(world)

    assert mode_at_touchdown == AGL
    assert first_agl is not None
    assert not world.crashed
    assert world.parts[1].parachute.state == ChuteState.DEPLOYED
    assert world.monitor.summary().auto_switches >= 1


def test_back_to_landed_preference_after_touchdown():
    world = World(chute_descent(), log_path=None)
    fly_until_down(world)
    for _ in range(30):
        world.step(DT)
    assert world.situation == Situation.LANDED
    assert world.altimeter == ASL


def test_projection_switches_earlier_toward_cliff():
    with_projection = World(cliff_run(), log_path=None)
    first_proj, mode_proj = fly_until_down(with_projection)
    crash_proj = with_projection.time_s

    without = World(cliff_run(), settings=Settings(path_projection=False), log_path=None)
    first_plain, _ = fly_until_down(without)

    assert with_projection.crashed
    assert mode_proj == AGL
    assert crash_proj - first_proj > 3.0
    assert first_plain is None or first_plain > first_proj


def test_on_the_pad_follows_landed_preference():
    world = World(on_the_pad(), log_path=None)
    for _ in range(10):
        world.step(DT)
    assert world.altimeter == ASL

    world = World(on_the_pad(), settings=Settings(landed_preference=AGL), log_path=None)
    for _ in range(10):
        world.step(DT)
    assert world.altimeter == AGL


def test_pilot_click_locks_until_recommendation_agrees():
    world = World(on_the_pad(), log_path=None)
    world.step(DT)
    world.click_altimeter()
    assert world.altimeter == AGL
    assert world.controller.override.locked_mode == AGL

    for _ in range(30):
        world.step(DT)
    assert world.altimeter == AGL
    assert world.monitor.summary().user_switches == 1
    assert world.monitor.summary().auto_switches == 0

    # Preference now agrees with the pilot: lock released, mode kept
    world.settings = Settings(landed_preference=AGL)
    for _ in range(5):
        world.step(DT)
    assert world.controller.override.locked_mode == NONE
    assert world.altimeter == AGL
    assert world.monitor.summary().overrides_cleared == 1


def test_pause_freezes_time_and_controller():
    world = World(chute_descent(), log_path=None)
    world.step(DT)
    world.toggle_pause()
    assert world.controller.paused
    t = world.time_s
    for _ in range(5):
        world.step(DT)
    assert world.time_s == t

    world.toggle_pause()
    assert not world.controller.paused
    world.step(DT)
    assert world.time_s > t


def test_reset_starts_a_new_flight():
    world = World(on_the_pad(), log_path=None)
    world.step(DT)
    world.click_altimeter()
    assert world.controller.override.locked_mode == AGL

    world.reset(chute_descent())
    assert world.controller.override.locked_mode == NONE
    assert world.vessel_id == 2
    assert world.landed_at is None


def test_arm_chutes_arms_stowed_only():
    world = World(chute_descent(), log_path=None)
    world.arm_chutes()
    states = [p.parachute.state for p in world.parts if p.parachute is not None]
    assert states == [ChuteState.ARMED, ChuteState.ARMED]


def test_thrust_lifts_off_the_pad():
    world = World(on_the_pad(), log_path=None)
    world.adjust_thrust(20.0)
    world.step(DT)
    assert world.landed_at is None
    assert world.situation == Situation.FLYING
    world.adjust_thrust(-100.0)
    assert world.thrust_mps2 == 0.0
