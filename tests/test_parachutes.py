from autoagl.models import Body, ChuteState, Parachute, Part, Situation, Vessel
from autoagl.parachutes import ParachuteCache, activation_altitude, parachute_activation_altitude

BODY = Body("Testbody", radius=600_000.0, grav_param=3.5316e12)


def make_vessel(vessel_id=1, parts=None):
    return Vessel(vessel_id=vessel_id, situation=Situation.FLYING, body=BODY, parts=parts or [])


def chute_part(alt, state=ChuteState.ARMED):
    return Part("parachuteSingle", Parachute(alt, state))


def test_activation_altitude_per_state():
    assert activation_altitude(Parachute(1000.0, ChuteState.STOWED)) == 0.0
    assert activation_altitude(Parachute(1000.0, ChuteState.ARMED)) == 1000.0
    assert activation_altitude(Parachute(1000.0, ChuteState.SEMIDEPLOYED)) == 1000.0
    assert activation_altitude(Parachute(1000.0, ChuteState.DEPLOYED)) == 1000.0
    assert activation_altitude(Parachute(1000.0, ChuteState.CUT)) == 0.0


def test_highest_active_chute():
    chutes = [
        Parachute(500.0, ChuteState.ARMED),
        Parachute(2000.0, ChuteState.CUT),
        Parachute(1200.0, ChuteState.DEPLOYED),
    ]
    assert parachute_activation_altitude(chutes) == 1200.0
    assert parachute_activation_altitude([]) == 0.0


def test_cache_collects_parachute_parts():
    parts = [Part("capsule"), chute_part(1000.0), Part("tank"), chute_part(500.0)]
    cache = ParachuteCache()
    chutes = cache.update(make_vessel(parts=parts))
    assert [c.deploy_altitude for c in chutes] == [1000.0, 500.0]


def test_cache_rebuilds_only_on_identity_or_part_count_change():
    parts = [Part("capsule"), chute_part(1000.0)]
    vessel = make_vessel(parts=parts)
    cache = ParachuteCache()

    cache.update(vessel)
    cache.update(vessel)
    assert cache.rebuilds == 1

    # Same parts, chute state changes in place: still seen, no rescan
    parts[1].parachute.state = ChuteState.DEPLOYED
    assert cache.update(vessel)[0].state == ChuteState.DEPLOYED
    assert cache.rebuilds == 1

    # Staging drops a part
    vessel.parts = parts[:1]
    assert cache.update(vessel) == []
    assert cache.rebuilds == 2

    # Switch to another vessel with the same part count
    other = make_vessel(vessel_id=2, parts=[chute_part(700.0)])
    assert cache.update(other)[0].deploy_altitude == 700.0
    assert cache.rebuilds == 3


def test_cache_clear_forces_rescan():
    vessel = make_vessel(parts=[chute_part(1000.0)])
    cache = ParachuteCache()
    cache.update(vessel)
    cache.clear()
    assert cache.parachutes == []
    cache.update(vessel)
    assert cache.rebuilds == 2
