import math
import pytest
from hypothesis import given, strategies as st

from autoagl.models import AltimeterMode
from autoagl.monitor import SwitchMonitor


def test_counts_auto_and_user_switches():
    mon = SwitchMonitor()
    mon.record_change(1.0, by_user=False)
    mon.record_change(3.0, by_user=True)
    mon.record_change(4.5, by_user=False)

    stats = mon.summary()
    assert stats.auto_switches == 2
    assert stats.user_switches == 1
    assert stats.total_switches == 3
    assert stats.min_interval_s == pytest.approx(1.5)


def test_single_switch_has_no_interval():
    mon = SwitchMonitor()
    mon.record_change(2.0, by_user=False)
    assert math.isinf(mon.summary().min_interval_s)


def test_time_per_mode():
    mon = SwitchMonitor()
    mon.record_time(AltimeterMode.AGL, 0.5)
    mon.record_time(AltimeterMode.ASL, 1.0)
    mon.record_time(AltimeterMode.AGL, 0.25)
    mon.record_time(AltimeterMode.NONE, 10.0)
    assert mon.stats.time_in_agl_s == pytest.approx(0.75)
    assert mon.stats.time_in_asl_s == pytest.approx(1.0)


def test_overrides_cleared():
    mon = SwitchMonitor()
    mon.record_override_cleared()
    mon.record_override_cleared()
    assert mon.summary().overrides_cleared == 2


@given(gaps=st.lists(st.floats(0.0, 100.0), min_size=1, max_size=20))
def test_min_interval_is_smallest_gap(gaps):
    mon = SwitchMonitor()
    t = 0.0
    mon.record_change(t, by_user=False)
    times = [t]
    for g in gaps:
        t += g
        mon.record_change(t, by_user=False)
        times.append(t)
    expected = min(b - a for a, b in zip(times, times[1:]))
    assert mon.summary().min_interval_s == pytest.approx(expected)
