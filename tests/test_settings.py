import dataclasses
import math
import pytest

from autoagl.models import AltimeterMode
from autoagl.settings import (
    ATM_COLLISION_THRESHOLDS,
    PARACHUTE_ALTITUDE_MULTIPLIERS,
    VAC_COLLISION_THRESHOLDS,
    Settings,
    ValueList,
    format_collision_threshold,
    format_parachute_multiplier,
)


def test_defaults():
    s = Settings()
    assert s.enabled
    assert s.landed_preference == AltimeterMode.ASL
    assert s.atm_collision_s == 10
    assert s.vac_collision_s == 30
    assert s.parachute_multiplier == 2.0
    assert s.path_projection


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().enabled = False


@pytest.mark.parametrize("pressure,expected", [
    (1.0, 10.0),
    (1.4, 10.0),
    (0.0, 30.0),
    (0.5, 20.0),
    (0.25, 25.0),
])
def test_threshold_between_vacuum_and_sea_level(pressure, expected):
    assert Settings().collision_threshold_s(pressure) == pytest.approx(expected)


def test_thin_air_threshold():
    t = Settings().collision_threshold_s(math.exp(-1.0))
    assert t == pytest.approx(math.exp(-1.0) * 10 + (1 - math.exp(-1.0)) * 30)


def test_disabled_thresholds():
    no_atm = Settings(atm_collision_s=0)
    assert no_atm.collision_threshold_s(1.0) is None
    assert no_atm.collision_threshold_s(0.0) == 30.0
    # Partial air blends toward the disabled end
    assert no_atm.collision_threshold_s(0.5) == pytest.approx(15.0)

    no_vac = Settings(vac_collision_s=0)
    assert no_vac.collision_threshold_s(0.0) is None
    assert no_vac.collision_threshold_s(1.0) == 10.0

    neither = Settings(atm_collision_s=0, vac_collision_s=0)
    for pressure in (0.0, 0.3, 1.0):
        assert neither.collision_threshold_s(pressure) is None


def test_formatters():
    assert format_collision_threshold(0) == "Disabled"
    assert format_collision_threshold(15) == "15s"
    assert format_parachute_multiplier(0) == "Disabled"
    assert format_parachute_multiplier(1.5) == "1.5x"


def test_option_lists():
    assert ATM_COLLISION_THRESHOLDS.default_label == "10s"
    assert VAC_COLLISION_THRESHOLDS.default_label == "30s"
    assert PARACHUTE_ALTITUDE_MULTIPLIERS.default_label == "2.0x"
    assert ATM_COLLISION_THRESHOLDS.labels[0] == "Disabled"
    assert "120s" in ATM_COLLISION_THRESHOLDS.labels
    assert "0.5x" in PARACHUTE_ALTITUDE_MULTIPLIERS.labels


def test_unknown_label_falls_back_to_default():
    assert ATM_COLLISION_THRESHOLDS["7s"] == 10
    assert PARACHUTE_ALTITUDE_MULTIPLIERS["lots"] == 2.0
    assert VAC_COLLISION_THRESHOLDS["Disabled"] == 0


def test_strict_lookup_rejects_unknown_labels():
    with pytest.raises(ValueError):
        ATM_COLLISION_THRESHOLDS.strict("7s")
    assert ATM_COLLISION_THRESHOLDS.strict("60s") == 60


def test_value_list_keeps_order():
    vl = ValueList(1, str, [3, 1, 2])
    assert vl.labels == ["3", "1", "2"]
    assert vl["2"] == 2


def test_from_labels():
    s = Settings.from_labels(
        enabled=True,
        landed="agl",
        atm_collision="5s",
        vac_collision="Disabled",
        parachute="1.5x",
        path_projection=False,
    )
    assert s.landed_preference == AltimeterMode.AGL
    assert s.atm_collision_s == 5
    assert s.vac_collision_s == 0
    assert s.parachute_multiplier == 1.5
    assert not s.path_projection


def test_from_labels_rejects_unknown_preference():
    with pytest.raises(ValueError) as excinfo:
        Settings.from_labels(landed="sideways")
    assert excinfo.value.__cause__ is None
    assert excinfo.value.__suppress_context__


@pytest.mark.parametrize("kwargs", [
    dict(landed_preference=AltimeterMode.NONE),
    dict(atm_collision_s=-1),
    dict(vac_collision_s=-5),
    dict(parachute_multiplier=-0.5),
])
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)
