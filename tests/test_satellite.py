"""Tests for the Satellite facade."""
from datetime import datetime, timedelta

import numpy as np
import pytest

from satorbit.julian import Julian
from satorbit.propagator import PropagatorConfig
from satorbit.satellite import Satellite
from satorbit.tle_parser import OrbitalElements


ISS_LINE1 = "1 25544U 98067A   24001.50000000  .00016717  00000-0  10270-3 0  9009"
ISS_LINE2 = "2 25544  51.6400 208.5000 0007417  68.0000 292.1000 15.49560000400004"

MOLNIYA_LINE1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_LINE2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"


@pytest.fixture
def iss():
    return Satellite.from_tle(ISS_LINE1, ISS_LINE2, name="ISS (ZARYA)")


class TestNames:
    def test_explicit_name(self, iss):
        assert iss.name == "ISS (ZARYA)"

    def test_defaults_to_catalog_number(self):
        sat = Satellite.from_tle(ISS_LINE1, ISS_LINE2)
        assert sat.name == "25544"

    def test_override_beats_tle_name(self):
        elements = OrbitalElements.parse(ISS_LINE1, ISS_LINE2, name="ISS (ZARYA)")
        assert Satellite(elements, name="Station").name == "Station"
        assert Satellite(elements).name == "ISS (ZARYA)"
        assert Satellite(elements, name="   ").name == "ISS (ZARYA)"


class TestAccessors:
    def test_identity(self, iss):
        assert iss.catalog_number == "25544"
        assert iss.norad_id == 25544
        assert iss.epoch_string == "2024-01-01 12:00:00.000 UTC"
        assert iss.epoch == iss.elements.epoch

    def test_regime(self, iss):
        assert not iss.is_deep_space
        assert Satellite.from_tle(MOLNIYA_LINE1, MOLNIYA_LINE2).is_deep_space

    def test_period(self, iss):
        assert 92.0 < iss.period < 93.5

    def test_config_is_passed_through(self):
        sat = Satellite.from_tle(ISS_LINE1, ISS_LINE2, config=PropagatorConfig.for_wgs84())
        assert sat.propagator.gravity.name == "wgs84"

    def test_repr(self, iss):
        assert "ISS (ZARYA)" in repr(iss)


class TestPositionQueries:
    def test_epoch_datetime_equals_zero_offset(self, iss):
        by_time = iss.position_at(datetime(2024, 1, 1, 12, 0))
        by_offset = iss.position_at(0.0)
        np.testing.assert_allclose(by_time.position, by_offset.position, atol=1e-3)

    def test_datetime_and_minutes_agree(self, iss):
        when = datetime(2024, 1, 1, 12, 0) + timedelta(minutes=75)
        np.testing.assert_allclose(
            iss.position_at(when).position,
            iss.position_at(75).position,
            atol=1e-2,
        )

    def test_julian_query(self, iss):
        state = iss.position_at(iss.epoch.add_hours(3))
        assert state.minutes_since_epoch == pytest.approx(180.0, abs=1e-6)

    def test_minutes_past_epoch(self, iss):
        assert iss.minutes_past_epoch(datetime(2024, 1, 2, 12, 0)) == pytest.approx(1440.0, abs=1e-6)
        assert iss.minutes_past_epoch(Julian.from_civil(2024, 1, 1)) == pytest.approx(-720.0, abs=1e-6)

    def test_queries_do_not_change_state(self, iss):
        before = iss.position_at(500.0)
        for t in (-100.0, 0.0, 3000.0):
            iss.position_at(t)
        after = iss.position_at(500.0)
        assert np.array_equal(before.position, after.position)

    @pytest.mark.parametrize("when", ["2024-01-01", None, True])
    def test_rejects_other_types(self, iss, when):
        with pytest.raises(TypeError):
            iss.position_at(when)

    def test_geodetic_sub_point(self, iss):
        geo = iss.position_at(30.0).to_geodetic()
        assert -52.0 <= geo.latitude_deg <= 52.0
        assert -180.0 <= geo.longitude_deg < 180.0
        assert 380.0 < geo.altitude < 450.0
