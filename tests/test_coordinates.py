"""Tests for inertial states and geodetic sub-points."""
import math

import numpy as np
import pytest

from satorbit.constants import WGS72, WGS84
from satorbit.coordinates import EciState
from satorbit.julian import Julian


J2000 = Julian(2451545.0)


def _eci_from_geodetic(lat_deg, lon_deg, alt_km, julian, gravity=WGS72):
    """Forward transform used to build states with a known sub-point."""
    a = gravity.radius
    e2 = gravity.flattening * (2.0 - gravity.flattening)
    phi = math.radians(lat_deg)
    n = a / math.sqrt(1.0 - e2 * math.sin(phi) ** 2)
    x = (n + alt_km) * math.cos(phi) * math.cos(math.radians(lon_deg))
    y = (n + alt_km) * math.cos(phi) * math.sin(math.radians(lon_deg))
    z = (n * (1.0 - e2) + alt_km) * math.sin(phi)

    theta = julian.gmst()
    return (
        x * math.cos(theta) - y * math.sin(theta),
        x * math.sin(theta) + y * math.cos(theta),
        z,
    )


def _state(position, julian=J2000):
    return EciState(position=position, velocity=(0.0, 0.0, 0.0), julian=julian, minutes_since_epoch=0.0)


class TestGeodetic:
    def test_equator_at_j2000(self):
        # GMST at J2000 is 280.46061837 deg, so inertial +x sits at 79.53938163 E
        geo = _state((WGS72.radius + 400.0, 0.0, 0.0)).to_geodetic()
        assert geo.latitude_deg == pytest.approx(0.0, abs=1e-9)
        assert geo.longitude_deg == pytest.approx(79.53938163, abs=1e-4)
        assert geo.altitude == pytest.approx(400.0, abs=1e-6)

    def test_over_the_north_pole(self):
        polar_radius = WGS72.radius * (1.0 - WGS72.flattening)
        geo = _state((0.0, 0.0, polar_radius + 800.0)).to_geodetic()
        assert geo.latitude_deg == pytest.approx(90.0)
        assert geo.altitude == pytest.approx(800.0, abs=1e-6)

    def test_over_the_south_pole(self):
        polar_radius = WGS72.radius * (1.0 - WGS72.flattening)
        geo = _state((0.0, 0.0, -(polar_radius + 35786.0))).to_geodetic()
        assert geo.latitude_deg == pytest.approx(-90.0)
        assert geo.altitude == pytest.approx(35786.0, abs=1e-6)

    @pytest.mark.parametrize(
        "lat, lon, alt",
        [
            (45.0, 30.0, 500.0),
            (-33.8688, 151.2093, 0.0),
            (89.9, -120.0, 1200.0),
            (51.6, -179.5, 420.0),
        ],
    )
    def test_known_sub_points(self, lat, lon, alt):
        jd = Julian.from_civil(2024, 3, 20, 3, 6)
        geo = _state(_eci_from_geodetic(lat, lon, alt, jd), jd).to_geodetic()
        assert geo.latitude_deg == pytest.approx(lat, abs=1e-7)
        assert geo.longitude_deg == pytest.approx(lon, abs=1e-7)
        assert geo.altitude == pytest.approx(alt, abs=1e-6)

    def test_ellipsoid_follows_gravity_model(self):
        jd = Julian.from_civil(2024, 1, 1)
        position = _eci_from_geodetic(40.0, 10.0, 600.0, jd, WGS84)
        geo = _state(position, jd).to_geodetic(WGS84)
        assert geo.altitude == pytest.approx(600.0, abs=1e-6)

    def test_longitude_range(self):
        jd = Julian.from_civil(2024, 1, 1)
        for lon in np.arange(-180.0, 180.0, 15.0):
            geo = _state(_eci_from_geodetic(10.0, float(lon), 300.0, jd), jd).to_geodetic()
            assert -math.pi <= geo.longitude < math.pi


class TestEciState:
    def test_radius_and_speed(self):
        state = EciState(
            position=(3.0, 4.0, 12.0),
            velocity=(1.0, 2.0, 2.0),
            julian=J2000,
            minutes_since_epoch=5.0,
        )
        assert state.radius == pytest.approx(13.0)
        assert state.speed == pytest.approx(3.0)

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            _state((1.0, 2.0))

    def test_to_dict(self):
        d = _state((7000.0, 0.0, 0.0)).to_dict()
        assert d["x_km"] == 7000.0
        assert d["jd"] == J2000.date
        assert d["converged"] is True
