"""Tests for SGP4/SDP4 propagation."""
import math
import warnings

import numpy as np
import pytest

from satorbit.constants import WGS72, WGS84
from satorbit.deep_space import RESONANCE_HALF_DAY, RESONANCE_SYNCHRONOUS
from satorbit.errors import (
    ConvergenceWarning,
    DecayedOrbit,
    PropagationError,
)
from satorbit.propagator import PropagatorConfig, SGP4Propagator, solve_kepler
from satorbit.tle_parser import OrbitalElements


VANGUARD_LINE1 = "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753"
VANGUARD_LINE2 = "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667"

ISS_LINE1 = "1 25544U 98067A   24001.50000000  .00016717  00000-0  10270-3 0  9009"
ISS_LINE2 = "2 25544  51.6400 208.5000 0007417  68.0000 292.1000 15.49560000400004"

MOLNIYA_LINE1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_LINE2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"

GEO_LINE1 = "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190"
GEO_LINE2 = "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00270176  4891"

# Perigee below the surface: a(1 - e) is about 0.98 Earth radii
SUBSURFACE_LINE1 = "1 99999U 24001A   24001.50000000  .00000000  00000-0  00000-0 0  9994"
SUBSURFACE_LINE2 = "2 99999  51.6000 100.0000 1000000   0.0000   0.0000 15.00000000    18"

# ISS with an extreme drag term: B* of 0.5 drives mean eccentricity negative
HIGH_DRAG_LINE1 = "1 25544U 98067A   24001.50000000  .00016717  00000-0  50000-0 0  9001"


def _propagator(line1, line2, config=None):
    return SGP4Propagator(OrbitalElements.parse(line1, line2), config)


# ── Reference vector ──


class TestReferenceVector:
    """Vallado's published verification output for catalog 00005 (WGS-72)."""

    @pytest.mark.parametrize(
        "minutes, position, velocity",
        [
            (
                0.0,
                (7022.46529266, -1400.08296755, 0.03995155),
                (1.893841015, 6.405893759, 4.534807250),
            ),
            (
                360.0,
                (-7154.03120202, -3783.17682504, -3536.19412294),
                (4.741887409, -4.151817765, -2.093935425),
            ),
        ],
    )
    def test_vanguard(self, minutes, position, velocity):
        state = _propagator(VANGUARD_LINE1, VANGUARD_LINE2).position_at(minutes)
        np.testing.assert_allclose(state.position, position, atol=1.0)
        np.testing.assert_allclose(state.velocity, velocity, atol=1e-3)
        assert state.converged


# ── Near-Earth behaviour ──


class TestNearEarth:
    def test_regime(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        assert not prop.is_deep_space
        assert prop.deep_space is None
        assert prop.period < 225.0

    def test_epoch_radius_matches_elements(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        state = prop.position_at(0.0)
        e = prop.ecco
        a = prop.semi_major_axis
        assert a * (1 - e) - 20.0 < state.radius < a * (1 + e) + 20.0

    def test_speed_is_orbital(self):
        state = _propagator(ISS_LINE1, ISS_LINE2).position_at(45.0)
        assert 7.5 < state.speed < 7.8

    def test_deterministic(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        first = prop.position_at(1234.5)
        prop.position_at(-600.0)
        second = prop.position_at(1234.5)
        assert np.array_equal(first.position, second.position)
        assert np.array_equal(first.velocity, second.velocity)

    def test_continuity(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        for t in (0.0, 100.0, 1000.0):
            a = prop.position_at(t)
            b = prop.position_at(t + 1.0 / 60.0)
            # One second at ~7.7 km/s
            assert np.linalg.norm(b.position - a.position) < 10.0

    def test_velocity_consistent_with_position(self):
        prop = _propagator(VANGUARD_LINE1, VANGUARD_LINE2)
        dt = 1.0 / 60.0
        a = prop.position_at(50.0)
        b = prop.position_at(50.0 + dt)
        finite = (b.position - a.position) / 60.0
        np.testing.assert_allclose(finite, a.velocity, atol=0.01)

    def test_backwards_propagation(self):
        state = _propagator(ISS_LINE1, ISS_LINE2).position_at(-1440.0)
        assert 6600 < state.radius < 6900

    def test_state_is_tagged_with_time(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        state = prop.position_at(90.0)
        assert state.minutes_since_epoch == 90.0
        assert state.julian.date == pytest.approx(prop.epoch.date + 90.0 / 1440.0)

    def test_position_at_time_matches_offset(self):
        prop = _propagator(ISS_LINE1, ISS_LINE2)
        by_time = prop.position_at_time(prop.epoch.add_minutes(30.0))
        by_offset = prop.position_at(30.0)
        np.testing.assert_allclose(by_time.position, by_offset.position, atol=1e-3)

    def test_state_vectors_are_read_only(self):
        state = _propagator(ISS_LINE1, ISS_LINE2).position_at(0.0)
        with pytest.raises(ValueError):
            state.position[0] = 0.0

    def test_gravity_model_changes_result_slightly(self):
        wgs72 = _propagator(ISS_LINE1, ISS_LINE2).position_at(60.0)
        wgs84 = _propagator(ISS_LINE1, ISS_LINE2, PropagatorConfig.for_wgs84()).position_at(60.0)
        diff = np.linalg.norm(wgs72.position - wgs84.position)
        assert 0.0 < diff < 5.0


# ── Deep space ──


class TestDeepSpace:
    def test_molniya_regime(self):
        prop = _propagator(MOLNIYA_LINE1, MOLNIYA_LINE2)
        assert prop.is_deep_space
        assert prop.isimp
        assert prop.deep_space.irez == RESONANCE_HALF_DAY

    def test_geo_regime(self):
        prop = _propagator(GEO_LINE1, GEO_LINE2)
        assert prop.is_deep_space
        assert prop.deep_space.irez == RESONANCE_SYNCHRONOUS

    def test_molniya_radius_bounds(self):
        prop = _propagator(MOLNIYA_LINE1, MOLNIYA_LINE2)
        assert prop.semi_major_axis == pytest.approx(26554.0, abs=50.0)
        for t in np.arange(0.0, 2880.0, 60.0):
            r = prop.position_at(float(t)).radius
            assert 7000.0 < r < 46000.0

    def test_geo_radius(self):
        prop = _propagator(GEO_LINE1, GEO_LINE2)
        for t in (0.0, 720.0, 1440.0, 10080.0):
            assert prop.position_at(t).radius == pytest.approx(42164.0, abs=60.0)

    def test_deep_space_deterministic(self):
        prop = _propagator(MOLNIYA_LINE1, MOLNIYA_LINE2)
        first = prop.position_at(5000.0)
        prop.position_at(100.0)
        prop.position_at(-3000.0)
        second = prop.position_at(5000.0)
        assert np.array_equal(first.position, second.position)

    def test_deep_space_continuity(self):
        prop = _propagator(GEO_LINE1, GEO_LINE2)
        # Crosses a resonance integrator step boundary at 720 min
        a = prop.position_at(719.995)
        b = prop.position_at(720.005)
        assert np.linalg.norm(b.position - a.position) < 5.0


# ── Failures ──


class TestFailures:
    def test_subsurface_perigee_decays(self):
        prop = _propagator(SUBSURFACE_LINE1, SUBSURFACE_LINE2)
        with pytest.raises(DecayedOrbit) as info:
            prop.position_at(0.0)
        assert info.value.code == 6
        assert info.value.minutes == 0.0

    def test_propagator_survives_a_failed_query(self):
        prop = _propagator(SUBSURFACE_LINE1, SUBSURFACE_LINE2)
        with pytest.raises(DecayedOrbit):
            prop.position_at(0.0)
        # Half an orbit later the satellite is near apogee
        state = prop.position_at(prop.period / 2.0)
        assert state.radius > WGS72.radius

    def test_decayed_orbit_is_propagation_error(self):
        assert issubclass(DecayedOrbit, PropagationError)

    def test_mean_eccentricity_out_of_range(self):
        prop = _propagator(HIGH_DRAG_LINE1, ISS_LINE2)
        # Near epoch the drag term is still small
        prop.position_at(0.0)
        with pytest.raises(PropagationError) as info:
            prop.position_at(20160.0)
        assert not isinstance(info.value, DecayedOrbit)
        assert info.value.code == 1
        assert info.value.minutes == 20160.0

    def test_mean_motion_below_zero_decays(self, monkeypatch):
        prop = _propagator(MOLNIYA_LINE1, MOLNIYA_LINE2)
        secular = prop.deep_space.secular

        def collapsed(t, *args):
            em, argpm, inclm, mm, nodem, _ = secular(t, *args)
            return em, argpm, inclm, mm, nodem, -1.0e-3

        monkeypatch.setattr(prop.deep_space, "secular", collapsed)
        with pytest.raises(DecayedOrbit) as info:
            prop.position_at(60.0)
        assert info.value.code == 2
        assert info.value.minutes == 60.0

    def test_perturbed_eccentricity_out_of_range(self, monkeypatch):
        prop = _propagator(MOLNIYA_LINE1, MOLNIYA_LINE2)
        periodic = prop.deep_space.periodic

        def hyperbolic(t, *args):
            _, inclp, nodep, argpp, mp = periodic(t, *args)
            return 1.5, inclp, nodep, argpp, mp

        monkeypatch.setattr(prop.deep_space, "periodic", hyperbolic)
        with pytest.raises(PropagationError) as info:
            prop.position_at(60.0)
        assert not isinstance(info.value, DecayedOrbit)
        assert info.value.code == 3


class TestKepler:
    def test_circular_orbit_is_trivial(self):
        eo1, converged = solve_kepler(1.0, 0.0, 0.0)
        assert converged
        assert eo1 == pytest.approx(1.0)

    def test_solution_satisfies_equation(self):
        u, axnl, aynl = 2.0, 0.3, 0.1
        eo1, converged = solve_kepler(u, axnl, aynl, tolerance=1e-12, max_iterations=50)
        assert converged
        assert eo1 + aynl * math.cos(eo1) - axnl * math.sin(eo1) == pytest.approx(u, abs=1e-10)

    def test_iteration_cap_flags_result(self):
        _, converged = solve_kepler(2.0, 0.3, 0.1, tolerance=0.0, max_iterations=3)
        assert not converged

    def test_non_convergence_warns(self):
        config = PropagatorConfig(kepler_tolerance=0.0)
        prop = _propagator(VANGUARD_LINE1, VANGUARD_LINE2, config)
        with pytest.warns(ConvergenceWarning):
            state = prop.position_at(100.0)
        assert not state.converged
        # Still a usable state
        assert 6000.0 < state.radius < 12000.0

    def test_default_settings_do_not_warn(self):
        prop = _propagator(VANGUARD_LINE1, VANGUARD_LINE2)
        with warnings.catch_warnings():
            warnings.simplefilter("error", ConvergenceWarning)
            prop.position_at(100.0)


class TestConfig:
    def test_defaults(self):
        config = PropagatorConfig()
        assert config.gravity is WGS72
        assert config.kepler_tolerance == 1e-6
        assert config.max_kepler_iterations == 10

    def test_presets(self):
        assert PropagatorConfig.for_wgs84().gravity is WGS84
        assert PropagatorConfig.for_wgs72old().gravity.name == "wgs72old"
