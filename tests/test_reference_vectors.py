"""Propagation checked against Vallado's SGP4 verification set (WGS-72).

Each element set exercises a different deep-space branch. Expected states
come from the ``sgp4`` package, Vallado's own implementation, run on the
same lines with the same gravity model.
"""
import numpy as np
import pytest
from sgp4.api import WGS72, Satrec

from satorbit.deep_space import (
    RESONANCE_HALF_DAY,
    RESONANCE_NONE,
    RESONANCE_SYNCHRONOUS,
)
from satorbit.errors import PropagationError
from satorbit.propagator import SGP4Propagator
from satorbit.tle_parser import OrbitalElements


# 12 h resonance, Molniya
MOLNIYA = (
    "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813",
    "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656",
)

# Synchronous resonance, near-zero inclination
GEO = (
    "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190",
    "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00270176  4891",
)

# Deep space without resonance
NON_RESONANT = (
    "1 04632U 70093B   04031.91070959 -.00000084  00000-0  10000-3 0  9955",
    "2 04632  11.4628 273.1101 1450506 207.6000 143.9350  1.20231981 44145",
)

# Deep space without resonance, very long period
LONG_PERIOD = (
    "1 20413U 83020D   05363.79166667  .00000000  00000-0  00000+0 0  7041",
    "2 20413  12.3514 187.4253 7864447 196.3027 356.5478  0.24690082  7978",
)

# Lyddane lunar/solar periodics (inclination under 0.2 rad), high drag
LYDDANE = (
    "1 23599U 95029B   06171.76535463  .00085586  12891-6  12956-2 0  2905",
    "2 23599   6.9327   0.2849 5782022 274.4436  25.2425  4.47796565123555",
)

CASES = [
    pytest.param(MOLNIYA, (0.0, 360.0, 1440.0, 2880.0), id="08195"),
    pytest.param(GEO, (0.0, 360.0, 1440.0), id="28626"),
    pytest.param(NON_RESONANT, (-1440.0, 0.0, 360.0, 1440.0), id="04632"),
    pytest.param(LONG_PERIOD, (0.0, 360.0, 1440.0), id="20413"),
    pytest.param(LYDDANE, (0.0, 360.0, 720.0), id="23599"),
]


def _reference(lines, minutes):
    sat = Satrec.twoline2rv(lines[0], lines[1], WGS72)
    return sat.sgp4_tsince(minutes)


def _propagator(lines):
    return SGP4Propagator(OrbitalElements.parse(*lines))


class TestVerificationSet:
    @pytest.mark.parametrize("lines, times", CASES)
    def test_matches_reference_implementation(self, lines, times):
        prop = _propagator(lines)
        for minutes in times:
            code, position, velocity = _reference(lines, minutes)
            if code != 0:
                with pytest.raises(PropagationError) as info:
                    prop.position_at(minutes)
                assert info.value.code == code
                continue
            state = prop.position_at(minutes)
            np.testing.assert_allclose(state.position, position, atol=0.1, err_msg=f"t={minutes}")
            np.testing.assert_allclose(state.velocity, velocity, atol=1e-4, err_msg=f"t={minutes}")

    def test_molniya_published_epoch_position(self):
        # First row of tcppver.out for catalog 08195
        state = _propagator(MOLNIYA).position_at(0.0)
        np.testing.assert_allclose(
            state.position, (2349.89483350, -14785.93811562, 0.02119378), atol=1.0
        )


class TestBranchCoverage:
    """The element sets above really do reach the branches they are named for."""

    def test_half_day_resonance(self):
        assert _propagator(MOLNIYA).deep_space.irez == RESONANCE_HALF_DAY

    def test_synchronous_resonance(self):
        assert _propagator(GEO).deep_space.irez == RESONANCE_SYNCHRONOUS

    @pytest.mark.parametrize("lines", [NON_RESONANT, LONG_PERIOD])
    def test_no_resonance(self, lines):
        prop = _propagator(lines)
        assert prop.is_deep_space
        assert prop.deep_space.irez == RESONANCE_NONE

    def test_lyddane_inclination(self):
        prop = _propagator(LYDDANE)
        assert prop.is_deep_space
        assert prop.inclo < 0.2
