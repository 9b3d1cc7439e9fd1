"""Physical and time constants.

Gravity models follow the values used by the SGP4 reference implementation
(Vallado et al., "Revisiting Spacetrack Report #3", AIAA 2006-6753). Element
sets are generated against WGS-72, so that is the default everywhere.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# ── Time ──

HOURS_PER_DAY = 24.0
"""Hours in a day."""

MINUTES_PER_DAY = 1440.0
"""Minutes in a day."""

SECONDS_PER_DAY = 86400.0
"""Seconds in a solar day."""

TICKS_PER_DAY = 8.64e11
"""100-nanosecond ticks in a day."""

OMEGA_E = 1.00273790934
"""Earth rotations per sidereal day."""

# ── Angles ──

TWO_PI = 2.0 * math.pi
"""2π constant."""

# ── Julian epochs ──

EPOCH_JAN0_12H_1900 = 2415020.0
"""Dec 31 1899 12h UTC."""

EPOCH_JAN1_00H_1900 = 2415020.5
"""Jan 1 1900 00h UTC."""

EPOCH_JAN1_12H_1900 = 2415021.0
"""Jan 1 1900 12h UTC."""

EPOCH_JAN1_12H_2000 = 2451545.0
"""Jan 1 2000 12h UTC (J2000)."""

EPOCH_JAN0_00H_1950 = 2433281.5
"""Dec 31 1949 00h UTC, the SGP4 internal day origin."""

# ── Propagation regime ──

DEEP_SPACE_PERIOD_MIN = 225.0
"""Orbital period (minutes) at or above which SDP4 deep-space terms apply."""


@dataclass(frozen=True)
class EarthGravity:
    """Earth gravity constants for one geodetic model.

    Attributes:
        name: Model name.
        mu: Gravitational parameter (km³/s²).
        radius: Equatorial radius (km).
        xke: sqrt(mu) in Earth radii^1.5 per minute.
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        flattening: Ellipsoid flattening, for geodetic conversion.
    """

    name: str
    mu: float
    radius: float
    xke: float
    j2: float
    j3: float
    j4: float
    flattening: float

    @property
    def tumin(self) -> float:
        """Minutes per time unit."""
        return 1.0 / self.xke

    @property
    def j3oj2(self) -> float:
        return self.j3 / self.j2


def _xke(mu: float, radius: float) -> float:
    return 60.0 / math.sqrt(radius**3 / mu)


WGS72OLD = EarthGravity(
    name="wgs72old",
    mu=398600.79964,
    radius=6378.135,
    xke=0.0743669161,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    flattening=1.0 / 298.26,
)

WGS72 = EarthGravity(
    name="wgs72",
    mu=398600.8,
    radius=6378.135,
    xke=_xke(398600.8, 6378.135),
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    flattening=1.0 / 298.26,
)

WGS84 = EarthGravity(
    name="wgs84",
    mu=398600.5,
    radius=6378.137,
    xke=_xke(398600.5, 6378.137),
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
    flattening=1.0 / 298.257223563,
)

GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}
"""Gravity models by lower-case name."""
