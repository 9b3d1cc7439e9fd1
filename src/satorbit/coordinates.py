"""Position/velocity values returned by the propagator.

``EciState`` is the Earth-centred inertial state SGP4 produces (the TEME
frame). ``Geodetic`` is the sub-satellite point on the reference ellipsoid,
obtained by rotating through Greenwich sidereal time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .constants import TWO_PI, WGS72, EarthGravity
from .julian import Julian


@dataclass(frozen=True)
class Geodetic:
    """Geodetic coordinates on the reference ellipsoid.

    Attributes:
        latitude: Geodetic latitude (radians, north positive).
        longitude: Longitude (radians, east positive) in [-π, π).
        altitude: Height above the ellipsoid (km).
    """

    latitude: float
    longitude: float
    altitude: float

    @property
    def latitude_deg(self) -> float:
        return math.degrees(self.latitude)

    @property
    def longitude_deg(self) -> float:
        return math.degrees(self.longitude)


@dataclass(frozen=True, eq=False)
class EciState:
    """Inertial position and velocity at one instant.

    Attributes:
        position: Position vector (km), read-only.
        velocity: Velocity vector (km/s), read-only.
        julian: Time at which the state is valid.
        minutes_since_epoch: Offset of ``julian`` from the element epoch.
        converged: False if Kepler's equation hit its iteration cap.
    """

    position: np.ndarray
    velocity: np.ndarray
    julian: Julian
    minutes_since_epoch: float
    converged: bool = True

    def __post_init__(self) -> None:
        for name in ("position", "velocity"):
            vec = np.array(getattr(self, name), dtype=float)
            if vec.shape != (3,):
                raise ValueError(f"{name} must have 3 components, got {vec.shape}")
            vec.setflags(write=False)
            object.__setattr__(self, name, vec)

    @property
    def radius(self) -> float:
        """Distance from Earth's centre (km)."""
        return float(np.linalg.norm(self.position))

    @property
    def speed(self) -> float:
        """Inertial speed (km/s)."""
        return float(np.linalg.norm(self.velocity))

    def to_geodetic(self, gravity: EarthGravity = WGS72) -> Geodetic:
        """Sub-satellite point for this state.

        Args:
            gravity: Model supplying the ellipsoid radius and flattening.

        Returns:
            Geodetic latitude, longitude and altitude.
        """
        x, y, z = (float(c) for c in self.position)
        a = gravity.radius
        e2 = gravity.flattening * (2.0 - gravity.flattening)

        theta = math.atan2(y, x)
        lon = (theta - self.julian.gmst() + math.pi) % TWO_PI - math.pi
        r = math.hypot(x, y)

        lat = math.atan2(z, r)
        for _ in range(10):
            phi = lat
            sin_phi = math.sin(phi)
            c = 1.0 / math.sqrt(1.0 - e2 * sin_phi * sin_phi)
            lat = math.atan2(z + a * c * e2 * sin_phi, r)
            if abs(lat - phi) < 1e-10:
                break

        sin_lat = math.sin(lat)
        c = 1.0 / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
        # Valid at all latitudes, including directly over a pole
        alt = r * math.cos(lat) + (z + e2 * a * c * sin_lat) * sin_lat - a * c
        return Geodetic(latitude=lat, longitude=lon, altitude=alt)

    def to_dict(self) -> dict:
        """Flatten to a dictionary suitable for DataFrame construction."""
        x, y, z = (float(c) for c in self.position)
        vx, vy, vz = (float(c) for c in self.velocity)
        return {
            "minutes": self.minutes_since_epoch,
            "utc": self.julian.to_datetime(),
            "jd": self.julian.date,
            "x_km": x,
            "y_km": y,
            "z_km": z,
            "vx_km_s": vx,
            "vy_km_s": vy,
            "vz_km_s": vz,
            "converged": self.converged,
        }
