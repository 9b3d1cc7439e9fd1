"""SATORBIT — Satellite position prediction from Two-Line Element sets.

Parses NORAD TLEs and propagates them with the SGP4/SDP4 model (Spacetrack
Report #3, revised by Vallado et al. 2006) to Earth-centred inertial
position and velocity at any UTC time.

Modules:
    julian:      Julian day counts, calendar conversion and sidereal time.
    tle_parser:  Parse and validate TLE line pairs into orbital elements.
    propagator:  Near-Earth SGP4 propagation and its configuration.
    deep_space:  Lunar/solar and resonance terms for deep-space orbits.
    satellite:   Named facade answering position queries by time.
    coordinates: Inertial state and geodetic sub-point values.
    catalog:     TLE batch/file loading and CelesTrak client with caching.
    ephemeris:   Tabulate states over a time span as a DataFrame.
    cli:         Command-line interface.

Example:
    >>> from datetime import datetime
    >>> from satorbit import Satellite
    >>>
    >>> sat = Satellite.from_tle(line1, line2, name="ISS")
    >>> state = sat.position_at(datetime(2024, 1, 1, 12, 0))
    >>> state.position, state.velocity
"""

from .constants import WGS72, WGS72OLD, WGS84, EarthGravity
from .coordinates import EciState, Geodetic
from .errors import (
    ConvergenceWarning,
    DecayedOrbit,
    FormatError,
    PropagationError,
    RangeError,
    SatOrbitError,
)
from .julian import Julian
from .propagator import PropagatorConfig, SGP4Propagator
from .satellite import Satellite
from .tle_parser import OrbitalElements, parse_tle

__version__ = "0.1.0"

__all__ = [
    "ConvergenceWarning",
    "DecayedOrbit",
    "EarthGravity",
    "EciState",
    "FormatError",
    "Geodetic",
    "Julian",
    "OrbitalElements",
    "PropagationError",
    "PropagatorConfig",
    "RangeError",
    "SGP4Propagator",
    "SatOrbitError",
    "Satellite",
    "WGS72",
    "WGS72OLD",
    "WGS84",
    "parse_tle",
]
