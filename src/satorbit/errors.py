"""Error kinds raised by satorbit.

Every failure in the library surfaces as one of these named conditions so
callers can tell a bad calendar input from a malformed element set from an
orbit that is no longer valid at the requested time.
"""

from __future__ import annotations


class SatOrbitError(Exception):
    """Base class for all satorbit errors."""


class RangeError(SatOrbitError, ValueError):
    """Calendar input outside the supported year window or day-of-year bounds."""


class FormatError(SatOrbitError, ValueError):
    """Malformed TLE line: wrong length, bad line number or unparsable field."""


class PropagationError(SatOrbitError):
    """The element set cannot be propagated to the requested time.

    Attributes:
        code: SGP4 error code (1 mean eccentricity, 2 mean motion,
            3 perturbed eccentricity, 4 semi-latus rectum, 6 decay).
        minutes: Time since epoch of the failed query (minutes).
    """

    def __init__(self, message: str, code: int, minutes: float) -> None:
        super().__init__(message)
        self.code = code
        self.minutes = minutes


class DecayedOrbit(PropagationError):
    """Propagated orbit is non-physical: the satellite has decayed."""


class ConvergenceWarning(RuntimeWarning):
    """Kepler's equation hit its iteration cap before reaching tolerance."""
