"""TLE parsing and orbital element extraction.

Parses standard NORAD Two-Line Element sets into typed orbital elements and
a handful of derived quantities (period, semi-major axis, altitude).

References:
    - Kelso, T.S. "CelesTrak TLE Format Documentation"
      https://celestrak.org/columns/v04n03/
    - Vallado, D. (2013). Fundamentals of Astrodynamics and Applications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from .constants import MINUTES_PER_DAY, SECONDS_PER_DAY, TWO_PI, WGS72
from .errors import FormatError, RangeError
from .julian import Julian

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
"""Characters in a TLE data line, checksum included."""

ALPHA5_LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"
"""Alpha-5 catalog prefixes; I and O are skipped to avoid confusion with 1 and 0."""

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OrbitalElements:
    """A parsed Two-Line Element set.

    Attributes:
        name: Display name (line 0 if given, else the catalog number).
        catalog_number: Catalog number exactly as written (5 characters).
        norad_id: Numeric NORAD catalog number (Alpha-5 decoded).
        classification: Security classification (U/C/S).
        intl_designator: International designator (launch year/number/piece).
        epoch_year: Full 4-digit epoch year.
        epoch_day: Fractional day of year at epoch.
        epoch: Epoch as a Julian date.
        mean_motion_dot: First derivative of mean motion / 2 (rev/day²).
        mean_motion_ddot: Second derivative of mean motion / 6 (rev/day³).
        bstar: B* drag term (1/Earth radii).
        ephemeris_type: Ephemeris type (normally 0).
        element_set_number: Element set number.
        inclination: Orbital inclination (degrees).
        raan: Right ascension of ascending node (degrees).
        eccentricity: Orbital eccentricity (dimensionless).
        arg_perigee: Argument of perigee (degrees).
        mean_anomaly: Mean anomaly (degrees).
        mean_motion: Mean motion (revolutions per day).
        rev_number: Revolution number at epoch.
        checksum_ok: Whether both line checksums verified.
        period: Derived orbital period (minutes).
        semi_major_axis: Derived two-body semi-major axis (km).
        altitude: Derived mean altitude above the equatorial radius (km).
    """

    # Identity
    name: str
    catalog_number: str
    norad_id: int
    classification: str
    intl_designator: str

    # Epoch
    epoch_year: int
    epoch_day: float
    epoch: Julian

    # Line 1 fields
    mean_motion_dot: float
    mean_motion_ddot: float
    bstar: float
    ephemeris_type: int
    element_set_number: int

    # Line 2 fields
    inclination: float
    raan: float
    eccentricity: float
    arg_perigee: float
    mean_anomaly: float
    mean_motion: float
    rev_number: int

    checksum_ok: bool = True

    # Derived (computed in __post_init__)
    period: float = field(init=False)
    semi_major_axis: float = field(init=False)
    altitude: float = field(init=False)

    def __post_init__(self) -> None:
        """Validate element ranges and compute derived quantities."""
        if not 0.0 <= self.eccentricity < 1.0:
            raise FormatError(f"Eccentricity {self.eccentricity} outside [0, 1)")
        if not 0.0 <= self.inclination <= 180.0:
            raise FormatError(f"Inclination {self.inclination} outside [0, 180]")
        if self.mean_motion <= 0.0:
            raise FormatError(f"Mean motion must be positive, got {self.mean_motion}")

        n_rad_s = self.mean_motion * TWO_PI / SECONDS_PER_DAY
        sma = (WGS72.mu / n_rad_s**2) ** (1.0 / 3.0)
        object.__setattr__(self, "period", MINUTES_PER_DAY / self.mean_motion)
        object.__setattr__(self, "semi_major_axis", sma)
        object.__setattr__(self, "altitude", sma - WGS72.radius)

    @property
    def epoch_dt(self) -> datetime:
        """Epoch as a naive UTC datetime."""
        return _epoch_to_datetime(self.epoch_year, self.epoch_day)

    @property
    def epoch_string(self) -> str:
        """Epoch formatted for display, to the millisecond."""
        return f"{self.epoch_dt:%Y-%m-%d %H:%M:%S.%f}"[:-3] + " UTC"

    @staticmethod
    def parse(
        line1: str,
        line2: str,
        name: Optional[str] = None,
    ) -> OrbitalElements:
        """Parse a TLE from line 1 and line 2 strings.

        Args:
            line1: TLE line 1 (69 characters, starts with '1').
            line2: TLE line 2 (69 characters, starts with '2').
            name: Optional spacecraft name (from line 0).

        Returns:
            Parsed orbital elements.

        Raises:
            FormatError: If a line has the wrong length or line number, the
                catalog numbers differ, or a numeric field does not parse.
        """
        l1 = line1.rstrip()
        l2 = line2.rstrip()

        for num, line in ((1, l1), (2, l2)):
            if len(line) != TLE_LINE_LENGTH:
                raise FormatError(
                    f"Line {num} must be {TLE_LINE_LENGTH} characters, "
                    f"got {len(line)}"
                )
        if l1[0] != "1":
            raise FormatError(f"Line 1 must start with '1', got '{l1[0]}'")
        if l2[0] != "2":
            raise FormatError(f"Line 2 must start with '2', got '{l2[0]}'")

        checksum_ok = _verify_checksum(l1, 1) & _verify_checksum(l2, 2)

        # ── Line 1 ──
        catalog_number = l1[2:7].strip()
        norad_id = _field(catalog_number, "catalog number", _parse_catalog_number)
        classification = l1[7]
        intl_designator = l1[9:17].strip()

        epoch_year_2d = _field(l1[18:20], "epoch year", int)
        epoch_year = (
            1900 + epoch_year_2d if epoch_year_2d >= 57 else 2000 + epoch_year_2d
        )
        epoch_day = _field(l1[20:32], "epoch day", float)
        mean_motion_dot = _field(l1[33:43], "mean motion dot", float)
        mean_motion_ddot = _field(l1[44:52], "mean motion ddot", _parse_implied_decimal)
        bstar = _field(l1[53:61], "bstar", _parse_implied_decimal)
        ephemeris_type = _field(l1[62], "ephemeris type", _parse_optional_int)
        element_set_number = _field(l1[64:68], "element set number", _parse_optional_int)

        # ── Line 2 ──
        catalog_number_2 = l2[2:7].strip()
        if catalog_number != catalog_number_2:
            raise FormatError(
                f"Catalog number mismatch: {catalog_number} vs {catalog_number_2}"
            )

        inclination = _field(l2[8:16], "inclination", float)
        raan = _field(l2[17:25], "raan", float)
        eccentricity = _field(l2[26:33], "eccentricity", _parse_assumed_decimal)
        arg_perigee = _field(l2[34:42], "argument of perigee", float)
        mean_anomaly = _field(l2[43:51], "mean anomaly", float)
        mean_motion = _field(l2[52:63], "mean motion", float)
        rev_number = _field(l2[63:68], "revolution number", _parse_optional_int)

        try:
            epoch = Julian.from_year_day(epoch_year, epoch_day)
        except RangeError as exc:
            raise FormatError(f"Invalid epoch: {exc}") from exc

        return OrbitalElements(
            name=name.strip() if name and name.strip() else catalog_number,
            catalog_number=catalog_number,
            norad_id=norad_id,
            classification=classification,
            intl_designator=intl_designator,
            epoch_year=epoch_year,
            epoch_day=epoch_day,
            epoch=epoch,
            mean_motion_dot=mean_motion_dot,
            mean_motion_ddot=mean_motion_ddot,
            bstar=bstar,
            ephemeris_type=ephemeris_type,
            element_set_number=element_set_number,
            inclination=inclination,
            raan=raan,
            eccentricity=eccentricity,
            arg_perigee=arg_perigee,
            mean_anomaly=mean_anomaly,
            mean_motion=mean_motion,
            rev_number=rev_number,
            checksum_ok=checksum_ok,
        )

    def to_dict(self) -> dict:
        """Convert to a flat dictionary suitable for DataFrame construction.

        Returns:
            Dictionary with all element fields and derived quantities.
        """
        return {
            "norad_id": self.norad_id,
            "name": self.name,
            "epoch": self.epoch_dt,
            "epoch_jd": self.epoch.date,
            "sma_km": self.semi_major_axis,
            "altitude_km": self.altitude,
            "period_min": self.period,
            "inclination_deg": self.inclination,
            "raan_deg": self.raan,
            "eccentricity": self.eccentricity,
            "arg_perigee_deg": self.arg_perigee,
            "mean_anomaly_deg": self.mean_anomaly,
            "mean_motion_rev_day": self.mean_motion,
            "mean_motion_dot": self.mean_motion_dot,
            "bstar": self.bstar,
            "rev_number": self.rev_number,
        }


def parse_tle(line1: str, line2: str, name: Optional[str] = None) -> OrbitalElements:
    """Parse a TLE line pair. See :meth:`OrbitalElements.parse`."""
    return OrbitalElements.parse(line1, line2, name=name)


# ── Private helpers ──


def _field(raw: str, label: str, convert: Callable[[str], T]) -> T:
    """Convert a raw column slice, reporting failures as FormatError."""
    try:
        return convert(raw.strip())
    except ValueError as exc:
        raise FormatError(f"Cannot parse {label} from {raw!r}") from exc


def _parse_optional_int(s: str) -> int:
    return int(s) if s else 0


def _parse_assumed_decimal(s: str) -> float:
    """Parse a field with an assumed leading decimal point (``0007417``)."""
    if not s.isdigit():
        raise ValueError(f"expected digits, got {s!r}")
    return float(f"0.{s}")


def _parse_catalog_number(s: str) -> int:
    """Decode a catalog number, including the Alpha-5 form (``A0001``)."""
    if s and s[0].isalpha():
        prefix = ALPHA5_LETTERS.find(s[0].upper())
        if prefix < 0:
            raise ValueError(f"invalid Alpha-5 prefix {s[0]!r}")
        return (prefix + 10) * 10000 + int(s[1:])
    return int(s)


def _parse_implied_decimal(s: str) -> float:
    """Parse TLE implied-decimal notation into a float.

    The TLE format encodes some fields as ``NNNNN±N`` where the mantissa
    has an implied leading ``0.`` and the final ``±N`` is a base-10
    exponent. For example, ``16538-4`` becomes ``0.16538e-4``.

    Args:
        s: Raw field string from a TLE line.

    Returns:
        Parsed floating-point value.
    """
    s = s.strip()
    if not s or s in ("00000-0", "00000+0"):
        return 0.0

    for i in range(len(s) - 1, 0, -1):
        if s[i] in "+-":
            mantissa = s[:i]
            exponent = s[i:]
            sign = "-" if mantissa.lstrip().startswith("-") else ""
            digits = mantissa.lstrip("+-").lstrip()
            return float(f"{sign}0.{digits}e{exponent}")

    sign = "-" if s.startswith("-") else ""
    digits = s.lstrip("+-").lstrip()
    return float(f"{sign}0.{digits}")


def _verify_checksum(line: str, line_num: int) -> bool:
    """Verify a TLE line's modulo-10 checksum.

    Logs a warning on mismatch rather than raising — many real-world TLE
    sources have minor formatting differences, and we prefer to parse
    rather than reject.

    Args:
        line: Full 69-character TLE line.
        line_num: Line number (1 or 2) for the warning message.

    Returns:
        True if the checksum digit matches.
    """
    if not line[68].isdigit():
        logger.warning("Line %d has no checksum digit", line_num)
        return False

    expected = int(line[68])
    total = 0
    for ch in line[:68]:
        if ch.isdigit():
            total += int(ch)
        elif ch == "-":
            total += 1

    computed = total % 10
    if computed != expected:
        logger.warning(
            "Checksum mismatch on line %d: expected %d, computed %d",
            line_num,
            expected,
            computed,
        )
        return False
    return True


def _epoch_to_datetime(year: int, day_of_year: float) -> datetime:
    """Convert a TLE epoch (year + fractional day-of-year) to a datetime.

    Args:
        year: Full 4-digit year.
        day_of_year: Fractional day of year (1.0 = midnight Jan 1).

    Returns:
        Corresponding UTC datetime.
    """
    jan1 = datetime(year, 1, 1)
    return jan1 + timedelta(days=day_of_year - 1.0)
