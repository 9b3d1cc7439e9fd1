"""Julian dates and sidereal time.

A Julian date is a continuous count of days where the day starts at noon.
Some reference values:

    01/01/1990 00:00 UTC - 2447892.5
    01/01/1990 12:00 UTC - 2447893.0
    01/01/2000 00:00 UTC - 2451544.5
    01/01/2001 00:00 UTC - 2451910.5

References:
    - Meeus, J. "Astronomical Formulae for Calculators", 4th ed., pp. 23-25.
    - The 1992 Astronomical Almanac, page B6.
    - Kelso, T.S. "Orbital Coordinate Systems, Part III", Satellite Times,
      Nov/Dec 1995.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .constants import (
    EPOCH_JAN0_12H_1900,
    EPOCH_JAN1_00H_1900,
    EPOCH_JAN1_12H_1900,
    EPOCH_JAN1_12H_2000,
    HOURS_PER_DAY,
    MINUTES_PER_DAY,
    OMEGA_E,
    SECONDS_PER_DAY,
    TICKS_PER_DAY,
    TWO_PI,
)
from .errors import RangeError

MIN_YEAR = 1900
"""Earliest supported calendar year."""

MAX_YEAR = 2100
"""Latest supported calendar year."""


@dataclass(frozen=True, order=True)
class Julian:
    """An immutable Julian date.

    Arithmetic returns a new ``Julian``; the original is never modified.

    Attributes:
        date: Days since noon, 1 January 4713 BC.
    """

    date: float

    # ── Construction ──

    @classmethod
    def from_year_day(cls, year: int, day_of_year: float) -> Julian:
        """Create a Julian date from a year and fractional day-of-year.

        Day 1.0 is January 1 at 00h, 1.5 is January 1 at 12h, 2.0 is
        January 2 at 00h.

        Args:
            year: Four-digit year.
            day_of_year: Fractional day of year in [1, 367).

        Raises:
            RangeError: If the year is outside 1900-2100 or the day is out
                of bounds.
        """
        if year < MIN_YEAR or year > MAX_YEAR:
            raise RangeError(
                f"Year {year} outside supported range {MIN_YEAR}-{MAX_YEAR}"
            )
        # The last day of a leap year is day 366
        if day_of_year < 1.0 or day_of_year >= 367.0:
            raise RangeError(f"Day of year {day_of_year} outside [1, 367)")

        y = year - 1

        # Centuries are not leap years unless they divide by 400
        a = y // 100
        b = 2 - a + a // 4

        jan01 = math.floor(365.25 * y) + math.floor(30.6001 * 14) + 1720994.5 + b
        return cls(jan01 + day_of_year)

    @classmethod
    def from_civil(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
    ) -> Julian:
        """Create a Julian date from UTC calendar fields.

        Raises:
            RangeError: If the year is outside 1900-2100 or any calendar
                field is invalid.
        """
        if year < MIN_YEAR or year > MAX_YEAR:
            raise RangeError(
                f"Year {year} outside supported range {MIN_YEAR}-{MAX_YEAR}"
            )
        if not 0 <= millisecond < 1000:
            raise RangeError(f"Millisecond {millisecond} outside [0, 1000)")
        try:
            dt = datetime(year, month, day, hour, minute, second, millisecond * 1000)
        except ValueError as exc:
            raise RangeError(str(exc)) from exc
        return cls.from_datetime(dt)

    @classmethod
    def from_datetime(cls, dt: datetime) -> Julian:
        """Create a Julian date from a datetime.

        Naive datetimes are taken to be UTC; aware ones are converted.
        """
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

        day = dt.timetuple().tm_yday + (
            dt.hour
            + (dt.minute + (dt.second + dt.microsecond / 1e6) / 60.0) / 60.0
        ) / HOURS_PER_DAY
        return cls.from_year_day(dt.year, day)

    # ── Conversion ──

    def to_datetime(self) -> datetime:
        """Return the naive UTC datetime for this Julian date, to the millisecond."""
        d2 = self.date + 0.5
        z = int(d2)
        alpha = int((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - alpha // 4
        b = a + 1524
        c = int((b - 122.1) / 365.25)
        d = int(365.25 * c)
        e = int((b - d) / 30.6001)

        month = e - 1 if e <= 13 else e - 13
        year = c - 4716 if month >= 3 else c - 4715

        jan01 = Julian.from_year_day(year, 1.0)
        doy = self.date - jan01.date  # zero-relative

        dt = datetime(year, 1, 1) + timedelta(days=doy)

        # Float day counts only resolve to tens of microseconds
        ms = round(dt.microsecond / 1000.0)
        return dt.replace(microsecond=0) + timedelta(milliseconds=ms)

    def from_jan0_12h_1900(self) -> float:
        return self.date - EPOCH_JAN0_12H_1900

    def from_jan1_00h_1900(self) -> float:
        return self.date - EPOCH_JAN1_00H_1900

    def from_jan1_12h_1900(self) -> float:
        return self.date - EPOCH_JAN1_12H_1900

    def from_jan1_12h_2000(self) -> float:
        return self.date - EPOCH_JAN1_12H_2000

    # ── Arithmetic ──

    def add_days(self, days: float) -> Julian:
        return Julian(self.date + days)

    def add_hours(self, hours: float) -> Julian:
        return Julian(self.date + hours / HOURS_PER_DAY)

    def add_minutes(self, minutes: float) -> Julian:
        return Julian(self.date + minutes / MINUTES_PER_DAY)

    def add_seconds(self, seconds: float) -> Julian:
        return Julian(self.date + seconds / SECONDS_PER_DAY)

    def ticks_between(self, other: Julian) -> int:
        """Signed difference ``self - other`` in 100-nanosecond ticks."""
        return int((self.date - other.date) * TICKS_PER_DAY)

    def diff(self, other: Julian) -> timedelta:
        """Signed time span ``self - other``."""
        return timedelta(microseconds=self.ticks_between(other) / 10.0)

    def minutes_since(self, other: Julian) -> float:
        """Minutes elapsed from ``other`` to this date."""
        return (self.date - other.date) * MINUTES_PER_DAY

    def __add__(self, other: timedelta) -> Julian:
        if isinstance(other, timedelta):
            return self.add_seconds(other.total_seconds())
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Julian):
            return self.diff(other)
        if isinstance(other, timedelta):
            return self.add_seconds(-other.total_seconds())
        return NotImplemented

    def __float__(self) -> float:
        return self.date

    # ── Sidereal time ──

    def gmst(self) -> float:
        """Greenwich Mean Sidereal Time.

        Returns:
            Angle in radians in [0, 2π), measured eastward from the vernal
            equinox to the prime meridian ("theta G").
        """
        ut = math.fmod(self.date + 0.5, 1.0)
        tu = (self.from_jan1_12h_2000() - ut) / 36525.0

        gmst = 24110.54841 + tu * (
            8640184.812866 + tu * (0.093104 - tu * 6.2e-06)
        )
        gmst = math.fmod(gmst + SECONDS_PER_DAY * OMEGA_E * ut, SECONDS_PER_DAY)

        if gmst < 0.0:
            gmst += SECONDS_PER_DAY  # wrap negative modulo value

        return _wrap_two_pi(TWO_PI * (gmst / SECONDS_PER_DAY))

    def lmst(self, longitude: float) -> float:
        """Local Mean Sidereal Time at a longitude.

        Args:
            longitude: East longitude in radians.

        Returns:
            Angle in radians in [0, 2π).
        """
        return _wrap_two_pi(self.gmst() + longitude)


def _wrap_two_pi(angle: float) -> float:
    """Reduce an angle to [0, 2π)."""
    angle %= TWO_PI
    return 0.0 if angle >= TWO_PI else angle
