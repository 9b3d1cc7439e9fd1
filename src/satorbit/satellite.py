"""Satellite facade.

Binds a display name to one SGP4/SDP4 propagator and answers position
queries either by absolute UTC time or by minutes past the element epoch.
"""

from __future__ import annotations

import numbers
from datetime import datetime
from typing import Optional, Union

from .coordinates import EciState
from .julian import Julian
from .propagator import PropagatorConfig, SGP4Propagator
from .tle_parser import OrbitalElements

TimeLike = Union[datetime, Julian, float]


class Satellite:
    """A named satellite and its propagator.

    Args:
        elements: Parsed TLE.
        name: Display name. Empty means use the TLE name, which in turn
            falls back to the catalog number.
        config: Propagator settings.

    Example:
        >>> sat = Satellite.from_tle(line1, line2, name="ISS")
        >>> sat.position_at(datetime(2024, 1, 1, 12, 30)).position
        array([...])
    """

    def __init__(
        self,
        elements: OrbitalElements,
        name: str = "",
        config: Optional[PropagatorConfig] = None,
    ) -> None:
        self._propagator = SGP4Propagator(elements, config)
        self._name = name.strip() if name and name.strip() else elements.name

    @classmethod
    def from_tle(
        cls,
        line1: str,
        line2: str,
        name: str = "",
        config: Optional[PropagatorConfig] = None,
    ) -> Satellite:
        """Parse a TLE line pair and build a satellite from it."""
        return cls(OrbitalElements.parse(line1, line2, name=name or None), config=config)

    def __repr__(self) -> str:
        return f"Satellite(name={self._name!r}, catalog_number={self.catalog_number!r})"

    # ── Identity ──

    @property
    def name(self) -> str:
        return self._name

    @property
    def elements(self) -> OrbitalElements:
        return self._propagator.elements

    @property
    def propagator(self) -> SGP4Propagator:
        return self._propagator

    @property
    def catalog_number(self) -> str:
        return self.elements.catalog_number

    @property
    def norad_id(self) -> int:
        return self.elements.norad_id

    @property
    def epoch(self) -> Julian:
        return self.elements.epoch

    @property
    def epoch_string(self) -> str:
        return self.elements.epoch_string

    @property
    def period(self) -> float:
        """Orbital period from the recovered mean motion (minutes)."""
        return self._propagator.period

    @property
    def is_deep_space(self) -> bool:
        return self._propagator.is_deep_space

    # ── Queries ──

    def minutes_past_epoch(self, when: Union[datetime, Julian]) -> float:
        """Convert an absolute time to minutes past the element epoch."""
        julian = when if isinstance(when, Julian) else Julian.from_datetime(when)
        return julian.minutes_since(self.epoch)

    def position_at(self, when: TimeLike) -> EciState:
        """Inertial state at a time.

        Args:
            when: A ``datetime`` (naive = UTC) or ``Julian`` for an absolute
                time, or a number of minutes past epoch.

        Raises:
            TypeError: If ``when`` is none of the accepted types.
            DecayedOrbit: If the orbit is non-physical at that time.
        """
        if isinstance(when, (datetime, Julian)):
            return self._propagator.position_at(self.minutes_past_epoch(when))
        if isinstance(when, numbers.Real) and not isinstance(when, bool):
            return self._propagator.position_at(float(when))
        raise TypeError(
            f"Expected datetime, Julian or minutes past epoch, got {type(when).__name__}"
        )
