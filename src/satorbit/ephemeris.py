"""Ephemeris tables.

Tabulates a satellite's state over a time span into a pandas DataFrame,
one row per sample, with the inertial state and the geodetic sub-point.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Union

import numpy as np
import pandas as pd

from .errors import DecayedOrbit
from .julian import Julian
from .satellite import Satellite

logger = logging.getLogger(__name__)

COLUMNS = [
    "minutes", "utc", "jd",
    "x_km", "y_km", "z_km",
    "vx_km_s", "vy_km_s", "vz_km_s",
    "lat_deg", "lon_deg", "alt_km",
    "converged",
]


def ephemeris_from_minutes(
    satellite: Satellite,
    minutes: Iterable[float],
    stop_on_decay: bool = False,
) -> pd.DataFrame:
    """Tabulate states at the given offsets from epoch.

    Args:
        satellite: Satellite to propagate.
        minutes: Offsets from the element epoch, in the order to sample.
        stop_on_decay: If True, truncate the table at the first decayed
            sample (logging a warning) instead of raising.

    Returns:
        DataFrame with one row per sample.

    Raises:
        DecayedOrbit: If a sample decays and ``stop_on_decay`` is False.
    """
    gravity = satellite.propagator.gravity
    records: list[dict] = []

    for mpe in minutes:
        try:
            state = satellite.position_at(float(mpe))
        except DecayedOrbit as exc:
            if not stop_on_decay:
                raise
            logger.warning(
                "%s decayed at %.1f min past epoch; ephemeris truncated (%s)",
                satellite.name,
                exc.minutes,
                exc,
            )
            break

        row = state.to_dict()
        geo = state.to_geodetic(gravity)
        row["lat_deg"] = geo.latitude_deg
        row["lon_deg"] = geo.longitude_deg
        row["alt_km"] = geo.altitude
        records.append(row)

    return pd.DataFrame(records, columns=COLUMNS)


def build_ephemeris(
    satellite: Satellite,
    start: Union[datetime, Julian],
    stop: Union[datetime, Julian],
    step_minutes: float = 1.0,
    stop_on_decay: bool = False,
) -> pd.DataFrame:
    """Tabulate states on a regular grid between two UTC times.

    Args:
        satellite: Satellite to propagate.
        start: First sample time.
        stop: Last sample time (included when it falls on the grid).
        step_minutes: Grid spacing (minutes, positive).
        stop_on_decay: See :func:`ephemeris_from_minutes`.

    Returns:
        DataFrame with one row per sample, sorted by time.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    t0 = satellite.minutes_past_epoch(start)
    t1 = satellite.minutes_past_epoch(stop)
    if t1 < t0:
        raise ValueError("stop must not be earlier than start")

    count = int(np.floor((t1 - t0) / step_minutes + 1e-9)) + 1
    grid = t0 + step_minutes * np.arange(count)
    return ephemeris_from_minutes(satellite, grid, stop_on_decay=stop_on_decay)
