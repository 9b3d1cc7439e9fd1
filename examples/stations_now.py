#!/usr/bin/env python3
"""
SATORBIT Example: Where are the crewed stations right now?

Fetches the CelesTrak "stations" group (cached for 24 hours under
``SATORBIT_CACHE_DIR``, default ``data/cache``) and prints each object's
sub-satellite point at the current UTC time.
"""
import sys
sys.path.insert(0, "src")

import logging
from datetime import datetime, timezone

from satorbit import DecayedOrbit, Satellite
from satorbit.catalog import CelesTrakClient


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s — %(message)s")

    print("=" * 65)
    print("  SATORBIT — Stations Now")
    print("=" * 65)

    client = CelesTrakClient()
    elements = client.get_group("stations")
    now = datetime.now(timezone.utc)
    print(f"\n{len(elements)} objects at {now:%Y-%m-%d %H:%M:%S} UTC\n")

    print(f"{'NAME':28s} {'NORAD':>6} {'LAT':>8} {'LON':>9} {'ALT (km)':>9}")
    print("-" * 64)
    for el in elements:
        sat = Satellite(el)
        try:
            geo = sat.position_at(now).to_geodetic()
        except DecayedOrbit as exc:
            print(f"{sat.name[:28]:28s} {sat.norad_id:>6} decayed ({exc})")
            continue
        print(
            f"{sat.name[:28]:28s} {sat.norad_id:>6} "
            f"{geo.latitude_deg:>8.3f} {geo.longitude_deg:>9.3f} {geo.altitude:>9.1f}"
        )


if __name__ == "__main__":
    main()
