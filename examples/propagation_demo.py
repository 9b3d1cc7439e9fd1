"""
Example: SGP4/SDP4 propagation of well-known element sets.

This example needs no network access. It propagates a near-Earth
satellite, a 12-hour Molniya orbit and a geostationary satellite, then
prints their states and a short ephemeris.
"""

import sys
sys.path.insert(0, "src")

from datetime import timedelta
from satorbit import Satellite
from satorbit.ephemeris import build_ephemeris


CATALOG = {
    "VANGUARD 1": (
        "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753",
        "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667",
    ),
    "MOLNIYA 1-36": (
        "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813",
        "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656",
    ),
    "GEO 28626": (
        "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190",
        "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00270176  4891",
    ),
}


def main():
    print("=" * 65)
    print("  SATORBIT — Propagation Demo")
    print("=" * 65)

    sats = [Satellite.from_tle(l1, l2, name=name) for name, (l1, l2) in CATALOG.items()]

    # ── States at epoch and six hours later ──
    print(f"\n{'NAME':14s} {'REGIME':11s} {'T+MIN':>6} {'X (km)':>12} {'Y (km)':>12} {'Z (km)':>12} {'|V| km/s':>9}")
    print("-" * 82)
    for sat in sats:
        regime = "deep space" if sat.is_deep_space else "near Earth"
        for minutes in (0.0, 360.0):
            state = sat.position_at(minutes)
            x, y, z = state.position
            print(
                f"{sat.name:14s} {regime:11s} {minutes:>6.0f} "
                f"{x:>12.3f} {y:>12.3f} {z:>12.3f} {state.speed:>9.4f}"
            )

    # ── One orbit of Vanguard as a table ──
    vanguard = sats[0]
    start = vanguard.epoch.to_datetime()
    df = build_ephemeris(
        vanguard, start, start + timedelta(minutes=vanguard.period), step_minutes=10
    )

    print(f"\n{'=' * 65}")
    print(f"VANGUARD 1 — one orbit ({vanguard.period:.1f} min) from {vanguard.epoch_string}")
    print(f"{'=' * 65}")
    print(df[["minutes", "lat_deg", "lon_deg", "alt_km"]].round(3).to_string(index=False))
    print(f"\nPerigee altitude ≈ {df['alt_km'].min():.1f} km, apogee ≈ {df['alt_km'].max():.1f} km")


if __name__ == "__main__":
    main()
