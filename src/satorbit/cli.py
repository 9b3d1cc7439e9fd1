#!/usr/bin/env python3
"""SATORBIT command-line interface.

Usage::

    satorbit info data/stations.tle
    satorbit position data/stations.tle --time 2024-01-01T12:00:00
    satorbit ephemeris data/stations.tle --name "ISS (ZARYA)" --duration 90 -o iss.csv
    satorbit fetch --group stations --output data/stations.tle
"""
from __future__ import annotations

import sys
import logging
from pathlib import Path
from datetime import datetime, timedelta

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .catalog import CelesTrakClient, load_tle_file, parse_batch
from .ephemeris import build_ephemeris
from .errors import SatOrbitError
from .propagator import PropagatorConfig
from .satellite import Satellite

console = Console()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--gravity", "-g", default="wgs72",
              type=click.Choice(["wgs72", "wgs72old", "wgs84"]),
              help="Earth gravity model for propagation")
@click.pass_context
def main(ctx: click.Context, verbose: bool, gravity: str):
    """SATORBIT — SGP4/SDP4 satellite position prediction from TLEs."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s — %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = _get_config(gravity)


@main.command()
@click.argument("filepath", type=click.Path(exists=True))
@click.pass_context
def info(ctx: click.Context, filepath: str):
    """List the element sets in a TLE file."""
    satellites = _load_satellites(filepath, ctx.obj["config"])

    table = Table(title=f"{len(satellites)} satellites in {filepath}", box=box.SIMPLE_HEAVY)
    table.add_column("Name", style="bold")
    table.add_column("NORAD", justify="right")
    table.add_column("Epoch (UTC)", style="cyan")
    table.add_column("Period (min)", justify="right")
    table.add_column("Incl (°)", justify="right")
    table.add_column("Ecc", justify="right")
    table.add_column("Regime")

    for sat in satellites:
        el = sat.elements
        table.add_row(
            sat.name,
            str(sat.norad_id),
            sat.epoch_string,
            f"{sat.period:.2f}",
            f"{el.inclination:.4f}",
            f"{el.eccentricity:.7f}",
            "deep space" if sat.is_deep_space else "near Earth",
        )

    console.print(table)


@main.command()
@click.argument("filepath", type=click.Path(exists=True))
@click.option("--name", "-n", help="Only satellites with this name or catalog number")
@click.option("--time", "-t", "when", help="UTC time, ISO 8601 (default: each epoch)")
@click.option("--minutes", "-m", type=float, help="Minutes past each element epoch")
@click.pass_context
def position(
    ctx: click.Context,
    filepath: str,
    name: str | None,
    when: str | None,
    minutes: float | None,
):
    """Show inertial position, velocity and sub-point."""
    if when is not None and minutes is not None:
        console.print("[red]Error: provide --time or --minutes, not both[/red]")
        sys.exit(1)

    config = ctx.obj["config"]
    satellites = _select(_load_satellites(filepath, config), name)
    target = _parse_time(when) if when else None

    table = Table(box=box.SIMPLE_HEAVY, show_lines=True)
    table.add_column("Name", style="bold")
    table.add_column("UTC", style="cyan")
    table.add_column("r (km)", justify="right")
    table.add_column("v (km/s)", justify="right")
    table.add_column("Lat (°)", justify="right")
    table.add_column("Lon (°)", justify="right")
    table.add_column("Alt (km)", justify="right")

    failures = 0
    for sat in satellites:
        query = target if target is not None else (minutes or 0.0)
        try:
            state = sat.position_at(query)
        except SatOrbitError as exc:
            console.print(f"[yellow]{sat.name}: {exc}[/yellow]")
            failures += 1
            continue

        geo = state.to_geodetic(config.gravity)
        x, y, z = state.position
        vx, vy, vz = state.velocity
        table.add_row(
            sat.name,
            f"{state.julian.to_datetime():%Y-%m-%d %H:%M:%S}",
            f"{x:.3f}\n{y:.3f}\n{z:.3f}",
            f"{vx:.6f}\n{vy:.6f}\n{vz:.6f}",
            f"{geo.latitude_deg:.4f}",
            f"{geo.longitude_deg:.4f}",
            f"{geo.altitude:.3f}",
        )

    console.print(table)
    if failures == len(satellites):
        sys.exit(1)


@main.command()
@click.argument("filepath", type=click.Path(exists=True))
@click.option("--name", "-n", help="Satellite name or catalog number (required if the file has several)")
@click.option("--start", "-s", help="UTC start time, ISO 8601 (default: element epoch)")
@click.option("--duration", "-d", default=90.0, help="Span to tabulate (minutes)")
@click.option("--step", default=1.0, help="Sample spacing (minutes)")
@click.option("--stop-on-decay", is_flag=True, help="Truncate instead of failing on decay")
@click.option("--output", "-o", type=click.Path(), help="Save the table to CSV")
@click.pass_context
def ephemeris(
    ctx: click.Context,
    filepath: str,
    name: str | None,
    start: str | None,
    duration: float,
    step: float,
    stop_on_decay: bool,
    output: str | None,
):
    """Tabulate a satellite's state over a time span."""
    satellites = _select(_load_satellites(filepath, ctx.obj["config"]), name)
    if len(satellites) > 1:
        console.print(
            f"[red]Error: {len(satellites)} satellites in {filepath}; pick one with --name[/red]"
        )
        sys.exit(1)
    sat = satellites[0]

    t0 = _parse_time(start) if start else sat.epoch.to_datetime()
    t1 = t0 + timedelta(minutes=duration)

    try:
        df = build_ephemeris(sat, t0, t1, step_minutes=step, stop_on_decay=stop_on_decay)
    except (SatOrbitError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    console.print(
        Panel(
            f"[bold]{sat.name}[/bold] (NORAD {sat.norad_id})\n"
            f"Epoch: {sat.epoch_string}\n"
            f"Span: {t0:%Y-%m-%d %H:%M} → {t1:%Y-%m-%d %H:%M}\n"
            f"Samples: {len(df)}\n"
            f"Altitude range: {df['alt_km'].min():.1f} – {df['alt_km'].max():.1f} km"
            if len(df) else f"[bold]{sat.name}[/bold]\nNo samples produced",
            title="Ephemeris",
            box=box.ROUNDED,
        )
    )

    if output:
        df.to_csv(output, index=False)
        console.print(f"\nEphemeris saved to {output}")
    else:
        _display_ephemeris(df)


@main.command()
@click.option("--group", "-G", help="CelesTrak group (e.g. 'stations')")
@click.option("--norad-id", "-i", type=int, help="NORAD catalog ID")
@click.option("--output", "-o", type=click.Path(), help="Save the TLE text to a file")
@click.option("--no-cache", is_flag=True, help="Bypass the on-disk cache")
def fetch(group: str | None, norad_id: int | None, output: str | None, no_cache: bool):
    """Download current TLEs from CelesTrak."""
    if (group is None) == (norad_id is None):
        console.print("[red]Error: provide exactly one of --group or --norad-id[/red]")
        sys.exit(1)

    client = CelesTrakClient()
    label = f"group {group}" if group else f"NORAD {norad_id}"
    console.print(f"Fetching TLEs for {label}...")
    raw = client.fetch_text(group=group, norad_id=norad_id, use_cache=not no_cache)

    elements = parse_batch(raw) if "No GP data found" not in raw else []
    if not elements:
        console.print("[yellow]No TLEs found.[/yellow]")
        return

    console.print(f"Fetched {len(elements)} TLEs")
    if output:
        Path(output).write_text(raw)
        console.print(f"Saved to {output}")


def _get_config(name: str) -> PropagatorConfig:
    presets = {
        "wgs72": PropagatorConfig(),
        "wgs72old": PropagatorConfig.for_wgs72old(),
        "wgs84": PropagatorConfig.for_wgs84(),
    }
    return presets[name]


def _load_satellites(filepath: str, config: PropagatorConfig) -> list[Satellite]:
    try:
        elements = load_tle_file(filepath)
    except SatOrbitError as exc:
        console.print(f"[red]Error reading {filepath}: {exc}[/red]")
        sys.exit(1)

    if not elements:
        console.print(f"[yellow]No TLEs found in {filepath}.[/yellow]")
        sys.exit(1)
    return [Satellite(el, config=config) for el in elements]


def _select(satellites: list[Satellite], name: str | None) -> list[Satellite]:
    if not name:
        return satellites
    wanted = name.strip().upper()
    matches = [
        s for s in satellites
        if s.name.upper() == wanted or s.catalog_number.upper() == wanted
        or str(s.norad_id) == wanted
    ]
    if not matches:
        console.print(f"[red]Error: no satellite named {name!r}[/red]")
        sys.exit(1)
    return matches


def _parse_time(text: str) -> datetime:
    """Parse an ISO 8601 time; naive values are taken as UTC."""
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        console.print(f"[red]Error: cannot parse time {text!r}[/red]")
        sys.exit(1)


def _display_ephemeris(df):
    """Display an ephemeris DataFrame as a rich table."""
    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("UTC", style="cyan")
    table.add_column("x (km)", justify="right")
    table.add_column("y (km)", justify="right")
    table.add_column("z (km)", justify="right")
    table.add_column("Lat (°)", justify="right")
    table.add_column("Lon (°)", justify="right")
    table.add_column("Alt (km)", justify="right")

    for _, row in df.head(50).iterrows():
        table.add_row(
            f"{row['utc']:%Y-%m-%d %H:%M:%S}",
            f"{row['x_km']:.3f}",
            f"{row['y_km']:.3f}",
            f"{row['z_km']:.3f}",
            f"{row['lat_deg']:.3f}",
            f"{row['lon_deg']:.3f}",
            f"{row['alt_km']:.3f}",
        )

    if len(df) > 50:
        console.print(f"(showing 50 of {len(df)} samples)")
    console.print(table)


if __name__ == "__main__":
    main()
