"""TLE loading: text splitting, local files and CelesTrak.

This is the loader side of the library. It turns catalogue text into
``OrbitalElements`` and never propagates anything itself.

CelesTrak's GP endpoint needs no account. Responses are cached on disk
for 24 hours; set ``SATORBIT_CACHE_DIR`` to move the cache and
``CELESTRAK_URL`` to point at a mirror.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Optional

import requests

from .tle_parser import OrbitalElements

logger = logging.getLogger(__name__)

BASE_URL = "https://celestrak.org"
GP_PATH = "/NORAD/elements/gp.php"

RATE_LIMIT_DELAY = 1.0  # seconds between requests
CACHE_MAX_AGE_HOURS = 24.0


def parse_batch(text: str) -> list[OrbitalElements]:
    """Parse a multi-TLE string containing 2-line or 3-line format TLEs.

    Automatically detects whether each TLE has a name line (line 0)
    or is a bare 2-line element set. A ``0 `` prefix on the name line is
    dropped. Lines that fit neither pattern are skipped.

    Args:
        text: String containing one or more TLEs separated by newlines.

    Returns:
        List of parsed elements, in the order they appear.

    Raises:
        FormatError: If a recognised line pair is malformed.
    """
    lines = [line.rstrip() for line in text.strip().splitlines() if line.strip()]
    elements: list[OrbitalElements] = []
    i = 0

    while i < len(lines):
        if (
            lines[i].startswith("1 ")
            and i + 1 < len(lines)
            and lines[i + 1].startswith("2 ")
        ):
            elements.append(OrbitalElements.parse(lines[i], lines[i + 1]))
            i += 2
        elif (
            i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            name = lines[i]
            if name.startswith("0 "):
                name = name[2:]
            elements.append(
                OrbitalElements.parse(lines[i + 1], lines[i + 2], name=name)
            )
            i += 3
        else:
            logger.debug("Skipping unrecognised line: %r", lines[i])
            i += 1

    return elements


def load_tle_file(filepath: str | Path) -> list[OrbitalElements]:
    """Load TLEs from a local file (2-line or 3-line format)."""
    text = Path(filepath).read_text()
    return parse_batch(text)


class CelesTrakClient:
    """Client for CelesTrak's general perturbations (GP) endpoint."""

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        base_url: Optional[str] = None,
    ):
        self.base_url = (base_url or os.environ.get("CELESTRAK_URL", BASE_URL)).rstrip("/")
        self.cache_dir = Path(
            cache_dir or os.environ.get("SATORBIT_CACHE_DIR", "data/cache")
        )
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.session = requests.Session()
        self._last_request_time = 0.0

    def _rate_limit(self):
        """Space out consecutive requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < RATE_LIMIT_DELAY:
            time.sleep(RATE_LIMIT_DELAY - elapsed)
        self._last_request_time = time.time()

    def _query(self, params: dict, use_cache: bool = True) -> str:
        """Fetch TLE text for a GP query, with optional disk caching."""
        cache_key = "_".join(f"{k}-{v}" for k, v in sorted(params.items()))
        cache_file = self.cache_dir / f"{cache_key}.tle"

        if use_cache and cache_file.exists():
            age_hours = (time.time() - cache_file.stat().st_mtime) / 3600
            if age_hours < CACHE_MAX_AGE_HOURS:
                logger.debug("Cache hit: %s", cache_file.name)
                return cache_file.read_text()

        self._rate_limit()

        url = f"{self.base_url}{GP_PATH}"
        logger.info("Querying: %s %s", url, params)

        resp = self.session.get(url, params={**params, "FORMAT": "tle"}, timeout=30)
        resp.raise_for_status()

        if use_cache:
            cache_file.write_text(resp.text)

        return resp.text

    def fetch_text(
        self,
        group: Optional[str] = None,
        norad_id: Optional[int] = None,
        use_cache: bool = True,
    ) -> str:
        """Fetch raw TLE text for a group or a single catalog number."""
        if (group is None) == (norad_id is None):
            raise ValueError("Provide exactly one of group or norad_id")
        params = {"GROUP": group} if group is not None else {"CATNR": norad_id}
        return self._query(params, use_cache=use_cache)

    def get_group(self, group: str, use_cache: bool = True) -> list[OrbitalElements]:
        """Fetch the current TLEs for a CelesTrak group (e.g. ``stations``).

        Returns:
            Parsed elements; empty if CelesTrak has no data for the group.
        """
        raw = self.fetch_text(group=group, use_cache=use_cache)
        return _parse_response(raw, f"group {group}")

    def get_satellite(
        self, norad_id: int, use_cache: bool = True
    ) -> Optional[OrbitalElements]:
        """Fetch the latest TLE for one satellite, or None if unknown."""
        raw = self.fetch_text(norad_id=norad_id, use_cache=use_cache)
        elements = _parse_response(raw, f"NORAD {norad_id}")
        return elements[0] if elements else None


def _parse_response(raw: str, label: str) -> list[OrbitalElements]:
    # CelesTrak answers unknown queries with a plain-text message
    if not raw.strip() or "No GP data found" in raw:
        logger.warning("No TLEs found for %s", label)
        return []
    return parse_batch(raw)
