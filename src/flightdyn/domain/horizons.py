# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JPL Horizons vector-table reader.

Accepts tables of geometric cartesian states (output format 02, no vector
labels) of a body relative to the solar-system barycentre, in km and km/s,
ICRF/J2000.0. Each record spans three lines between ``$$SOE`` and
``$$EOE``: the Julian Date (TDB), the position and the velocity.
"""
from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

import numpy as np

from flightdyn.domain.line_reader import LineReader
from flightdyn.domain.tabulated_ephemeris import TabulatedBlock

logger = logging.getLogger(__name__)

HERMITE_ORDER: int = 10

_HEADER = (
    ("Center body name", "Solar System Barycenter"),
    ("Center-site name", "BODY CENTER"),
    ("Output units", "KM-S"),
    ("Output format", "02"),
    ("Reference frame", "ICRF/J2000.0"),
    ("Output type", "GEOMETRIC cartesian states"),
)


class HorizonsEphemeris(TabulatedBlock):
    """Barycentric states of one body, Hermite-interpolated.

    ``interpolate`` takes MJD2000 TDB and returns the barycentric ICRF
    state. Iterating yields the tabulated records.
    """

    def __init__(self, x, fs, source: str = "<stream>",
                 object_name: Optional[str] = None) -> None:
        super().__init__(x, fs, "HERMITE", HERMITE_ORDER)
        self.source = source
        self.object_name = object_name


def _expect(reader: LineReader, key: str, value: str) -> None:
    line = reader.require_line()
    while not line.startswith(key) and not line.startswith("$$SOE"):
        reader.next_line()
        line = reader.require_line()
    if line.startswith("$$SOE"):
        reader.error(f"Horizons file has invalid header; expected key: {key}")
    found = line[line.find(":") + 1:].strip()
    if not found.startswith(value):
        reader.error(f"Invalid value for: {key}, expected {value!r}, found {found!r}")


def _parse_jd(reader: LineReader, token: str) -> float:
    if not token.startswith("24"):
        reader.error(f"Julian Date out of range: {token}")
    try:
        # MJD2000 = JD - 2451544.5; dropping the leading digits first keeps precision
        return float(token[2:]) - 51544.5
    except ValueError:
        reader.error(f"Invalid Julian Date: {token}")


def _parse_vector(reader: LineReader) -> list[float]:
    tokens = reader.require_line().split()
    try:
        values = [float(t) for t in tokens[:3]]
    except ValueError:
        reader.error(f"Invalid vector: {reader.line}")
    if len(values) < 3:
        reader.error(f"Expected 3 vector components, found {len(values)}")
    return values


def _object_name(line: str) -> Optional[str]:
    if line.startswith("Target body name"):
        name = line[line.find(":") + 1:].strip()
        return name.split("{")[0].strip() or None
    return None


def parse_horizons(lines: Iterable[str], source: str = "<stream>") -> HorizonsEphemeris:
    """Parse a Horizons vector table given as lines of text.

    Raises:
        FormatError: With the source and line number, if the header does
            not describe barycentric geometric states in km and km/s, or a
            record is malformed.
    """
    started = time.perf_counter()
    reader = LineReader(lines, source)
    reader.next_line()

    object_name = None
    for key, value in _HEADER:
        line = reader.require_line()
        while not line.startswith(key) and not line.startswith("$$SOE"):
            object_name = object_name or _object_name(line)
            reader.next_line()
            line = reader.require_line()
        _expect(reader, key, value)
    while not reader.require_line().startswith("$$SOE"):
        reader.next_line()
    reader.next_line()

    times: list[float] = []
    states: list[list[float]] = []
    while reader.require_line() != "$$EOE":
        times.append(_parse_jd(reader, reader.line.split()[0]))
        reader.next_line()
        position = _parse_vector(reader)
        reader.next_line()
        velocity = _parse_vector(reader)
        reader.next_line()
        states.append(position + velocity)
    if not times:
        reader.error("Horizons file contains no records")

    ephemeris = HorizonsEphemeris(times, np.array(states).T, source, object_name)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    logger.info("Reading Horizons file %s took %.0f ms (%d records)",
                source, elapsed_ms, len(times))
    return ephemeris
