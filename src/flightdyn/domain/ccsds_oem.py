# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CCSDS Orbit Ephemeris Message (OEM) reader, KVN format, version 1.0.

Reads spacecraft ephemerides given relative to the Earth in EME2000 on the
TDB scale. Each segment becomes one tabulated block; segment metadata fixes
the usable span and the interpolation method (LAGRANGE of degree 8 unless
stated otherwise).

Reference: CCSDS 502.0-B-3 (Orbit Data Messages).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from flightdyn.domain.errors import FormatError
from flightdyn.domain.line_reader import LineReader
from flightdyn.domain.tabulated_ephemeris import EphemerisSet, TabulatedBlock
from flightdyn.domain.time_formats import (
    Mjd2000TimeFormat,
    SimpleTimeFormat,
    TimeFormatConfig,
)
from flightdyn.domain.time_scales import TimeScale

logger = logging.getLogger(__name__)

_TDB_FORMAT = SimpleTimeFormat(TimeScale.TDB, TimeFormatConfig(decimals=6))
_MJD2000_TDB = Mjd2000TimeFormat(TimeScale.TDB)

DEFAULT_INTERPOLATION = "LAGRANGE"
DEFAULT_DEGREE = 8


def parse_time(text: str) -> float:
    """Convert an OEM epoch (``yyyy-mm-ddThh:mm:ss[.ffffff]``) to MJD2000 TDB."""
    return _MJD2000_TDB.to_value(_TDB_FORMAT.parse(text + " TDB"))


@dataclass(frozen=True)
class OemMetadata:
    """Metadata of one OEM segment."""
    object_name: str
    object_id: str
    start_time: float
    stop_time: float
    interpolation: str = DEFAULT_INTERPOLATION
    degree: int = DEFAULT_DEGREE


class OemEphemeris(EphemerisSet):
    """Spacecraft ephemeris read from an OEM file.

    ``interpolate`` returns the geocentric EME2000 state at an MJD2000 TDB
    time.
    """

    def __init__(self, source: str = "<stream>") -> None:
        super().__init__()
        self.source = source
        self.metadata: list[OemMetadata] = []

    @property
    def object_name(self) -> Optional[str]:
        return self.metadata[0].object_name if self.metadata else None

    @property
    def object_id(self) -> Optional[str]:
        return self.metadata[0].object_id if self.metadata else None


# --------------------------------------------------------------------------- #
# Keyword parsing
# --------------------------------------------------------------------------- #

def _split_keyword(reader: LineReader) -> tuple[str, Optional[str]]:
    line = reader.require_line()
    if "=" not in line:
        return line.split()[0], None
    name, _, value = line.partition("=")
    return name.strip(), value.split("=")[0].strip()


def _keyword(reader: LineReader, keyword: str) -> None:
    name = reader.require_line().split()[0]
    if name != keyword:
        reader.error(f"Expected keyword: {keyword}, found: {name}")
    reader.next_line()


def _keyword_value(reader: LineReader, keyword: str, expected: Optional[str] = None) -> str:
    name, value = _split_keyword(reader)
    if name != keyword:
        reader.error(f"Expected keyword: {keyword}, found: {name}")
    if value is None:
        reader.error(f"Missing value for keyword: {keyword}")
    if expected is not None and value != expected:
        reader.error(f"Keyword: {keyword}, expected value={expected}, found: {value}")
    reader.next_line()
    return value


def _optional_value(reader: LineReader, keyword: str) -> Optional[str]:
    name, value = _split_keyword(reader)
    if name != keyword:
        return None
    if value is None:
        reader.error(f"Missing value for keyword: {keyword}")
    reader.next_line()
    return value


def _time_value(reader: LineReader, text: str) -> float:
    try:
        return parse_time(text)
    except FormatError as exc:
        reader.error(f"Invalid time {text!r}: {exc.message}")


# --------------------------------------------------------------------------- #
# Reader
# --------------------------------------------------------------------------- #

def _read_header(reader: LineReader) -> None:
    name, value = _split_keyword(reader)
    if name != "CCSDS_OEM_VERS":
        reader.error("Unknown orbit file format")
    logger.info("Reading CCSDS orbit file: %s", reader.source)
    if value != "1.0":
        reader.error(f"Unsupported OEM version = {value}")
    # Past the version line, CREATION_DATE and ORIGINATOR
    reader.next_line()
    reader.next_line()
    reader.next_line()


def _read_metadata(reader: LineReader) -> OemMetadata:
    _keyword(reader, "META_START")
    object_name = _keyword_value(reader, "OBJECT_NAME")
    object_id = _keyword_value(reader, "OBJECT_ID")
    _keyword_value(reader, "CENTER_NAME", "EARTH")
    _keyword_value(reader, "REF_FRAME", "EME2000")
    _keyword_value(reader, "TIME_SYSTEM", "TDB")

    start = _time_value(reader, _keyword_value(reader, "START_TIME"))
    useable_start = _optional_value(reader, "USEABLE_START_TIME")
    if useable_start is not None:
        start = _time_value(reader, useable_start)
    useable_stop = _optional_value(reader, "USEABLE_STOP_TIME")
    stop = _time_value(reader, _keyword_value(reader, "STOP_TIME"))
    if useable_stop is not None:
        stop = _time_value(reader, useable_stop)

    interpolation = DEFAULT_INTERPOLATION
    degree = DEFAULT_DEGREE
    method = _optional_value(reader, "INTERPOLATION")
    if method is not None:
        interpolation = method
        degree_text = _keyword_value(reader, "INTERPOLATION_DEGREE")
        try:
            degree = int(degree_text)
        except ValueError:
            reader.error(f"Invalid interpolation degree {degree_text!r}")
    _keyword(reader, "META_STOP")
    return OemMetadata(object_name, object_id, start, stop, interpolation, degree)


def _read_data(reader: LineReader, meta: OemMetadata) -> TabulatedBlock:
    times: list[float] = []
    states: list[list[float]] = []
    while reader.line is not None and reader.line != "META_START":
        tokens = reader.line.split()
        if len(tokens) < 7:
            reader.error(f"Expected epoch and 6 state values, found {len(tokens)} fields")
        times.append(_time_value(reader, tokens[0]))
        try:
            states.append([float(v) for v in tokens[1:7]])
        except ValueError:
            reader.error(f"Invalid state vector: {reader.line}")
        reader.next_line()
    if not times:
        reader.error("Ephemeris segment contains no data")
    try:
        return TabulatedBlock(
            times, np.array(states).T, meta.interpolation, meta.degree,
            start=meta.start_time, end=meta.stop_time,
        )
    except FormatError as exc:
        reader.error(exc.message)


def parse_oem(lines: Iterable[str], source: str = "<stream>") -> OemEphemeris:
    """Parse an OEM file given as lines of text.

    Raises:
        FormatError: With the source and line number, on any deviation from
            the expected layout.
    """
    reader = LineReader(lines, source)
    reader.next_line()
    _read_header(reader)
    ephemeris = OemEphemeris(source)
    while True:
        meta = _read_metadata(reader)
        ephemeris.metadata.append(meta)
        ephemeris.add_block(_read_data(reader, meta))
        if reader.line is None:
            break
    return ephemeris
