# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
flightdyn

Flight-dynamics time and ephemeris core. Exact microsecond atomic time with
leap-second aware UTC, TT and TDB conversion, half-open interval and
constraint algebra for availability windows, and ephemeris interpolation:
Chebyshev (JPL DE405), Hermite and Lagrange over tabulated states (CCSDS
OEM, JPL Horizons), with light-time and stellar-aberration corrected
spacecraft-relative states.
"""

from flightdyn.domain.errors import (
    FlightDynError,
    FormatError,
    RangeError,
    EphemerisLookupError,
    ArgumentError,
)
from flightdyn.domain.atomic_time import (
    AtomicTime,
    Epoch,
    atomic_to_unix,
    unix_to_atomic,
    atomic_to_datetime,
    datetime_to_atomic,
)
from flightdyn.domain.leap_seconds import LeapSecondTable, default_table
from flightdyn.domain.time_scales import TimeScale
from flightdyn.domain.time_formats import (
    TimeFormatConfig,
    SimpleTimeFormat,
    MjdTimeFormat,
    Mjd2000TimeFormat,
)
from flightdyn.domain.cuc import CucConverter
from flightdyn.domain.time_interval import TimeInterval
from flightdyn.domain.time_constraint import TimeConstraint
from flightdyn.domain.state import Body, State
from flightdyn.domain.chebyshev_ephemeris import ChebyshevBlock, ChebyshevEphemerisStore
from flightdyn.domain.interpolation import (
    HermiteInterpolator,
    LagrangeInterpolator,
    make_interpolator,
)
from flightdyn.domain.tabulated_ephemeris import (
    EphemerisRecord,
    TabulatedBlock,
    EphemerisSet,
)
from flightdyn.domain.ccsds_oem import OemEphemeris, parse_oem
from flightdyn.domain.horizons import HorizonsEphemeris, parse_horizons
from flightdyn.domain.relative_state import (
    Correction,
    RedshiftFrame,
    SpacecraftEphemerides,
    RelativeStateResolver,
)
from flightdyn.domain.earth_sites import Ellipsoid, EarthSites, WGS84, gmst

__all__ = [
    "FlightDynError",
    "FormatError",
    "RangeError",
    "EphemerisLookupError",
    "ArgumentError",
    "AtomicTime",
    "Epoch",
    "atomic_to_unix",
    "unix_to_atomic",
    "atomic_to_datetime",
    "datetime_to_atomic",
    "LeapSecondTable",
    "default_table",
    "TimeScale",
    "TimeFormatConfig",
    "SimpleTimeFormat",
    "MjdTimeFormat",
    "Mjd2000TimeFormat",
    "CucConverter",
    "TimeInterval",
    "TimeConstraint",
    "Body",
    "State",
    "ChebyshevBlock",
    "ChebyshevEphemerisStore",
    "HermiteInterpolator",
    "LagrangeInterpolator",
    "make_interpolator",
    "EphemerisRecord",
    "TabulatedBlock",
    "EphemerisSet",
    "OemEphemeris",
    "parse_oem",
    "HorizonsEphemeris",
    "parse_horizons",
    "Correction",
    "RedshiftFrame",
    "SpacecraftEphemerides",
    "RelativeStateResolver",
    "Ellipsoid",
    "EarthSites",
    "WGS84",
    "gmst",
]
