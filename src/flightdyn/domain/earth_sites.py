# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Ground stations on the rotating Earth.

Station coordinates are geodetic (WGS-84). Inertial positions use a simple
rotation about the polar axis by Greenwich Mean Sidereal Time, with no
precession, nutation or polar motion. Units are km and km/s.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.errors import EphemerisLookupError
from flightdyn.domain.state import rotate_about_axis
from flightdyn.domain.time_formats import SimpleTimeFormat
from flightdyn.domain.time_scales import TimeScale

SIDEREAL_RATE: float = 24.06570982441908
"""Sidereal hours per solar day."""

GMST_J2000_HOURS: float = 18.697374558
"""GMST at 2000-01-01T12:00:00 UT, hours."""

EARTH_ROTATION_RATE: float = math.radians(SIDEREAL_RATE * 15.0 / 86400)
"""rad/s"""

_Z_AXIS = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid given by its semi-axes."""
    major: float
    minor: float

    def eccentricity(self) -> float:
        return math.sqrt(1.0 - (self.minor * self.minor) / (self.major * self.major))

    def vector_for(self, longitude: float, latitude: float, height: float) -> np.ndarray:
        """Earth-fixed cartesian vector of a geodetic position.

        Args:
            longitude: East longitude, degrees.
            latitude: Geodetic latitude, degrees.
            height: Height above the ellipsoid, in the unit of the axes.
        """
        phi = math.radians(latitude)
        lam = math.radians(longitude)
        e = self.eccentricity()
        es = e * math.sin(phi)
        rn = self.major / math.sqrt(1.0 - es * es)
        return np.array([
            (rn + height) * math.cos(phi) * math.cos(lam),
            (rn + height) * math.cos(phi) * math.sin(lam),
            ((1.0 - e * e) * rn + height) * math.sin(phi),
        ])


WGS84 = Ellipsoid(6378.137, 6356.752314)


_J2000_UT = SimpleTimeFormat(TimeScale.UTC).parse("2000-01-01T12:00:00Z")


def gmst(t: AtomicTime) -> float:
    """Greenwich Mean Sidereal Time in hours, in [0, 24)."""
    days = t.subtract(_J2000_UT) / 1_000_000.0 / 86400.0
    h = GMST_J2000_HOURS + SIDEREAL_RATE * days
    h = h - int(int(h) / 24) * 24
    return h if h >= 0 else h + 24


@dataclass(frozen=True)
class Station:
    """A ground station and its Earth-fixed position (km)."""
    id: str
    name: str
    vector: np.ndarray


class EarthSites:
    """Registry of ground stations.

    Args:
        ellipsoid: Reference ellipsoid for geodetic coordinates.
    """

    def __init__(self, ellipsoid: Ellipsoid = WGS84) -> None:
        self._ellipsoid = ellipsoid
        self._stations: dict[str, Station] = {}

    def add_station(self, id: str, name: str, longitude: float,
                    latitude: float, height: float) -> None:
        vector = self._ellipsoid.vector_for(longitude, latitude, height)
        self._stations[id] = Station(id, name, vector)

    def vector(self, id: str) -> Optional[np.ndarray]:
        """Earth-fixed vector of a station, None if unknown."""
        station = self._stations.get(id)
        return None if station is None else station.vector.copy()

    def name(self, id: str) -> Optional[str]:
        station = self._stations.get(id)
        return None if station is None else station.name

    def _station(self, id: str) -> Station:
        try:
            return self._stations[id]
        except KeyError:
            raise EphemerisLookupError(f"Unknown ground station {id!r}", key=id) from None

    def gmst(self, t: AtomicTime) -> float:
        return gmst(t)

    def position(self, id: str, t: AtomicTime) -> np.ndarray:
        """Inertial position of a station at ``t``."""
        vector = self._station(id).vector
        return rotate_about_axis(vector, _Z_AXIS, math.radians(gmst(t) * 15.0))

    def state(self, id: str, t: AtomicTime) -> tuple[np.ndarray, np.ndarray]:
        """Inertial position and velocity of a station at ``t``."""
        p = self.position(id, t)
        v = np.array([-p[1], p[0], 0.0]) * EARTH_ROTATION_RATE
        return p, v

    def __iter__(self) -> Iterator[str]:
        return iter(self._stations)

    def __len__(self) -> int:
        return len(self._stations)

    def __contains__(self, id: object) -> bool:
        return id in self._stations
