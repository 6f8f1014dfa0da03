# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Spacecraft-relative states of solar-system bodies.

SpacecraftEphemerides combines a geocentric spacecraft orbit with a
planetary ephemeris. RelativeStateResolver adds small bodies (asteroids,
comets, planetary system barycentres) looked up by NAIF id, and applies
light-time and stellar-aberration corrections to give the apparent state
as seen from the spacecraft.

Times are AtomicTime or MJD2000 TDB floats. Positions are km, velocities
km/s, ICRF/EME2000.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Union

import numpy as np

from flightdyn.domain.atomic_time import AtomicTime
from flightdyn.domain.errors import EphemerisLookupError
from flightdyn.domain.state import (
    Body,
    State,
    normalize,
    rotate_about_axis,
    unit_vector_from_radec,
)
from flightdyn.domain.time_formats import Mjd2000TimeFormat
from flightdyn.domain.time_interval import TimeInterval
from flightdyn.domain.time_scales import TimeScale
from flightdyn.ports import EphemerisSource, PlanetaryEphemeris, Provider

# --------------------------------------------------------------------------- #
# Constants
# --------------------------------------------------------------------------- #

SPEED_OF_LIGHT: float = 299792.458
"""km/s"""

SECONDS_PER_DAY: int = 86400

LSR_RA_DEG: float = 270.9595417
"""Solar apex right ascension, 18h03m50.29s."""

LSR_DEC_DEG: float = 30.00466667
"""Solar apex declination, +30d00m16.8s."""

LSR_SPEED: float = 20.0
"""Standard solar motion, km/s."""

_MJD2000_TDB = Mjd2000TimeFormat(TimeScale.TDB)

Time = Union[AtomicTime, float]


def to_tdb(t: Time) -> float:
    """MJD2000 TDB for an AtomicTime; floats pass through unchanged."""
    if isinstance(t, AtomicTime):
        return _MJD2000_TDB.to_value(t)
    return float(t)


def tdb_to_atomic(tdb: float) -> AtomicTime:
    return _MJD2000_TDB.from_value(tdb)


class Correction(Enum):
    """Corrections applied to the relative state of a target."""
    NONE = "NONE"
    LT = "LT"
    LTS = "LTS"


class RedshiftFrame(Enum):
    """Rest frames for radial velocities."""
    GEOCENTRIC = "GEOCENTRIC"
    HELIOCENTRIC = "HELIOCENTRIC"
    LSR = "LSR"


def aberration(r: np.ndarray, v_observer: np.ndarray) -> np.ndarray:
    """Apply classical stellar aberration to direction ``r``.

    ``r`` is rotated towards the observer velocity about ``r x v / c`` by
    ``asin(|r x v| / c)``.
    """
    h = np.cross(normalize(r), v_observer) / SPEED_OF_LIGHT
    phi = math.asin(min(float(np.linalg.norm(h)), 1.0))
    return rotate_about_axis(r, h, phi)


def kinematic_lsr() -> np.ndarray:
    """Solar motion relative to the kinematic Local Standard of Rest."""
    return unit_vector_from_radec(LSR_RA_DEG, LSR_DEC_DEG) * LSR_SPEED


# --------------------------------------------------------------------------- #
# Spacecraft ephemerides
# --------------------------------------------------------------------------- #

class SpacecraftEphemerides:
    """Spacecraft orbit combined with the planetary ephemeris.

    Args:
        orbit: Geocentric spacecraft states (e.g. an OEM ephemeris).
        planets: Planetary ephemeris (e.g. a ChebyshevEphemerisStore).
    """

    def __init__(self, orbit: EphemerisSource, planets: PlanetaryEphemeris) -> None:
        self._orbit = orbit
        self._planets = planets

    @property
    def orbit(self) -> EphemerisSource:
        return self._orbit

    @property
    def planets(self) -> PlanetaryEphemeris:
        return self._planets

    def spacecraft_to(self, t: Time, body: int) -> State:
        """State of ``body`` relative to the spacecraft."""
        tdb = to_tdb(t)
        sc_geo = self._orbit.interpolate(tdb)
        if body == Body.EARTH:
            return -sc_geo
        if body == Body.SPACECRAFT:
            return State.zero()
        return self._planets.geocentric_state(tdb, body) - sc_geo

    def barycentric_state(self, t: Time, body: int) -> State:
        if body == Body.SPACECRAFT:
            return -self.spacecraft_to(t, Body.SS_BARY)
        return self._planets.barycentric_state(to_tdb(t), body)

    def geocentric_state(self, t: Time, body: int) -> State:
        if body == Body.SPACECRAFT:
            return self._orbit.interpolate(to_tdb(t))
        return self._planets.geocentric_state(to_tdb(t), body)

    @property
    def start_time(self) -> float:
        return max(self._planets.start_time, self._orbit.start_time)

    @property
    def end_time(self) -> float:
        return min(self._planets.end_time, self._orbit.end_time)

    def time_range(self) -> TimeInterval:
        """Span covered by both the orbit and the planetary ephemeris."""
        return TimeInterval.between(
            tdb_to_atomic(self.start_time), tdb_to_atomic(self.end_time),
        )

    def correct_aberration(self, target: np.ndarray, t: Time) -> np.ndarray:
        """Apparent direction of ``target`` as seen from the moving spacecraft."""
        v_sc = self.barycentric_state(t, Body.SPACECRAFT).velocity
        return aberration(target, v_sc)

    def radial_velocity(self, r: np.ndarray, t: Time, frame: RedshiftFrame) -> float:
        """Velocity of the frame origin relative to the spacecraft, along ``r``."""
        if frame is RedshiftFrame.GEOCENTRIC:
            v = self.spacecraft_to(t, Body.EARTH).velocity
        elif frame is RedshiftFrame.HELIOCENTRIC:
            v = self.spacecraft_to(t, Body.SUN).velocity
        elif frame is RedshiftFrame.LSR:
            v = self.spacecraft_to(t, Body.SS_BARY).velocity - kinematic_lsr()
        else:
            raise ValueError(f"Unsupported redshift frame: {frame}")
        return float(np.dot(v, normalize(r)))

    def __str__(self) -> str:
        return (f"Ephemerides for period:\n{tdb_to_atomic(self.start_time)} to\n"
                f"{tdb_to_atomic(self.end_time)}")


# --------------------------------------------------------------------------- #
# Resolver
# --------------------------------------------------------------------------- #

class RelativeStateResolver:
    """Apparent states of bodies identified by NAIF id.

    Args:
        provider: Returns the barycentric ephemeris of a NAIF id, or None.
        ephemerides: Source of the spacecraft barycentric state.
    """

    def __init__(
        self,
        provider: Provider[int, EphemerisSource],
        ephemerides: SpacecraftEphemerides,
    ) -> None:
        self._provider = provider
        self._ephemerides = ephemerides

    def ephemeris(self, naif_id: int) -> EphemerisSource:
        """Ephemeris of ``naif_id``.

        Raises:
            EphemerisLookupError: If the provider has none.
        """
        ephemeris = self._provider(naif_id)
        if ephemeris is None:
            raise EphemerisLookupError(
                f"No ephemeris found for NAIFID={naif_id}", key=naif_id,
            )
        return ephemeris

    def time_range(self, naif_id: int) -> TimeInterval:
        ephemeris = self.ephemeris(naif_id)
        return TimeInterval.between(
            tdb_to_atomic(ephemeris.start_time), tdb_to_atomic(ephemeris.end_time),
        )

    def state_of(
        self, naif_id: int, t: Time, correction: Correction = Correction.LTS,
    ) -> State:
        """State of ``naif_id`` relative to the spacecraft.

        NONE gives the geometric state at ``t``. LT evaluates the target at
        the light-time retarded epoch, using three fixed-point passes. LTS
        additionally applies stellar aberration for the spacecraft velocity.
        """
        tdb = to_tdb(t)
        target = self.ephemeris(naif_id)
        observer = self._ephemerides.barycentric_state(tdb, Body.SPACECRAFT)

        if correction is Correction.NONE:
            return target.interpolate(tdb) - observer

        p_obs = observer.position
        v_obs = observer.velocity
        lt = np.linalg.norm(target.interpolate(tdb).position - p_obs) / SPEED_OF_LIGHT
        retarded = target.interpolate(tdb - lt / SECONDS_PER_DAY)
        lt = np.linalg.norm(retarded.position - p_obs) / SPEED_OF_LIGHT
        retarded = target.interpolate(tdb - lt / SECONDS_PER_DAY)

        r = retarded.position - p_obs
        v = retarded.velocity - v_obs
        if correction is Correction.LTS:
            r = aberration(r, v_obs)
        return State.from_vectors(r, v)

    def radial_velocity(self, naif_id: int, t: Time) -> float:
        """Range rate of ``naif_id`` from the apparent (LTS) state, km/s."""
        state = self.state_of(naif_id, t, Correction.LTS)
        return float(np.dot(state.velocity, normalize(state.position)))
