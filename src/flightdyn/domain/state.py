# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Cartesian state vectors, body identifiers and small vector helpers.

States hold position (km) and velocity (km/s) in a numpy array. They are
values: every operation returns a new State and the array is never handed
out without copying.
"""
from __future__ import annotations

import math
from enum import IntEnum
from typing import Sequence

import numpy as np


class Body(IntEnum):
    """Solar-system bodies and reference points known to the ephemerides."""

    SPACECRAFT = 0
    MERCURY = 1
    VENUS = 2
    EARTH = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9
    MOON = 10
    SUN = 11
    SS_BARY = 12
    EM_BARY = 13


class State:
    """Position and velocity of an object.

    Args:
        x, y, z: Position components (km).
        vx, vy, vz: Velocity components (km/s).
    """

    __slots__ = ("_a",)

    def __init__(
        self,
        x: float = 0.0, y: float = 0.0, z: float = 0.0,
        vx: float = 0.0, vy: float = 0.0, vz: float = 0.0,
    ) -> None:
        self._a = np.array([x, y, z, vx, vy, vz], dtype=np.float64)
        self._a.flags.writeable = False

    @classmethod
    def from_array(cls, values: Sequence[float] | np.ndarray) -> State:
        a = np.asarray(values, dtype=np.float64)
        if a.shape != (6,):
            raise ValueError(f"State needs 6 components, got shape {a.shape}")
        return cls(*a)

    @classmethod
    def from_vectors(cls, position: Sequence[float], velocity: Sequence[float]) -> State:
        return cls(*position, *velocity)

    @classmethod
    def zero(cls) -> State:
        return cls()

    @property
    def position(self) -> np.ndarray:
        return self._a[:3].copy()

    @property
    def velocity(self) -> np.ndarray:
        return self._a[3:].copy()

    def as_array(self) -> np.ndarray:
        return self._a.copy()

    def add(self, other: State) -> State:
        return State.from_array(self._a + other._a)

    def subtract(self, other: State) -> State:
        return State.from_array(self._a - other._a)

    def multiply(self, k: float) -> State:
        return State.from_array(self._a * k)

    def negate(self) -> State:
        return State.from_array(-self._a)

    __add__ = add
    __sub__ = subtract
    __neg__ = negate

    def __mul__(self, k: float) -> State:
        return self.multiply(k)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return bool(np.array_equal(self._a, other._a))

    def __hash__(self) -> int:
        return hash(self._a.tobytes())

    def __repr__(self) -> str:
        return "State({})".format(", ".join(repr(float(v)) for v in self._a))


# --------------------------------------------------------------------------- #
# Vector helpers
# --------------------------------------------------------------------------- #

def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along ``v``; the zero vector is returned unchanged."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v.copy()
    return v / norm


def rotate_about_axis(v: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotate ``v`` by ``angle`` radians about ``axis`` (Rodrigues' formula).

    A zero axis leaves the vector unchanged.
    """
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        return v.copy()
    k = np.asarray(axis, dtype=np.float64) / norm
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return v * cos_a + np.cross(k, v) * sin_a + k * np.dot(k, v) * (1.0 - cos_a)


def unit_vector_from_radec(ra_deg: float, dec_deg: float) -> np.ndarray:
    """Direction with right ascension and declination in degrees."""
    ra = math.radians(ra_deg)
    dec = math.radians(dec_deg)
    return np.array([
        math.cos(dec) * math.cos(ra),
        math.cos(dec) * math.sin(ra),
        math.sin(dec),
    ])


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Angle between two vectors in radians."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return math.atan2(np.linalg.norm(np.cross(a, b)), np.dot(a, b))
