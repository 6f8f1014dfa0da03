# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Interpolation of tabulated state vectors.

Samples are given as abscissae ``x`` (MJD2000 days, non-decreasing) and a
6 x N array of states (km, km/s). Each evaluation uses a window of samples
around the query time, clipped at the ends of the table rather than
shifted, so the window shrinks near the edges.

The window size follows from the configured degree. Whether that degree
suits the sample spacing is up to the caller.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from flightdyn.domain.errors import FormatError, RangeError
from flightdyn.domain.state import State

SECONDS_PER_DAY: int = 86400


class Interpolator:
    """Base class: sample lookup and window selection.

    Args:
        x: Sample abscissae, MJD2000.
        fs: States, shape (6, N).
        degree: Interpolation degree.
    """

    def __init__(self, x: Sequence[float], fs, degree: int) -> None:
        self._x = np.asarray(x, dtype=np.float64)
        self._fs = np.asarray(fs, dtype=np.float64)
        if self._fs.shape != (6, len(self._x)):
            raise ValueError(
                f"Expected states of shape (6, {len(self._x)}), got {self._fs.shape}"
            )
        if len(self._x) == 0:
            raise ValueError("Interpolator needs at least one sample")
        self._degree = degree

    @property
    def sample_count(self) -> int:
        return len(self._x)

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def window_size(self) -> int:
        raise NotImplementedError

    def contains(self, t: float) -> bool:
        """True if ``t`` lies in the closed sample range."""
        return bool(self._x[0] <= t <= self._x[-1])

    def find_index(self, t: float) -> int:
        """Index of the last sample at or before ``t`` (binary search)."""
        if not self.contains(t):
            raise RangeError(
                f"Time {t} is outside block: [{self._x[0]}, {self._x[-1]}]",
                value=t,
            )
        j = 0
        k = len(self._x) - 1
        while k - j > 1:
            i = (k + j) >> 1
            if self._x[i] > t:
                k = i
            else:
                j = i
        return j

    def interpolation_range(self, t: float, n: int) -> tuple[int, int]:
        """First and last sample index (inclusive) of an ``n``-point window."""
        i = self.find_index(t)
        j = i - n // 2 + 1
        k = j + n - 1
        if k >= len(self._x):
            k = len(self._x) - 1
        if j < 0:
            j = 0
        return j, k

    def interpolate(self, t: float) -> State:
        raise NotImplementedError


class HermiteInterpolator(Interpolator):
    """Multipoint Hermite interpolation of positions and their derivatives.

    Positions and velocities are matched at every window sample. Velocities
    enter the fit in km/day, since the abscissae are in days.
    """

    @property
    def window_size(self) -> int:
        return 2 * (self._degree // 4 + 1)

    def interpolate(self, t: float) -> State:
        x = self._x
        p = self._fs[:3]
        v = self._fs[3:]
        f = np.zeros(6)
        jj, kk = self.interpolation_range(t, self.window_size)
        for i in range(jj, kk + 1):
            fac10 = 1.0
            fac11 = 0.0
            fac2 = 1.0
            total = 0.0
            for j in range(jj, kk + 1):
                if j != i:
                    fac11 = fac11 * (t - x[j]) + fac10
                    fac10 *= t - x[j]
                    fac2 *= x[i] - x[j]
                    total += 1.0 / (x[i] - x[j])
            fac22 = fac2 * fac2
            a = fac10 * fac10 / fac22
            b = 2.0 * fac10 * fac11 / fac22
            phi10 = a * (t - x[i])
            phi11 = b * (t - x[i]) + a
            phi00 = a - 2.0 * total * phi10
            phi01 = b - 2.0 * total * phi11
            f[:3] += phi00 * p[:, i] + phi10 * v[:, i] * SECONDS_PER_DAY
            f[3:] += phi01 * p[:, i] / SECONDS_PER_DAY + phi11 * v[:, i]
        return State.from_array(f)


class LagrangeInterpolator(Interpolator):
    """Lagrange interpolation applied to all six components."""

    @property
    def window_size(self) -> int:
        return 2 * (self._degree // 2 + 1)

    def interpolate(self, t: float) -> State:
        x = self._x
        f = np.zeros(6)
        jj, kk = self.interpolation_range(t, self.window_size)
        for i in range(jj, kk + 1):
            phi = 1.0
            for j in range(jj, kk + 1):
                if j != i:
                    phi *= (t - x[j]) / (x[i] - x[j])
            f += phi * self._fs[:, i]
        return State.from_array(f)


_METHODS = {
    "HERMITE": HermiteInterpolator,
    "LAGRANGE": LagrangeInterpolator,
}


def make_interpolator(method: str, x: Sequence[float], fs, degree: int) -> Interpolator:
    """Create the interpolator named by a CCSDS ``INTERPOLATION`` keyword.

    Raises:
        FormatError: If ``method`` is neither HERMITE nor LAGRANGE.
    """
    try:
        cls = _METHODS[method.upper()]
    except KeyError:
        raise FormatError(f"Unsupported interpolation method {method!r}") from None
    return cls(x, fs, degree)
