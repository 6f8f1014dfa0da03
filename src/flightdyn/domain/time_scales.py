# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Time scales UTC, TAI, TT and TDB as offsets from the AtomicTime count.

A scale maps a TAI microsecond count to the count a clock on that scale
would show, and back. UTC shares the TAI count: its leap seconds are only
visible in calendar fields and day counts, which the time formats handle.
"""
import math
from enum import Enum

TT_MINUS_TAI_US: int = 32_184_000
"""TT - TAI in microseconds (exact)."""

_US_PER_DAY = 86_400_000_000

_MJD2000_DAY0_US = 15340 * _US_PER_DAY
"""2000-01-01T00:00:00 on the 1958-based microsecond count."""


def tdb_minus_tt(tai: int) -> int:
    """Return TDB - TT in microseconds at ``tai``.

    One-term approximation of the periodic terms, amplitude 1.6567 ms,
    using the mean anomaly of the Earth on the MJD2000 day count.
    """
    d = (tai - _MJD2000_DAY0_US) / _US_PER_DAY
    m = 6.231435 + 0.01720197 * d
    e = m + 0.01671 * (math.sin(m) + 0.5 * 0.01671 * math.sin(2.0 * m))
    return round(0.0016567 * math.sin(e) * 1e6)


class TimeScale(Enum):
    """Supported time scales, valued by their formatting suffix."""

    UTC = "Z"
    TAI = "TAI"
    TT = "TT"
    TDB = "TDB"

    @property
    def suffix(self) -> str:
        return self.value

    @property
    def has_leap_seconds(self) -> bool:
        return self is TimeScale.UTC

    def tai_to_scale(self, tai: int) -> int:
        """Convert TAI microseconds to microseconds on this scale."""
        if self is TimeScale.TT:
            return tai + TT_MINUS_TAI_US
        if self is TimeScale.TDB:
            return tai + TT_MINUS_TAI_US + tdb_minus_tt(tai)
        return tai

    def scale_to_tai(self, value: int) -> int:
        """Convert microseconds on this scale to TAI microseconds."""
        if self is TimeScale.TT:
            return value - TT_MINUS_TAI_US
        if self is TimeScale.TDB:
            tai = value - TT_MINUS_TAI_US
            return tai - tdb_minus_tt(tai)
        return value
