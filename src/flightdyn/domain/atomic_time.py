# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""AtomicTime value object: integer microseconds since 1958-01-01 TAI.

All arithmetic is exact integer arithmetic. Conversions to civil UTC go
through the leap-second table; conversions to MJD and formatted strings go
through the time formats.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from flightdyn.domain.leap_seconds import (
    LEAP_1972,
    LeapSecondTable,
    MS_1958_UNIX,
    MS_1972_UNIX,
    default_table,
)

if TYPE_CHECKING:
    from flightdyn.domain.time_scales import TimeScale

_US_PER_S = 1_000_000

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class AtomicTime:
    """Instant on the TAI scale, in microseconds since 1958-01-01T00:00:00."""

    microseconds_since_1958: int

    # ------------------------------------------------------------------- #
    # Arithmetic
    # ------------------------------------------------------------------- #

    def add(self, microseconds: int) -> AtomicTime:
        """Return this time shifted by ``microseconds``."""
        return AtomicTime(self.microseconds_since_1958 + microseconds)

    add_microseconds = add

    def add_seconds(self, seconds: int) -> AtomicTime:
        return AtomicTime(self.microseconds_since_1958 + seconds * _US_PER_S)

    def subtract(self, other: AtomicTime) -> int:
        """Return ``self - other`` in microseconds."""
        return self.microseconds_since_1958 - other.microseconds_since_1958

    def __add__(self, microseconds: int) -> AtomicTime:
        if isinstance(microseconds, bool) or not isinstance(microseconds, int):
            return NotImplemented
        return self.add(microseconds)

    def __sub__(self, other):
        if isinstance(other, AtomicTime):
            return self.subtract(other)
        if isinstance(other, int) and not isinstance(other, bool):
            return self.add(-other)
        return NotImplemented

    # ------------------------------------------------------------------- #
    # Ordering
    # ------------------------------------------------------------------- #

    def before(self, other: AtomicTime) -> bool:
        return self.microseconds_since_1958 < other.microseconds_since_1958

    def after(self, other: AtomicTime) -> bool:
        return self.microseconds_since_1958 > other.microseconds_since_1958

    def at_or_before(self, other: AtomicTime) -> bool:
        return self.microseconds_since_1958 <= other.microseconds_since_1958

    def at_or_after(self, other: AtomicTime) -> bool:
        return self.microseconds_since_1958 >= other.microseconds_since_1958

    def compare_to(self, other: AtomicTime) -> int:
        """Return -1, 0 or 1 as this time is before, at or after ``other``."""
        diff = self.microseconds_since_1958 - other.microseconds_since_1958
        return (diff > 0) - (diff < 0)

    def earliest(self, other: AtomicTime) -> AtomicTime:
        """Return the earlier of the two times (``other`` on a tie)."""
        return self if self.before(other) else other

    def latest(self, other: AtomicTime) -> AtomicTime:
        """Return the later of the two times (``other`` on a tie)."""
        return self if self.after(other) else other

    # ------------------------------------------------------------------- #
    # Civil and MJD conversions
    # ------------------------------------------------------------------- #

    @classmethod
    def from_datetime(
        cls, dt: datetime, table: Optional[LeapSecondTable] = None,
    ) -> AtomicTime:
        return datetime_to_atomic(dt, table)

    def to_datetime(self, table: Optional[LeapSecondTable] = None) -> datetime:
        return atomic_to_datetime(self, table)

    from_civil = from_datetime
    to_civil = to_datetime

    def to_mjd(self, scale: TimeScale) -> float:
        from flightdyn.domain.time_formats import MjdTimeFormat
        return MjdTimeFormat(scale).to_value(self)

    @classmethod
    def from_mjd(cls, value: float, scale: TimeScale) -> AtomicTime:
        from flightdyn.domain.time_formats import MjdTimeFormat
        return MjdTimeFormat(scale).from_value(value)

    def to_mjd2000(self, scale: TimeScale) -> float:
        from flightdyn.domain.time_formats import Mjd2000TimeFormat
        return Mjd2000TimeFormat(scale).to_value(self)

    @classmethod
    def from_mjd2000(cls, value: float, scale: TimeScale) -> AtomicTime:
        from flightdyn.domain.time_formats import Mjd2000TimeFormat
        return Mjd2000TimeFormat(scale).from_value(value)

    def __str__(self) -> str:
        us = self.microseconds_since_1958
        if 0 < us < 10**17:
            from flightdyn.domain.time_formats import SimpleTimeFormat, TimeFormatConfig
            from flightdyn.domain.time_scales import TimeScale
            fmt = SimpleTimeFormat(TimeScale.TAI, TimeFormatConfig(decimals=6))
            return f"{fmt.format(self)} ({us})"
        return str(us)


# --------------------------------------------------------------------------- #
# Unix time and datetime
# --------------------------------------------------------------------------- #

def atomic_to_unix(
    t: AtomicTime, freeze: bool = False, table: Optional[LeapSecondTable] = None,
) -> int:
    """Return Unix microseconds for ``t``.

    Raises:
        RangeError: If ``t`` precedes 1972-01-01T00:00:00Z.
    """
    table = table or default_table()
    return table.tai_to_unix(t.microseconds_since_1958, freeze)


def unix_to_atomic(
    unix_microseconds: int, table: Optional[LeapSecondTable] = None,
) -> AtomicTime:
    table = table or default_table()
    return AtomicTime(table.unix_to_tai(unix_microseconds))


def atomic_to_datetime(
    t: AtomicTime, table: Optional[LeapSecondTable] = None,
) -> datetime:
    """Convert to an aware UTC datetime, truncated to milliseconds.

    A leap second cannot be represented by ``datetime``: 23:59:60.x maps onto
    the following 00:00:00.x.
    """
    unix_ms = atomic_to_unix(t, table=table) // 1000
    return _UNIX_EPOCH + timedelta(milliseconds=unix_ms)


def datetime_to_atomic(
    dt: datetime, table: Optional[LeapSecondTable] = None,
) -> AtomicTime:
    """Convert a UTC datetime to AtomicTime. Naive datetimes are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    unix_us = (dt - _UNIX_EPOCH) // timedelta(microseconds=1)
    return unix_to_atomic(unix_us, table)


# --------------------------------------------------------------------------- #
# Epochs
# --------------------------------------------------------------------------- #

class Epoch:
    """Reference instants used throughout flight dynamics."""

    TAI_1958 = AtomicTime(0)
    """1958-01-01T00:00:00 TAI, the origin of the AtomicTime scale."""

    UTC_1972 = AtomicTime(
        ((MS_1972_UNIX - MS_1958_UNIX) // 1000 + LEAP_1972) * _US_PER_S
    )
    """1972-01-01T00:00:00Z, the first instant with integral TAI-UTC."""

    J2000 = AtomicTime(((2000 - 1958) * 365 + 10) * 86400 * _US_PER_S
                       + 12 * 3600 * _US_PER_S - 32_184_000)
    """2000-01-01T12:00:00 TT (MJD 51544.5 TT)."""
